"""Performance profiler for conversion operations."""

import logging
import time
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import psutil


@dataclass
class PerformanceMetrics:
    """Performance metrics for one conversion."""
    operation_name: str
    duration: float
    input_size: int
    output_size: int
    records_processed: int
    memory_start_mb: float
    memory_end_mb: float
    records_per_second: float


class PerformanceProfiler:
    """
    Collects timing and memory metrics for conversions.

    Metrics are logged at INFO level when an operation finishes and kept in
    ``metrics_history`` for later inspection.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        """
        Initialize the performance profiler.

        Args:
            logger: Optional logger instance
        """
        self.logger = logger or logging.getLogger(__name__)
        self.metrics_history: List[PerformanceMetrics] = []
        self.current_operation: Optional[str] = None
        self.start_time: Optional[float] = None
        self.start_memory: float = 0
        self.input_size = 0
        self.output_size = 0
        self.records_processed = 0

    @contextmanager
    def profile_operation(self, operation_name: str, input_size: int = 0):
        """
        Context manager for profiling operations.

        Args:
            operation_name: Name of the operation being profiled
            input_size: Size of input data in bytes
        """
        self.start_profiling(operation_name, input_size)
        try:
            yield self
        finally:
            self.stop_profiling()

    def start_profiling(self, operation_name: str, input_size: int = 0):
        """Start profiling an operation."""
        self.current_operation = operation_name
        self.start_time = time.perf_counter()
        self.input_size = input_size
        self.output_size = 0
        self.records_processed = 0
        self.start_memory = self._memory_mb()

        self.logger.debug(f"Started profiling: {operation_name}")

    def record_output(self, output_size: int, records_processed: int) -> None:
        """Record the result size of the active operation."""
        self.output_size = output_size
        self.records_processed = records_processed

    def stop_profiling(self) -> PerformanceMetrics:
        """
        Stop profiling and return metrics.

        Returns:
            PerformanceMetrics object with collected data
        """
        if not self.current_operation or self.start_time is None:
            raise ValueError("No active profiling session")

        duration = time.perf_counter() - self.start_time
        end_memory = self._memory_mb()
        rate = self.records_processed / duration if duration > 0 else 0.0

        metrics = PerformanceMetrics(
            operation_name=self.current_operation,
            duration=duration,
            input_size=self.input_size,
            output_size=self.output_size,
            records_processed=self.records_processed,
            memory_start_mb=self.start_memory,
            memory_end_mb=end_memory,
            records_per_second=rate
        )
        self.metrics_history.append(metrics)

        self.logger.info(f"Performance Summary - {self.current_operation}:")
        self.logger.info(f"  Duration: {duration:.4f}s")
        self.logger.info(f"  Records: {self.records_processed} ({rate:.0f}/s)")
        self.logger.info(f"  Size: {self.input_size}B in, {self.output_size}B out")
        self.logger.info(f"  Memory: {self.start_memory:.1f} MB -> {end_memory:.1f} MB")

        self.current_operation = None
        self.start_time = None
        return metrics

    def get_performance_summary(self) -> Dict[str, Any]:
        """
        Get summary of all performance metrics.

        Returns:
            Dictionary with performance summary
        """
        if not self.metrics_history:
            return {"total_operations": 0}

        return {
            "total_operations": len(self.metrics_history),
            "total_duration": sum(m.duration for m in self.metrics_history),
            "total_records": sum(m.records_processed for m in self.metrics_history),
            "operations": [
                {
                    "name": m.operation_name,
                    "duration": m.duration,
                    "records": m.records_processed,
                }
                for m in self.metrics_history
            ]
        }

    def _memory_mb(self) -> float:
        try:
            return psutil.Process().memory_info().rss / 1024 / 1024
        except psutil.Error as e:
            self.logger.warning(f"Memory sampling failed: {e}")
            return 0.0
