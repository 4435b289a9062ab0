"""Utility functions for the CSV Transformer."""

from .validation import ValidationUtils

__all__ = ["ValidationUtils"]
