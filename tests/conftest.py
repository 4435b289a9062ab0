"""Pytest configuration and fixtures."""

import pytest
import tempfile
from pathlib import Path


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    with tempfile.TemporaryDirectory() as tmp_dir:
        yield Path(tmp_dir)


@pytest.fixture
def users():
    """Flat records for testing."""
    return [
        {"id": 1, "name": "Joe"},
        {"id": 2, "name": "Sarah"},
    ]


@pytest.fixture
def nested_record():
    """Record with nested objects and an array."""
    return {
        "name": "Joe",
        "details": {
            "address": {"city": "Rotterdam"},
            "location": [51.9280712, 4.4207888]
        }
    }


@pytest.fixture
def all_data_types():
    """Record holding one value of every supported kind."""
    return [
        {
            "string": "hi",
            "empty": "",
            "number": 42,
            "true": True,
            "false": False,
            "object": {"key": "value"},
            "array": ["item1"],
            "null": None,
        }
    ]
