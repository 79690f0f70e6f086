"""
Pytest configuration and shared fixtures for seedconf tests.

This module provides reusable fixtures and test utilities used across
the test suite.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import pytest


@pytest.fixture
def tmp_test_dir(tmp_path: Path) -> Path:
    """
    Provide a temporary directory for test artifacts.

    Automatically cleaned up after test completion.
    """
    return tmp_path


@pytest.fixture
def person_schema() -> dict[str, Any]:
    """Provide a schema describing a person record."""
    return {
        "type": "object",
        "additionalProperties": False,
        "required": ["name", "age"],
        "properties": {
            "name": {"type": "string"},
            "gender": {"type": "string", "enum": ["male", "female"]},
            "age": {"type": "integer", "minimum": 0},
            "address": {
                "type": "object",
                "properties": {
                    "city": {"type": "string"},
                    "country": {"type": "string"},
                },
            },
        },
    }


@pytest.fixture
def write_config(tmp_test_dir: Path):
    """
    Factory fixture for creating configuration files.

    Files are created with mode 0o600 unless another mode is given.

    Usage:
        path = write_config("valid.json", '{"name": "kevin"}')
        path = write_config("open.json", "{}", mode=0o644)
    """

    def _create(filename: str, content: str, mode: int = 0o600) -> Path:
        path = tmp_test_dir / filename
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        os.chmod(path, mode)
        return path

    return _create
