"""
Shared assertion helpers for integration tests that hit a live database.
"""

from __future__ import annotations

import json
from typing import Any, Iterable

# Every node the integration tests create carries this label
TEST_LABEL = "CypherMcpTest"


class AssertionErrorWithContext(AssertionError):
    """Assertion error that carries sample context for quicker debugging."""

    def __init__(self, message: str, sample: Any | None = None):
        if sample is not None:
            message = f"{message}\nSample: {sample!r}"
        super().__init__(message)


def assert_json(result: str) -> Any:
    """Parse JSON string, raising informative assertion on failure."""
    try:
        return json.loads(result)
    except json.JSONDecodeError as exc:
        raise AssertionErrorWithContext("Response was not valid JSON", result) from exc


def assert_keys(data: dict[str, Any], required_keys: Iterable[str]) -> None:
    """Ensure all required keys are present in a dictionary."""
    missing = [k for k in required_keys if k not in data]
    if missing:
        raise AssertionErrorWithContext(f"Missing required keys: {missing}", data)
