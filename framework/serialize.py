"""Utilities for deterministic JSON-ready snapshots."""

from __future__ import annotations

import dataclasses
from enum import Enum
from typing import Any, Mapping


def to_serializable(value: Any) -> Any:
    """Convert Python objects into JSON-serializable primitives."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "to_dict") and callable(value.to_dict):
        return to_serializable(value.to_dict())
    if dataclasses.is_dataclass(value):
        return {key: to_serializable(field_value) for key, field_value in dataclasses.asdict(value).items()}
    if isinstance(value, Mapping):
        return {str(key): to_serializable(field_value) for key, field_value in sorted(value.items())}
    if isinstance(value, (set, frozenset)):
        # Sets have no stable order; snapshots must not depend on hash seeds.
        return [to_serializable(item) for item in sorted(value)]
    if isinstance(value, (list, tuple)):
        return [to_serializable(item) for item in value]
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable.")
