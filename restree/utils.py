"""Utility helpers shared across the engine."""

from __future__ import annotations

from typing import Any, Iterable


ROOT_PATH = "<root>"


def format_path(parts: Iterable[Any]) -> str:
    """Render a key path as ``a.b.c`` (``<root>`` for the empty path)."""
    joined = ".".join(str(p) for p in parts)
    return joined or ROOT_PATH


def percent(processed: int, total: int) -> float:
    """Share of processed jobs in percent; 0 when there is nothing to do."""
    if total == 0:
        return 0
    return processed * 100 / total
