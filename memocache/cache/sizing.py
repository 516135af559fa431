"""Approximate memory accounting for cached values."""

import json
import sys

_UNITS = ("B", "KB", "MB", "GB", "TB")

# Rough per-entry overhead of the entry record and its dict slot.
ENTRY_OVERHEAD_BYTES = 64


def estimate_size(value: object) -> int:
    """Estimate the size of *value* in bytes.

    Uses the UTF-8 length of its JSON encoding; values that cannot be
    encoded fall back to ``sys.getsizeof``.
    """
    try:
        return len(json.dumps(value, default=str).encode("utf-8"))
    except (TypeError, ValueError):
        return sys.getsizeof(value)


def estimate_entry_size(key: str, value: object) -> int:
    return len(key.encode("utf-8")) + estimate_size(value) + ENTRY_OVERHEAD_BYTES


def format_bytes(num_bytes: int) -> str:
    """Render a byte count as a short human-readable string, e.g. ``1.5 KB``."""
    size = float(max(num_bytes, 0))
    unit = 0
    while size >= 1024 and unit < len(_UNITS) - 1:
        size /= 1024
        unit += 1
    size = round(size, 2)
    if size == int(size):
        return f"{int(size)} {_UNITS[unit]}"
    return f"{size} {_UNITS[unit]}"
