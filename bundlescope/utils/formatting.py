from __future__ import annotations

_UNITS = ("B", "KB", "MB", "GB")

def format_size(num_bytes: float) -> str:
    """Human size with binary units, e.g. ``1572864 -> '1.5 MB'``."""
    if not num_bytes or num_bytes <= 0:
        return "0 B"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_UNITS) - 1:
        value /= 1024
        i += 1
    return f"{float(f'{value:.2f}'):g} {_UNITS[i]}"

def format_percent(value: float, total: float) -> str:
    if not total:
        return "0.0%"
    return f"{value / total * 100:.1f}%"

def format_seconds(seconds: float) -> str:
    return f"{seconds:.2f}s"
