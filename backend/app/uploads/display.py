"""Formatting helpers for status output."""
from app.uploads.models import ItemStatus

_SIZE_UNITS = ["Bytes", "KB", "MB", "GB"]


def format_file_size(num_bytes: int) -> str:
    """1024-based size with at most two decimals: 0 Bytes, 1.5 KB, 2 MB."""
    if num_bytes <= 0:
        return "0 Bytes"
    value = float(num_bytes)
    i = 0
    while value >= 1024 and i < len(_SIZE_UNITS) - 1:
        value /= 1024
        i += 1
    text = f"{value:.2f}".rstrip("0").rstrip(".")
    return f"{text} {_SIZE_UNITS[i]}"


def status_label(status: ItemStatus) -> str:
    value = status.value
    return value[:1].upper() + value[1:]
