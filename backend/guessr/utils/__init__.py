"""Utility functions for the WorldGuessr backend."""

from guessr.utils.formatting import format_count, format_duration, format_number

__all__ = [
    "format_count",
    "format_duration",
    "format_number",
]
