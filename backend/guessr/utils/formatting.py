"""Display formatting helpers for map pages.

These are pure functions; none of them read the clock or settings.
"""

# Coarse units for elapsed time, largest first
DURATION_UNITS = [
    ("year", 365 * 24 * 60 * 60),
    ("month", 30 * 24 * 60 * 60),
    ("day", 24 * 60 * 60),
    ("hour", 60 * 60),
    ("minute", 60),
    ("second", 1),
]

COMPACT_SUFFIXES = ["", "K", "M", "B", "T"]


def format_duration(duration_ms: float) -> str:
    """Render an elapsed duration as a single coarse unit.

    The value is floored to the largest unit that fits, e.g. 90 000 ms is
    "1 minute" and 3.5 days is "3 days". Negative durations count as zero.

    Args:
        duration_ms: Elapsed time in milliseconds

    Returns:
        Human-readable duration such as "5 hours"
    """
    seconds = max(int(duration_ms // 1000), 0)

    for unit, size in DURATION_UNITS:
        if seconds >= size:
            count = seconds // size
            return f"{count} {unit}" if count == 1 else f"{count} {unit}s"

    return "0 seconds"


def format_number(value: int | float, significant_digits: int = 3) -> str:
    """Render a number in compact notation ("1.23K", "45.6M").

    Values below one thousand are returned as plain digits.

    Args:
        value: Number to format
        significant_digits: Digits kept after compaction

    Returns:
        Compact string representation

    Raises:
        ValueError: If significant_digits is less than 1
    """
    if significant_digits < 1:
        raise ValueError("significant_digits must be at least 1")

    if abs(value) < 1000:
        return str(int(value)) if float(value).is_integer() else f"{value:.{significant_digits}g}"

    magnitude = 0
    scaled = float(value)
    while abs(scaled) >= 1000 and magnitude < len(COMPACT_SUFFIXES) - 1:
        scaled /= 1000
        magnitude += 1

    rounded = float(f"{scaled:.{significant_digits}g}")
    # 999_999 rounds up to 1000K; carry into the next suffix
    if abs(rounded) >= 1000 and magnitude < len(COMPACT_SUFFIXES) - 1:
        rounded = float(f"{rounded / 1000:.{significant_digits}g}")
        magnitude += 1

    return f"{rounded:g}{COMPACT_SUFFIXES[magnitude]}"


def format_count(value: int) -> str:
    """Render an integer with thousands separators ("12,345")."""
    return f"{value:,}"
