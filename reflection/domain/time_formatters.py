"""Human-readable duration formatting and parsing. Durations are in seconds."""


def format_duration(seconds: float) -> str:
    """Format as ``H:MM:SS``, or ``M:SS`` below one hour."""
    total = int(seconds)
    hours = total // 3600
    minutes = total % 3600 // 60
    secs = total % 60
    if hours > 0:
        return f"{hours}:{minutes:02d}:{secs:02d}"
    return f"{minutes}:{secs:02d}"


def format_duration_short(seconds: float) -> str:
    """Format compactly: ``1h30m``, ``2h`` or ``45m``."""
    total_minutes = int(seconds / 60)
    hours = total_minutes // 60
    mins = total_minutes % 60
    if hours > 0:
        return f"{hours}h{mins}m" if mins > 0 else f"{hours}h"
    return f"{mins}m"


def parse_time_interval(value: str) -> float | None:
    """Parse ``"M"``, ``"H:M"`` or ``"H:M:S"`` into seconds.

    Returns None when the input does not match one of those shapes.
    """
    parts = value.strip().split(":")
    try:
        numbers = [float(p) for p in parts]
    except ValueError:
        return None

    if len(numbers) == 1:
        return numbers[0] * 60
    if len(numbers) == 2:
        hours, minutes = numbers
        return hours * 3600 + minutes * 60
    if len(numbers) == 3:
        hours, minutes, secs = numbers
        return hours * 3600 + minutes * 60 + secs
    return None
