"""Timecode formatting for comment positions within a video."""

import math


def format_timecode(seconds: float | None) -> str | None:
    """Render a position in seconds as ``M:SS``.

    Minutes carry no leading zero; seconds are zero-padded. Both parts are
    truncated, never rounded, so 59.999 renders as ``0:59``.

    Args:
        seconds: Non-negative offset in seconds, or None.

    Returns:
        The formatted timecode, or None when no usable offset is given.
    """
    if seconds is None or not math.isfinite(seconds):
        return None
    minutes = math.floor(seconds / 60)
    remainder = math.floor(seconds % 60)
    return f"{minutes}:{remainder:02d}"
