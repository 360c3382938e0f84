"""Human-readable rendering of counts, byte sizes and durations."""

from __future__ import annotations

_IEC_UNITS = ("B", "KiB", "MiB", "GiB", "TiB", "PiB", "EiB")


def format_count(value: int) -> str:
    """Format an integer with thousands separators."""
    return f"{value:,}"


def format_ibytes(size_bytes: int) -> str:
    """Format bytes using IEC units, e.g. ``82 KiB`` or ``1.1 MiB``."""
    if size_bytes < 1024:
        return f"{size_bytes} B"

    value = float(size_bytes)
    exponent = 0
    while value >= 1024 and exponent < len(_IEC_UNITS) - 1:
        value /= 1024
        exponent += 1
    if value < 10:
        return f"{value:.1f} {_IEC_UNITS[exponent]}"
    return f"{value:.0f} {_IEC_UNITS[exponent]}"


def format_percent(value: float) -> str:
    return f"{value:.0f}"


def format_duration(seconds: float) -> str:
    """Format a duration as ``1y2d3h4m5s`` style text, largest unit first."""
    if seconds <= 0:
        return "0s"

    total = int(seconds)
    minutes, secs = divmod(total, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    years, days = divmod(days, 365)

    if years:
        return f"{years}y{days}d{hours}h{minutes}m{secs}s"
    if days:
        return f"{days}d{hours}h{minutes}m{secs}s"
    if hours:
        return f"{hours}h{minutes}m{secs}s"
    if minutes:
        return f"{minutes}m{secs}s"
    if total:
        return f"{seconds:.2f}s"
    return f"{seconds * 1000:.0f}ms"


def format_rtt(seconds: float) -> str:
    """Format a round-trip time rounded to the millisecond."""
    millis = round(seconds * 1000)
    if millis < 1000:
        return f"{millis}ms"
    return f"{millis / 1000:.3f}s"
