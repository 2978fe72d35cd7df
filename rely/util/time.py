"""Timestamp helpers."""
from datetime import datetime, timezone
from typing import Optional


def utcnow_iso() -> str:
    """Return current UTC time as ISO-8601 string with millisecond precision."""
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"


def parse_iso(iso: str) -> datetime:
    return datetime.fromisoformat(iso.replace("Z", "+00:00"))


def fmt_display(iso: str) -> str:
    """Convert ISO timestamp to human-readable display format."""
    try:
        dt = parse_iso(iso)
        return dt.strftime("%b %d, %Y %H:%M UTC")
    except ValueError:
        return iso


def fmt_relative(iso: str, now: Optional[datetime] = None) -> str:
    """Render an ISO timestamp as a distance from now, e.g. "5 minutes ago"."""
    try:
        dt = parse_iso(iso)
    except ValueError:
        return iso
    now = now or datetime.now(timezone.utc)
    seconds = int((now - dt).total_seconds())
    if seconds < 0:
        return "just now"

    minutes = round(seconds / 60)
    if seconds < 30:
        return "less than a minute ago"
    if minutes < 2:
        return "1 minute ago"
    if minutes < 45:
        return f"{minutes} minutes ago"
    hours = round(minutes / 60)
    if minutes < 90:
        return "about 1 hour ago"
    if hours < 24:
        return f"about {hours} hours ago"
    days = round(hours / 24)
    if days < 2:
        return "1 day ago"
    if days < 30:
        return f"{days} days ago"
    months = round(days / 30)
    if months < 12:
        return "about 1 month ago" if months == 1 else f"{months} months ago"
    years = days // 365
    return "about 1 year ago" if years <= 1 else f"about {years} years ago"
