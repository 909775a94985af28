"""Display dates — human-readable "ordered at" / "refunded at" strings."""

from datetime import datetime, timezone

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def utc_now() -> datetime:
    """Default time source for record creation."""
    return datetime.now(timezone.utc)


def format_day(moment: datetime) -> str:
    """Format a creation timestamp for display. Naive datetimes are treated as UTC."""
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc).strftime(DISPLAY_FORMAT)
