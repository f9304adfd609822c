from datetime import datetime, timezone

from dateutil import parser as date_parser

TIME_FORMAT = "%d.%m.%Y %H:%M"


def format_timestamp(value: datetime | None) -> str:
    """Format ``value`` as ``DD.MM.YYYY HH:mm`` or return an empty string."""
    if value is None:
        return ""
    if isinstance(value, str):
        value = parse_timestamp(value)
    return value.strftime(TIME_FORMAT)


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-like date/time string.

    Raises:
        ValueError: if the string is not a recognizable date.
    """
    try:
        parsed = date_parser.isoparse(value)
    except ValueError:
        # dateutil.isoparse строгий, пробуем свободный разбор
        parsed = date_parser.parse(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed
