from datetime import date, datetime

from photo_clusters.core.config import configs

# Anything below this is a seconds-scale epoch (1e12 ms is September 2001).
MILLIS_THRESHOLD = 1e12


def to_millis_maybe_seconds(ts: float) -> float:
    """Normalize an epoch timestamp of unknown unit to milliseconds."""
    return ts * 1000 if ts < MILLIS_THRESHOLD else ts


def to_local_datetime(ms: float) -> datetime:
    return datetime.fromtimestamp(ms / 1000)


def local_day(ms: float) -> date:
    """Calendar day of a millisecond timestamp in local time."""
    return to_local_datetime(ms).date()


def format_date(dt: datetime) -> str:
    return dt.strftime(configs.DATE_FORMAT)


def format_time(dt: datetime) -> str:
    return dt.strftime(configs.TIME_FORMAT)


def format_date_span(start_ms: float, end_ms: float) -> str:
    """Single date when both ends fall on the same local day, else a range."""
    start, end = to_local_datetime(start_ms), to_local_datetime(end_ms)
    if start.date() == end.date():
        return format_date(start)
    return f"{format_date(start)} – {format_date(end)}"


def format_time_span(start_ms: float, end_ms: float) -> str:
    return f"{format_time(to_local_datetime(start_ms))} – {format_time(to_local_datetime(end_ms))}"
