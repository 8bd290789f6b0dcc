"""Date manipulation utilities"""

from datetime import date


def elapsed_whole_days(start: date, end: date) -> int:
    """Whole days from start to end, truncated (end must not precede start)"""
    return (end - start).days


def parse_query_date(value: str | None) -> date | None:
    """Parse a YYYY-MM-DD query parameter, treating empty as absent"""
    if not value:
        return None
    return date.fromisoformat(value)
