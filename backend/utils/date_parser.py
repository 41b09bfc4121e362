"""Date parsing utilities for catalog metadata."""

from __future__ import annotations

from datetime import datetime

# Reasonable date bounds for catalog timestamps
MIN_VALID_YEAR = 1970
MAX_VALID_YEAR = 2100


def parse_flexible_date(value: str | datetime | None) -> datetime | None:
    """Parse a catalog timestamp from the formats seen in MBS exports.

    Supports the following formats:
    - ISO 8601 date or datetime (e.g., 2024-01-15, 2024-01-15T09:30:00Z)
    - Australian format: DD/MM/YYYY (e.g., 15/01/2024)
    - Compact: YYYYMMDD (e.g., 20240115)

    Examples:
        >>> parse_flexible_date("2024-01-15")
        datetime.datetime(2024, 1, 15, 0, 0)
        >>> parse_flexible_date("15/01/2024")
        datetime.datetime(2024, 1, 15, 0, 0)
        >>> parse_flexible_date("2024-02-30")  # Invalid date
        None
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    if not isinstance(value, str):
        return None

    candidates: list[datetime] = []
    try:
        # fromisoformat does not accept a trailing Z before Python 3.11
        candidates.append(datetime.fromisoformat(value.strip().replace("Z", "+00:00")))
    except ValueError:
        pass

    for fmt in ("%d/%m/%Y", "%Y%m%d"):
        try:
            candidates.append(datetime.strptime(value.strip(), fmt))
        except ValueError:
            # strptime raises ValueError for invalid dates like Feb 30
            continue

    for parsed in candidates:
        if MIN_VALID_YEAR <= parsed.year <= MAX_VALID_YEAR:
            return parsed

    return None
