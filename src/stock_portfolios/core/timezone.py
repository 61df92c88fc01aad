"""Calendar and timezone helpers."""

from datetime import date, datetime
from typing import Optional, Union

import pytz

from stock_portfolios.core.exceptions import ValidationError

DEFAULT_TZ = pytz.timezone("US/Eastern")

# Payload date layouts accepted for transactions, most specific first
TRADE_DATE_FORMATS = ("%Y/%m/%d", "%Y-%m-%d")


def get_tz(name: Optional[str] = None) -> pytz.BaseTzInfo:
    """Return the named timezone, falling back to US/Eastern."""
    if not name:
        return DEFAULT_TZ
    try:
        return pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return DEFAULT_TZ


def now_local(tz_name: Optional[str] = None) -> datetime:
    """Return current time in the configured timezone."""
    return datetime.now(get_tz(tz_name))


def today_local(tz_name: Optional[str] = None) -> date:
    """Return today's calendar date in the configured timezone."""
    return now_local(tz_name).date()


def parse_trade_date(value: Union[str, date, datetime]) -> date:
    """
    Parse a transaction date into a calendar day.

    Accepts "YYYY/MM/DD" (payload format) and "YYYY-MM-DD"; datetimes are
    truncated to their date. Anything else raises ValidationError.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = (value or "").strip()
    for fmt in TRADE_DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    raise ValidationError(f"invalid date {value!r} (use YYYY/MM/DD)")
