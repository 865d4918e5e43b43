"""
Date Utilities

Market-session and timestamp helpers shared by the clock, scheduler and routes.
"""
from datetime import datetime, time, timedelta
from typing import Optional

import pandas as pd

from config import NST, MarketHoursConfig, MarketState


def get_market_state(nst_now: datetime, hours=MarketHoursConfig) -> str:
    """
    Resolve the session state for a Nepal Standard Time instant.

    Friday and Saturday are weekend; otherwise the day splits into
    PRE_OPEN, OPEN (open <= t < close) and POST_CLOSE.
    """
    if nst_now.weekday() in hours.weekend_days:
        return MarketState.WEEKEND

    current = nst_now.hour * 60 + nst_now.minute
    open_minutes = hours.open_hour * 60 + hours.open_minute
    close_minutes = hours.close_hour * 60 + hours.close_minute

    if current < open_minutes:
        return MarketState.PRE_OPEN
    if current < close_minutes:
        return MarketState.OPEN
    return MarketState.POST_CLOSE


def format_market_hours(hours=MarketHoursConfig) -> dict:
    return {
        "open": time(hours.open_hour, hours.open_minute).strftime("%H:%M"),
        "close": time(hours.close_hour, hours.close_minute).strftime("%H:%M"),
    }


def format_uptime(seconds: int) -> str:
    """86461 -> '1d 1m 1s'"""
    days, remainder = divmod(int(seconds), 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, secs = divmod(remainder, 60)

    parts = []
    if days > 0:
        parts.append(f"{days}d")
    if hours > 0:
        parts.append(f"{hours}h")
    if minutes > 0:
        parts.append(f"{minutes}m")
    parts.append(f"{secs}s")
    return " ".join(parts)


def parse_timestamp(value) -> Optional[datetime]:
    """Parse an ISO-ish timestamp into a naive local datetime, or None."""
    if not value:
        return None
    try:
        ts = pd.Timestamp(value)
    except (ValueError, TypeError):
        return None
    if ts is pd.NaT:
        return None
    parsed = ts.to_pydatetime()
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def is_within(value, seconds: float, now: Optional[datetime] = None) -> bool:
    """True when the timestamp is no older than `seconds`."""
    parsed = parse_timestamp(value)
    if parsed is None:
        return False
    now = now or datetime.now()
    return now - parsed <= timedelta(seconds=seconds)


def to_nst(dt: datetime) -> datetime:
    return dt.astimezone(NST)
