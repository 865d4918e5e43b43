import os
from datetime import timedelta, timezone


NST = timezone(timedelta(hours=5, minutes=45), name="NST")


class MarketHoursConfig:
    """NEPSE trading session in Nepal Standard Time"""
    open_hour: int = int(os.getenv("MARKET_OPEN_HOUR", 11))
    open_minute: int = int(os.getenv("MARKET_OPEN_MINUTE", 0))
    close_hour: int = int(os.getenv("MARKET_CLOSE_HOUR", 15))
    close_minute: int = int(os.getenv("MARKET_CLOSE_MINUTE", 0))

    # datetime.weekday(): Friday=4, Saturday=5
    weekend_days: tuple = (4, 5)


class MarketState:
    OPEN = "OPEN"
    PRE_OPEN = "PRE_OPEN"
    POST_CLOSE = "POST_CLOSE"
    WEEKEND = "WEEKEND"
