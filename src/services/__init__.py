from .market_clock_service import MarketClockService
from .fetch_service import FetchService, is_valid_data
from .analytics_service import AnalyticsService
from .scheduler_service import UpdateScheduler


__all__ = [
    "MarketClockService",
    "FetchService",
    "is_valid_data",
    "AnalyticsService",
    "UpdateScheduler",
]
