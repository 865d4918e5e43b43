from .stock_schema import (
    StockSchema, StockListQuerySchema, SearchQuerySchema, LimitQuerySchema, TrendingQuerySchema,
    RecentQuerySchema, StockResponseSchema, StockListResponseSchema, SectorListResponseSchema,
    TrendingResponseSchema, CleanupResponseSchema
)
from .market_schema import (
    MarketSummarySchema, MarketHistoryQuerySchema, MarketSummaryResponseSchema,
    MarketHistoryResponseSchema, MarketStatsResponseSchema, TopMoversResponseSchema
)
from .ipo_schema import (
    IPOSchema, IPOListQuerySchema, IPOResponseSchema, IPOListResponseSchema, IPOCountsResponseSchema
)
from .app_schema import (
    MessageSchema, SchedulerStatusResponseSchema, TimeSyncResponseSchema, HealthSchema
)

__all__ = [
    "StockSchema",
    "StockListQuerySchema",
    "SearchQuerySchema",
    "LimitQuerySchema",
    "TrendingQuerySchema",
    "RecentQuerySchema",
    "StockResponseSchema",
    "StockListResponseSchema",
    "SectorListResponseSchema",
    "TrendingResponseSchema",
    "CleanupResponseSchema",
    "MarketSummarySchema",
    "MarketHistoryQuerySchema",
    "MarketSummaryResponseSchema",
    "MarketHistoryResponseSchema",
    "MarketStatsResponseSchema",
    "TopMoversResponseSchema",
    "IPOSchema",
    "IPOListQuerySchema",
    "IPOResponseSchema",
    "IPOListResponseSchema",
    "IPOCountsResponseSchema",
    "MessageSchema",
    "SchedulerStatusResponseSchema",
    "TimeSyncResponseSchema",
    "HealthSchema",
]
