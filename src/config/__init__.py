from .app_config import (
    APP_ENV, USE_MOCK_DATA, SCRAPER_SIMULATE_FALLBACK, DATA_DIR, SAVE_DEBOUNCE_SECONDS,
    MARKET_HISTORY_LIMIT, SUMMARY_RETENTION_DAYS, UPDATE_INTERVAL_OPEN, UPDATE_INTERVAL_CLOSED,
    FETCH_MAX_RETRIES, FETCH_RETRY_DELAY, UNHEALTHY_FAILURE_COUNT, NEPSE_BASE_URL,
    REQUEST_TIMEOUT, NEPSE_VERIFY_SSL, TIME_SYNC_TIMEOUT, TIME_SYNC_INTERVAL
)
from .flask_config import Config
from .logger_config import setup_logger, sse_log_queue
from .market_config import NST, MarketHoursConfig, MarketState
from .sources_config import (
    BROWSER_HEADERS, NEPSE_HEADERS, NEPSE_INDEX_ID, SECTOR_IDS, NEPSE_PUBLIC_ENDPOINTS,
    SHARESANSAR_LIVE_URL, MEROLAGANI_LIVE_URL, PROXY_API_SOURCES, IPO_ENDPOINTS, TIME_SOURCES
)


__all__ = [
    #AppConfig
    "APP_ENV",
    "USE_MOCK_DATA",
    "SCRAPER_SIMULATE_FALLBACK",
    "DATA_DIR",
    "SAVE_DEBOUNCE_SECONDS",
    "MARKET_HISTORY_LIMIT",
    "SUMMARY_RETENTION_DAYS",
    "UPDATE_INTERVAL_OPEN",
    "UPDATE_INTERVAL_CLOSED",
    "FETCH_MAX_RETRIES",
    "FETCH_RETRY_DELAY",
    "UNHEALTHY_FAILURE_COUNT",
    "NEPSE_BASE_URL",
    "REQUEST_TIMEOUT",
    "NEPSE_VERIFY_SSL",
    "TIME_SYNC_TIMEOUT",
    "TIME_SYNC_INTERVAL",

    #FlaskConfig
    "Config",

    #Logger Config
    "setup_logger",
    "sse_log_queue",

    #Market Config
    "NST",
    "MarketHoursConfig",
    "MarketState",

    #Sources Config
    "BROWSER_HEADERS",
    "NEPSE_HEADERS",
    "NEPSE_INDEX_ID",
    "SECTOR_IDS",
    "NEPSE_PUBLIC_ENDPOINTS",
    "SHARESANSAR_LIVE_URL",
    "MEROLAGANI_LIVE_URL",
    "PROXY_API_SOURCES",
    "IPO_ENDPOINTS",
    "TIME_SOURCES",
]
