import os

from dotenv import load_dotenv


project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..', '..'))
load_dotenv(os.path.join(project_root, '.env'))


def _env_bool(name, default=False):
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


APP_ENV = os.getenv("APP_ENV", "production")
USE_MOCK_DATA = _env_bool("USE_MOCK_DATA") or APP_ENV == "development"
SCRAPER_SIMULATE_FALLBACK = _env_bool("SCRAPER_SIMULATE_FALLBACK", True)

# Persistence
DATA_DIR = os.getenv("DATA_DIR", os.path.join(project_root, "data", "store"))
SAVE_DEBOUNCE_SECONDS = float(os.getenv("SAVE_DEBOUNCE_SECONDS", 2))
MARKET_HISTORY_LIMIT = 1000
SUMMARY_RETENTION_DAYS = int(os.getenv("SUMMARY_RETENTION_DAYS", 30))

# Polling
UPDATE_INTERVAL_OPEN = int(os.getenv("UPDATE_INTERVAL_OPEN", 10))
UPDATE_INTERVAL_CLOSED = int(os.getenv("UPDATE_INTERVAL_CLOSED", 3600))
FETCH_MAX_RETRIES = int(os.getenv("FETCH_MAX_RETRIES", 3))
FETCH_RETRY_DELAY = float(os.getenv("FETCH_RETRY_DELAY", 2))
UNHEALTHY_FAILURE_COUNT = 3

# Upstream
NEPSE_BASE_URL = os.getenv("NEPSE_BASE_URL", "https://nepalstock.com.np")
REQUEST_TIMEOUT = int(os.getenv("REQUEST_TIMEOUT", 20))
NEPSE_VERIFY_SSL = _env_bool("NEPSE_VERIFY_SSL", False)
TIME_SYNC_TIMEOUT = 5
TIME_SYNC_INTERVAL = int(os.getenv("TIME_SYNC_INTERVAL", 300))
