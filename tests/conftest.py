import pytest

from config import Config
from utils import JsonFileStore, StoreManager


@pytest.fixture
def store(tmp_path):
    """Isolated file store with a short debounce"""
    return JsonFileStore(str(tmp_path / "store"), debounce_seconds=0.05)


@pytest.fixture
def raw_stocks():
    """Upstream records in the different shapes the sources return"""
    return [
        {
            "symbol": "NABIL",
            "securityName": "Nabil Bank Limited",
            "sectorName": "Commercial Banks",
            "lastTradedPrice": "1,020.50",
            "openPrice": 1000,
            "highPrice": 1030,
            "lowPrice": 995,
            "previousClose": 1000,
            "totalTradedQuantity": 12000,
            "totalTradedValue": 12246000,
            "totalTrades": 340,
        },
        {
            "symbol": "NICA",
            "prices": {"ltp": 560, "previousClose": 575, "open": 570, "high": 571, "low": 555},
            "trading": {"volume": 5000, "turnover": 2800000, "totalTrades": 120},
        },
        {
            "s": "UPPER",
            "n": "Upper Tamakoshi Hydropower Ltd",
            "l": 0,
            "pc": 0,
            "v": 0,
        },
        {"securityName": "No symbol here", "ltp": 100},
    ]


@pytest.fixture
def sample_stocks():
    """Already-normalized records"""
    return [
        {"symbol": "NABIL", "name": "Nabil Bank Limited", "sector": "Commercial Banks",
         "ltp": 1020.5, "change": 20.5, "change_percent": 2.05, "volume": 12000,
         "turnover": 12246000.0, "trades": 340},
        {"symbol": "NICA", "name": "NIC Asia Bank Ltd.", "sector": "Commercial Banks",
         "ltp": 560.0, "change": -15.0, "change_percent": -2.61, "volume": 5000,
         "turnover": 2800000.0, "trades": 120},
        {"symbol": "UPPER", "name": "Upper Tamakoshi Hydropower Ltd", "sector": "Hydro Power",
         "ltp": 210.0, "change": 0.0, "change_percent": 0.0, "volume": 800,
         "turnover": 168000.0, "trades": 40},
        {"symbol": "NLIC", "name": "Nepal Life Insurance Co. Ltd.", "sector": "Life Insurance",
         "ltp": 0.0, "change": 0.0, "change_percent": 0.0, "volume": 0,
         "turnover": 0.0, "trades": 0},
    ]


@pytest.fixture
def app(tmp_path):
    """Flask app on a temporary data directory with the scheduler disabled"""
    from app import create_app

    class TestConfig(Config):
        TESTING = True
        DATA_DIR = str(tmp_path / "data")
        START_SCHEDULER = False
        USE_MOCK_DATA = False

    app = create_app(TestConfig)
    yield app
    StoreManager.get_store().flush()
    StoreManager._store = None


@pytest.fixture
def client(app):
    return app.test_client()
