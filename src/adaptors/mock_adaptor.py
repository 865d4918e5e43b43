import random
from datetime import datetime

from config import setup_logger
from repositories import SymbolsRepository
from utils import normalize_stocks


class MockAdaptor:
    """
    Generates market data from the static symbol table for development.

    The first listed symbol is always reported with zero prices so the
    anti-regression merge is exercised on every cycle.
    """
    name = "mock"

    def __init__(self, logger=None, rng=None):
        self.logger = logger or setup_logger(name="MockAdaptor")
        self.rng = rng or random.Random()

    def _price(self, base):
        return round(base * (1 + self.rng.uniform(-0.02, 0.02)), 1)

    def fetch_data(self):
        self.logger.info("Generating mock market data...")
        now = datetime.now().isoformat()
        raw_stocks = []
        for index, info in enumerate(SymbolsRepository.get_all()):
            base = info.get("base") or 300
            if index == 0:
                raw_stocks.append({
                    "symbol": info["symbol"],
                    "companyName": info["name"],
                    "sector": info["sector"],
                    "prices": {"ltp": 0, "previousClose": 0, "open": 0, "high": 0, "low": 0},
                    "trading": {"volume": 0, "turnover": 0, "totalTrades": 0},
                    "timestamp": now,
                })
                continue

            ltp = self._price(base)
            raw_stocks.append({
                "symbol": info["symbol"],
                "companyName": info["name"],
                "sector": info["sector"],
                "prices": {
                    "ltp": ltp,
                    "previousClose": base,
                    "open": base,
                    "high": round(ltp * 1.01, 2),
                    "low": round(ltp * 0.99, 2),
                },
                "trading": {
                    "volume": self.rng.randint(0, 50000),
                    "turnover": self.rng.randint(0, 10000000),
                    "totalTrades": self.rng.randint(0, 500),
                },
                "timestamp": now,
            })

        stocks = normalize_stocks(raw_stocks, market_open=False)
        return {
            "stocks": stocks,
            "market_summary": {
                "index_value": round(2000 + self.rng.uniform(-10, 10), 2),
                "index_change": round(self.rng.uniform(-5, 5), 2),
                "timestamp": now,
            },
            "ipos": [],
            "source": "mock-weekend-mode",
            "timestamp": now,
        }
