import random
from datetime import datetime

from config import (
    setup_logger, NEPSE_BASE_URL, NEPSE_HEADERS, NEPSE_PUBLIC_ENDPOINTS, MEROLAGANI_LIVE_URL,
    REQUEST_TIMEOUT, SCRAPER_SIMULATE_FALLBACK, NEPSE_VERIFY_SSL
)
from repositories import SymbolsRepository
from utils import build_session, normalize_stocks, unwrap_list, to_float, to_int


class ScraperAdaptor:
    """
    Last link of the chain: scrapes the exchange and MeroLagani directly and,
    when everything is down, simulates a session from the symbol table.
    """
    name = "scraper"

    def __init__(self, logger=None, simulate_fallback=SCRAPER_SIMULATE_FALLBACK, session=None, rng=None):
        self.logger = logger or setup_logger(name="ScraperAdaptor")
        self.simulate_fallback = simulate_fallback
        self.session = session or build_session(NEPSE_HEADERS)
        self.session.verify = NEPSE_VERIFY_SSL
        self.rng = rng or random.Random()

    def _get_json(self, url, **kwargs):
        response = self.session.get(url, timeout=REQUEST_TIMEOUT, **kwargs)
        response.raise_for_status()
        return response.json()

    def get_token(self):
        try:
            prove = self._get_json(f"{NEPSE_BASE_URL}/api/authenticate/prove")
            response = self.session.post(
                f"{NEPSE_BASE_URL}/api/authenticate/accesstoken",
                json={"accessToken": prove},
                timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
            return (response.json() or {}).get("accessToken")
        except Exception as e:
            self.logger.debug(f"Token generation failed: {e}")
            return None

    def fetch_nepse_summary(self, token):
        try:
            data = self._get_json(f"{NEPSE_BASE_URL}/api/nots", headers={"Authorization": f"Salter {token}"})
        except Exception as e:
            self.logger.debug(f"Market summary fetch failed: {e}")
            return None
        if not isinstance(data, dict):
            return None
        return {
            "index_value": to_float(data.get("index") or data.get("nepseIndex")),
            "index_change": to_float(data.get("change") or data.get("pointChange")),
            "index_change_percent": to_float(data.get("perChange") or data.get("percentChange")),
            "total_transactions": to_int(data.get("totalTransactions")),
            "total_turnover": to_float(data.get("totalTurnover")),
            "total_volume": to_int(data.get("totalVolume")),
            "active_companies": to_int(data.get("tradedScrip")),
            "advanced_companies": to_int(data.get("positive")),
            "declined_companies": to_int(data.get("negative")),
            "unchanged_companies": to_int(data.get("neutral")),
        }

    def fetch_nepse_direct(self):
        token = self.get_token()
        if not token:
            return None
        try:
            data = self._get_json(
                f"{NEPSE_BASE_URL}/api/nots/nepse-data/today-price",
                headers={"Authorization": f"Salter {token}"}
            )
        except Exception as e:
            self.logger.debug(f"NEPSE direct fetch error: {e}")
            return None
        stocks = normalize_stocks(data if isinstance(data, list) else [])
        if not stocks:
            return None
        return self._result(stocks, self.fetch_nepse_summary(token), "nepse-direct")

    def fetch_nepse_public(self):
        for endpoint in NEPSE_PUBLIC_ENDPOINTS:
            try:
                data = self._get_json(f"{NEPSE_BASE_URL}{endpoint}")
            except Exception as e:
                self.logger.debug(f"NEPSE endpoint {endpoint} failed: {e}")
                continue
            stocks = normalize_stocks(unwrap_list(data, ("data", "content")))
            if stocks:
                return self._result(stocks, None, "nepse-public")
        return None

    def fetch_merolagani(self):
        try:
            data = self._get_json(MEROLAGANI_LIVE_URL, params={"type": "get_live_market"})
        except Exception as e:
            self.logger.debug(f"MeroLagani fetch failed: {e}")
            return None
        stocks = normalize_stocks(data if isinstance(data, list) else [])
        return self._result(stocks, None, "merolagani") if stocks else None

    def generate_simulated_data(self):
        """One simulated session: prices within ±3% of each symbol's reference price."""
        self.logger.info("Generating simulated market data from static stock list...")

        def around(base, volatility):
            return round(base * (1 + self.rng.uniform(-volatility, volatility)), 2)

        raw_stocks = []
        for info in SymbolsRepository.get_all():
            base = info.get("base") or self.rng.randint(100, 600)
            ltp = around(base, 0.03)
            open_price = around(base, 0.02)
            volume = self.rng.randint(1000, 51000)
            raw_stocks.append({
                "symbol": info["symbol"],
                "companyName": info["name"],
                "sector": info["sector"],
                "ltp": ltp,
                "open": open_price,
                "high": round(max(ltp, open_price) + self.rng.uniform(0, 10), 2),
                "low": round(min(ltp, open_price) - self.rng.uniform(0, 10), 2),
                "previousClose": around(base, 0.01),
                "volume": volume,
                "turnover": round(ltp * volume),
                "totalTrades": self.rng.randint(10, 510),
                "fiftyTwoWeekHigh": round(base * 1.3, 2),
                "fiftyTwoWeekLow": round(base * 0.7, 2),
            })

        base_index = 2200
        index_change = self.rng.uniform(-20, 20)
        summary = {
            "index_value": round(base_index + index_change, 2),
            "index_change": round(index_change, 2),
            "index_change_percent": round(index_change / base_index * 100, 2),
        }
        return self._result(normalize_stocks(raw_stocks, market_open=False), summary, "simulated")

    def _result(self, stocks, summary, source):
        return {
            "stocks": stocks,
            "market_summary": summary,
            "ipos": [],
            "source": source,
            "timestamp": datetime.now().isoformat(),
        }

    def fetch_data(self):
        self.logger.info("Custom scraper starting...")
        for fetch in (self.fetch_nepse_direct, self.fetch_nepse_public, self.fetch_merolagani):
            result = fetch()
            if result:
                self.logger.info(f"Scraper got {len(result['stocks'])} stocks from {result['source']}")
                return result

        if not self.simulate_fallback:
            self.logger.warning("All scrape targets failed")
            return None
        self.logger.info("All real sources failed - using simulated data fallback")
        return self.generate_simulated_data()
