from datetime import datetime

from config import (
    setup_logger, NEPSE_BASE_URL, NEPSE_HEADERS, NEPSE_INDEX_ID, SECTOR_IDS,
    REQUEST_TIMEOUT, NEPSE_VERIFY_SSL
)
from utils import build_session, normalize_stocks, to_float, to_int


class NepseAdaptor:
    """
    Client for the exchange's own `nots` API.

    Every data call needs a short-lived access token obtained through the
    prove / accesstoken handshake and sent as `Authorization: Salter <token>`.
    """
    name = "nepse-api"

    def __init__(self, logger=None, base_url=NEPSE_BASE_URL, market_open_fn=None, session=None):
        self.logger = logger or setup_logger(name="NepseAdaptor")
        self.base_url = base_url.rstrip("/")
        self.market_open_fn = market_open_fn
        self.session = session or build_session(NEPSE_HEADERS)
        self.session.verify = NEPSE_VERIFY_SSL
        self.token = None

    def _get(self, path, token=None):
        headers = {"Authorization": f"Salter {token}"} if token else {}
        response = self.session.get(f"{self.base_url}{path}", headers=headers, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
        return response.json()

    def get_token(self):
        """Run the prove / accesstoken handshake. Returns the token or None."""
        try:
            prove = self._get("/api/authenticate/prove")
            response = self.session.post(
                f"{self.base_url}/api/authenticate/accesstoken",
                json={"accessToken": prove},
                timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
            token = (response.json() or {}).get("accessToken")
            if not token:
                self.logger.warning("NEPSE handshake returned no access token")
                return None
            self.token = token
            return token
        except Exception as e:
            self.logger.warning(f"NEPSE token handshake failed: {e}")
            return None

    def _is_market_open(self):
        if self.market_open_fn is None:
            return None
        return self.market_open_fn()

    @staticmethod
    def _prepare_security(security):
        # Untraded securities report ltp 0; their last price is yesterday's close
        prepared = dict(security)
        ltp = to_float(security.get("lastTradedPrice")) or to_float(security.get("closePrice"))
        previous_close = to_float(security.get("previousClose"))
        if ltp == 0 and previous_close > 0:
            prepared["lastTradedPrice"] = previous_close
        prepared["sector"] = SECTOR_IDS.get(security.get("indexId") or 53, "Others")
        return prepared

    def fetch_securities(self, token):
        data = self._get(f"/api/nots/securityDailyTradeStat/{NEPSE_INDEX_ID}", token)
        if not isinstance(data, list):
            self.logger.warning("No price data from securityDailyTradeStat")
            return []
        prepared = [self._prepare_security(s) for s in data if isinstance(s, dict)]
        return normalize_stocks(prepared, market_open=self._is_market_open())

    def fetch_market_summary(self, token):
        indices = self._get("/api/nots/nepse-index", token)
        if not isinstance(indices, list):
            return None
        nepse_index = next((i for i in indices if i.get("id") == NEPSE_INDEX_ID), None)
        if not nepse_index:
            return None

        try:
            rows = self._get("/api/nots/market-summary", token)
        except Exception as e:
            self.logger.debug(f"Market summary endpoint failed: {e}")
            rows = []

        totals = {}
        for row in rows if isinstance(rows, list) else []:
            detail = (row.get("detail") or "").lower()
            value = to_float(row.get("value"))
            if "turnover" in detail:
                totals["total_turnover"] = value
            elif "transaction" in detail:
                totals["total_transactions"] = round(value)
            elif "traded shares" in detail:
                totals["total_volume"] = round(value)
            elif "scrips traded" in detail:
                totals["active_companies"] = round(value)
            elif "market capitalization" in detail and "float" not in detail:
                totals["total_market_cap"] = value

        sub_indices = [
            {
                "name": SECTOR_IDS.get(i.get("id"), i.get("index") or str(i.get("id"))),
                "value": to_float(i.get("currentValue") or i.get("close")),
                "change": to_float(i.get("change")),
                "change_percent": to_float(i.get("perChange")),
            }
            for i in indices if i.get("id") != NEPSE_INDEX_ID
        ]

        return {
            "index_value": to_float(nepse_index.get("currentValue") or nepse_index.get("close")),
            "index_change": to_float(nepse_index.get("change")),
            "index_change_percent": to_float(nepse_index.get("perChange")),
            "high": to_float(nepse_index.get("high")),
            "low": to_float(nepse_index.get("low")),
            "previous_close": to_float(nepse_index.get("previousClose")),
            "fifty_two_week_high": to_float(nepse_index.get("fiftyTwoWeekHigh")),
            "fifty_two_week_low": to_float(nepse_index.get("fiftyTwoWeekLow")),
            "sub_indices": sub_indices,
            **totals,
        }

    def fetch_top_ten(self, token, kind):
        """kind is 'turnover' or 'trade'."""
        try:
            rows = self._get(f"/api/nots/top-ten/{kind}", token)
        except Exception as e:
            self.logger.debug(f"Top ten {kind} failed: {e}")
            return []
        return [
            {
                "symbol": row.get("symbol"),
                "name": row.get("securityName"),
                "ltp": to_float(row.get("closingPrice") or row.get("lastTradedPrice")),
                "turnover": to_float(row.get("turnover")),
                "volume": to_int(row.get("shareTraded")),
                "trades": to_int(row.get("totalTrades")),
            }
            for row in rows if isinstance(row, dict)
        ] if isinstance(rows, list) else []

    def fetch_data(self):
        token = self.get_token()
        if not token:
            return None
        try:
            stocks = self.fetch_securities(token)
        except Exception as e:
            self.logger.error(f"NEPSE securities fetch failed: {e}")
            return None
        if not stocks:
            self.logger.warning("NEPSE API returned no securities")
            return None

        try:
            summary = self.fetch_market_summary(token)
        except Exception as e:
            self.logger.warning(f"NEPSE index fetch failed: {e}")
            summary = None

        self.logger.info(f"NEPSE API returned {len(stocks)} stocks")
        return {
            "stocks": stocks,
            "market_summary": summary,
            "ipos": [],
            "top_movers": {
                "turnover": self.fetch_top_ten(token, "turnover"),
                "trade": self.fetch_top_ten(token, "trade"),
            },
            "source": self.name,
            "timestamp": datetime.now().isoformat(),
        }

    def fetch_valid_symbols(self):
        """Symbols currently listed by the exchange, or an empty set."""
        token = self.get_token()
        if not token:
            return set()
        data = self._get(f"/api/nots/securityDailyTradeStat/{NEPSE_INDEX_ID}", token)
        return {s["symbol"].upper() for s in data if isinstance(s, dict) and s.get("symbol")}
