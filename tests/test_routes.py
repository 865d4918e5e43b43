from unittest.mock import Mock

import pytest

from repositories import StockRepository, MarketRepository, IPORepository


@pytest.fixture
def seeded(app, sample_stocks):
    StockRepository().save_stocks(sample_stocks)
    MarketRepository().save_market_summary({"index_value": 2045.3, "active_companies": 3})
    IPORepository().save_ipos([
        {"company_name": "Sanima Hydropower Ltd", "status": "open", "sector": "Hydro Power"},
        {"company_name": "Nepal Micro Finance", "status": "closed", "sector": "Microfinance"},
    ])
    return app


def test_stock_list(client, seeded):
    response = client.get("/api/stocks/?sort_by=ltp&sort_order=desc&limit=2")
    body = response.get_json()

    assert response.status_code == 200
    assert body["success"] is True
    assert [s["symbol"] for s in body["data"]] == ["NABIL", "NICA"]
    assert body["pagination"] == {"skip": 0, "limit": 2, "total": 4}


def test_stock_detail_and_not_found(client, seeded):
    response = client.get("/api/stocks/nabil")
    assert response.status_code == 200
    assert response.get_json()["data"]["ltp"] == 1020.5

    response = client.get("/api/stocks/NOPE")
    body = response.get_json()
    assert response.status_code == 404
    assert body["success"] is False
    assert body["error"]["code"] == 404
    assert "NOPE" in body["error"]["message"]


def test_search_requires_query(client, seeded):
    response = client.get("/api/stocks/search")
    assert response.status_code == 400
    assert response.get_json()["error"]["message"] == "Search query is required"

    body = client.get("/api/stocks/search?q=bank").get_json()
    assert {s["symbol"] for s in body["data"]} == {"NABIL", "NICA"}
    assert body["query"] == "bank"


def test_invalid_query_parameter_uses_error_envelope(client, seeded):
    response = client.get("/api/stocks/top-gainers?limit=0")
    body = response.get_json()

    assert response.status_code == 422
    assert body["success"] is False
    assert "limit" in str(body["error"]["errors"])


def test_screens_and_sectors(client, seeded):
    assert [s["symbol"] for s in client.get("/api/stocks/top-gainers").get_json()["data"]] == ["NABIL"]
    assert [s["symbol"] for s in client.get("/api/stocks/top-losers").get_json()["data"]] == ["NICA"]
    assert [s["symbol"] for s in client.get("/api/stocks/unchanged").get_json()["data"]] == ["UPPER"]
    assert client.get("/api/stocks/top-traded?limit=1").get_json()["data"][0]["symbol"] == "NABIL"
    assert client.get("/api/stocks/sectors").get_json()["count"] == 3
    assert client.get("/api/stocks/sector/hydro%20power").get_json()["count"] == 1
    assert client.get("/api/stocks/recent?seconds=60").get_json()["window"] == "60 seconds"


def test_views_and_searches_feed_trending(client, seeded):
    client.get("/api/stocks/NICA")
    client.get("/api/stocks/search?q=nabil")
    client.get("/api/stocks/search?q=nabil")

    body = client.get("/api/stocks/trending").get_json()
    assert [t["symbol"] for t in body["data"]] == ["NABIL", "NICA"]


def test_cleanup_inactive(client, seeded):
    body = client.post("/api/stocks/admin/cleanup").get_json()
    assert body["removed"] == 1
    assert body["remaining"] == 3


def test_validate_symbols(client, app, seeded):
    adaptor = Mock()
    adaptor.fetch_valid_symbols.return_value = {"NABIL", "NICA", "UPPER"}
    app.extensions["nepse"]["nepse_adaptor"] = adaptor

    body = client.post("/api/stocks/admin/validate").get_json()

    assert body["removed_symbols"] == ["NLIC"]
    assert body["valid_nepse_stocks"] == 3


def test_validate_symbols_upstream_failure(client, app, seeded):
    adaptor = Mock()
    adaptor.fetch_valid_symbols.side_effect = ConnectionError("down")
    app.extensions["nepse"]["nepse_adaptor"] = adaptor

    response = client.post("/api/stocks/admin/validate")

    assert response.status_code == 502
    assert StockRepository().get_stock_count() == 4


def test_ipo_routes(client, seeded):
    body = client.get("/api/ipos/").get_json()
    assert body["count"] == 2
    assert body["statistics"]["total"] == 2

    assert client.get("/api/ipos/?status=closed").get_json()["data"][0]["company_name"] == "Nepal Micro Finance"
    assert client.get("/api/ipos/active").get_json()["count"] == 1
    assert client.get("/api/ipos/status/open").get_json()["count"] == 1
    assert client.get("/api/ipos/status/bogus").status_code == 400
    assert client.get("/api/ipos/counts").get_json()["data"]["open"] == 1
    assert client.get("/api/ipos/search?q=hydro").get_json()["count"] == 1
    assert client.get("/api/ipos/Sanima%20Hydropower%20Ltd").get_json()["data"]["status"] == "open"
    assert client.get("/api/ipos/Nobody").status_code == 404


def test_market_routes(client, seeded):
    assert client.get("/api/market-summary").get_json()["data"]["index_value"] == 2045.3
    assert client.get("/api/market-history?hours=1").get_json()["count"] == 1

    stats = client.get("/api/market-stats").get_json()["data"]
    assert stats["stock_count"] == 4
    assert stats["sector_count"] == 3
    assert stats["has_data"] is True

    movers = client.get("/api/top-movers").get_json()["data"]
    assert movers["gainers"] == []


def test_market_summary_missing(client):
    response = client.get("/api/market-summary")
    assert response.status_code == 404
    assert response.get_json()["success"] is False


def test_health(client, seeded):
    response = client.get("/api/health")
    body = response.get_json()

    assert response.status_code == 200
    assert body["status"] == "running"
    assert body["scheduler"]["is_running"] is False
    assert body["data"]["stock_count"] == 4
    assert body["data"]["has_market_data"] is True
    assert body["market"]["hours"] == {"open": "11:00", "close": "15:00"}
    assert body["server"]["uptime_formatted"].endswith("s")


def test_scheduler_status_and_time_sync(client):
    status = client.get("/api/scheduler-status").get_json()["data"]
    assert status["update_count"] == 0
    assert status["current_interval"] is None

    sync = client.get("/api/time-sync").get_json()["data"]
    assert sync["synced"] is False
    assert sync["market_hours"] == {"open": "11:00", "close": "15:00"}


def test_force_update(client, app):
    scheduler = app.extensions["nepse"]["scheduler"]
    adaptor = Mock()
    adaptor.name = "stub"
    adaptor.fetch_data.return_value = {
        "stocks": [{"symbol": "NABIL", "ltp": 1020.5, "change_percent": 2.05, "volume": 10}],
        "source": "stub",
    }
    scheduler.fetch_service.adaptors = [adaptor]

    body = client.post("/api/force-update").get_json()

    assert body["success"] is True
    assert StockRepository().get_stock_by_symbol("NABIL")["ltp"] == 1020.5
    assert scheduler.update_count == 1


def test_dashboard(client):
    response = client.get("/")
    assert response.status_code == 200
    assert b"NEPSE Tracker" in response.data
