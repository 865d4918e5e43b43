from datetime import datetime, timedelta

from repositories import MarketRepository


def test_save_and_read_latest_summary(store):
    repo = MarketRepository(store)
    assert repo.get_latest_market_summary() is None

    repo.save_market_summary({"index_value": 2000.0})
    repo.save_market_summary({"index_value": 2010.0})

    assert repo.get_latest_market_summary()["index_value"] == 2010.0
    history = repo.get_market_summary_history(hours=1)
    assert [h["index_value"] for h in history] == [2010.0, 2000.0]


def test_history_window_and_cleanup(store):
    repo = MarketRepository(store)
    old = (datetime.now() - timedelta(days=40)).isoformat()
    yesterday = (datetime.now() - timedelta(hours=30)).isoformat()
    repo.save_market_summary({"index_value": 1900.0, "timestamp": old})
    repo.save_market_summary({"index_value": 1950.0, "timestamp": yesterday})
    repo.save_market_summary({"index_value": 2000.0})

    assert len(repo.get_market_summary_history(hours=24)) == 1
    assert len(repo.get_market_summary_history(hours=48)) == 2

    assert repo.clean_old_summaries(days=30) == 1
    assert repo.get_market_stats()["total_records"] == 2


def test_summary_by_date(store):
    repo = MarketRepository(store)
    repo.save_market_summary({"index_value": 1950.0, "timestamp": "2024-01-07T14:00:00"})

    assert repo.get_market_summary_by_date("2024-01-07")["index_value"] == 1950.0
    assert repo.get_market_summary_by_date("2024-01-08") is None


def test_top_movers_keep_previous_lists_when_update_is_empty(store):
    repo = MarketRepository(store)
    repo.save_top_movers({"gainers": [{"symbol": "NABIL"}], "losers": [{"symbol": "NICA"}]})
    repo.save_top_movers({"gainers": [{"symbol": "ADBL"}], "losers": []})

    movers = repo.get_top_movers()
    assert movers["gainers"] == [{"symbol": "ADBL"}]
    assert movers["losers"] == [{"symbol": "NICA"}]
    assert movers["updated_at"]


def test_market_stats_without_data(store):
    stats = MarketRepository(store).get_market_stats()
    assert stats == {"latest": None, "total_records": 0, "has_data": False}
