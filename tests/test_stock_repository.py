from repositories import StockRepository
from repositories.stock_repository import merge_stock


def test_merge_keeps_stored_price_when_incoming_ltp_is_zero():
    existing = {"symbol": "NABIL", "ltp": 1020.5, "change": 20.5, "change_percent": 2.05, "volume": 100}
    incoming = {"symbol": "NABIL", "ltp": 0, "change": 0, "change_percent": 0, "volume": 250}

    merged = merge_stock(existing, incoming, "2024-01-07T12:00:00")

    assert merged["ltp"] == 1020.5
    assert merged["change"] == 20.5
    assert merged["change_percent"] == 2.05
    assert merged["volume"] == 250
    assert merged["updated_at"] == "2024-01-07T12:00:00"


def test_merge_accepts_zero_for_new_symbol():
    merged = merge_stock(None, {"symbol": "NLIC", "ltp": 0}, "ts")
    assert merged["ltp"] == 0


def test_merge_drops_transient_flags():
    merged = merge_stock({"symbol": "A", "ltp": 1}, {"symbol": "A", "ltp": 2, "is_top_gainer": True}, "ts")
    assert "is_top_gainer" not in merged


def test_ltp_never_regresses_to_zero(store):
    repo = StockRepository(store)
    repo.save_stocks([{"symbol": "nabil", "ltp": 1020.5, "change": 20.5, "change_percent": 2.05}])

    for _ in range(3):
        repo.save_stocks([{"symbol": "NABIL", "ltp": 0, "change": 0, "change_percent": 0}])
        assert repo.get_stock_by_symbol("NABIL")["ltp"] == 1020.5

    repo.save_stocks([{"symbol": "NABIL", "ltp": 1030.0}])
    assert repo.get_stock_by_symbol("nabil")["ltp"] == 1030.0


def test_save_stocks_counts_only_records_with_a_symbol(store):
    repo = StockRepository(store)

    saved = repo.save_stocks([{"symbol": "NABIL", "ltp": 1020.5}, {"symbol": "", "ltp": 5}, {"ltp": 7}])

    assert saved == 1
    assert repo.get_stock_count() == 1


def test_listing_sorting_and_filters(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)

    by_ltp = repo.get_all_stocks(sort_by="ltp", sort_order="desc")
    assert [s["symbol"] for s in by_ltp] == ["NABIL", "NICA", "UPPER", "NLIC"]

    traded = repo.get_all_stocks(include_zero_ltp=False)
    assert [s["symbol"] for s in traded] == ["NABIL", "NICA", "UPPER"]

    page = repo.get_all_stocks(skip=1, limit=2)
    assert [s["symbol"] for s in page] == ["NICA", "NLIC"]


def test_screens(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)

    assert [s["symbol"] for s in repo.get_top_gainers()] == ["NABIL"]
    assert [s["symbol"] for s in repo.get_top_losers()] == ["NICA"]
    assert [s["symbol"] for s in repo.get_unchanged_stocks()] == ["UPPER"]
    assert repo.get_top_traded(limit=1)[0]["symbol"] == "NABIL"
    assert repo.get_all_sectors() == ["Commercial Banks", "Hydro Power", "Life Insurance"]
    assert len(repo.get_stocks_by_sector("commercial banks")) == 2


def test_search_matches_symbol_and_name(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)

    assert [s["symbol"] for s in repo.search_stocks("tamakoshi")] == ["UPPER"]
    assert {s["symbol"] for s in repo.search_stocks("bank")} == {"NABIL", "NICA"}


def test_recently_updated(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)
    assert len(repo.get_recently_updated(60)) == 4


def test_cleanup_inactive_and_invalid(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)

    assert repo.cleanup_inactive_stocks() == {"removed": 1, "remaining": 3}

    result = repo.cleanup_invalid_stocks(["nabil", "nica"])
    assert result == {"removed": 1, "remaining": 2, "removed_symbols": ["UPPER"]}


def test_clear_all_persists_immediately(store, sample_stocks):
    repo = StockRepository(store)
    repo.save_stocks(sample_stocks)

    repo.clear_all_stocks()

    assert repo.get_stock_count() == 0
    assert not store.has_pending("stocks")
