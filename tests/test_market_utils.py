from utils import calculate_market_summary, rank_movers


def test_summary_counts_only_traded_stocks(sample_stocks):
    summary = calculate_market_summary(sample_stocks)

    assert summary["active_companies"] == 3
    assert summary["advanced_companies"] == 1
    assert summary["declined_companies"] == 1
    assert summary["unchanged_companies"] == 1
    assert summary["total_volume"] == 17800
    assert summary["total_transactions"] == 500
    assert summary["total_turnover"] == 15214000.0
    assert summary["timestamp"]


def test_upstream_values_take_precedence(sample_stocks):
    upstream = {"index_value": 2045.3, "total_turnover": 99.0, "total_volume": 0}

    summary = calculate_market_summary(sample_stocks, upstream)

    assert summary["index_value"] == 2045.3
    assert summary["total_turnover"] == 99.0
    # Zero upstream values are replaced by computed ones
    assert summary["total_volume"] == 17800


def test_summary_of_empty_batch():
    summary = calculate_market_summary([])
    assert summary["active_companies"] == 0
    assert summary["sub_indices"] == []


def test_rank_movers(sample_stocks):
    movers = rank_movers(sample_stocks, limit=2)

    assert [m["symbol"] for m in movers["turnover"]] == ["NABIL", "NICA"]
    assert [m["symbol"] for m in movers["gainers"]] == ["NABIL"]
    assert [m["symbol"] for m in movers["losers"]] == ["NICA"]
    # Zero-price symbols never rank
    assert all(m["symbol"] != "NLIC" for m in movers["volume"])


def test_rank_movers_fills_missing_columns_with_none():
    movers = rank_movers([{"symbol": "ADBL", "ltp": 300.0, "volume": 10, "turnover": 3000.0}])
    assert movers["volume"][0]["name"] is None
    assert movers["gainers"] == []
