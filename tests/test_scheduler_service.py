from unittest.mock import Mock

import pytest

from config import MarketHoursConfig, MarketState
from repositories import StockRepository, MarketRepository, IPORepository
from services import UpdateScheduler


@pytest.fixture
def clock():
    clock = Mock()
    clock.hours = MarketHoursConfig
    clock.sync_interval = 300
    clock.get_market_state.return_value = MarketState.OPEN
    clock.is_market_open.return_value = True
    clock.get_nst_time_string.return_value = "12:00:00"
    return clock


@pytest.fixture
def fetch_service():
    service = Mock()
    service.fetch_with_retry.return_value = {
        "stocks": [{"symbol": "NABIL", "ltp": 1020.5, "change_percent": 2.05}],
        "market_summary": {"index_value": 2045.3},
        "ipos": [{"company_name": "Sanima Hydropower Ltd", "status": "open"}],
        "top_movers": {"gainers": [{"symbol": "NABIL"}]},
        "source": "nepse-api",
    }
    service.get_fetch_status.return_value = {"data_source": "nepse-api"}
    return service


@pytest.fixture
def scheduler(store, clock, fetch_service):
    return UpdateScheduler(
        fetch_service, clock,
        stock_repo=StockRepository(store),
        market_repo=MarketRepository(store),
        ipo_repo=IPORepository(store),
        scheduler=Mock(),
        open_interval=10,
        closed_interval=3600,
    )


def test_perform_update_persists_every_entity(scheduler):
    assert scheduler.perform_update() is True

    assert scheduler.stock_repo.get_stock_by_symbol("NABIL")["ltp"] == 1020.5
    assert scheduler.ipo_repo.get_ipo_counts()["open"] == 1
    summary = scheduler.market_repo.get_latest_market_summary()
    assert summary["index_value"] == 2045.3
    assert summary["is_open"] is True
    assert summary["state"] == MarketState.OPEN
    assert summary["source"] == "nepse-api"
    assert scheduler.market_repo.get_top_movers()["gainers"] == [{"symbol": "NABIL"}]
    assert scheduler.update_count == 1
    assert scheduler.last_error is None


def test_failed_fetch_records_error(scheduler, fetch_service):
    fetch_service.fetch_with_retry.return_value = None

    assert scheduler.perform_update() is False
    assert scheduler.last_error == "All data sources failed"
    assert scheduler.update_count == 0


def test_weekend_skips_once_data_exists(scheduler, clock, fetch_service):
    clock.get_market_state.return_value = MarketState.WEEKEND
    clock.is_market_open.return_value = False

    # Empty store: the first weekend cycle still loads data
    assert scheduler.perform_update() is True
    assert scheduler.perform_update() is False
    assert fetch_service.fetch_with_retry.call_count == 1

    assert scheduler.force_update() is True
    assert fetch_service.fetch_with_retry.call_count == 2


def test_overlapping_update_is_rejected(scheduler, fetch_service):
    scheduler._update_lock.acquire()
    try:
        assert scheduler.perform_update() is False
    finally:
        scheduler._update_lock.release()
    fetch_service.fetch_with_retry.assert_not_called()


def test_adjust_interval_follows_market_state(scheduler, clock):
    scheduler.current_interval = 10

    assert scheduler.adjust_interval() is False
    scheduler.scheduler.reschedule_job.assert_not_called()

    clock.is_market_open.return_value = False
    assert scheduler.adjust_interval() is True
    assert scheduler.current_interval == 3600
    scheduler.scheduler.reschedule_job.assert_called_once()
    assert scheduler.scheduler.reschedule_job.call_args[0][0] == "market_update"


def test_start_registers_jobs(scheduler, clock):
    scheduler.start()

    clock.sync.assert_called_once()
    job_ids = [c.kwargs["id"] for c in scheduler.scheduler.add_job.call_args_list]
    assert job_ids == ["market_update", "summary_cleanup", "time_sync"]
    scheduler.scheduler.start.assert_called_once()
    assert scheduler.is_running is True
    assert scheduler.current_interval == 10

    scheduler.stop()
    scheduler.scheduler.shutdown.assert_called_once_with(wait=False)
    assert scheduler.is_running is False


def test_update_status(scheduler):
    scheduler.perform_update()
    status = scheduler.get_update_status()

    assert status["is_market_open"] is True
    assert status["market_hours"] == {"open": "11:00", "close": "15:00"}
    assert status["current_nst"] == "12:00:00"
    assert status["data_source"] == "nepse-api"
    assert status["update_count"] == 1
