import json
import os
import threading
import time

import pytest

from utils import write_json_atomic, read_json


def _read(store, key):
    with open(store.path_for(key), encoding="utf-8") as fh:
        return json.load(fh)


def _record_writes(store, delay=0.0):
    """Wrap the store's writer to record calls and detect overlapping writes"""
    calls, active, overlaps = [], [], []
    original = store._perform_write

    def writer(key, immediate):
        active.append(key)
        if len(active) > 1:
            overlaps.append(key)
        calls.append(immediate)
        time.sleep(delay)
        try:
            original(key, immediate)
        finally:
            active.pop()

    store._perform_write = writer
    return calls, overlaps


def test_write_json_atomic_replaces_file(tmp_path):
    path = str(tmp_path / "data.json")
    write_json_atomic(path, {"a": 1})
    write_json_atomic(path, {"a": 2})

    assert read_json(path) == {"a": 2}
    assert not os.path.exists(f"{path}.tmp")


def test_write_json_atomic_cleans_up_on_failure(tmp_path):
    path = str(tmp_path / "data.json")
    write_json_atomic(path, {"a": 1})

    with pytest.raises(TypeError):
        write_json_atomic(path, {"a": object()})

    assert read_json(path) == {"a": 1}
    assert not os.path.exists(f"{path}.tmp")


def test_read_json_default_on_missing_or_corrupt(tmp_path):
    path = tmp_path / "broken.json"
    assert read_json(str(path), []) == []
    path.write_text("{not json")
    assert read_json(str(path), {}) == {}


def test_debounced_saves_coalesce(store):
    calls, _ = _record_writes(store)
    store.set("stocks", {"A": 1})

    for value in range(3):
        store.get("stocks")["A"] = value
        store.save("stocks")
    time.sleep(0.3)

    assert calls == [False]
    assert _read(store, "stocks") == {"A": 2}
    assert not store.has_pending("stocks")


def test_save_now_cancels_pending_debounce(store):
    store.debounce_seconds = 0.3
    calls, _ = _record_writes(store)
    store.set("stocks", {"A": 1})

    store.save("stocks")
    assert store.has_pending("stocks")
    store.save_now("stocks")
    time.sleep(0.5)

    assert calls == [True]
    assert _read(store, "stocks") == {"A": 1}


def test_debounced_write_never_overlaps_immediate_write(store):
    calls, overlaps = _record_writes(store, delay=0.2)
    store.set("stocks", {"A": 1})

    writer = threading.Thread(target=store.save_now, args=("stocks",))
    writer.start()
    time.sleep(0.02)
    # The timer fires while the immediate write still holds the key's lock
    store.save("stocks")
    writer.join()
    time.sleep(0.3)

    assert overlaps == []
    assert calls == [True]


def test_flush_writes_pending_keys(store):
    store.debounce_seconds = 10
    store.set("ipos", {"x": {"company_name": "X"}})
    store.save("ipos")

    store.flush()

    assert _read(store, "ipos") == {"x": {"company_name": "X"}}
    assert not store.has_pending("ipos")


def test_load_reads_existing_file_once(store):
    write_json_atomic(store.path_for("stocks"), {"NABIL": {"ltp": 1000}})

    loaded = store.load("stocks", {})
    loaded["NICA"] = {"ltp": 500}

    assert store.load("stocks", {}) == {"NABIL": {"ltp": 1000}, "NICA": {"ltp": 500}}
