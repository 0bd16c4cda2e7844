# tests/test_store.py
from datetime import datetime

from store import ReadingStore, is_newest_first, sort_newest_first

FIXED_NOW = datetime(2024, 5, 1, 12, 0, 0)


def make_store() -> ReadingStore:
    return ReadingStore(clock=lambda: FIXED_NOW)


def test_empty_store():
    store = make_store()
    assert store.latest() is None
    assert len(store) == 0
    assert store.last_updated is None
    assert store.temperature_stats() is None


def test_replace_swaps_whole_window(make_window):
    store = make_store()
    store.replace(make_window(5))
    store.replace(make_window(2))

    assert len(store) == 2
    assert store.latest().temperature == 20.0
    assert store.last_updated == FIXED_NOW


def test_replace_with_invalid_value_empties_window(make_window):
    store = make_store()
    store.replace(make_window(3))
    store.replace(None)

    assert store.readings == ()
    assert store.latest() is None


def test_stats_are_derived_from_current_window(make_window):
    store = make_store()
    store.replace(make_window(3))
    assert store.humidity_stats().average == 51.0

    store.replace(make_window(1))
    assert store.humidity_stats().count == 1


def test_server_order_is_kept_when_newest_first(make_window):
    window = make_window(4)
    store = make_store()
    store.replace(window)
    assert list(store) == window


def test_out_of_order_window_is_resorted(make_reading):
    older = make_reading(1, _id="b", timestamp="2024-01-01T10:00:00Z")
    newer = make_reading(2, _id="a", timestamp="2024-01-01T11:00:00Z")
    store = make_store()
    store.replace([older, newer])
    assert store.latest() is newer


def test_sort_breaks_ties_by_id_and_puts_unknown_time_last(make_reading):
    same = "2024-01-01T10:00:00Z"
    b = make_reading(0, _id="b", timestamp=same)
    a = make_reading(1, _id="a", timestamp=same)
    undated = make_reading(2, _id="c", timestamp=None)
    newest = make_reading(3, _id="z", timestamp="2024-01-02T10:00:00Z")

    assert sort_newest_first([undated, b, newest, a]) == [newest, a, b, undated]


def test_newest_first_check(make_reading):
    dated = make_reading(0)
    undated = make_reading(1, timestamp=None)
    assert is_newest_first([dated, undated])
    assert not is_newest_first([undated, dated])


def test_null_humidity_is_kept_and_excluded_from_stats(make_reading):
    store = make_store()
    store.replace([make_reading(0, humidity=None), make_reading(1)])

    assert len(store) == 2
    assert store.latest().humidity is None
    assert store.humidity_stats().count == 1
    assert store.humidity_stats().average == 51.0
    assert store.temperature_stats().count == 2


def test_pressure_stats(make_reading):
    store = make_store()
    store.replace([make_reading(0, pressure=1000.0), make_reading(1, pressure=1010.0), make_reading(2, pressure=None)])

    stats = store.pressure_stats()
    assert stats.count == 2
    assert stats.average == 1005.0
