from datetime import datetime, timedelta, timezone

import pytest

from minsql.streams.event_sourcing import Event, EventStore, VersionMismatchError

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _event(agg, version, data=None, ts=BASE, kind="account"):
    return Event(agg, kind, "changed", version, event_data=data, timestamp=ts)


def _summing(state, event):
    return (state or 0) + event.event_data


def test_append_sequential_versions():
    store = EventStore()
    store.append_event(_event("a", 1))
    store.append_event(_event("a", 2))
    assert store.get_aggregate_state("a").version == 2
    assert [e.version for e in store.get_events("a")] == [1, 2]


def test_version_mismatch_raises():
    store = EventStore()
    store.append_event(_event("a", 1))
    with pytest.raises(VersionMismatchError):
        store.append_event(_event("a", 3))
    assert store.get_aggregate_state("a").version == 1
    assert len(store.get_events("a")) == 1


def test_failed_first_append_still_registers_aggregate():
    store = EventStore()
    with pytest.raises(VersionMismatchError):
        store.append_event(_event("a", 2))
    aggregate = store.get_aggregate_state("a")
    assert aggregate.version == 0
    assert aggregate.aggregate_type == "account"
    assert store.get_events("a") == []


def test_unknown_aggregate():
    store = EventStore()
    assert store.get_aggregate_state("missing") is None
    assert store.get_snapshot("missing") is None


def test_get_events_from_version():
    store = EventStore()
    for v in (1, 2, 3):
        store.append_event(_event("a", v))
    store.append_event(_event("b", 1))
    assert [e.version for e in store.get_events("a", 2)] == [2, 3]


def test_rebuild_without_reducer_is_none():
    store = EventStore()
    store.append_event(_event("a", 1, 5))
    assert store.rebuild_aggregate("a") is None


def test_rebuild_replays_all_events():
    store = EventStore(reducer=_summing)
    for v, amount in ((1, 5), (2, 7)):
        store.append_event(_event("a", v, amount))
    assert store.rebuild_aggregate("a") == 5 + 7


def test_rebuild_from_snapshot_uses_later_events_only():
    store = EventStore(reducer=_summing)
    for v, amount in ((1, 5), (2, 7), (3, 11)):
        store.append_event(_event("a", v, amount))
    store.create_snapshot("a", 2, 100)
    assert store.get_snapshot("a") == (2, 100)
    assert store.rebuild_aggregate("a") == 100 + 11


def test_event_stream_filters():
    store = EventStore()
    store.append_event(_event("a", 1, ts=BASE))
    store.append_event(_event("b", 1, ts=BASE + timedelta(hours=1), kind="order"))
    assert [e.aggregate_id for e in store.get_event_stream("order")] == ["b"]
    later = store.get_event_stream(from_timestamp=BASE + timedelta(minutes=1))
    assert [e.aggregate_id for e in later] == ["b"]
    assert len(store.get_event_stream()) == 2


def test_purge_old_events():
    store = EventStore()
    store.append_event(_event("a", 1, ts=BASE))
    store.append_event(_event("a", 2, ts=BASE + timedelta(days=1)))
    assert store.purge_old_events(BASE + timedelta(hours=1)) == 1
    assert [e.version for e in store.get_events("a")] == [2]
    assert store.purge_old_events(BASE) == 0