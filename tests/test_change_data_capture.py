import json
from datetime import datetime, timedelta, timezone

import pytest

from minsql.streams.change_data_capture import (
    CDCSubscription,
    ChangeDataCapture,
    ChangeType,
)

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


class _Clock:
    def __init__(self):
        self.now = BASE

    def __call__(self):
        return self.now


@pytest.mark.asyncio
async def test_matching_change_is_delivered():
    cdc = ChangeDataCapture()
    queue = cdc.subscribe(CDCSubscription("s1", tables=["users"]))
    await cdc.emit_change(ChangeType.INSERT, "users", None, {"id": 1}, 7)
    event = queue.get_nowait()
    assert event.change_id == 1
    assert event.change_type is ChangeType.INSERT
    assert event.table == "users"
    assert event.after == {"id": 1}
    assert event.before is None
    assert event.transaction_id == 7


@pytest.mark.asyncio
async def test_other_table_not_delivered():
    cdc = ChangeDataCapture()
    queue = cdc.subscribe(CDCSubscription("s1", tables=["users"]))
    await cdc.emit_change(ChangeType.INSERT, "orders", None, {"id": 1}, 1)
    assert queue.empty()


@pytest.mark.asyncio
async def test_operation_filter():
    cdc = ChangeDataCapture()
    deletes = cdc.subscribe(CDCSubscription("d", tables=["t"], operations=[ChangeType.DELETE]))
    everything = cdc.subscribe(CDCSubscription("a", tables=["t"]))
    await cdc.emit_change(ChangeType.INSERT, "t", None, 1, 1)
    await cdc.emit_change(ChangeType.DELETE, "t", 1, None, 2)
    assert deletes.qsize() == 1
    assert deletes.get_nowait().change_type is ChangeType.DELETE
    assert everything.qsize() == 2


@pytest.mark.asyncio
async def test_change_ids_increase():
    cdc = ChangeDataCapture()
    first = await cdc.emit_change(ChangeType.INSERT, "t")
    second = await cdc.emit_change(ChangeType.UPDATE, "t")
    assert second.change_id == first.change_id + 1


@pytest.mark.asyncio
async def test_unsubscribe_stops_delivery():
    cdc = ChangeDataCapture()
    queue = cdc.subscribe(CDCSubscription("s1", tables=["t"]))
    cdc.unsubscribe("s1")
    await cdc.emit_change(ChangeType.INSERT, "t")
    assert queue.empty()
    assert cdc.list_subscriptions() == []


def test_list_subscriptions():
    cdc = ChangeDataCapture()
    sub = CDCSubscription("s1", tables=["t"])
    cdc.subscribe(sub)
    assert cdc.list_subscriptions() == [sub]


@pytest.mark.asyncio
async def test_change_log_filters():
    clock = _Clock()
    cdc = ChangeDataCapture(clock=clock)
    await cdc.emit_change(ChangeType.INSERT, "a")
    clock.now = BASE + timedelta(hours=1)
    await cdc.emit_change(ChangeType.INSERT, "b")
    await cdc.emit_change(ChangeType.UPDATE, "a")
    assert [e.table for e in cdc.get_change_log("a")] == ["a", "a"]
    assert len(cdc.get_change_log(since=BASE + timedelta(minutes=30))) == 2
    assert len(cdc.get_change_log(limit=1)) == 1


@pytest.mark.asyncio
async def test_export_csv_header_and_rows():
    cdc = ChangeDataCapture(clock=_Clock())
    await cdc.emit_change(ChangeType.DELETE, "t")
    lines = cdc.export_changes("csv").splitlines()
    assert lines[0] == "change_id,change_type,table,timestamp"
    assert lines[1].startswith("1,Delete,t,")


def test_export_csv_empty():
    assert ChangeDataCapture().export_changes("csv") == "change_id,change_type,table,timestamp\n"


@pytest.mark.asyncio
async def test_export_json_round_trip():
    cdc = ChangeDataCapture()
    event = await cdc.emit_change(ChangeType.UPDATE, "t", {"v": 1}, {"v": 2}, 3)
    data = json.loads(cdc.export_changes("json"))
    assert data == [event.to_dict()]


def test_export_unsupported_format():
    with pytest.raises(ValueError):
        ChangeDataCapture().export_changes("xml")