import pytest

from minsql.transactions.snapshot import Snapshot, TransactionId


def tid(n):
    return TransactionId(n)


def test_next_is_strictly_increasing():
    ids = [TransactionId.next() for _ in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_transaction_ids_compare_by_value():
    assert tid(3) == tid(3)
    assert tid(2) < tid(3)


@pytest.fixture
def snapshot():
    return Snapshot(tid(10), None, [tid(7), tid(10)])


def test_tuple_from_future_is_invisible(snapshot):
    assert snapshot.is_visible(tid(11)) is False


def test_tuple_from_committed_past_is_visible(snapshot):
    assert snapshot.is_visible(tid(5)) is True


def test_tuple_from_other_active_transaction_is_invisible(snapshot):
    assert snapshot.is_visible(tid(7)) is False


def test_own_tuple_is_visible(snapshot):
    assert snapshot.is_visible(tid(10)) is True


def test_zero_xmax_means_not_deleted(snapshot):
    assert snapshot.is_visible(tid(5), tid(0)) is True


def test_deleted_by_later_transaction_still_visible(snapshot):
    assert snapshot.is_visible(tid(5), tid(12)) is True


def test_deleted_by_active_transaction_still_visible(snapshot):
    assert snapshot.is_visible(tid(5), tid(7)) is True


def test_deleted_by_committed_transaction_is_invisible(snapshot):
    assert snapshot.is_visible(tid(5), tid(6)) is False


def test_deleted_by_self_is_invisible(snapshot):
    assert snapshot.is_visible(tid(5), tid(10)) is False