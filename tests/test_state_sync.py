from minsql.replication.state_sync import Snapshot, StateSync


def test_create_snapshot_fields():
    snapshot = StateSync().create_snapshot(10, 3, b"state")
    assert snapshot == Snapshot(last_included_index=10, last_included_term=3, data=b"state")


def test_install_snapshot_records_it():
    sync = StateSync()
    assert sync.last_installed is None
    snapshot = sync.create_snapshot(5, 2, b"data")
    sync.install_snapshot(snapshot)
    assert sync.last_installed == snapshot


def test_create_snapshot_copies_bytearray():
    state = bytearray(b"abc")
    snapshot = StateSync().create_snapshot(1, 1, state)
    state[0] = ord("z")
    assert snapshot.data == b"abc"