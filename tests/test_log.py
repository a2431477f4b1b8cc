from minsql.replication.log import LogEntry, LogEntryType, ReplicationLog


def _filled(count):
    log = ReplicationLog()
    for i in range(count):
        log.append(LogEntry(term=i + 1, index=i, entry_type=LogEntryType.WRITE, data=bytes([i])))
    return log


def test_empty_log():
    log = ReplicationLog()
    assert log.last_index() == 0
    assert log.last_term() == 0
    assert log.get(0) is None


def test_append_and_get():
    log = _filled(3)
    assert log.last_index() == 3
    assert len(log) == 3
    assert log.get(1).data == bytes([1])
    assert log.get(3) is None
    assert log.get(-1) is None


def test_last_term_follows_last_entry():
    log = _filled(2)
    log.append(LogEntry(term=9, index=2, entry_type=LogEntryType.CONFIG))
    assert log.last_term() == 9


def test_truncate():
    log = _filled(5)
    log.truncate(2)
    assert log.last_index() == 2
    assert [entry.index for entry in log.entries] == [0, 1]
    log.truncate(10)
    assert log.last_index() == 2


def test_commit_and_apply():
    log = _filled(4)
    log.commit(3)
    log.apply(2)
    assert log.commit_index == 3
    assert log.last_applied == 2