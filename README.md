# minsql

Components for a database node, usable on their own: a length-prefixed wire
protocol with a handshake and password check, replication-log bookkeeping,
hash-based sharding, MVCC snapshots and transactions, access control and
auditing, counters, monitoring, and in-process streaming primitives.

## Installation

```
pip install .
```

With the test requirements:

```
pip install ".[test]"
```

The only runtime dependency is `psutil`, used by the host health checks.

## Modules

| Module | Contents |
|---|---|
| `minsql.protocol.framing` | `Frame`, `MessageType`, `FrameError`; frames are a big-endian u32 length, a type byte and the payload, at most 100 MiB |
| `minsql.protocol.handshake` | `HandshakeRequest`, `HandshakeResponse`, `perform_handshake`, `HandshakeError`; requests start with the magic bytes `MINSQL` |
| `minsql.protocol.auth` | `Credentials`, `AuthManager`, `AuthError`; passwords kept as SHA-256 digests, with a built-in `admin` account |
| `minsql.replication.log` | `ReplicationLog` of `LogEntry` records (`LogEntryType`), with commit and last-applied indexes |
| `minsql.replication.state_sync` | `StateSync` creating and installing `Snapshot`s |
| `minsql.sharding.blake3` | `blake3(data, length=32)`, a pure-Python BLAKE3 hash |
| `minsql.sharding.keyspace` | `ShardId`, `KeyRange`, `Keyspace`; a key's shard is the low 64 bits (little-endian) of its BLAKE3 hash modulo the shard count |
| `minsql.sharding.routing` | `Router`, `ShardInfo`; shard *i* lives on node *i* mod 3 |
| `minsql.sharding.placement` | `PlacementStrategy`: least-loaded placement and `rebalance`, which returns the moves it made |
| `minsql.sharding.rebalance` | `Rebalancer`: `split_shard`, `should_split`, `migrate_shard` (logs the move) |
| `minsql.transactions.snapshot` | `TransactionId` (with `TransactionId.next()`), `Snapshot.is_visible` |
| `minsql.transactions.manager` | `TransactionManager`, `Transaction`, `TransactionState`, `TransactionNotFoundError` |
| `minsql.transactions.visibility` | `VisibilityChecker` |
| `minsql.security.rbac` | `RBACManager`, `Role`, `User`, `Permission`, `RBACError`; built-in roles `admin`, `readonly`, `readwrite` |
| `minsql.security.row_level_security` | `RLSManager`, `RowLevelSecurityPolicy` with a Python callable as row filter |
| `minsql.security.encryption` | `EncryptionManager`: key-derived XOR masking and salted SHA-256 password hashes |
| `minsql.security.audit_log` | `AuditLogger`, `AuditEvent`, `AuditEventType`; export as `json` or `csv` |
| `minsql.telemetry.metrics` | `MetricsRegistry` counters and an async `report_loop` that logs them |
| `minsql.monitoring.alerts` | `AlertManager`, `Alert`, `AlertSeverity`, `AlertNotFoundError` |
| `minsql.monitoring.performance` | `PerformanceMonitor` with average and p50/p95/p99 latencies |
| `minsql.monitoring.health_check` | `HealthChecker` (CPU, memory, disk, consensus, storage) returning a `HealthReport` |
| `minsql.streams.change_data_capture` | `ChangeDataCapture`, `CDCSubscription`, `ChangeEvent`, `ChangeType` |
| `minsql.streams.event_sourcing` | `EventStore`, `Event`, `Aggregate`, `VersionMismatchError` |
| `minsql.streams.pub_sub` | `PubSubBroker`, `Subscription`, `Message` |

## Examples

Encode a frame and route a key to a shard:

```python
from minsql.protocol.framing import Frame, MessageType
from minsql.sharding.routing import Router

wire = Frame(MessageType.QUERY, b"retrieve users").encode()

router = Router(16)
shard = router.route_key(b"user:42")
print(shard, router.get_shard_info(shard))
```

Register and authenticate a user:

```python
from minsql.protocol.auth import AuthError, AuthManager

password = "password"
auth = AuthManager()
auth.add_user("alice", password)
auth.authenticate("alice", password)   # returns None on success
try:
    auth.authenticate("bob", password)
except AuthError as exc:
    print(exc)                          # User not found
```

Check a permission against the built-in roles:

```python
from minsql.security.rbac import Permission, RBACManager

rbac = RBACManager()
rbac.create_user("alice", ["readonly"])
assert rbac.check_permission("alice", Permission.SELECT)
assert not rbac.check_permission("alice", Permission.INSERT)
```

Run transactions and test tuple visibility:

```python
from minsql.transactions.manager import TransactionManager

manager = TransactionManager()
xid = manager.begin(logical_time=0)
snapshot = manager.get_snapshot(xid)
print(snapshot.is_visible(snapshot.xid))  # True
manager.commit(xid)
```

Publish to subscribers with asyncio:

```python
import asyncio
from minsql.streams.pub_sub import PubSubBroker

async def demo():
    broker = PubSubBroker(max_history=100)
    sub = broker.subscribe("orders")
    await broker.publish("orders", {"id": 1})
    message = await sub.receive()
    print(message.channel, message.payload)

asyncio.run(demo())
```

Health checks read the host through `psutil` by default; the probes can be
replaced:

```python
from minsql.monitoring.health_check import HealthChecker

checker = HealthChecker(
    cpu_probe=lambda: [20.0, 30.0],
    memory_probe=lambda: (16 * 1024**3, 4 * 1024**3),   # (total, used) bytes
    disk_probe=lambda: [(100, 50)],                     # (total, available)
)
report = checker.check_all()
print(report.status, [c.message for c in report.checks])
```

Errors are raised as exceptions: `FrameError`, `HandshakeError`, `AuthError`,
`RBACError`, `TransactionNotFoundError`, `AlertNotFoundError`,
`VersionMismatchError`, and `ValueError` for unsupported export formats.

## What this package does not do

- There is no server and no command: nothing listens on a port or runs a
  connection loop. `Frame.read_from`/`write_to` and `perform_handshake` work on
  asyncio streams you open yourself.
- There is no query language: nothing parses, plans or executes queries.
- There is no storage: everything is held in memory and lost when the process
  ends. `ReplicationLog` only keeps entries and indexes; there is no consensus
  or network replication. `StateSync.install_snapshot` records the snapshot
  and nothing more.
- `EncryptionManager` masks bytes by XOR with a key; it is not a cipher and
  gives no real confidentiality.
- The consensus and storage health checks always report healthy.
- `Router.route` returns every shard for every request.

## Running the tests

```
pytest
```