"""Shard identifiers and hash-based key placement."""

from __future__ import annotations

from dataclasses import dataclass, field

from minsql.sharding.blake3 import blake3


@dataclass(frozen=True, order=True)
class ShardId:
    value: int


@dataclass
class KeyRange:
    shard_id: ShardId
    start: bytes = b""
    end: bytes = b""


@dataclass
class Keyspace:
    """Maps keys onto ``num_shards`` shards by hashing."""

    num_shards: int
    ranges: list[KeyRange] = field(init=False)

    def __post_init__(self) -> None:
        self.ranges = [KeyRange(ShardId(i)) for i in range(self.num_shards)]

    def lookup(self, key: bytes) -> ShardId:
        """Return the shard owning ``key``: the low 64 bits of its BLAKE3 hash mod the shard count."""
        if self.num_shards <= 0:
            raise ValueError("keyspace has no shards")
        digest = blake3(key)
        return ShardId(int.from_bytes(digest[:8], "little") % self.num_shards)

    def get_shard_range(self, shard_id: ShardId) -> KeyRange | None:
        return next((r for r in self.ranges if r.shard_id == shard_id), None)