"""Routing of keys and requests to shards."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from minsql.sharding.keyspace import Keyspace, ShardId

_NODE_COUNT = 3


@dataclass(frozen=True)
class ShardInfo:
    shard_id: ShardId
    node_id: int
    is_primary: bool


class Router:
    """Knows every shard, the node that holds it, and where keys land."""

    def __init__(self, num_shards: int) -> None:
        self.keyspace = Keyspace(num_shards)
        self._shard_map = {
            ShardId(i): ShardInfo(ShardId(i), i % _NODE_COUNT, True) for i in range(num_shards)
        }

    def route(self, intent: Any) -> list[ShardId]:
        """Return the shards a request must visit; every request visits all of them."""
        return self.all_shards()

    def route_key(self, key: bytes) -> ShardId:
        return self.keyspace.lookup(key)

    def get_shard_info(self, shard_id: ShardId) -> ShardInfo | None:
        return self._shard_map.get(shard_id)

    def all_shards(self) -> list[ShardId]:
        return sorted(self._shard_map)