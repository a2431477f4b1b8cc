"""Shard splitting and migration decisions."""

from __future__ import annotations

import logging

from minsql.sharding.keyspace import ShardId

logger = logging.getLogger(__name__)


class Rebalancer:
    """Splits oversized shards and moves shards between nodes."""

    def split_shard(self, shard_id: ShardId) -> tuple[ShardId, ShardId]:
        """Return the two child shards of ``shard_id``."""
        return ShardId(shard_id.value * 2), ShardId(shard_id.value * 2 + 1)

    def migrate_shard(self, shard_id: ShardId, from_node: int, to_node: int) -> None:
        logger.info("Migrating shard %s from node %d to node %d", shard_id, from_node, to_node)

    def should_split(self, shard_size: int, threshold: int) -> bool:
        return shard_size > threshold