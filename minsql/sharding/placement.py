"""Assignment of shards to nodes, keeping node loads even."""

from __future__ import annotations

from dataclasses import dataclass, field

from minsql.sharding.keyspace import ShardId


@dataclass
class PlacementStrategy:
    """Tracks which node holds each shard and how many shards each node holds."""

    shard_to_node: dict[ShardId, int] = field(default_factory=dict)
    node_loads: dict[int, int] = field(default_factory=dict)

    def assign_shard(self, shard_id: ShardId, num_nodes: int) -> int:
        """Place ``shard_id`` on the least loaded of ``num_nodes`` nodes."""
        node_id = self._least_loaded_node(num_nodes)
        self.shard_to_node[shard_id] = node_id
        self.node_loads[node_id] = self.node_loads.get(node_id, 0) + 1
        return node_id

    def get_node(self, shard_id: ShardId) -> int | None:
        return self.shard_to_node.get(shard_id)

    def _least_loaded_node(self, num_nodes: int) -> int:
        # Ties go to the lowest node id; with no nodes, node 0.
        return min(range(num_nodes), key=lambda n: (self.node_loads.get(n, 0), n), default=0)

    def rebalance(self, num_nodes: int) -> list[tuple[ShardId, int, int]]:
        """Move shards off nodes holding more than one over the fair share.

        Returns the moves made as ``(shard, from_node, to_node)``.
        """
        if num_nodes <= 0:
            raise ValueError("num_nodes must be positive")
        target_load = len(self.shard_to_node) // num_nodes
        moves: list[tuple[ShardId, int, int]] = []

        while True:
            overloaded = [n for n, load in self.node_loads.items() if load > target_load + 1]
            if not overloaded:
                break
            source = max(overloaded, key=lambda n: (self.node_loads[n], -n))
            destination = self._least_loaded_node(num_nodes)
            if self.node_loads.get(destination, 0) + 1 >= self.node_loads[source]:
                break
            shard = min(s for s, n in self.shard_to_node.items() if n == source)
            self.shard_to_node[shard] = destination
            self.node_loads[source] -= 1
            self.node_loads[destination] = self.node_loads.get(destination, 0) + 1
            moves.append((shard, source, destination))

        return moves