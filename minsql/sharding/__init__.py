"""BLAKE3 key hashing, shard routing, placement and rebalancing."""