import logging

from minsql.sharding.keyspace import ShardId
from minsql.sharding.rebalance import Rebalancer


def test_split_shard_children():
    assert Rebalancer().split_shard(ShardId(3)) == (ShardId(6), ShardId(7))


def test_split_children_are_distinct_for_distinct_parents():
    rebalancer = Rebalancer()
    children = [c for i in range(20) for c in rebalancer.split_shard(ShardId(i))]
    assert len(set(children)) == len(children)


def test_should_split():
    rebalancer = Rebalancer()
    assert rebalancer.should_split(10, 5) is True
    assert rebalancer.should_split(5, 5) is False
    assert rebalancer.should_split(4, 5) is False


def test_migrate_shard_logs(caplog):
    with caplog.at_level(logging.INFO, logger="minsql.sharding.rebalance"):
        result = Rebalancer().migrate_shard(ShardId(2), 0, 1)
    assert result is None
    assert "Migrating shard" in caplog.text
    assert "from node 0 to node 1" in caplog.text