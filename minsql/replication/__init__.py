"""In-memory replication log bookkeeping and state snapshots."""