"""Transactions, MVCC snapshots and tuple visibility."""