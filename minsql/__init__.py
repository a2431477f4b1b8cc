"""Building blocks for a database node: protocol, sharding, transactions, security, monitoring and streams."""

__version__ = "0.1.0"