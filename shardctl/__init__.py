"""Shards, a thread-safe static shard controller, and a query command."""

__version__ = "0.1.0"
__all__ = ["messages", "controller", "query_command"]