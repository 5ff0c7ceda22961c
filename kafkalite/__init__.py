"""An in-process message broker with hashed partitions, append-only partition logs and a batching producer."""

__version__ = "0.1.0"