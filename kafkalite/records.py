"""Data carried between a producer and a broker."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field


@dataclass
class RecordHeader:
    """One metadata header of a record."""

    key: bytes
    value: bytes


@dataclass
class Record:
    """A single message inside a record batch."""

    offset_delta: int = 0
    timestamp: str = ""
    headers: list[RecordHeader] = field(default_factory=list)
    key: bytes = b""
    value: bytes = b""


@dataclass
class RecordBatch:
    """An ordered batch of records with its count."""

    record_count: int = 0
    records: list[Record] = field(default_factory=list)

    def append(self, record: Record) -> None:
        """Add a record to the end of the batch."""
        self.records.append(record)
        self.record_count += 1

    def clear(self) -> None:
        """Remove every record from the batch."""
        self.records = []
        self.record_count = 0


@dataclass
class TopicPartitionData:
    """Pending records for one partition of a topic."""

    partition_id: int
    record_batch: RecordBatch = field(default_factory=RecordBatch)
    last_flush_time: float | None = None
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )


@dataclass
class TopicData:
    """A topic and its partitions keyed by partition id."""

    topic_name: str
    partitions: dict[int, TopicPartitionData] = field(default_factory=dict)


@dataclass
class ProduceRequest:
    """A request that hands batches of records to a broker."""

    acks: int = 1
    timeout_ms: int = 5000
    topics: list[TopicData] = field(default_factory=list)


@dataclass
class ProducerRecord:
    """What an application asks a producer to send."""

    topic: str
    key: str = ""
    value: str = ""
    partition: int | None = None