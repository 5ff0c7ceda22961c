"""Producer that batches records per partition and hands them to a broker."""

from __future__ import annotations

import logging
import threading
import time
from typing import Protocol

from .hashing import partition_index
from .records import (
    ProduceRequest,
    ProducerRecord,
    Record,
    RecordBatch,
    RecordHeader,
    TopicData,
    TopicPartitionData,
)

logger = logging.getLogger(__name__)

_MAX_RECORDS_PER_BATCH = 5
_LINGER_SECONDS = 2.0


class BrokerClient(Protocol):
    """What a producer needs from a broker."""

    def receive_produce_request(self, request: ProduceRequest) -> None:
        """Store the batches carried by ``request``."""

    def describe_topic(self, name: str) -> TopicData:
        """Return empty partition batches for topic ``name``; raise if unknown."""


def generate_random_key() -> str:
    """Return a key of the form ``key-N`` with N below 1000."""
    return f"key-{time.time_ns() % 1000}"


class Producer:
    """Collects records into per-partition batches and flushes them to a broker."""

    def __init__(self, name: str, broker: BrokerClient | None) -> None:
        self.name = name
        self.broker = broker
        self.topic_map: dict[str, TopicData] = {}
        self._lock = threading.Lock()

    def send(self, record: ProducerRecord) -> None:
        """Validate ``record`` and add it to its partition's pending batch."""
        if not record.topic:
            raise ValueError("topic cannot be empty")
        if not record.value:
            raise ValueError("value cannot be empty")
        key = record.key or generate_random_key()

        topic_data = self.metadata(record.topic)
        total_partitions = len(topic_data.partitions)
        partition = (
            record.partition
            if record.partition is not None
            else partition_index(key, total_partitions)
        )
        partition_data = topic_data.partitions.get(partition)
        if partition_data is None:
            raise ValueError(f"partition {partition} not found in topic {record.topic}")

        new_record = Record(
            offset_delta=len(partition_data.record_batch.records),
            headers=[
                RecordHeader(b"header-key", key.encode("utf-8")),
                RecordHeader(b"header-value", b"header-value"),
            ],
            key=key.encode("utf-8"),
            value=record.value.encode("utf-8"),
        )
        self.add_to_partition(key, topic_data, total_partitions, new_record)
        logger.debug(
            "produced record with key: %s, value: %s to topic: %s, partition: %d",
            key,
            record.value,
            record.topic,
            partition,
        )

    def add_to_partition(
        self, key: str, topic_data: TopicData, total_partitions: int, record: Record
    ) -> None:
        """Append ``record`` to the partition chosen by ``key``; flush when due."""
        partition_id = partition_index(key, total_partitions)
        partition_data = topic_data.partitions.get(partition_id)
        if partition_data is None:
            return
        with partition_data.lock:
            partition_data.record_batch.append(record)
            count = partition_data.record_batch.record_count
            logger.debug("current record count in partition %d: %d", partition_id, count)
            now = time.monotonic()
            linger_expired = (
                partition_data.last_flush_time is None
                or now - partition_data.last_flush_time >= _LINGER_SECONDS
            )
            if count >= _MAX_RECORDS_PER_BATCH or linger_expired:
                threading.Thread(
                    target=self.flush_batch, args=(topic_data, partition_id)
                ).start()
                partition_data.last_flush_time = now

    def flush_batch(self, topic_data: TopicData, partition_id: int) -> None:
        """Send the pending batch of one partition to the broker and clear it."""
        topic_name = topic_data.topic_name
        partition_data = topic_data.partitions.get(partition_id)
        if partition_data is None:
            logger.warning("partition %d not found in topic %s", partition_id, topic_name)
            return

        with partition_data.lock:
            batch = partition_data.record_batch
            if batch.record_count == 0:
                logger.debug(
                    "no records to flush for topic %s partition %d", topic_name, partition_id
                )
                return

            request = ProduceRequest(
                acks=1,
                timeout_ms=5000,
                topics=[
                    TopicData(
                        topic_name,
                        {partition_id: TopicPartitionData(partition_id, record_batch=batch)},
                    )
                ],
            )
            if self.broker is not None:
                self.broker.receive_produce_request(request)

            partition_data.record_batch = RecordBatch()
            logger.debug("flushed batch for topic %s partition %d", topic_name, partition_id)

    def metadata(self, topic_name: str) -> TopicData:
        """Return cached partition data for a topic, asking the broker on first use."""
        with self._lock:
            topic_data = self.topic_map.get(topic_name)
        if topic_data is not None:
            return topic_data
        if self.broker is None:
            raise LookupError(f"no broker to describe topic {topic_name}")
        described = self.broker.describe_topic(topic_name)
        with self._lock:
            return self.topic_map.setdefault(topic_name, described)