"""Broker that owns topics, assigns partitions and appends messages to logs."""

from __future__ import annotations

import logging
import os
import threading
import time
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import IO

from .cache import WriterCache
from .hashing import partition_index
from .records import ProduceRequest, RecordBatch, TopicData, TopicPartitionData
from .writer import PartitionWriter, QueueFullError, WriterClosedError

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = "kafka-data"
DEFAULT_PARTITIONS = 3
_CREATE_RETRIES = 3
_CREATE_DELAY = 1.0
_WRITER_CACHE_CAPACITY = 100


class TopicExistsError(ValueError):
    """Raised when creating a topic whose name is already taken."""


class TopicNotFoundError(LookupError):
    """Raised when a topic is not known to the broker."""


@dataclass(frozen=True)
class Partition:
    """One partition of a topic and the name of its log file."""

    id: int
    name: str


@dataclass
class Topic:
    """A named topic and its partitions."""

    name: str
    partitions: list[Partition] = field(default_factory=list)


def _partition_name(partition_id: int) -> str:
    return f"partition-{partition_id}.log"


def format_production_message(key: str, topic: str, value: str) -> str:
    """Return the log line for a message: epoch millis, local time, key, topic, value."""
    millis = time.time_ns() // 1_000_000
    stamp = datetime.fromtimestamp(millis / 1000).astimezone().isoformat(
        timespec="milliseconds"
    )
    if stamp.endswith("+00:00"):
        stamp = stamp[: -len("+00:00")] + "Z"
    return "\t|\t".join((str(millis), stamp, key, topic, value))


def retryable_file_create(
    path: str | os.PathLike[str],
    retries: int = _CREATE_RETRIES,
    delay: float = _CREATE_DELAY,
) -> IO[str]:
    """Create ``path`` exclusively, retrying with growing delays on transient errors.

    Raises FileExistsError at once if the file is already there.
    """
    last_error: OSError | None = None
    for attempt in range(1, retries + 1):
        try:
            return open(path, "x", encoding="utf-8")
        except FileExistsError:
            raise FileExistsError(f"file {os.fspath(path)} already exists") from None
        except OSError as exc:
            last_error = exc
            logger.warning(
                "[retry %d/%d] error creating %s: %s", attempt, retries, path, exc
            )
            time.sleep(delay * attempt)
    raise OSError(
        f"failed to create {os.fspath(path)} after {retries} attempts: {last_error}"
    ) from last_error


class Broker:
    """Keeps topics and writes the messages sent to them under ``data_dir``."""

    def __init__(self, data_dir: str | os.PathLike[str] = DEFAULT_DATA_DIR) -> None:
        self.data_dir = Path(data_dir)
        self._topics: dict[str, Topic] = {}
        self._lock = threading.RLock()
        self._writer_cache: WriterCache[PartitionWriter] = WriterCache(
            _WRITER_CACHE_CAPACITY
        )
        self._writers: list[PartitionWriter] = []
        self._writer_lock = threading.Lock()

    def create_topic(self, name: str, partitions: int = DEFAULT_PARTITIONS) -> Topic:
        """Register a topic and create an empty log file for each partition."""
        with self._lock:
            if name in self._topics:
                raise TopicExistsError(f"topic {name} already exists")
            if partitions <= 0:
                partitions = DEFAULT_PARTITIONS
            topic = Topic(
                name, [Partition(i, _partition_name(i)) for i in range(partitions)]
            )
            self._topics[name] = topic
            self._create_partition_files(topic)
            return topic

    def _create_partition_files(self, topic: Topic) -> None:
        base = self.data_dir / topic.name
        try:
            base.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("failed to create topic directory %s: %s", base, exc)
            return
        for partition in topic.partitions:
            path = base / partition.name
            try:
                with retryable_file_create(path, _CREATE_RETRIES, _CREATE_DELAY):
                    pass
            except OSError as exc:
                logger.error("failed to create file %s: %s", path, exc)
                continue
            logger.info("created partition log: %s", path)

    def get_partition(self, topic: str, key: str) -> Partition:
        """Return the partition of ``topic`` that ``key`` hashes to."""
        with self._lock:
            found = self._topics.get(topic)
            if found is None:
                raise TopicNotFoundError(f"topic {topic} not found")
            index = partition_index(key, len(found.partitions))
        return Partition(index, _partition_name(index))

    def append_message(self, topic: str, key: str, message: str) -> None:
        """Queue ``message`` for the partition that ``key`` selects."""
        partition = self.get_partition(topic, key)
        path = self.data_dir / topic / partition.name
        cache_key = str(path)
        with self._writer_lock:
            writer = self._writer_cache.get(cache_key)
            if writer is None:
                try:
                    writer = PartitionWriter(path)
                except OSError as exc:
                    raise OSError(
                        f"failed to create partition writer for {partition.name}: {exc}"
                    ) from exc
                self._writer_cache.put(cache_key, writer)
                self._writers.append(writer)
        try:
            writer.send(format_production_message(key, topic, message))
        except (QueueFullError, WriterClosedError) as exc:
            logger.error("failed to send message: %s", exc)

    def receive_produce_request(self, request: ProduceRequest) -> None:
        """Append every batch carried by ``request`` to its partition log."""
        for topic_data in request.topics:
            for partition_id, partition_data in topic_data.partitions.items():
                self._write_batch(
                    topic_data.topic_name, partition_id, partition_data.record_batch
                )

    def _write_batch(self, topic_name: str, partition_id: int, batch: RecordBatch) -> None:
        directory = self.data_dir / topic_name
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            logger.error("failed to create directory %s: %s", directory, exc)
            return
        content = "".join(
            f"{record.timestamp} | {record.key.decode('utf-8', 'replace')} | "
            f"{topic_name} | {record.value.decode('utf-8', 'replace')}\n"
            for record in batch.records
        )
        path = directory / _partition_name(partition_id)
        try:
            with open(path, "a", encoding="utf-8") as file:
                file.write(content)
        except OSError as exc:
            logger.error(
                "failed to write batch to partition %d of topic %s: %s",
                partition_id,
                topic_name,
                exc,
            )

    def list_topics(self) -> None:
        """Print every topic with its partitions."""
        with self._lock:
            if not self._topics:
                print("No topics available.")
                return
            print("==== Available topics ====")
            for name, topic in self._topics.items():
                print(f"Topic: {name}, Partitions: {len(topic.partitions)}")
                for partition in topic.partitions:
                    print(
                        f"  - Partition ID: {partition.id} | "
                        f"Partition Name: {partition.name}"
                    )

    def describe_topic(self, name: str) -> TopicData:
        """Return the topic's partitions, each with an empty record batch."""
        with self._lock:
            topic = self._topics.get(name)
            if topic is None:
                raise TopicNotFoundError(f"topic {name} does not exist")
            topic_data = TopicData(
                topic.name,
                {p.id: TopicPartitionData(p.id) for p in topic.partitions},
            )
        if not topic_data.partitions:
            raise ValueError(f"topic {name} has no partitions")
        return topic_data

    def close(self) -> None:
        """Flush and close every partition writer the broker has opened."""
        with self._writer_lock:
            writers = self._writers
            self._writers = []
            self._writer_cache = WriterCache(_WRITER_CACHE_CAPACITY)
        for writer in writers:
            writer.close()