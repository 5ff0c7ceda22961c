"""Benchmark: many concurrent producers sending to many topics."""

from __future__ import annotations

import argparse
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from .broker import Broker, TopicExistsError
from .producer import Producer
from .records import ProducerRecord

_PARTITIONS = 5


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kafkalite-producer", description="Producer throughput benchmark."
    )
    parser.add_argument("--data-dir", default="kafka-data")
    parser.add_argument("--topics", type=int, default=16)
    parser.add_argument("--workers", type=int, default=100)
    parser.add_argument("--messages", type=int, default=100)
    parser.add_argument(
        "--settle",
        type=float,
        default=1.0,
        help="seconds to wait for background flushes",
    )
    return parser.parse_args(argv)


def _topic_names(count: int) -> list[str]:
    if count <= 0:
        return []
    return ["test-topic"] + [f"test-topic{i}" for i in range(1, count)]


def _send_messages(producer: Producer, topic: str, count: int) -> None:
    for index in range(count):
        record = ProducerRecord(topic=topic, key=f"key-{index}", value=f"Message {index}")
        try:
            producer.send(record)
        except (ValueError, LookupError, OSError) as exc:
            print(f"Error sending message: {exc}")


def _produce_topic(producer: Producer, topic: str, workers: int, count: int) -> None:
    if workers <= 0:
        return
    with ThreadPoolExecutor(max_workers=workers) as pool:
        for _ in range(workers):
            pool.submit(_send_messages, producer, topic, count)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the producer benchmark and print its throughput."""
    args = _parse_args(argv)
    broker = Broker(args.data_dir)
    producer = Producer("example-producer", broker)

    topics = _topic_names(args.topics)
    for name in topics:
        try:
            broker.create_topic(name, _PARTITIONS)
        except TopicExistsError as exc:
            print(f"Error creating topic: {exc}")

    start = time.perf_counter()
    threads = [
        threading.Thread(
            target=_produce_topic, args=(producer, name, args.workers, args.messages)
        )
        for name in topics
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    elapsed = time.perf_counter() - start

    time.sleep(args.settle)
    broker.close()

    total = len(topics) * args.workers * args.messages
    rate = total / elapsed if elapsed > 0 else 0.0
    print("================================================")
    print("All messages sent successfully")
    print("Benchmark complete")
    print(f"Total time: {elapsed:.3f}s")
    print(f"Total Messages: {total}")
    print(f"Messages per second: {rate:.2f}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())