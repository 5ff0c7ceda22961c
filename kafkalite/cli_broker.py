"""Stress run: many concurrent writers appending to one topic on a broker."""

from __future__ import annotations

import argparse
import logging
import threading
import time
from datetime import datetime
from typing import Sequence

from .broker import Broker, TopicExistsError, TopicNotFoundError
from .writer import reset_total_written, total_written

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


def _parse_args(argv: Sequence[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="kafkalite-broker", description="Concurrent write test for the broker."
    )
    parser.add_argument("--data-dir", default="kafka-data")
    parser.add_argument("--topic", default="test-topic")
    parser.add_argument("--partitions", type=int, default=5)
    parser.add_argument("--writers", type=int, default=10)
    parser.add_argument("--messages", type=int, default=200)
    parser.add_argument(
        "--settle",
        type=float,
        default=5.0,
        help="seconds to wait for queued messages to be written",
    )
    return parser.parse_args(argv)


def _run_writer(broker: Broker, topic: str, writer_id: int, count: int) -> None:
    for seq in range(count):
        key = f"key-{writer_id}-{seq}"
        stamp = datetime.now().astimezone().isoformat()
        message = f"Message from writer {writer_id}, seq {seq}: {stamp}"
        try:
            broker.append_message(topic, key, message)
        except (TopicNotFoundError, OSError) as exc:
            logger.error(
                "writer %d, message %d: failed to append message '%s': %s",
                writer_id,
                seq,
                key,
                exc,
            )
    print(f"Writer {writer_id} finished sending {count} messages.")


def main(argv: Sequence[str] | None = None) -> int:
    """Run the concurrent write test; return 0 when every message was written."""
    args = _parse_args(argv)
    print("--- Starting Hardcore Broker Test ---")

    broker = Broker(args.data_dir)
    print(f"Creating topic '{args.topic}' with {args.partitions} partitions...")
    try:
        broker.create_topic(args.topic, args.partitions)
    except TopicExistsError as exc:
        print(f"Failed to create topic: {exc}")
        return 1
    print("Topic created successfully.")

    expected = args.writers * args.messages
    reset_total_written()
    print(
        f"Starting {args.writers} concurrent writers, "
        f"each sending {args.messages} messages..."
    )
    start = time.perf_counter()
    threads = [
        threading.Thread(
            target=_run_writer, args=(broker, args.topic, writer_id, args.messages)
        )
        for writer_id in range(args.writers)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    duration = time.perf_counter() - start
    print(
        f"\nAll writers finished. Total messages attempted: {expected}. "
        f"Time taken: {duration:.3f}s"
    )

    deadline = time.monotonic() + args.settle
    while total_written() < expected and time.monotonic() < deadline:
        time.sleep(_POLL_INTERVAL)

    print("Verifying message counts in partition files...")
    actual = total_written()
    broker.close()
    passed = actual == expected
    if passed:
        print("Test PASSED: All expected messages were written successfully!")
    else:
        print(
            "Test FAILED: Mismatch in message count. "
            f"Expected {expected}, Got {actual}."
        )
    print("\n--- Hardcore Broker Test Finished ---")
    return 0 if passed else 1


if __name__ == "__main__":
    raise SystemExit(main())