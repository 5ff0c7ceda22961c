# kafkalite

kafkalite is a small in-process message broker. Messages go to topics, and each topic is split into partitions. Every partition is an append-only log file under a data directory, `kafka-data/` by default.

## Features

- **Topics.** `Broker.create_topic(name, partitions)` registers a topic and creates an empty `partition-N.log` file for each partition. A count of zero or less gives the default of 3 partitions. A name that is already taken raises `TopicExistsError`.
- **Key routing.** Keys are hashed with 32-bit FNV-1a (`kafkalite.hashing.fnv1a_32`). The hash modulo the partition count picks the partition (`partition_index`). The same key always lands in the same partition. `Broker.get_partition(topic, key)` shows the choice.
- **Background writers.** `Broker.append_message(topic, key, message)` queues a line for a `PartitionWriter`. There is one writer per partition file, and each runs in its own thread with a bounded queue of 1000 messages. A failed write is retried up to three times. When the queue is full, the message is dropped and an error is logged. `kafkalite.writer.total_written()` counts the messages the writers have stored.
- **Batching producer.** `Producer.send(ProducerRecord(...))` adds a record to its partition's pending batch. The batch is handed to the broker with `receive_produce_request` in a background thread when it reaches five records, or when two seconds have passed since that partition's last flush. The first record sent to a partition also triggers a flush.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Usage

```python
from kafkalite.broker import Broker
from kafkalite.producer import Producer
from kafkalite.records import ProducerRecord

broker = Broker("kafka-data")
broker.create_topic("orders", 5)

# Write directly through the broker's partition writers
broker.append_message("orders", "order-1", "created")

# Or batch records through a producer
producer = Producer("example-producer", broker)
producer.send(ProducerRecord(topic="orders", key="order-2", value="paid"))

broker.close()  # writes what is queued and closes every partition writer
```

Other broker methods:

- `Broker.describe_topic(name)` returns a `TopicData` that holds an empty batch for each partition. An unknown topic raises `TopicNotFoundError`.
- `Broker.list_topics()` prints every topic with its partitions.

`Producer.send` has its own rules:

- It raises `ValueError` when the topic or the value is empty.
- A record with an empty key gets a generated key of the form `key-N`.

### Log line formats

Lines written by `append_message` are tab-separated with `|` between the fields:

```
<epoch millis>	|	<local ISO time>	|	<key>	|	<topic>	|	<value>
```

Batches flushed by a producer are written as:

```
<record timestamp> | <key> | <topic> | <value>
```

## Commands

```
kafkalite-broker [--data-dir DIR] [--topic NAME] [--partitions N] [--writers N] [--messages N] [--settle SECONDS]
```

This command creates one topic, 5 partitions by default. It then starts concurrent writer threads, 10 by default, and each thread appends 200 messages by default through `append_message`. The command waits up to `--settle` seconds (default 5) for the queued messages to be written. It then reports whether the number written matches the number sent, and exits with 0 on a match and 1 otherwise.

```
kafkalite-producer [--data-dir DIR] [--topics N] [--workers N] [--messages N] [--settle SECONDS]
```

This command creates N topics, 16 by default, named `test-topic`, `test-topic1`, and so on, with 5 partitions each. For every topic it runs `--workers` threads (default 100), and each thread sends `--messages` records (default 100) through one shared `Producer`. It then prints the elapsed time and the messages per second.

Both commands write under `kafka-data/` in the current directory unless `--data-dir` is given. Partition files that already exist are left in place; an error is logged for each one and the run continues.

## What it does not do

- Everything runs in one process. There is no network server or wire protocol.
- Nothing reads messages back out of the logs. There is no consumer and no offset tracking. The only way to see stored messages is to read the partition files.
- Topics are held in memory only. A new `Broker` knows no topics, even when their log files are still on disk.