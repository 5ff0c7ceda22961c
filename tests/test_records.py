from kafkalite.records import (
    ProduceRequest,
    ProducerRecord,
    Record,
    RecordBatch,
    RecordHeader,
    TopicData,
    TopicPartitionData,
)


def test_append_increments_count_and_keeps_order():
    batch = RecordBatch()
    first = Record(offset_delta=0, key=b"a", value=b"1")
    second = Record(offset_delta=1, key=b"b", value=b"2")
    batch.append(first)
    batch.append(second)
    assert batch.record_count == 2
    assert batch.records == [first, second]


def test_clear_empties_batch():
    batch = RecordBatch()
    batch.append(Record(key=b"a"))
    batch.clear()
    assert batch.record_count == 0
    assert batch.records == []


def test_clear_does_not_touch_previously_shared_list():
    batch = RecordBatch()
    batch.append(Record(key=b"a"))
    held = batch.records
    batch.clear()
    assert len(held) == 1


def test_batches_do_not_share_lists():
    one = RecordBatch()
    two = RecordBatch()
    one.append(Record())
    assert two.records == []


def test_record_defaults():
    record = Record()
    assert record.timestamp == ""
    assert record.headers == []
    assert record.key == b""


def test_header_equality():
    assert RecordHeader(b"k", b"v") == RecordHeader(b"k", b"v")
    assert (RecordHeader(b"k", b"v") == RecordHeader(b"k", b"w")) is False


def test_partition_data_has_own_lock_and_empty_batch():
    first = TopicPartitionData(0)
    second = TopicPartitionData(1)
    assert first.lock is not second.lock
    assert first.record_batch.record_count == 0
    assert first.last_flush_time is None
    with first.lock:
        assert second.lock.acquire(blocking=False)
        second.lock.release()


def test_topic_data_holds_partitions():
    data = TopicData("orders", {i: TopicPartitionData(i) for i in range(3)})
    assert sorted(data.partitions) == [0, 1, 2]
    assert data.partitions[2].partition_id == 2


def test_produce_request_defaults():
    request = ProduceRequest()
    assert request.acks == 1
    assert request.timeout_ms == 5000
    assert request.topics == []


def test_producer_record_defaults():
    record = ProducerRecord(topic="orders", value="v")
    assert record.key == ""
    assert record.partition is None