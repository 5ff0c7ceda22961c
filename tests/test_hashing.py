import pytest

from kafkalite.hashing import fnv1a_32, partition_index


def test_empty_input_is_offset_basis():
    assert fnv1a_32(b"") == 0x811C9DC5


@pytest.mark.parametrize(
    "data, expected",
    [(b"a", 0xE40C292C), (b"foobar", 0xBF9CF968)],
)
def test_reference_vectors(data, expected):
    assert fnv1a_32(data) == expected


def test_str_and_bytes_hash_alike():
    assert fnv1a_32("key-42") == fnv1a_32(b"key-42")


def test_hash_fits_in_32_bits():
    for n in range(200):
        assert 0 <= fnv1a_32(f"key-{n}") <= 0xFFFFFFFF


def test_partition_index_in_range():
    for n in range(500):
        assert 0 <= partition_index(f"key-{n}", 5) < 5


def test_partition_index_is_stable_and_uses_hash():
    key = "key-7"
    assert partition_index(key, 5) == partition_index(key, 5)
    assert partition_index(key, 5) == fnv1a_32(key) % 5


def test_single_partition_always_zero():
    assert {partition_index(f"k{n}", 1) for n in range(50)} == {0}


@pytest.mark.parametrize("count", [0, -3])
def test_partition_index_rejects_non_positive(count):
    with pytest.raises(ValueError):
        partition_index("key", count)