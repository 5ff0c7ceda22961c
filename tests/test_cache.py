from kafkalite.cache import WriterCache


def test_missing_key_returns_none():
    cache = WriterCache(10)
    assert cache.get("absent") is None


def test_put_then_get():
    cache = WriterCache(10)
    value = object()
    cache.put("a", value)
    assert cache.get("a") is value


def test_put_existing_key_keeps_first_value():
    cache = WriterCache(10)
    first, second = object(), object()
    cache.put("a", first)
    cache.put("a", second)
    assert cache.get("a") is first
    assert len(cache) == 1


def test_len_counts_distinct_keys():
    cache = WriterCache(10)
    for name in ["a", "b", "c", "b"]:
        cache.put(name, name.upper())
    assert len(cache) == 3


def test_no_eviction_beyond_capacity():
    cache = WriterCache(2)
    for n in range(5):
        cache.put(f"k{n}", n)
    assert len(cache) == 5
    assert cache.get("k0") == 0
    assert cache.capacity == 2