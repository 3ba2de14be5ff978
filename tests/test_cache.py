from cache import ViewCache


def test_get_or_compute_memoizes_per_params():
    cache = ViewCache()
    calls = []

    def compute():
        calls.append(1)
        return {"total": len(calls)}

    first = cache.get_or_compute("statistics", {"year": 2020}, compute)
    again = cache.get_or_compute("statistics", {"year": 2020}, compute)
    other = cache.get_or_compute("statistics", {"year": 2021}, compute)

    assert first is again
    assert other == {"total": 2}
    assert cache.get_stats() == {"total_entries": 2, "hits": 1, "misses": 2}


def test_key_ignores_param_order():
    cache = ViewCache()
    cache.set("view", {"a": 1, "b": 2}, "x")
    assert cache.get("view", {"b": 2, "a": 1}) == "x"
    assert cache.get("statistics", {"a": 1, "b": 2}) is None


def test_lru_eviction_and_clear():
    cache = ViewCache(max_entries=2)
    cache.set("v", {"n": 1}, 1)
    cache.set("v", {"n": 2}, 2)
    cache.get("v", {"n": 1})
    cache.set("v", {"n": 3}, 3)

    assert cache.get("v", {"n": 2}) is None
    assert cache.get("v", {"n": 1}) == 1

    cache.clear_all()
    assert cache.get_stats()["total_entries"] == 0
