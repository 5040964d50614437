from keno_admin.modules.roles.cache import RoleCache


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class CountingLoader:
    def __init__(self):
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return [f"load-{self.calls}"]


def test_serves_cached_value_until_expiry():
    clock = FakeClock()
    loader = CountingLoader()
    cache = RoleCache(ttl_seconds=300, clock=clock)

    assert cache.get(loader) == ["load-1"]
    clock.now = 299
    assert cache.get(loader) == ["load-1"]
    clock.now = 300
    assert cache.get(loader) == ["load-2"]
    assert loader.calls == 2


def test_force_refresh_reloads():
    loader = CountingLoader()
    cache = RoleCache(ttl_seconds=300, clock=FakeClock())

    cache.get(loader)
    assert cache.get(loader, force_refresh=True) == ["load-2"]


def test_invalidate():
    loader = CountingLoader()
    cache = RoleCache(ttl_seconds=300, clock=FakeClock())

    cache.get(loader)
    assert cache.is_fresh
    cache.invalidate()
    assert not cache.is_fresh
    assert cache.get(loader) == ["load-2"]

