from app.core.data_store import DataStore, get_data_store


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self):
        return self.now


def test_put_and_get():
    store = DataStore(ttl_seconds=60)
    payload = {"slices": [{"title": "A"}]}
    token = store.put(payload)

    assert isinstance(token, str) and len(token) == 36
    assert store.get(token) == payload
    assert store.get("unknown") is None


def test_tokens_are_unique():
    store = DataStore(ttl_seconds=60)
    assert store.put(1) != store.put(1)
    assert len(store) == 2


def test_entries_expire_on_read():
    clock = FakeClock()
    store = DataStore(ttl_seconds=60, clock=clock)
    token = store.put("backlog")

    clock.now += 60
    assert store.get(token) == "backlog"

    clock.now += 1
    assert store.get(token) is None
    assert len(store) == 0


def test_sweep_removes_only_expired():
    clock = FakeClock()
    store = DataStore(ttl_seconds=30, clock=clock)
    old = store.put("old")
    clock.now += 20
    fresh = store.put("fresh")
    clock.now += 15

    assert store.sweep() == 1
    assert store.get(old) is None
    assert store.get(fresh) == "fresh"
    assert store.sweep() == 0


def test_process_wide_store_is_shared():
    assert get_data_store() is get_data_store()
