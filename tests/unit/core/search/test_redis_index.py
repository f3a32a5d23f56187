"""RedisSearchIndex against an in-memory stand-in for the redis client."""

import asyncio
import fnmatch
from uuid import uuid4

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from redis.exceptions import WatchError

from notevault.core.search import SearchIndexError, build_document
from notevault.core.search.redis_index import RedisSearchIndex


class FakePipeline:
    """Immediate mode after WATCH, buffered after MULTI, like redis-py."""

    def __init__(self, redis):
        self.redis = redis
        self.ops = []
        self.watched = {}

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        self.reset()

    def reset(self):
        self.ops.clear()
        self.watched.clear()

    async def watch(self, *keys):
        self.redis._check()
        for key in keys:
            self.watched[key] = self.redis.versions.get(key, 0)

    async def get(self, key):
        return await self.redis.get(key)

    def multi(self):
        pass

    def sadd(self, key, *members):
        self.ops.append(lambda: self.redis._sadd(key, members))
        return self

    def srem(self, key, *members):
        self.ops.append(lambda: self.redis._srem(key, members))
        return self

    def set(self, key, value):
        self.ops.append(lambda: self.redis._set(key, value))
        return self

    def delete(self, *keys):
        self.ops.append(lambda: self.redis._delete(keys))
        return self

    async def execute(self):
        self.redis._check()
        try:
            if any(self.redis.versions.get(k, 0) != v for k, v in self.watched.items()):
                raise WatchError("Watched variable changed.")
            for op in self.ops:
                op()
        finally:
            self.reset()


class FakeRedis:
    def __init__(self):
        self.sets = {}
        self.strings = {}
        self.versions = {}
        self.closed = False
        self.down = False

    def _check(self):
        if self.down:
            raise RedisConnectionError("connection refused")

    def _touch(self, key):
        self.versions[key] = self.versions.get(key, 0) + 1

    def _set(self, key, value):
        self.strings[key] = value
        self._touch(key)

    def _sadd(self, key, members):
        self.sets.setdefault(key, set()).update(members)
        self._touch(key)

    def _srem(self, key, members):
        self.sets.get(key, set()).difference_update(members)
        self._touch(key)

    def _delete(self, keys):
        for key in keys:
            if self.strings.pop(key, None) is not None or self.sets.pop(key, None) is not None:
                self._touch(key)

    async def ping(self):
        self._check()
        return True

    async def get(self, key):
        self._check()
        return self.strings.get(key)

    async def delete(self, *keys):
        self._check()
        self._delete(keys)

    async def smembers(self, key):
        self._check()
        return set(self.sets.get(key, set()))

    async def scan_iter(self, match="*"):
        self._check()
        for key in list(self.strings) + list(self.sets):
            if fnmatch.fnmatch(key, match):
                yield key

    def pipeline(self, transaction=True):
        self._check()
        return FakePipeline(self)

    async def aclose(self):
        self.closed = True


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def index(fake_redis):
    return RedisSearchIndex(client=fake_redis)


def test_requires_url_or_client():
    with pytest.raises(ValueError):
        RedisSearchIndex()


async def test_index_and_match(index):
    trip, groceries = uuid4(), uuid4()
    await index.index(build_document(trip, "trip plan", "plan the trip"))
    await index.index(build_document(groceries, "groceries", "milk for the trip"))

    assert await index.match(["trip", "plan"]) == {trip: 2, groceries: 1}
    assert await index.match(["nothing"]) == {}


async def test_reindex_drops_stale_terms(index, fake_redis):
    note_id = uuid4()
    await index.index(build_document(note_id, "trip", ""))
    await index.index(build_document(note_id, "holiday", ""))

    assert await index.match(["trip"]) == {}
    assert await index.match(["holiday"]) == {note_id: 1}
    assert f"search:note:{note_id}" in fake_redis.strings


async def test_remove(index, fake_redis):
    note_id = uuid4()
    await index.index(build_document(note_id, "trip", "rome"))
    await index.remove(note_id)

    assert await index.match(["trip", "rome"]) == {}
    assert f"search:note:{note_id}" not in fake_redis.strings


async def test_clear_only_touches_own_prefix(index, fake_redis):
    fake_redis.strings["other:key"] = "keep"
    await index.index(build_document(uuid4(), "trip", ""))

    await index.clear()

    assert await index.match(["trip"]) == {}
    assert fake_redis.strings == {"other:key": "keep"}


async def test_backend_failures_become_search_index_errors(index, fake_redis):
    fake_redis.down = True

    with pytest.raises(SearchIndexError):
        await index.ensure()
    with pytest.raises(SearchIndexError):
        await index.index(build_document(uuid4(), "trip", ""))
    with pytest.raises(SearchIndexError):
        await index.match(["trip"])
    assert await index.ping() is False


async def test_close_releases_client(index, fake_redis):
    await index.close()
    assert fake_redis.closed is True


async def test_refresh_follows_what_the_store_returns(index):
    note_id = uuid4()
    store = {note_id: build_document(note_id, "trip", "rome")}

    async def load():
        return store.get(note_id)

    await index.refresh(note_id, load)
    assert await index.match(["rome"]) == {note_id: 1}

    del store[note_id]
    await index.refresh(note_id, load)
    assert await index.match(["trip", "rome"]) == {}


async def test_stale_writer_rereads_store_after_newer_write(index):
    note_id = uuid4()
    store = {"content": "apple"}
    await index.index(build_document(note_id, "", "apple"))

    slow_reads = []
    first_read_taken = asyncio.Event()
    newer_write_done = asyncio.Event()

    async def slow_load():
        content = store["content"]
        slow_reads.append(content)
        if len(slow_reads) == 1:
            first_read_taken.set()
            await newer_write_done.wait()
        return build_document(note_id, "", content)

    async def load():
        return build_document(note_id, "", store["content"])

    # first writer reads "banana", then stalls while a second writer lands "cherry"
    store["content"] = "banana"
    slow = asyncio.create_task(index.refresh(note_id, slow_load))
    await first_read_taken.wait()
    store["content"] = "cherry"
    await index.refresh(note_id, load)
    newer_write_done.set()
    await slow

    assert slow_reads == ["banana", "cherry"]
    assert await index.match(["cherry"]) == {note_id: 1}
    assert await index.match(["banana"]) == {}
    assert await index.match(["apple"]) == {}


async def test_refresh_gives_up_when_note_never_settles(fake_redis):
    index = RedisSearchIndex(client=fake_redis, max_retries=3)
    note_id = uuid4()
    loads = []

    async def load():
        loads.append(1)
        fake_redis._set(f"search:note:{note_id}", "{}")
        return build_document(note_id, "trip", "")

    with pytest.raises(SearchIndexError):
        await index.refresh(note_id, load)
    assert len(loads) == 3
