"""Search index kept in Redis sets."""

import json
import logging
from collections import Counter
from functools import partial
from typing import Any, Dict, Iterable, Optional
from uuid import UUID

import redis.asyncio as redis
from redis.exceptions import RedisError, WatchError

from .base import DocumentLoader, SearchDocument, SearchIndex, SearchIndexError

logger = logging.getLogger(__name__)


async def _loaded(document: Optional[SearchDocument]) -> Optional[SearchDocument]:
    return document


class RedisSearchIndex(SearchIndex):
    """Inverted index in Redis.

    Key layout:
        search:term:{token}   set of note ids containing the token
        search:note:{note_id} JSON document, including its tokens so removal is exact
    """

    backend = "redis"

    def __init__(
        self,
        url: Optional[str] = None,
        *,
        client: Optional[Any] = None,
        max_connections: int = 10,
        min_token_length: int = 2,
        prefix: str = "search",
        max_retries: int = 10,
    ):
        super().__init__(min_token_length)
        if client is None:
            if url is None:
                raise ValueError("RedisSearchIndex needs a url or a client")
            client = redis.from_url(url, max_connections=max_connections, decode_responses=True)
        self.redis = client
        self.prefix = prefix
        self.max_retries = max_retries

    def _term_key(self, token: str) -> str:
        return f"{self.prefix}:term:{token}"

    def _note_key(self, note_id: UUID) -> str:
        return f"{self.prefix}:note:{note_id}"

    async def ensure(self) -> None:
        try:
            await self.redis.ping()
        except (RedisError, OSError) as e:
            raise SearchIndexError("Redis search index is unreachable") from e
        logger.info("Search index ready", extra={"backend": self.backend})

    async def index(self, document: SearchDocument) -> None:
        await self.refresh(document.note_id, partial(_loaded, document))

    async def remove(self, note_id: UUID) -> None:
        await self.refresh(note_id, partial(_loaded, None))

    async def refresh(self, note_id: UUID, load: DocumentLoader) -> None:
        """Replace the entry for ``note_id`` with what ``load`` returns.

        The note key is WATCHed before ``load`` reads the store. Any other
        write to the same note between the read and EXEC aborts the
        transaction and the store is read again, so the last successful write
        always reflects a read taken after the latest note commit.
        """
        note_key = self._note_key(note_id)
        try:
            async with self.redis.pipeline(transaction=True) as pipe:
                for _ in range(self.max_retries):
                    try:
                        await pipe.watch(note_key)
                        raw = await pipe.get(note_key)
                        document = await load()

                        pipe.multi()
                        for term in json.loads(raw).get("terms", []) if raw else []:
                            pipe.srem(self._term_key(term), str(note_id))
                        if document is None:
                            pipe.delete(note_key)
                        else:
                            self._queue_document(pipe, document)
                        await pipe.execute()
                    except WatchError:
                        logger.debug(f"Note {note_id} changed while indexing, retrying")
                        continue
                    break
                else:
                    raise SearchIndexError(f"Note {note_id} kept changing while indexing")
        except (RedisError, OSError) as e:
            raise SearchIndexError(f"Failed to index note {note_id}") from e
        logger.debug(f"Refreshed note {note_id} in search index")

    def _queue_document(self, pipe, document: SearchDocument) -> None:
        note_id = str(document.note_id)
        terms = document.all_terms
        for term in terms:
            pipe.sadd(self._term_key(term), note_id)
        pipe.set(
            self._note_key(document.note_id),
            json.dumps(
                {
                    "id": note_id,
                    "title": document.title,
                    "content": document.content,
                    "terms": terms,
                }
            ),
        )

    async def match(self, tokens: Iterable[str]) -> Dict[UUID, int]:
        hits: Counter = Counter()
        try:
            for token in tokens:
                for note_id in await self.redis.smembers(self._term_key(token)):
                    hits[note_id] += 1
        except (RedisError, OSError) as e:
            raise SearchIndexError("Search query failed") from e
        return {UUID(note_id): count for note_id, count in hits.items()}

    async def clear(self) -> None:
        try:
            keys = [key async for key in self.redis.scan_iter(match=f"{self.prefix}:*")]
            if keys:
                await self.redis.delete(*keys)
        except (RedisError, OSError) as e:
            raise SearchIndexError("Failed to clear search index") from e

    async def ping(self) -> bool:
        try:
            return bool(await self.redis.ping())
        except (RedisError, OSError):
            return False

    async def close(self) -> None:
        try:
            await self.redis.aclose()
        except (RedisError, OSError) as e:
            logger.warning(f"Redis disconnect failed: {e}")
