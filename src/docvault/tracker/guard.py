"""Single-flight guard for ensuring object collections exist."""

import asyncio
import logging
from typing import Dict, Set

from docvault.core.exceptions import CollectionError
from docvault.storage.base import ObjectStore

logger = logging.getLogger(__name__)


class CollectionGuard:
    """Memoizes the "collection exists" check per collection.

    The first caller for a collection starts the check; every concurrent
    caller awaits that same in-flight task, and once it succeeds the
    collection is remembered as ready. ``create_collection`` therefore runs
    at most once per collection. A check that fails is forgotten, so the
    next caller starts a fresh one.
    """

    def __init__(self):
        self._ready: Set[str] = set()
        self._in_flight: Dict[str, asyncio.Task] = {}

    async def ensure(self, store: ObjectStore, collection: str) -> None:
        """Make sure ``collection`` exists in ``store``.

        Raises:
            CollectionError: If the check or the creation fails
        """
        # The collection's address identifies it across store instances
        key = store.collection_url(collection)
        if key in self._ready:
            return

        check = self._in_flight.get(key)
        if check is None:
            check = asyncio.ensure_future(self._ensure(store, collection))
            self._in_flight[key] = check
            check.add_done_callback(lambda done: self._settle(key, done))
        # Shield so one cancelled waiter does not cancel the shared check
        await asyncio.shield(check)

    def _settle(self, key: str, check: asyncio.Task) -> None:
        if self._in_flight.get(key) is check:
            del self._in_flight[key]
        if not check.cancelled() and check.exception() is None:
            self._ready.add(key)

    @staticmethod
    async def _ensure(store: ObjectStore, collection: str) -> None:
        try:
            if not await store.collection_exists(collection):
                logger.info(
                    f"Collection {collection} missing, creating it",
                    extra={"collection": collection, "backend": store.get_backend_name()},
                )
                await store.create_collection(collection)
        except CollectionError:
            raise
        except Exception as e:
            raise CollectionError(f"Failed to ensure collection {collection}: {e}") from e

    def reset(self) -> None:
        """Forget every memoized check."""
        self._ready.clear()
        self._in_flight.clear()


# Process-wide instance shared by all trackers
collection_guard = CollectionGuard()
