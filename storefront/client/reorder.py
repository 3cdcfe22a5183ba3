"""
List Reorder Engine

Moves one entry of an ordered admin collection (categories or banners) up
or down by one position. The swap is computed on a copy of the current id
list, and the *whole* new sequence is submitted; the server turns each
position into the row's ``order``.

State per collection::

    IDLE --move()--> SUBMITTING --success--> IDLE (list refetched)
                                 --failure--> IDLE (error notice, list refetched)

A move requested while SUBMITTING is refused without a request, so reorders
on one collection never overlap. Nothing is committed locally before the
server answers; the list shown afterwards always comes from a refetch.
"""

import logging
from enum import Enum
from typing import Optional, Sequence

from storefront.client.api import StorefrontAPIClient, StorefrontAPIError
from storefront.client.cache import QueryCache
from storefront.client.notices import NoticeBoard

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    UP = "up"
    DOWN = "down"


class ReorderState(str, Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"


# Cache keys touched by a reorder of each collection
COLLECTION_CACHE_KEYS = {
    "categories": ("/api/admin/categories", "/api/categories"),
    "banners": ("/api/admin/banners", "/api/banners"),
}

COLLECTION_LABELS = {
    "categories": "Category",
    "banners": "Banner",
}


def compute_reordered_ids(
    ids: Sequence[str],
    index: int,
    direction: Direction,
) -> Optional[list[str]]:
    """
    Swap the id at ``index`` with its neighbour in ``direction``.

    Returns:
        A new list, or None when the move would leave ``[0, len(ids))``
        (first item up, last item down, or an invalid index)
    """
    target = index - 1 if Direction(direction) == Direction.UP else index + 1
    if not 0 <= index < len(ids) or not 0 <= target < len(ids):
        return None

    reordered = list(ids)
    reordered[index], reordered[target] = reordered[target], reordered[index]
    return reordered


class ListReorderEngine:
    """
    Reorder controller for one admin collection.

    Attributes:
        client: API client with an authenticated admin session
        collection: ``"categories"`` or ``"banners"``
        cache: Read cache invalidated after every submission
        notices: Where success and failure notices are posted
    """

    def __init__(
        self,
        client: StorefrontAPIClient,
        collection: str,
        cache: Optional[QueryCache] = None,
        notices: Optional[NoticeBoard] = None,
    ):
        if collection not in COLLECTION_CACHE_KEYS:
            raise ValueError(f"Unknown collection: {collection}")
        self.client = client
        self.collection = collection
        self.cache = cache or QueryCache()
        self.notices = notices or NoticeBoard()
        self.state = ReorderState.IDLE

    @property
    def is_busy(self) -> bool:
        return self.state == ReorderState.SUBMITTING

    @property
    def _list_key(self) -> str:
        return COLLECTION_CACHE_KEYS[self.collection][0]

    @property
    def items(self) -> list:
        """Last fetched list, in server order."""
        return list(self.cache.get(self._list_key, []))

    async def load(self) -> list:
        return list(await self.cache.fetch(self._list_key, lambda: self.client.admin_list(self.collection)))

    async def refresh(self) -> list:
        """
        Invalidate every cached view of the collection and refetch it.

        The admin list is only replaced once the refetch succeeds.
        """
        list_key, *other_keys = COLLECTION_CACHE_KEYS[self.collection]
        self.cache.invalidate(*other_keys)
        items = await self.client.admin_list(self.collection)
        self.cache.set(list_key, items)
        return list(items)

    def can_move(self, index: int, direction: Direction) -> bool:
        """Whether the move control for ``index`` should be enabled."""
        if self.is_busy:
            return False
        ids = [entry.id for entry in self.items]
        return compute_reordered_ids(ids, index, direction) is not None

    async def move(self, index: int, direction: Direction) -> bool:
        """
        Move the entry at ``index`` one step in ``direction``.

        Returns:
            True when the server accepted the new order; False for a refused
            (busy), boundary, or failed move
        """
        if self.is_busy:
            logger.info(f"Reorder of {self.collection} already in progress; ignoring move")
            return False

        ids = [entry.id for entry in self.items]
        reordered = compute_reordered_ids(ids, index, direction)
        if reordered is None:
            return False

        label = COLLECTION_LABELS[self.collection]
        self.state = ReorderState.SUBMITTING
        try:
            try:
                await self.client.reorder(self.collection, reordered)
            except StorefrontAPIError as e:
                self.notices.error(f"Failed to reorder {self.collection}", str(e.detail))
                await self._reconcile()
                return False

            self.notices.success(f"{label} order updated")
            await self._reconcile()
            return True
        finally:
            self.state = ReorderState.IDLE

    async def _reconcile(self) -> None:
        try:
            await self.refresh()
        except StorefrontAPIError as e:
            logger.error(f"Could not refetch {self.collection} after reorder: {e}")
            self.notices.error(f"Could not reload {self.collection}", "The list shown may be out of date")
