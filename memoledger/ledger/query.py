"""Mini README: Search, sort and pagination over the ledger.

Structure:
    * QueryEngine - turns listing parameters into a :class:`MemoPage`.

Search is a case-insensitive substring match on client or item name. Listings
are always newest first, either by memo date or by creation time, and the
returned total counts every matching memo so callers can render page counts.
"""

from __future__ import annotations

from typing import Optional

from ..errors import InvalidArgumentError
from ..logging_utils import get_logger
from .models import MemoPage, SortMode
from .store import LedgerStore

LOGGER = get_logger(__name__)

DEFAULT_PAGE_SIZE = 50


class QueryEngine:
    """Paginated, searchable view of the ledger for display."""

    def __init__(self, store: LedgerStore, *, default_page_size: int = DEFAULT_PAGE_SIZE) -> None:
        self._store = store
        self._default_page_size = default_page_size

    def list_memos(
        self,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        sort_by: Optional[str | SortMode] = None,
        search: Optional[str] = None,
    ) -> MemoPage:
        """Return memos matching ``search`` ordered by ``sort_by`` descending."""

        # A zero or missing limit means "use the default page size".
        effective_limit = limit or self._default_page_size
        effective_offset = offset or 0
        if effective_limit < 0:
            raise InvalidArgumentError("limit must not be negative")
        if effective_offset < 0:
            raise InvalidArgumentError("offset must not be negative")

        sort_mode = sort_by if isinstance(sort_by, SortMode) else SortMode.from_str(sort_by)
        memos, total = self._store.query(
            search=search or None,
            sort_mode=sort_mode,
            limit=effective_limit,
            offset=effective_offset,
        )
        return MemoPage(memos=memos, total=total)


__all__ = ["DEFAULT_PAGE_SIZE", "QueryEngine"]
