"""Mini README: Ledger storage and statistics engine.

This package groups the durable memo store and the three components built on
top of it: the memo service (write path), the query engine (listings) and the
statistics aggregator (sales summaries). Every component depends only on the
store and exchanges plain dataclass copies with its callers.
"""

from .models import BucketGranularity, LedgerTotals, Memo, MemoPage, PeriodBucket, SortMode
from .query import QueryEngine
from .service import MemoService
from .statistics import Period, SalesStats, StatisticsAggregator
from .store import LedgerStore

__all__ = [
    "BucketGranularity",
    "LedgerStore",
    "LedgerTotals",
    "Memo",
    "MemoPage",
    "MemoService",
    "Period",
    "PeriodBucket",
    "QueryEngine",
    "SalesStats",
    "SortMode",
    "StatisticsAggregator",
]
