"""Mini README: Period-based sales summaries.

Structure:
    * Period - named shorthands for the default reporting window.
    * SalesStats - headline totals plus the per-day breakdown.
    * StatisticsAggregator - resolves the date range and queries the store.

The headline figures (``totalSales``, ``cashAvailable``, ``totalDue``) always
cover the whole ledger, while ``periodSales`` only covers the requested date
range. An explicit range is used only when both ``start_date`` and
``end_date`` are supplied; otherwise the period picks the window, anchored to
the injected clock.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..errors import ValidationError
from ..logging_utils import get_logger
from .models import BucketGranularity, PeriodBucket, parse_date
from .store import LedgerStore

LOGGER = get_logger(__name__)


class Period(str, Enum):
    """Enumerate the default reporting windows."""

    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "Period":
        """Coerce arbitrary casing; unknown or missing values mean a week."""

        try:
            return cls((value or "").strip().lower())
        except ValueError:
            return cls.WEEK

    def default_range(self, now: datetime) -> Tuple[date, date]:
        """Return the ``(start, end)`` dates this period covers at ``now``."""

        today = now.date()
        if self is Period.DAY:
            return today, today
        if self is Period.MONTH:
            return today.replace(day=1), today
        if self is Period.YEAR:
            return today.replace(month=1, day=1), today
        return (now - timedelta(days=7)).date(), today


@dataclass(slots=True)
class SalesStats:
    """Whole-ledger totals with a date-ranged breakdown."""

    total_sales: float
    cash_available: float
    total_due: float
    start_date: date
    end_date: date
    period_sales: List[PeriodBucket] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "totalSales": self.total_sales,
            "cashAvailable": self.cash_available,
            "totalDue": self.total_due,
            "periodSales": [bucket.as_dict() for bucket in self.period_sales],
        }


class StatisticsAggregator:
    """Combine whole-ledger sums with per-day sales inside a date range."""

    def __init__(
        self,
        store: LedgerStore,
        *,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._store = store
        self._clock = clock

    def resolve_range(
        self,
        period: Optional[str] = None,
        start_date: Optional[object] = None,
        end_date: Optional[object] = None,
    ) -> Tuple[date, date]:
        """Pick the explicit range when both ends are given, else the period default."""

        if start_date and end_date:
            try:
                return parse_date(start_date), parse_date(end_date)
            except ValueError as error:
                raise ValidationError(f"Invalid date range: {error}") from error
        return Period.from_str(period).default_range(self._clock())

    def sales_stats(
        self,
        period: Optional[str] = None,
        start_date: Optional[object] = None,
        end_date: Optional[object] = None,
    ) -> SalesStats:
        """Return headline totals over the ledger and daily sales in range."""

        start, end = self.resolve_range(period, start_date, end_date)
        totals = self._store.ledger_totals()
        buckets = self._store.sum_and_bucket(start, end, BucketGranularity.DAY)
        LOGGER.debug(
            "Sales stats period=%s range=%s..%s buckets=%s",
            period,
            start.isoformat(),
            end.isoformat(),
            len(buckets),
        )
        return SalesStats(
            total_sales=totals.total_sales,
            cash_available=totals.total_paid,
            total_due=totals.total_due,
            start_date=start,
            end_date=end,
            period_sales=buckets,
        )


__all__ = ["Period", "SalesStats", "StatisticsAggregator"]
