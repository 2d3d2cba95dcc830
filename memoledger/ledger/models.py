"""Mini README: Value objects shared by the ledger components.

Structure:
    * Memo - dataclass for one sales record, with wire export helpers.
    * PeriodBucket - summed sales for one bucket key (usually a calendar day).
    * LedgerTotals - whole-ledger sums of price, paid and due amounts.
    * MemoPage - one page of memos plus the unpaginated match count.
    * SortMode - the two descending orders a listing can use.
    * BucketGranularity - calendar unit used to group summed sales.
    * parse_date - normalise ISO strings and date/datetime values to ``date``.

Attribute names are snake_case; ``WIRE_NAMES`` maps them to the camelCase
keys used by the HTTP interface so the two spellings never drift apart.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Dict, List, Optional

WIRE_NAMES: Dict[str, str] = {
    "memo_id": "id",
    "date": "date",
    "client_name": "clientName",
    "item_name": "itemName",
    "item_count": "itemCount",
    "item_price": "itemPrice",
    "total_price": "totalPrice",
    "paid": "paid",
    "due": "due",
    "memo_image_url": "memoImageUrl",
    "created_at": "createdAt",
}

# Fields callers may set on create or update; id and created_at belong to the store.
MUTABLE_FIELDS = (
    "date",
    "client_name",
    "item_name",
    "item_count",
    "item_price",
    "total_price",
    "paid",
    "due",
    "memo_image_url",
)


class SortMode(str, Enum):
    """Enumerate the supported listing orders; both are most-recent first."""

    DATE = "date"
    CREATED_AT = "createdAt"

    @property
    def column(self) -> str:
        return "date" if self is SortMode.DATE else "created_at"

    @classmethod
    def from_str(cls, value: Optional[str]) -> "SortMode":
        """Coerce arbitrary casing, falling back to creation order when unknown."""

        normalised = (value or "").strip().lower().replace("_", "")
        if normalised == "date":
            return cls.DATE
        return cls.CREATED_AT


class BucketGranularity(str, Enum):
    """Calendar unit used as the bucket key when summing sales."""

    DAY = "day"
    MONTH = "month"
    YEAR = "year"

    @property
    def key_length(self) -> int:
        """Length of the ISO date prefix identifying a bucket."""

        return {"day": 10, "month": 7, "year": 4}[self.value]

    @classmethod
    def from_str(cls, value: str) -> "BucketGranularity":
        try:
            return cls(value.strip().lower())
        except (ValueError, AttributeError) as error:
            raise ValueError(f"Unsupported bucket granularity: {value}") from error


def parse_date(value: object) -> date:
    """Parse ISO formatted strings or date objects, dropping any time of day."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) > 10:
                return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
            return date.fromisoformat(text)
        except ValueError as error:
            raise ValueError(f"Invalid ISO date: {value!r}") from error
    raise ValueError("Dates must be provided as ISO strings or date/datetime instances.")


@dataclass(slots=True)
class Memo:
    """Represent one ledger entry as stored."""

    memo_id: int
    date: date
    client_name: str
    item_name: str
    item_count: int
    item_price: float
    total_price: float
    paid: float
    due: float
    created_at: datetime
    memo_image_url: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        """Export the memo with camelCase keys and serialisable values."""

        payload: Dict[str, object] = {
            "id": self.memo_id,
            "date": self.date.isoformat(),
            "clientName": self.client_name,
            "itemName": self.item_name,
            "itemCount": self.item_count,
            "itemPrice": self.item_price,
            "totalPrice": self.total_price,
            "paid": self.paid,
            "due": self.due,
            "createdAt": self.created_at.isoformat(),
        }
        if self.memo_image_url:
            payload["memoImageUrl"] = self.memo_image_url
        return payload


@dataclass(slots=True, frozen=True)
class PeriodBucket:
    """Summed sales for one bucket key."""

    period: str
    sales: float
    paid: float
    due: float

    def as_dict(self) -> Dict[str, object]:
        return {"period": self.period, "sales": self.sales, "paid": self.paid, "due": self.due}


@dataclass(slots=True, frozen=True)
class LedgerTotals:
    """Sums over every stored memo."""

    total_sales: float = 0.0
    total_paid: float = 0.0
    total_due: float = 0.0


@dataclass(slots=True)
class MemoPage:
    """A page of memos and the number of memos matching the filter."""

    memos: List[Memo] = field(default_factory=list)
    total: int = 0

    def as_dict(self) -> Dict[str, object]:
        return {"memos": [memo.as_dict() for memo in self.memos], "total": self.total}
