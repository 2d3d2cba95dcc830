"""Mini README: Create/update/delete contract for ledger memos.

Structure:
    * MemoService - validates and normalises memo payloads before delegating
      to :class:`~memoledger.ledger.store.LedgerStore`.

Payload keys may use either the attribute spelling (``client_name``) or the
wire spelling (``clientName``). Derived amounts (``total_price`` and ``due``)
are trusted as supplied: keeping them consistent with count, price and paid is
the caller's responsibility, and the service never recomputes them.
"""

from __future__ import annotations

from numbers import Real
from typing import Any, Dict, Mapping, Optional

from ..errors import ValidationError
from ..logging_utils import get_logger
from .models import MUTABLE_FIELDS, WIRE_NAMES, Memo, parse_date
from .store import SQLITE_MAX_INTEGER, LedgerStore

LOGGER = get_logger(__name__)

_ATTRIBUTE_FOR_KEY: Dict[str, str] = {wire: attribute for attribute, wire in WIRE_NAMES.items()}
_ATTRIBUTE_FOR_KEY.update({attribute: attribute for attribute in WIRE_NAMES})

_REQUIRED_ON_CREATE = tuple(field for field in MUTABLE_FIELDS if field != "memo_image_url")


def _coerce_text(key: str, value: object) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f"{WIRE_NAMES[key]} must be a non-empty string")
    return value.strip()


def _coerce_amount(key: str, value: object, *, non_negative: bool) -> float:
    if isinstance(value, bool) or not isinstance(value, (Real, str)):
        raise ValidationError(f"{WIRE_NAMES[key]} must be a number")
    try:
        amount = float(value)
    except (ValueError, OverflowError) as error:
        raise ValidationError(f"{WIRE_NAMES[key]} must be a number") from error
    if amount != amount or amount in (float("inf"), float("-inf")):
        raise ValidationError(f"{WIRE_NAMES[key]} must be a finite number")
    if non_negative and amount < 0:
        raise ValidationError(f"{WIRE_NAMES[key]} must not be negative")
    return amount


def _coerce_count(value: object) -> int:
    if isinstance(value, bool):
        raise ValidationError("itemCount must be a positive integer")
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, str) and value.strip().isdigit():
        value = int(value.strip())
    if not isinstance(value, int) or not 1 <= value <= SQLITE_MAX_INTEGER:
        raise ValidationError("itemCount must be a positive integer")
    return value


def _coerce_field(key: str, value: object) -> object:
    """Validate a single supplied field and return its storage value."""

    if key == "date":
        try:
            return parse_date(value)
        except ValueError as error:
            raise ValidationError(f"date is invalid: {error}") from error
    if key in {"client_name", "item_name"}:
        return _coerce_text(key, value)
    if key == "item_count":
        return _coerce_count(value)
    if key in {"item_price", "paid"}:
        return _coerce_amount(key, value, non_negative=True)
    if key in {"total_price", "due"}:
        return _coerce_amount(key, value, non_negative=False)
    if key == "memo_image_url":
        if not isinstance(value, str):
            raise ValidationError("memoImageUrl must be a string")
        return value.strip() or None
    raise ValidationError(f"Field '{key}' cannot be set")


def _normalise_keys(payload: Mapping[str, Any]) -> Dict[str, Any]:
    """Translate wire keys to attribute names, dropping values left unset."""

    normalised: Dict[str, Any] = {}
    for key, value in payload.items():
        if value is None:
            continue
        attribute = _ATTRIBUTE_FOR_KEY.get(key)
        if attribute is None or attribute not in MUTABLE_FIELDS:
            raise ValidationError(f"Field '{key}' cannot be set")
        normalised[attribute] = value
    return normalised


class MemoService:
    """Validate memo requests and apply them to the ledger store."""

    def __init__(self, store: LedgerStore) -> None:
        self._store = store

    def create_memo(self, request: Mapping[str, Any]) -> Memo:
        """Validate a full memo payload and insert it."""

        fields = _normalise_keys(request)
        missing = [WIRE_NAMES[name] for name in _REQUIRED_ON_CREATE if name not in fields]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}")
        coerced = {key: _coerce_field(key, value) for key, value in fields.items()}
        if coerced.get("memo_image_url") is None:
            coerced.pop("memo_image_url", None)
        memo = self._store.insert(coerced)
        LOGGER.info("Created memo %s dated %s", memo.memo_id, memo.date.isoformat())
        return memo

    def update_memo(self, memo_id: int, request: Optional[Mapping[str, Any]]) -> Memo:
        """Apply a partial update; unsupplied fields keep their stored value.

        A blank ``memoImageUrl`` clears the stored attachment.
        """

        fields = _normalise_keys(request or {})
        coerced = {key: _coerce_field(key, value) for key, value in fields.items()}
        return self._store.update_fields(memo_id, coerced)

    def delete_memo(self, memo_id: int) -> None:
        self._store.delete(memo_id)

    def get_memo(self, memo_id: int) -> Memo:
        return self._store.get(memo_id)


__all__ = ["MemoService"]
