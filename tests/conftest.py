"""Mini README: Shared pytest fixtures for ledger tests.

Structure:
    * store - fresh SQLite ledger in a temporary directory.
    * memo_fields - factory building valid create payloads with overrides.
"""

from __future__ import annotations

from datetime import date
from typing import Callable, Dict

import pytest

from memoledger.ledger import LedgerStore


@pytest.fixture()
def store(tmp_path) -> LedgerStore:
    return LedgerStore(tmp_path / "ledger.sqlite3")


@pytest.fixture()
def memo_fields() -> Callable[..., Dict[str, object]]:
    """Return a factory for complete memo payloads using attribute names."""

    def build(**overrides: object) -> Dict[str, object]:
        fields: Dict[str, object] = {
            "date": date(2024, 1, 5),
            "client_name": "Rahim Traders",
            "item_name": "Gold ring",
            "item_count": 2,
            "item_price": 500.0,
            "total_price": 1000.0,
            "paid": 400.0,
            "due": 600.0,
        }
        fields.update(overrides)
        return fields

    return build
