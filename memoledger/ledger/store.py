"""Mini README: SQLite-backed durable storage for ledger memos.

Structure:
    * LedgerStore - owns the ``memos`` table, assigns identity and creation
      timestamps, and answers paginated and aggregate queries.

Every public method opens its own connection and runs inside a single
transaction that is committed on success and rolled back on any error, so a
failed write never leaves a half-populated row behind. ``sqlite3`` errors are
re-raised as :class:`~memoledger.errors.StorageError`. Dates are stored as ISO
``YYYY-MM-DD`` text so range filters and grouping compare lexicographically.
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Callable, Iterator, List, Mapping, Optional, Tuple

from ..errors import InvalidArgumentError, NotFoundError, StorageError
from ..logging_utils import get_logger
from .models import (
    MUTABLE_FIELDS,
    BucketGranularity,
    LedgerTotals,
    Memo,
    PeriodBucket,
    SortMode,
)

LOGGER = get_logger(__name__)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS memos (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        date TEXT NOT NULL,
        client_name TEXT NOT NULL,
        item_name TEXT NOT NULL,
        item_count INTEGER NOT NULL,
        item_price REAL NOT NULL,
        total_price REAL NOT NULL,
        paid REAL NOT NULL,
        due REAL NOT NULL,
        memo_image_url TEXT,
        created_at TEXT NOT NULL
    )
    """,
    "CREATE INDEX IF NOT EXISTS idx_memos_date ON memos(date)",
    "CREATE INDEX IF NOT EXISTS idx_memos_created_at ON memos(created_at)",
)

# Largest value SQLite can bind as an INTEGER.
SQLITE_MAX_INTEGER = 2**63 - 1

_COLUMNS = (
    "id, date, client_name, item_name, item_count, item_price, "
    "total_price, paid, due, memo_image_url, created_at"
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _casefold(value: Optional[str]) -> Optional[str]:
    return value.casefold() if value is not None else None


def _to_column(value: object) -> object:
    """Convert Python values into the representation stored in SQLite."""

    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    return value


def _row_to_memo(row: sqlite3.Row) -> Memo:
    return Memo(
        memo_id=int(row["id"]),
        date=date.fromisoformat(row["date"]),
        client_name=row["client_name"],
        item_name=row["item_name"],
        item_count=int(row["item_count"]),
        item_price=float(row["item_price"]),
        total_price=float(row["total_price"]),
        paid=float(row["paid"]),
        due=float(row["due"]),
        created_at=datetime.fromisoformat(row["created_at"]),
        memo_image_url=row["memo_image_url"],
    )


class LedgerStore:
    """Durable, queryable collection of memos keyed by ``id``."""

    def __init__(
        self,
        db_path: str | Path,
        *,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.db_path = str(db_path)
        self._clock = clock
        self.initialise()

    # ---- internals --------------------------------------------------------

    def _connect(self) -> sqlite3.Connection:
        # Autocommit mode; transactions are opened explicitly in _transaction.
        con = sqlite3.connect(self.db_path, timeout=10.0, isolation_level=None)
        con.row_factory = sqlite3.Row
        con.create_function("casefold", 1, _casefold, deterministic=True)
        return con

    @contextmanager
    def _transaction(self, action: str, *, write: bool = False) -> Iterator[sqlite3.Connection]:
        """Yield a connection inside one transaction, translating sqlite errors."""

        con: Optional[sqlite3.Connection] = None
        try:
            con = self._connect()
            con.execute("BEGIN IMMEDIATE" if write else "BEGIN")
            try:
                yield con
            except BaseException:
                con.execute("ROLLBACK")
                raise
            con.execute("COMMIT")
        except sqlite3.Error as error:
            LOGGER.error("Ledger store failed to %s: %s", action, error)
            raise StorageError(f"Failed to {action}: {error}") from error
        finally:
            if con is not None:
                con.close()

    @staticmethod
    def _check_columns(fields: Mapping[str, object]) -> None:
        unknown = sorted(set(fields) - set(MUTABLE_FIELDS))
        if unknown:
            raise InvalidArgumentError(f"Unsupported memo fields: {', '.join(unknown)}")

    @staticmethod
    def _fetch(con: sqlite3.Connection, memo_id: int) -> Optional[Memo]:
        row = con.execute(f"SELECT {_COLUMNS} FROM memos WHERE id = ?", (memo_id,)).fetchone()
        return _row_to_memo(row) if row is not None else None

    def _next_created_at(self, con: sqlite3.Connection) -> str:
        """Return a creation timestamp never earlier than the latest stored one."""

        stamp = self._clock().astimezone(timezone.utc).isoformat(timespec="microseconds")
        latest = con.execute("SELECT MAX(created_at) FROM memos").fetchone()[0]
        if latest is not None and latest > stamp:
            return latest
        return stamp

    # ---- API --------------------------------------------------------------

    def initialise(self) -> None:
        """Create the memos table and its indexes if they are missing."""

        try:
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise StorageError(f"Ledger directory is unavailable: {error}") from error
        with self._transaction("initialise schema", write=True) as con:
            for statement in _SCHEMA:
                con.execute(statement)
        LOGGER.debug("Ledger store ready at %s", self.db_path)

    def insert(self, fields: Mapping[str, object]) -> Memo:
        """Persist a new memo and return the stored row with id and timestamp."""

        self._check_columns(fields)
        columns = list(fields)
        with self._transaction("insert memo", write=True) as con:
            created_at = self._next_created_at(con)
            placeholders = ", ".join("?" for _ in range(len(columns) + 1))
            cur = con.execute(
                f"INSERT INTO memos ({', '.join(columns)}, created_at) VALUES ({placeholders})",
                [_to_column(fields[column]) for column in columns] + [created_at],
            )
            memo = self._fetch(con, int(cur.lastrowid))
        LOGGER.info("Inserted memo %s for client %r", memo.memo_id, memo.client_name)
        return memo

    def get(self, memo_id: int) -> Memo:
        """Retrieve a memo, raising ``NotFoundError`` when missing."""

        if not 0 < memo_id <= SQLITE_MAX_INTEGER:
            raise NotFoundError("Memo not found")
        with self._transaction("read memo") as con:
            memo = self._fetch(con, memo_id)
        if memo is None:
            raise NotFoundError("Memo not found")
        return memo

    def update_fields(self, memo_id: int, fields: Mapping[str, object]) -> Memo:
        """Apply only the supplied fields to an existing memo."""

        if not fields:
            raise InvalidArgumentError("No fields to update")
        self._check_columns(fields)
        if not 0 < memo_id <= SQLITE_MAX_INTEGER:
            raise NotFoundError("Memo not found")
        columns = list(fields)
        assignments = ", ".join(f"{column} = ?" for column in columns)
        with self._transaction("update memo", write=True) as con:
            cur = con.execute(
                f"UPDATE memos SET {assignments} WHERE id = ?",
                [_to_column(fields[column]) for column in columns] + [memo_id],
            )
            if cur.rowcount == 0:
                raise NotFoundError("Memo not found")
            memo = self._fetch(con, memo_id)
        LOGGER.info("Updated memo %s fields: %s", memo_id, ", ".join(columns))
        return memo

    def delete(self, memo_id: int) -> None:
        """Remove a memo if present; deleting an unknown id is not an error."""

        if not 0 < memo_id <= SQLITE_MAX_INTEGER:
            LOGGER.info("Delete memo %s ignored: no such id", memo_id)
            return
        with self._transaction("delete memo", write=True) as con:
            cur = con.execute("DELETE FROM memos WHERE id = ?", (memo_id,))
        LOGGER.info("Delete memo %s removed %s row(s)", memo_id, cur.rowcount)

    def query(
        self,
        *,
        search: Optional[str] = None,
        sort_mode: SortMode = SortMode.CREATED_AT,
        limit: int = 50,
        offset: int = 0,
    ) -> Tuple[List[Memo], int]:
        """Return one page of matching memos and the unpaginated match count."""

        if limit < 0 or offset < 0:
            raise InvalidArgumentError("limit and offset must not be negative")
        # Anything past the largest SQLite integer behaves like "no limit" or "past the end".
        limit = min(limit, SQLITE_MAX_INTEGER)
        offset = min(offset, SQLITE_MAX_INTEGER)
        where = ""
        params: List[object] = []
        if search:
            needle = search.casefold()
            where = " WHERE (instr(casefold(client_name), ?) > 0 OR instr(casefold(item_name), ?) > 0)"
            params = [needle, needle]
        with self._transaction("query memos") as con:
            total = con.execute(f"SELECT COUNT(*) FROM memos{where}", params).fetchone()[0]
            rows = con.execute(
                f"SELECT {_COLUMNS} FROM memos{where} "
                f"ORDER BY {sort_mode.column} DESC, id DESC LIMIT ? OFFSET ?",
                params + [limit, offset],
            ).fetchall()
        memos = [_row_to_memo(row) for row in rows]
        LOGGER.debug(
            "Query search=%r sort=%s limit=%s offset=%s -> %s of %s",
            search,
            sort_mode.value,
            limit,
            offset,
            len(memos),
            total,
        )
        return memos, int(total)

    def sum_and_bucket(
        self,
        start: date,
        end: date,
        granularity: BucketGranularity = BucketGranularity.DAY,
    ) -> List[PeriodBucket]:
        """Sum price, paid and due per bucket for memos dated within ``[start, end]``."""

        with self._transaction("aggregate sales") as con:
            rows = con.execute(
                """
                SELECT substr(date, 1, :key_length) AS period,
                       COALESCE(SUM(total_price), 0) AS sales,
                       COALESCE(SUM(paid), 0) AS paid,
                       COALESCE(SUM(due), 0) AS due
                FROM memos
                WHERE date >= :start AND date <= :end
                GROUP BY period
                ORDER BY period DESC
                """,
                {
                    "key_length": granularity.key_length,
                    "start": start.isoformat(),
                    "end": end.isoformat(),
                },
            ).fetchall()
        return [
            PeriodBucket(
                period=row["period"],
                sales=float(row["sales"]),
                paid=float(row["paid"]),
                due=float(row["due"]),
            )
            for row in rows
        ]

    def ledger_totals(self) -> LedgerTotals:
        """Sum price, paid and due over every stored memo."""

        with self._transaction("total ledger") as con:
            row = con.execute(
                """
                SELECT COALESCE(SUM(total_price), 0) AS total_sales,
                       COALESCE(SUM(paid), 0) AS total_paid,
                       COALESCE(SUM(due), 0) AS total_due
                FROM memos
                """
            ).fetchone()
        return LedgerTotals(
            total_sales=float(row["total_sales"]),
            total_paid=float(row["total_paid"]),
            total_due=float(row["total_due"]),
        )

    def count(self) -> int:
        """Return the number of stored memos."""

        with self._transaction("count memos") as con:
            return int(con.execute("SELECT COUNT(*) FROM memos").fetchone()[0])


__all__ = ["LedgerStore"]
