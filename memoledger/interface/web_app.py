"""Mini README: FastAPI-powered HTTP interface for the Memo Ledger.

Structure:
    * MemoPayload / PreferencePayload - request bodies using camelCase keys.
    * create_application - application factory wiring routes to the ledger.

Routes translate HTTP requests into calls on the memo service, query engine
and statistics aggregator. Ledger errors are mapped to HTTP statuses by one
exception handler, so each route only contains the happy path.
"""

from __future__ import annotations

from typing import Optional

from fastapi import FastAPI, Query, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from ..configuration import LedgerSettings, get_settings
from ..errors import LedgerError
from ..ledger import LedgerStore, MemoService, QueryEngine, StatisticsAggregator
from ..logging_utils import get_logger
from ..preferences import PreferenceStore

LOGGER = get_logger(__name__)


class MemoPayload(BaseModel):
    """Memo fields accepted on create (all required) and update (any subset)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    date: Optional[str] = None
    client_name: Optional[str] = None
    item_name: Optional[str] = None
    item_count: Optional[int] = None
    item_price: Optional[float] = None
    total_price: Optional[float] = None
    paid: Optional[float] = None
    due: Optional[float] = None
    memo_image_url: Optional[str] = None

    def supplied_fields(self) -> dict:
        return self.model_dump(exclude_unset=True, exclude_none=True)


class PreferencePayload(BaseModel):
    model_config = ConfigDict(extra="forbid")

    headerTitle: Optional[str] = None
    siteIcon: Optional[str] = None
    logoUrl: Optional[str] = None


def create_application(settings: Optional[LedgerSettings] = None) -> FastAPI:
    """Create the FastAPI application with routes and dependencies."""

    settings = settings or get_settings()
    app = FastAPI(title="Memo Ledger", version="0.1.0")

    store = LedgerStore(settings.database_path)
    memo_service = MemoService(store)
    query_engine = QueryEngine(store, default_page_size=settings.default_page_size)
    aggregator = StatisticsAggregator(store)
    preferences = PreferenceStore(settings.preferences_path)
    LOGGER.info("Memo Ledger using database %s", settings.database_path)

    @app.exception_handler(LedgerError)
    async def ledger_error_handler(request: Request, error: LedgerError) -> JSONResponse:
        """Report ledger failures with the status attached to the error type."""

        LOGGER.warning(
            "%s %s failed with %s: %s",
            request.method,
            request.url.path,
            type(error).__name__,
            error.message,
        )
        return JSONResponse(status_code=error.status_code, content={"detail": error.message})

    @app.get("/health")
    def health() -> JSONResponse:
        return JSONResponse({"status": "ok", "environment": settings.environment})

    @app.post("/memos", status_code=201)
    def create_memo(payload: MemoPayload) -> JSONResponse:
        """Record a new memo and return it with its assigned id."""

        memo = memo_service.create_memo(payload.supplied_fields())
        return JSONResponse(memo.as_dict(), status_code=201)

    @app.get("/memos")
    def list_memos(
        limit: Optional[int] = Query(None),
        offset: Optional[int] = Query(None),
        sort_by: Optional[str] = Query(None, alias="sortBy"),
        search: Optional[str] = Query(None),
    ) -> JSONResponse:
        """Return one page of memos plus the total number of matches."""

        page = query_engine.list_memos(limit=limit, offset=offset, sort_by=sort_by, search=search)
        return JSONResponse(page.as_dict())

    @app.get("/memos/{memo_id}")
    def get_memo(memo_id: int) -> JSONResponse:
        return JSONResponse(memo_service.get_memo(memo_id).as_dict())

    @app.put("/memos/{memo_id}")
    def update_memo(memo_id: int, payload: MemoPayload) -> JSONResponse:
        """Apply a partial update; omitted fields keep their stored values."""

        memo = memo_service.update_memo(memo_id, payload.supplied_fields())
        return JSONResponse(memo.as_dict())

    @app.delete("/memos/{memo_id}", status_code=204)
    def delete_memo(memo_id: int) -> Response:
        memo_service.delete_memo(memo_id)
        return Response(status_code=204)

    @app.get("/sales/stats")
    def sales_stats(
        period: Optional[str] = Query(None),
        start_date: Optional[str] = Query(None, alias="startDate"),
        end_date: Optional[str] = Query(None, alias="endDate"),
    ) -> JSONResponse:
        """Return whole-ledger totals and daily sales for the requested range."""

        stats = aggregator.sales_stats(period=period, start_date=start_date, end_date=end_date)
        return JSONResponse(stats.as_dict())

    @app.get("/settings")
    def read_preferences() -> JSONResponse:
        return JSONResponse(preferences.load())

    @app.put("/settings")
    def update_preferences(payload: PreferencePayload) -> JSONResponse:
        return JSONResponse(preferences.update(payload.model_dump(exclude_unset=True)))

    return app
