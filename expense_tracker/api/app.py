"""
RPC Surface

Exposes the five expense operations plus a liveness probe as
procedure-style endpoints:

    GET  /rpc/healthcheck
    POST /rpc/createExpense     body: {amount, date, description, category}
    POST /rpc/getExpenses       body: {category?, month?, year?} | null
    POST /rpc/getExpenseById    body: <id>
    POST /rpc/updateExpense     body: {id, amount?, date?, description?, category?}
    POST /rpc/deleteExpense     body: <id>

The request body is the procedure input. FastAPI validates it against the
pydantic schema before the handler runs, so a bad input is a 422 with
per-field details and never reaches storage.

Error mapping:
    validation failure  -> 422
    NotFoundError       -> 404
    StorageError        -> 500
"""

from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from expense_tracker import __version__
from expense_tracker.logging_setup import get_logger
from expense_tracker.models.expense import (
    Expense,
    ExpenseCreate,
    ExpenseFilter,
    ExpenseUpdate,
    HealthStatus,
)
from expense_tracker.orchestrator import ExpenseHandler, create_app_components
from expense_tracker.services.storage import NotFoundError, StorageError


logger = get_logger(__name__)

router = APIRouter(prefix="/rpc")


def get_handler(request: Request) -> ExpenseHandler:
    """Dependency: the handler bound to this application."""
    return request.app.state.handler


@router.get("/healthcheck", response_model=HealthStatus)
def healthcheck() -> HealthStatus:
    timestamp = datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")
    return HealthStatus(status="ok", timestamp=timestamp)


@router.post("/createExpense", response_model=Expense)
def create_expense(
    data: ExpenseCreate,
    handler: ExpenseHandler = Depends(get_handler),
) -> Expense:
    return handler.create_expense(data)


@router.post("/getExpenses", response_model=list[Expense])
def get_expenses(
    expense_filter: Optional[ExpenseFilter] = Body(default=None),
    handler: ExpenseHandler = Depends(get_handler),
) -> list[Expense]:
    return handler.get_expenses(expense_filter)


@router.post("/getExpenseById", response_model=Optional[Expense])
def get_expense_by_id(
    expense_id: int = Body(...),
    handler: ExpenseHandler = Depends(get_handler),
) -> Optional[Expense]:
    return handler.get_expense_by_id(expense_id)


@router.post("/updateExpense", response_model=Expense)
def update_expense(
    data: ExpenseUpdate,
    handler: ExpenseHandler = Depends(get_handler),
) -> Expense:
    return handler.update_expense(data)


@router.post("/deleteExpense", response_model=None)
def delete_expense(
    expense_id: int = Body(...),
    handler: ExpenseHandler = Depends(get_handler),
) -> None:
    handler.delete_expense(expense_id)


async def _not_found_handler(request: Request, exc: NotFoundError) -> JSONResponse:
    return JSONResponse(status_code=404, content={"detail": str(exc)})


async def _storage_error_handler(request: Request, exc: StorageError) -> JSONResponse:
    logger.error("rpc_storage_error", path=request.url.path, error=str(exc))
    return JSONResponse(status_code=500, content={"detail": str(exc)})


def create_app(handler: Optional[ExpenseHandler] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        handler: Handler to serve. If None, one is created from settings
                 (DATABASE_URL) when the application starts.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database = None
        if getattr(app.state, "handler", None) is None:
            app.state.handler, database = create_app_components()
            logger.info("database_connected", dialect=database.engine.dialect.name)
        try:
            yield
        finally:
            if database is not None:
                database.dispose()

    app = FastAPI(
        title="Expense Tracker",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.handler = handler

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
    )

    app.add_exception_handler(NotFoundError, _not_found_handler)
    app.add_exception_handler(StorageError, _storage_error_handler)
    app.include_router(router)

    return app
