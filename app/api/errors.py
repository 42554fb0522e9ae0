"""Mapping of ledger error kinds to HTTP responses."""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse

from app.domain.accounting.errors import (
    LedgerError,
    ImbalancedEntry,
    InvalidLineInput,
    InvalidExchangeRate,
    ConstraintViolation,
    AlreadyVoided,
    AccountNotFound,
    JournalEntryNotFound,
    ConcurrencyConflict,
)

logger = structlog.get_logger()

STATUS_BY_ERROR = {
    ImbalancedEntry: status.HTTP_400_BAD_REQUEST,
    InvalidLineInput: status.HTTP_400_BAD_REQUEST,
    InvalidExchangeRate: status.HTTP_400_BAD_REQUEST,
    ConstraintViolation: status.HTTP_400_BAD_REQUEST,
    AlreadyVoided: status.HTTP_400_BAD_REQUEST,
    AccountNotFound: status.HTTP_404_NOT_FOUND,
    JournalEntryNotFound: status.HTTP_404_NOT_FOUND,
    ConcurrencyConflict: status.HTTP_409_CONFLICT,
}


def status_for(error: LedgerError) -> int:
    for error_type in type(error).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def ledger_error_handler(request: Request, exc: LedgerError) -> JSONResponse:
    status_code = status_for(exc)
    logger.warning(
        "Ledger operation rejected",
        path=request.url.path,
        kind=exc.kind,
        status_code=status_code,
        error=exc.message,
    )
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "kind": exc.kind},
    )


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unexpected error", path=request.url.path, error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error", "kind": "Unexpected"},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LedgerError, ledger_error_handler)
    app.add_exception_handler(Exception, unexpected_error_handler)
