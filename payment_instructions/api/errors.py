"""Centralized API exception definitions and handlers."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from payment_instructions.payments.constants import StatusCode, TransactionStatus
from payment_instructions.schemas.instruction import TransactionResponse

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base application error."""

    def __init__(self, message: str, status_code: int = 400) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class MalformedRequestError(AppError):
    """Raised when the request body cannot be handed to the processing pipeline."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, status_code=400)


async def malformed_request_handler(_request: Request, exc: MalformedRequestError) -> JSONResponse:
    """Render a rejected request as a failed SY03 transaction."""

    body = TransactionResponse(
        status=TransactionStatus.FAILED,
        status_code=StatusCode.MALFORMED_INSTRUCTION,
        status_reason=exc.message,
    )
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


async def unhandled_error_handler(_request: Request, exc: Exception) -> JSONResponse:
    """Catch-all exception handler for non-domain errors."""

    logger.exception("Unhandled error while serving request", exc_info=exc)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def register_exception_handlers(app: FastAPI) -> None:
    """Attach API exception handlers once during startup."""

    app.add_exception_handler(MalformedRequestError, malformed_request_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
