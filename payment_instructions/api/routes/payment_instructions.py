"""Payment instruction endpoints."""

from __future__ import annotations

import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from payment_instructions.api.deps import get_payment_service
from payment_instructions.api.errors import MalformedRequestError
from payment_instructions.payments.constants import TransactionStatus
from payment_instructions.payments.service import PaymentInstructionService
from payment_instructions.schemas.instruction import PaymentInstructionRequest, TransactionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/payment-instructions", tags=["payment-instructions"])


def _is_blank(value: Any) -> bool:
    """Null, false, zero or an empty string; lists and objects always count as supplied."""

    return value is None or (isinstance(value, (bool, int, float, str)) and not value)


def parse_request_payload(payload: Any) -> PaymentInstructionRequest:
    """Check the raw body shape before it reaches the pipeline."""

    if not isinstance(payload, dict):
        raise MalformedRequestError("Request must include instruction and accounts")
    accounts = payload.get("accounts")
    if _is_blank(payload.get("instruction")) or _is_blank(accounts):
        raise MalformedRequestError("Request must include instruction and accounts")
    if not isinstance(accounts, list):
        raise MalformedRequestError("Accounts must be an array")

    try:
        return PaymentInstructionRequest.model_validate(payload)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first["loc"])
        raise MalformedRequestError(f"Invalid request payload at {location}: {first['msg']}") from exc


@router.post("", response_model=TransactionResponse)
async def process_payment_instruction(
    request: Request,
    service: PaymentInstructionService = Depends(get_payment_service),
) -> JSONResponse:
    """Parse, validate and execute one payment instruction."""

    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise MalformedRequestError("Request body must be valid JSON") from exc

    body = parse_request_payload(payload)
    result = service.process(body.instruction, body.accounts)

    http_status = status.HTTP_400_BAD_REQUEST if result.status == TransactionStatus.FAILED else status.HTTP_200_OK
    logger.info(
        "payment-instruction-request-completed http_status=%s status=%s code=%s",
        http_status,
        result.status.value,
        result.status_code.value,
    )
    return JSONResponse(status_code=http_status, content=result.model_dump(mode="json"))
