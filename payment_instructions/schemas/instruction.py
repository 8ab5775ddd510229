"""Payment instruction request/response schemas."""

from __future__ import annotations

from decimal import Decimal
from typing import Optional, Union

from pydantic import BaseModel, Field, field_serializer

from payment_instructions.payments.constants import StatusCode, TransactionStatus, TransactionType
from payment_instructions.payments.records import FinalInstruction


class Account(BaseModel):
    """Account snapshot entry supplied by the caller."""

    account_id: str
    balance: int
    currency: str = Field(min_length=1)


class ResultAccount(BaseModel):
    """Involved account with its balance before and after execution."""

    account_id: str
    balance: int
    balance_before: int
    currency: str


class PaymentInstructionRequest(BaseModel):
    """Body accepted by the payment instruction endpoint."""

    instruction: str
    accounts: list[Account]


class TransactionResponse(BaseModel):
    """Outcome of a processed instruction."""

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = Field(default=None, allow_inf_nan=True)
    currency: Optional[str] = None
    debit_account: Optional[str] = None
    credit_account: Optional[str] = None
    execute_by: Optional[str] = None
    status: TransactionStatus
    status_reason: str
    status_code: StatusCode
    accounts: list[ResultAccount] = Field(default_factory=list)

    @classmethod
    def from_instruction(cls, record: FinalInstruction, accounts: list[ResultAccount]) -> "TransactionResponse":
        fields = record.fields
        return cls(
            type=fields.type,
            amount=fields.amount,
            currency=fields.currency,
            debit_account=fields.debit_account,
            credit_account=fields.credit_account,
            execute_by=fields.execute_by,
            status=record.status,
            status_reason=record.status_reason,
            status_code=record.status_code,
            accounts=accounts,
        )

    @field_serializer("amount")
    def serialize_amount(self, value: Optional[Decimal]) -> Union[int, float, None]:
        """Whole amounts render as exact integers, fractional ones as floats, infinite ones as null."""

        if value is None or not value.is_finite():
            return None
        if value == value.to_integral_value():
            return int(value)
        return float(value)
