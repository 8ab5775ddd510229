"""Instruction records threaded through parse, validate and execute.

A record is either a ``ParsedInstruction`` (fields extracted, not yet
classified) or a ``FinalInstruction`` (fields plus a fixed status, code and
reason). Stages return new records and never touch a final one.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from decimal import Decimal
from typing import Optional, Union

from payment_instructions.payments.constants import (
    STATUS_MESSAGES,
    StatusCode,
    TransactionStatus,
    TransactionType,
)


@dataclass(frozen=True)
class InstructionFields:
    """Values extracted from the instruction text."""

    type: Optional[TransactionType] = None
    amount: Optional[Decimal] = None
    currency: Optional[str] = None
    debit_account: Optional[str] = None
    credit_account: Optional[str] = None
    execute_by: Optional[str] = None

    def evolve(self, **changes) -> "InstructionFields":
        return replace(self, **changes)


@dataclass(frozen=True)
class ParsedInstruction:
    """Structurally valid instruction awaiting validation."""

    fields: InstructionFields


@dataclass(frozen=True)
class FinalInstruction:
    """Instruction with a terminal status; later stages pass it through."""

    fields: InstructionFields
    status: TransactionStatus
    status_code: StatusCode
    status_reason: str

    @classmethod
    def failed(
        cls,
        fields: InstructionFields,
        code: StatusCode,
        reason: Optional[str] = None,
    ) -> "FinalInstruction":
        return cls(
            fields=fields,
            status=TransactionStatus.FAILED,
            status_code=code,
            status_reason=reason or STATUS_MESSAGES[code],
        )

    @property
    def is_failed(self) -> bool:
        return self.status == TransactionStatus.FAILED


InstructionRecord = Union[ParsedInstruction, FinalInstruction]
