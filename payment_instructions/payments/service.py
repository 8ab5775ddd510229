"""Payment instruction processing orchestration."""

from __future__ import annotations

import logging
from typing import Iterable, Optional

from payment_instructions.payments.executor import TransactionExecutor
from payment_instructions.payments.parser import InstructionParser
from payment_instructions.payments.validator import Clock, InstructionValidator, utc_today
from payment_instructions.schemas.instruction import Account, TransactionResponse

logger = logging.getLogger(__name__)


class PaymentInstructionService:
    """Run parse, validate and execute for one instruction."""

    def __init__(
        self,
        parser: Optional[InstructionParser] = None,
        validator: Optional[InstructionValidator] = None,
        executor: Optional[TransactionExecutor] = None,
    ) -> None:
        self._parser = parser or InstructionParser()
        self._validator = validator or InstructionValidator()
        self._executor = executor or TransactionExecutor()

    @classmethod
    def with_clock(cls, clock: Clock = utc_today) -> "PaymentInstructionService":
        """Factory using ``clock`` to decide whether a date lies in the future."""

        return cls(validator=InstructionValidator(clock=clock))

    def process(self, instruction: str, accounts: Iterable[Account]) -> TransactionResponse:
        """Process one instruction against an account snapshot."""

        snapshot = list(accounts)

        parsed = self._parser.parse(instruction)
        validated = self._validator.validate(parsed, snapshot)
        result = self._executor.execute(validated, snapshot)

        logger.info(
            "Processed %s instruction: status=%s code=%s",
            result.type.value if result.type else "unknown",
            result.status.value,
            result.status_code.value,
        )
        return result
