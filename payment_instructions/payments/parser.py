"""Token-based parser for natural-language payment instructions.

Two grammars are recognised:

    DEBIT <amount> <currency> FROM ACCOUNT <id> FOR CREDIT TO ACCOUNT <id> [ON <date>]
    CREDIT <amount> <currency> TO ACCOUNT <id> FOR DEBIT FROM ACCOUNT <id> [ON <date>]

Both share one routine driven by a ``Grammar`` description. Keywords are
matched case-insensitively; account identifiers keep their original case.
"""

from __future__ import annotations

import logging
import math
import sys
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from payment_instructions.payments.constants import (
    INFINITY_LITERALS,
    KEYWORD_ACCOUNT,
    KEYWORD_FOR,
    KEYWORD_FROM,
    KEYWORD_ON,
    KEYWORD_TO,
    MIN_INSTRUCTION_TOKENS,
    NUMBER_PATTERN,
    RADIX_INTEGER_PATTERN,
    StatusCode,
    TransactionType,
)
from payment_instructions.payments.records import (
    FinalInstruction,
    InstructionFields,
    InstructionRecord,
    ParsedInstruction,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Grammar:
    """Keyword layout of one instruction form.

    ``first_role`` is the account named right after the opening keyword,
    ``second_role`` the one named after ``FOR <continuation>``.
    """

    type: TransactionType
    opening: str
    first_role: str
    continuation: tuple[str, ...]
    second_role: str


GRAMMARS: dict[str, Grammar] = {
    TransactionType.DEBIT.value: Grammar(
        type=TransactionType.DEBIT,
        opening=KEYWORD_FROM,
        first_role="debit_account",
        continuation=(TransactionType.CREDIT.value, KEYWORD_TO, KEYWORD_ACCOUNT),
        second_role="credit_account",
    ),
    TransactionType.CREDIT.value: Grammar(
        type=TransactionType.CREDIT,
        opening=KEYWORD_TO,
        first_role="credit_account",
        continuation=(TransactionType.DEBIT.value, KEYWORD_FROM, KEYWORD_ACCOUNT),
        second_role="debit_account",
    ),
}


def _role_label(role: str) -> str:
    return role.split("_", 1)[0]


def parse_amount(token: str) -> Optional[Decimal]:
    """Read a numeric literal; None when ``token`` is not one.

    Hex, octal and binary literals become integers. ``Infinity`` and values
    beyond the float range become an infinite ``Decimal`` and underflow becomes
    zero, so the amount rule sees every number the text can spell.
    """

    if RADIX_INTEGER_PATTERN.fullmatch(token):
        value = int(token, 0)
        return Decimal(value) if value <= sys.float_info.max else Decimal("Infinity")
    if token in INFINITY_LITERALS:
        return Decimal(token)
    if not NUMBER_PATTERN.fullmatch(token):
        return None
    magnitude = float(token)
    if math.isinf(magnitude):
        return Decimal(magnitude)
    if magnitude == 0:
        return Decimal(0)
    return Decimal(token)


def find_keyword(tokens: Sequence[str], keyword: str, start: int = 0) -> Optional[int]:
    """Return the index of the first case-insensitive ``keyword`` at or after ``start``."""

    for index in range(start, len(tokens)):
        if tokens[index].upper() == keyword:
            return index
    return None


class InstructionParser:
    """Turn instruction text into a parsed or failed instruction record."""

    def parse(self, text: str) -> InstructionRecord:
        """Parse ``text``; never raises, failures come back as ``FinalInstruction``."""

        try:
            return self._parse(text)
        except Exception as exc:  # noqa: BLE001
            logger.warning("Unexpected error while parsing instruction: %r", exc)
            return FinalInstruction.failed(InstructionFields(), StatusCode.MALFORMED_INSTRUCTION)

    def _parse(self, text: str) -> InstructionRecord:
        tokens = text.split()
        if not tokens:
            return FinalInstruction.failed(InstructionFields(), StatusCode.MALFORMED_INSTRUCTION)

        grammar = GRAMMARS.get(tokens[0].upper())
        if grammar is None:
            return FinalInstruction.failed(
                InstructionFields(),
                StatusCode.MISSING_KEYWORD,
                f"Expected instruction to start with DEBIT or CREDIT, found: {tokens[0]}",
            )
        return self._parse_grammar(tokens, grammar)

    def _parse_grammar(self, tokens: list[str], grammar: Grammar) -> InstructionRecord:
        fields = InstructionFields(type=grammar.type)

        if len(tokens) < MIN_INSTRUCTION_TOKENS:
            return FinalInstruction.failed(
                fields,
                StatusCode.MALFORMED_INSTRUCTION,
                f"{grammar.type.value} instruction is incomplete",
            )

        amount = parse_amount(tokens[1])
        if amount is None:
            return FinalInstruction.failed(fields, StatusCode.MALFORMED_INSTRUCTION, "Invalid or missing amount")
        fields = fields.evolve(amount=amount, currency=tokens[2].upper())

        failure = self._expect(tokens, 3, grammar.opening, "currency", fields)
        if failure is None:
            failure = self._expect(tokens, 4, KEYWORD_ACCOUNT, grammar.opening, fields)
        if failure is not None:
            return failure

        for_index = find_keyword(tokens, KEYWORD_FOR, 5)
        if for_index is None:
            return FinalInstruction.failed(fields, StatusCode.MISSING_KEYWORD, "Missing FOR keyword")

        first_account = tokens[5:for_index]
        if not first_account:
            return FinalInstruction.failed(
                fields,
                StatusCode.MALFORMED_INSTRUCTION,
                f"Missing {_role_label(grammar.first_role)} account ID",
            )
        fields = fields.evolve(**{grammar.first_role: " ".join(first_account)})

        previous = KEYWORD_FOR
        for offset, keyword in enumerate(grammar.continuation, start=1):
            failure = self._expect(tokens, for_index + offset, keyword, previous, fields)
            if failure is not None:
                return failure
            previous = keyword

        second_start = for_index + len(grammar.continuation) + 1
        on_index = find_keyword(tokens, KEYWORD_ON, second_start)
        second_account = tokens[second_start:on_index] if on_index is not None else tokens[second_start:]
        if not second_account:
            return FinalInstruction.failed(
                fields,
                StatusCode.MALFORMED_INSTRUCTION,
                f"Missing {_role_label(grammar.second_role)} account ID",
            )
        fields = fields.evolve(**{grammar.second_role: " ".join(second_account)})

        if on_index is not None:
            date_tokens = tokens[on_index + 1:]
            if not date_tokens:
                return FinalInstruction.failed(
                    fields,
                    StatusCode.MALFORMED_INSTRUCTION,
                    "Missing date after ON keyword",
                )
            fields = fields.evolve(execute_by=" ".join(date_tokens))

        return ParsedInstruction(fields=fields)

    def _expect(
        self,
        tokens: list[str],
        index: int,
        keyword: str,
        after: str,
        fields: InstructionFields,
    ) -> Optional[FinalInstruction]:
        """Return an SY02 failure unless ``tokens[index]`` is ``keyword``."""

        found = tokens[index] if index < len(tokens) else None
        if found is not None and found.upper() == keyword:
            return None
        return FinalInstruction.failed(
            fields,
            StatusCode.INVALID_KEYWORD_ORDER,
            f"Expected {keyword} after {after}, found: {found if found is not None else 'end of instruction'}",
        )
