"""Business-rule validation for parsed payment instructions.

Rules run in a fixed priority order and stop at the first failure. The order
is part of the public contract: an instruction breaking several rules always
reports the earliest one in ``RULES``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Callable, Iterable, Optional

from payment_instructions.payments.constants import (
    ACCOUNT_ID_PATTERN,
    DATE_PATTERN,
    STATUS_MESSAGES,
    SUPPORTED_CURRENCIES,
    StatusCode,
    TransactionStatus,
)
from payment_instructions.payments.records import (
    FinalInstruction,
    InstructionFields,
    InstructionRecord,
)
from payment_instructions.schemas.instruction import Account

logger = logging.getLogger(__name__)

Clock = Callable[[], date]


def utc_today() -> date:
    """Current calendar date in UTC."""

    return datetime.now(timezone.utc).date()


def index_accounts(accounts: Iterable[Account]) -> dict[str, Account]:
    """Map account id to account; later duplicates win."""

    return {account.account_id: account for account in accounts}


def parse_calendar_date(value: str) -> Optional[date]:
    """Return the date for a strict ``YYYY-MM-DD`` string, or None if it is not a real day."""

    if not DATE_PATTERN.fullmatch(value):
        return None
    year, month, day = (int(part) for part in value.split("-"))
    try:
        parsed = date(year, month, day)
    except ValueError:
        return None
    if parsed.isoformat() != value:
        return None
    return parsed


def is_future_dated(execute_by: Optional[str], today: date) -> bool:
    """True when ``execute_by`` names a valid day strictly after ``today``."""

    if not execute_by:
        return False
    target = parse_calendar_date(execute_by)
    return target is not None and target > today


@dataclass(frozen=True)
class RuleContext:
    """Everything a rule may look at."""

    fields: InstructionFields
    accounts: dict[str, Account]
    today: date

    @property
    def debit(self) -> Optional[Account]:
        return self.accounts.get(self.fields.debit_account or "")

    @property
    def credit(self) -> Optional[Account]:
        return self.accounts.get(self.fields.credit_account or "")


# A check returns None when the rule holds, otherwise the failure reason.
Check = Callable[[RuleContext], Optional[str]]


@dataclass(frozen=True)
class Rule:
    name: str
    code: StatusCode
    check: Check


def _check_amount(ctx: RuleContext) -> Optional[str]:
    amount = ctx.fields.amount
    if amount is None:
        return "Amount is required"
    if not amount.is_finite() or amount != amount.to_integral_value() or amount <= 0:
        return STATUS_MESSAGES[StatusCode.INVALID_AMOUNT]
    return None


def _check_currency_supported(ctx: RuleContext) -> Optional[str]:
    currency = ctx.fields.currency
    if not currency:
        return "Currency is required"
    if currency.upper() not in SUPPORTED_CURRENCIES:
        return STATUS_MESSAGES[StatusCode.UNSUPPORTED_CURRENCY]
    return None


def _account_format_check(role: str) -> Check:
    def check(ctx: RuleContext) -> Optional[str]:
        account_id = getattr(ctx.fields, f"{role}_account")
        if not account_id:
            return f"{role.capitalize()} account: Account ID is required"
        if not ACCOUNT_ID_PATTERN.fullmatch(account_id):
            return (
                f"{role.capitalize()} account: {STATUS_MESSAGES[StatusCode.INVALID_ACCOUNT_FORMAT]}: "
                f"'{account_id}' contains invalid characters"
            )
        return None

    return check


def _account_exists_check(role: str) -> Check:
    def check(ctx: RuleContext) -> Optional[str]:
        account_id = getattr(ctx.fields, f"{role}_account")
        if account_id not in ctx.accounts:
            return f"{role.capitalize()} account '{account_id}' not found"
        return None

    return check


def _check_distinct_accounts(ctx: RuleContext) -> Optional[str]:
    if ctx.fields.debit_account == ctx.fields.credit_account:
        return STATUS_MESSAGES[StatusCode.SAME_ACCOUNT]
    return None


def _check_account_currencies_match(ctx: RuleContext) -> Optional[str]:
    debit_currency = ctx.debit.currency
    credit_currency = ctx.credit.currency
    if debit_currency != credit_currency:
        return (
            f"{STATUS_MESSAGES[StatusCode.CURRENCY_MISMATCH]}: debit account uses {debit_currency}, "
            f"credit account uses {credit_currency}"
        )
    return None


def _check_instruction_currency_matches(ctx: RuleContext) -> Optional[str]:
    account_currency = ctx.debit.currency
    if ctx.fields.currency != account_currency:
        return (
            f"{STATUS_MESSAGES[StatusCode.CURRENCY_MISMATCH]}: instruction specifies {ctx.fields.currency}, "
            f"accounts use {account_currency}"
        )
    return None


def _check_execution_date(ctx: RuleContext) -> Optional[str]:
    execute_by = ctx.fields.execute_by
    if execute_by is None:
        return None
    if not DATE_PATTERN.fullmatch(execute_by):
        return f"{STATUS_MESSAGES[StatusCode.INVALID_DATE_FORMAT]}: '{execute_by}'"
    if parse_calendar_date(execute_by) is None:
        return f"Invalid date: '{execute_by}' does not represent a valid calendar date"
    return None


def _check_sufficient_funds(ctx: RuleContext) -> Optional[str]:
    if is_future_dated(ctx.fields.execute_by, ctx.today):
        return None
    debit = ctx.debit
    if debit.balance < ctx.fields.amount:
        return (
            f"{STATUS_MESSAGES[StatusCode.INSUFFICIENT_FUNDS]}: account {debit.account_id} has "
            f"{debit.balance} {debit.currency}, needs {ctx.fields.amount} {ctx.fields.currency}"
        )
    return None


RULES: tuple[Rule, ...] = (
    Rule("amount", StatusCode.INVALID_AMOUNT, _check_amount),
    Rule("currency_supported", StatusCode.UNSUPPORTED_CURRENCY, _check_currency_supported),
    Rule("debit_account_format", StatusCode.INVALID_ACCOUNT_FORMAT, _account_format_check("debit")),
    Rule("credit_account_format", StatusCode.INVALID_ACCOUNT_FORMAT, _account_format_check("credit")),
    Rule("debit_account_exists", StatusCode.ACCOUNT_NOT_FOUND, _account_exists_check("debit")),
    Rule("credit_account_exists", StatusCode.ACCOUNT_NOT_FOUND, _account_exists_check("credit")),
    Rule("distinct_accounts", StatusCode.SAME_ACCOUNT, _check_distinct_accounts),
    Rule("account_currencies_match", StatusCode.CURRENCY_MISMATCH, _check_account_currencies_match),
    Rule("instruction_currency_matches", StatusCode.CURRENCY_MISMATCH, _check_instruction_currency_matches),
    Rule("execution_date", StatusCode.INVALID_DATE_FORMAT, _check_execution_date),
    Rule("sufficient_funds", StatusCode.INSUFFICIENT_FUNDS, _check_sufficient_funds),
)


class InstructionValidator:
    """Classify a parsed instruction as failed, pending or successful."""

    def __init__(self, clock: Clock = utc_today, rules: tuple[Rule, ...] = RULES) -> None:
        self._clock = clock
        self._rules = rules

    def validate(self, record: InstructionRecord, accounts: Iterable[Account]) -> FinalInstruction:
        """Apply the rules in order; final records are returned untouched."""

        if isinstance(record, FinalInstruction):
            return record

        ctx = RuleContext(fields=record.fields, accounts=index_accounts(accounts), today=self._clock())

        for rule in self._rules:
            reason = rule.check(ctx)
            if reason is not None:
                logger.debug("Rule %s failed with %s: %s", rule.name, rule.code.value, reason)
                return FinalInstruction.failed(record.fields, rule.code, reason)

        if is_future_dated(ctx.fields.execute_by, ctx.today):
            return FinalInstruction(
                fields=record.fields,
                status=TransactionStatus.PENDING,
                status_code=StatusCode.PENDING,
                status_reason=STATUS_MESSAGES[StatusCode.PENDING],
            )

        return FinalInstruction(
            fields=record.fields,
            status=TransactionStatus.SUCCESSFUL,
            status_code=StatusCode.SUCCESS,
            status_reason=STATUS_MESSAGES[StatusCode.SUCCESS],
        )
