"""Keywords, status codes and fixed reference data for payment instructions."""

from __future__ import annotations

import re
from enum import Enum


class TransactionType(str, Enum):
    """Leading keyword of an instruction."""

    DEBIT = "DEBIT"
    CREDIT = "CREDIT"


class TransactionStatus(str, Enum):
    """Outcome classification of a processed instruction."""

    SUCCESSFUL = "successful"
    PENDING = "pending"
    FAILED = "failed"


class StatusCode(str, Enum):
    """Stable outcome codes returned to callers."""

    SUCCESS = "AP00"
    PENDING = "AP02"

    INVALID_AMOUNT = "AM01"

    CURRENCY_MISMATCH = "CU01"
    UNSUPPORTED_CURRENCY = "CU02"

    INSUFFICIENT_FUNDS = "AC01"
    SAME_ACCOUNT = "AC02"
    ACCOUNT_NOT_FOUND = "AC03"
    INVALID_ACCOUNT_FORMAT = "AC04"

    INVALID_DATE_FORMAT = "DT01"

    MISSING_KEYWORD = "SY01"
    INVALID_KEYWORD_ORDER = "SY02"
    MALFORMED_INSTRUCTION = "SY03"


STATUS_MESSAGES: dict[StatusCode, str] = {
    StatusCode.SUCCESS: "Transaction executed successfully",
    StatusCode.PENDING: "Transaction scheduled for future execution",
    StatusCode.INVALID_AMOUNT: "Amount must be a positive integer",
    StatusCode.CURRENCY_MISMATCH: "Account currency mismatch",
    StatusCode.UNSUPPORTED_CURRENCY: "Unsupported currency. Only NGN, USD, GBP, and GHS are supported",
    StatusCode.INSUFFICIENT_FUNDS: "Insufficient funds in debit account",
    StatusCode.SAME_ACCOUNT: "Debit and credit accounts cannot be the same",
    StatusCode.ACCOUNT_NOT_FOUND: "Account not found",
    StatusCode.INVALID_ACCOUNT_FORMAT: "Invalid account ID format",
    StatusCode.INVALID_DATE_FORMAT: "Invalid date format. Expected YYYY-MM-DD",
    StatusCode.MISSING_KEYWORD: "Missing required keyword in instruction",
    StatusCode.INVALID_KEYWORD_ORDER: "Invalid keyword order in instruction",
    StatusCode.MALFORMED_INSTRUCTION: "Malformed instruction: unable to parse",
}

SUPPORTED_CURRENCIES = frozenset({"NGN", "USD", "GBP", "GHS"})

# Letters, digits, hyphen, period and "@"
ACCOUNT_ID_PATTERN = re.compile(r"[A-Za-z0-9\-.@]+")
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}", re.ASCII)
NUMBER_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)
RADIX_INTEGER_PATTERN = re.compile(r"0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+", re.ASCII)
INFINITY_LITERALS = frozenset({"Infinity", "+Infinity", "-Infinity"})

MIN_INSTRUCTION_TOKENS = 11

KEYWORD_FROM = "FROM"
KEYWORD_TO = "TO"
KEYWORD_ACCOUNT = "ACCOUNT"
KEYWORD_FOR = "FOR"
KEYWORD_ON = "ON"
