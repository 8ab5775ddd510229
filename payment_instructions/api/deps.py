"""Dependency helpers for API layer."""

from payment_instructions.payments.service import PaymentInstructionService


def get_payment_service() -> PaymentInstructionService:
    """Build payment instruction service dependency."""

    return PaymentInstructionService()
