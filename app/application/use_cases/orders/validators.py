"""Validation helpers for order use cases."""

from typing import Any

from app.domain.entities import ORDER_STATUSES, PAYMENT_STATUSES


def ensure_valid_statuses(changes: dict[str, Any]) -> None:
    """Raise ``ValueError`` when ``changes`` holds an unknown status value."""

    status = changes.get("status")
    if status is not None and status not in ORDER_STATUSES:
        msg = f"Invalid order status '{status}'"
        raise ValueError(msg)
    payment_status = changes.get("payment_status")
    if payment_status is not None and payment_status not in PAYMENT_STATUSES:
        msg = f"Invalid payment status '{payment_status}'"
        raise ValueError(msg)


def ensure_valid_amount(amount: float | None) -> None:
    if amount is not None and amount < 0:
        raise ValueError("Order total cannot be negative")
