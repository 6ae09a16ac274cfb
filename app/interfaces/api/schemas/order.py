"""Pydantic models for storefront orders."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class OrderCreate(BaseModel):
    order_number: str | None = Field(default=None, max_length=40)
    customer_name: str = Field(..., min_length=1, max_length=120)
    customer_email: str = Field(..., min_length=3, max_length=255)
    customer_phone: str | None = Field(default=None, max_length=40)
    total_amount: float = Field(..., ge=0)
    notes: str | None = None


class OrderUpdate(BaseModel):
    """Partial order update, typically a status or payment transition."""

    customer_name: str | None = Field(default=None, min_length=1, max_length=120)
    customer_email: str | None = Field(default=None, min_length=3, max_length=255)
    customer_phone: str | None = Field(default=None, max_length=40)
    total_amount: float | None = Field(default=None, ge=0)
    status: str | None = None
    payment_status: str | None = None
    notes: str | None = None

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude_unset=True)


class OrderRead(BaseModel):
    id: str
    order_number: str
    customer_name: str
    customer_email: str
    customer_phone: str | None = None
    total_amount: float
    status: str
    payment_status: str
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


__all__ = ["OrderCreate", "OrderRead", "OrderUpdate"]
