"""Pydantic models for FreshBooks resources."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict, field_validator

NULL_TIMESTAMP = "0000-00-00 00:00:00"


class Resource(BaseModel):
    """Common configuration for all resource models."""

    model_config = ConfigDict(extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _null_timestamp(cls, value: Any) -> Any:
        # The API reports unset timestamps as all zeroes
        if value == NULL_TIMESTAMP:
            return None
        return value


T = TypeVar("T")


def _unwrap(value: Any, tag: str) -> Any:
    """Turn ``{"line": x}`` or ``{"line": [x, y]}`` into a list."""
    if value is None:
        return []
    if isinstance(value, dict):
        inner = value.get(tag)
        if inner is None:
            return []
        return inner if isinstance(inner, list) else [inner]
    if isinstance(value, str) and not value.strip():
        return []
    return value


class Line(Resource):
    """An invoice line."""

    name: str | None = None
    description: str | None = None
    unit_cost: Decimal | None = None
    quantity: Decimal | None = None
    amount: Decimal | None = None
    tax1_name: str | None = None
    tax1_percent: Decimal | None = None
    tax2_name: str | None = None
    tax2_percent: Decimal | None = None


class Invoice(Resource):
    """An invoice.

    List responses only carry a summary; fetch with ``get_invoice`` for the
    full record including lines.
    """

    invoice_id: str | None = None
    client_id: str | None = None
    number: str | None = None
    amount: Decimal | None = None
    amount_outstanding: Decimal | None = None
    status: str | None = None
    date: datetime | None = None
    po_number: str | None = None
    discount: Decimal | None = None
    notes: str | None = None
    terms: str | None = None
    currency_code: str | None = None
    organization: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    p_street1: str | None = None
    p_street2: str | None = None
    p_city: str | None = None
    p_state: str | None = None
    p_country: str | None = None
    p_code: str | None = None
    updated: datetime | None = None
    lines: list[Line] = []

    @field_validator("lines", mode="before")
    @classmethod
    def _unwrap_lines(cls, value: Any) -> Any:
        return _unwrap(value, "line")


class Payment(Resource):
    """A payment received from a client."""

    payment_id: str | None = None
    client_id: str | None = None
    invoice_id: str | None = None
    date: datetime | None = None
    amount: Decimal | None = None
    currency_code: str | None = None
    type: str | None = None
    notes: str | None = None
    updated: datetime | None = None


class Expense(Resource):
    """An expense."""

    expense_id: str | None = None
    staff_id: str | None = None
    category_id: str | None = None
    project_id: str | None = None
    client_id: str | None = None
    amount: Decimal | None = None
    vendor: str | None = None
    date: datetime | None = None
    notes: str | None = None
    status: str | None = None
    tax1_name: str | None = None
    tax1_percent: Decimal | None = None
    tax1_amount: Decimal | None = None
    tax2_name: str | None = None
    tax2_percent: Decimal | None = None
    tax2_amount: Decimal | None = None
    updated: datetime | None = None


class Client(Resource):
    """A client of the account owner."""

    client_id: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    organization: str | None = None
    email: str | None = None
    username: str | None = None
    work_phone: str | None = None
    home_phone: str | None = None
    mobile: str | None = None
    fax: str | None = None
    language: str | None = None
    currency_code: str | None = None
    notes: str | None = None
    p_street1: str | None = None
    p_street2: str | None = None
    p_city: str | None = None
    p_state: str | None = None
    p_country: str | None = None
    p_code: str | None = None
    updated: datetime | None = None


class Category(Resource):
    """An expense category."""

    category_id: str | None = None
    name: str | None = None
    tax1: Decimal | None = None
    tax2: Decimal | None = None


class Page(BaseModel, Generic[T]):
    """One page of a paginated listing.

    ``page`` is 1-based. An empty listing reports ``pages`` as 0 or 1 with no
    items.
    """

    model_config = ConfigDict(frozen=True)

    items: tuple[T, ...] = ()
    page: int = 1
    pages: int = 0
    per_page: int | None = None
    total: int | None = None

    def __len__(self) -> int:
        return len(self.items)
