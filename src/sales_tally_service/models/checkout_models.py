"""Checkout and change calculation models."""

from decimal import Decimal
from enum import Enum

from pydantic import BaseModel, Field


class ChangeStatusEnum(str, Enum):
    """Outcome of a change-due calculation."""

    NO_TENDER = "no_tender"
    OK = "ok"
    INSUFFICIENT_FUNDS = "insufficient_funds"


class ChangeResult(BaseModel):
    """Change owed for a tendered amount.

    ``change`` is only set when the tender covers the total. An insufficient
    tender reports the missing amount in ``shortfall`` instead of a negative
    change.
    """

    status: ChangeStatusEnum
    change: Decimal | None = Field(None, description="Change owed to the customer", ge=0)
    shortfall: Decimal | None = Field(None, description="Amount still missing", gt=0)

    @property
    def is_insufficient(self) -> bool:
        """Whether the tender falls short of the total."""
        return self.status == ChangeStatusEnum.INSUFFICIENT_FUNDS


class CartLine(BaseModel):
    """A priced cart line."""

    dish_id: str
    name: str
    unit_price: Decimal
    qty: int = Field(..., gt=0)
    subtotal: Decimal


class CheckoutQuote(BaseModel):
    """Current state of a checkout: cart lines, total, tender and change."""

    lines: list[CartLine] = Field(default_factory=list)
    total: Decimal = Decimal("0")
    tendered: Decimal | None = None
    change: ChangeResult
    presets: list[Decimal] = Field(default_factory=list)
