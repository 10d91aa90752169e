"""Cart totals and change-due calculation for checkout."""

import logging
from decimal import Decimal, InvalidOperation

from sales_tally_service.models.catalog_models import CatalogSnapshot
from sales_tally_service.models.checkout_models import (
    CartLine,
    ChangeResult,
    ChangeStatusEnum,
    CheckoutQuote,
)
from sales_tally_service.models.ledger_models import CartLedger

logger = logging.getLogger(__name__)

# Banknote shortcuts offered next to the exact-amount preset
TENDER_DENOMINATIONS: tuple[Decimal, ...] = (
    Decimal("10000"),
    Decimal("20000"),
    Decimal("50000"),
    Decimal("100000"),
)


def cart_lines(catalog: CatalogSnapshot, cart: CartLedger) -> list[CartLine]:
    """Price each cart entry that still resolves to a dish.

    Lines follow catalog order. Entries for deleted dishes, or dishes whose
    category was deleted, are dropped.

    Args:
        catalog: Current catalog snapshot
        cart: Pending transaction

    Returns:
        list: Priced cart lines
    """
    lines = []
    for dish, _category in catalog.resolvable_dishes():
        qty = cart.quantity_for(dish.id)
        if qty > 0:
            lines.append(
                CartLine(
                    dish_id=dish.id,
                    name=dish.name,
                    unit_price=dish.price,
                    qty=qty,
                    subtotal=dish.price * qty,
                )
            )
    return lines


def cart_total(catalog: CatalogSnapshot, cart: CartLedger) -> Decimal:
    """Sum price x quantity over the cart."""
    return sum((line.subtotal for line in cart_lines(catalog, cart)), Decimal("0"))


def parse_tendered(raw: str | int | float | Decimal | None) -> Decimal | None:
    """Parse a tendered amount typed by the operator.

    Args:
        raw: Raw input (string from a text field or a number)

    Returns:
        Decimal if the input is a finite number, None otherwise
    """
    if raw is None or isinstance(raw, bool):
        return None

    text = str(raw).strip()
    if not text:
        return None

    try:
        value = Decimal(text)
    except InvalidOperation:
        logger.debug(f"Ignoring unparsable tendered amount: {text!r}")
        return None

    if not value.is_finite():
        return None
    return value


def change_due(total: Decimal, tendered: Decimal | None) -> ChangeResult:
    """Compute change owed for a tendered amount.

    Args:
        total: Amount to collect
        tendered: Cash handed over, None when nothing was entered

    Returns:
        ChangeResult: NO_TENDER when tendered is None, INSUFFICIENT_FUNDS with
        the shortfall when tendered < total, otherwise OK with the change
    """
    if tendered is None:
        return ChangeResult(status=ChangeStatusEnum.NO_TENDER)

    difference = tendered - total
    if difference < 0:
        return ChangeResult(status=ChangeStatusEnum.INSUFFICIENT_FUNDS, shortfall=-difference)

    return ChangeResult(status=ChangeStatusEnum.OK, change=difference)


def tender_presets(total: Decimal) -> list[Decimal]:
    """Return the quick-tender amounts for a total.

    The exact amount comes first, followed by the banknote denominations.
    """
    presets = [total] if total > 0 else []
    presets.extend(value for value in TENDER_DENOMINATIONS if value != total)
    return presets


class CheckoutSession:
    """In-memory checkout state: a cart and the amount tendered.

    The session is never persisted. Completing or abandoning a transaction
    clears both the cart and the tender.
    """

    def __init__(self) -> None:
        """Initialize an empty checkout session."""
        self.cart = CartLedger()
        self.tendered: Decimal | None = None

    def update(self, dish_id: str, delta: int) -> int:
        """Adjust a cart line.

        Args:
            dish_id: Dish to adjust
            delta: Units to add (negative to remove)

        Returns:
            int: The new quantity for the dish
        """
        return self.cart.update(dish_id, delta)

    def set_tendered(self, raw: str | int | float | Decimal | None) -> Decimal | None:
        """Record the tendered amount, clearing it when unparsable.

        Returns:
            The parsed amount, or None
        """
        self.tendered = parse_tendered(raw)
        return self.tendered

    def clear(self) -> None:
        """Drop the cart and the tendered amount."""
        self.cart.clear()
        self.tendered = None

    def quote(self, catalog: CatalogSnapshot) -> CheckoutQuote:
        """Price the cart against a catalog snapshot.

        Args:
            catalog: Current catalog snapshot

        Returns:
            CheckoutQuote: Lines, total, tender, change and preset amounts
        """
        lines = cart_lines(catalog, self.cart)
        total = sum((line.subtotal for line in lines), Decimal("0"))
        return CheckoutQuote(
            lines=lines,
            total=total,
            tendered=self.tendered,
            change=change_due(total, self.tendered),
            presets=tender_presets(total),
        )
