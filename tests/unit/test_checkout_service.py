"""Unit tests for checkout totals and change calculation."""

from decimal import Decimal

import pytest

from sales_tally_service.models.catalog_models import CatalogSnapshot, Dish
from sales_tally_service.models.checkout_models import ChangeStatusEnum
from sales_tally_service.models.ledger_models import CartLedger
from sales_tally_service.services.checkout_service import (
    TENDER_DENOMINATIONS,
    CheckoutSession,
    cart_lines,
    cart_total,
    change_due,
    parse_tendered,
    tender_presets,
)


@pytest.mark.unit
class TestChangeDue:
    """Test suite for change_due."""

    def test_change_is_returned_when_tender_covers_total(self) -> None:
        """Test that surplus cash is returned as change."""
        result = change_due(Decimal("15000"), Decimal("20000"))

        assert result.status == ChangeStatusEnum.OK
        assert result.change == Decimal("5000")
        assert result.shortfall is None

    def test_insufficient_tender_is_signalled(self) -> None:
        """Test that a short tender reports insufficient funds, not a negative amount."""
        result = change_due(Decimal("15000"), Decimal("10000"))

        assert result.is_insufficient
        assert result.change is None
        assert result.shortfall == Decimal("5000")

    def test_exact_tender_gives_zero_change(self) -> None:
        """Test that an exact payment owes nothing."""
        result = change_due(Decimal("15000"), Decimal("15000"))

        assert result.status == ChangeStatusEnum.OK
        assert result.change == Decimal("0")

    def test_missing_tender_shows_nothing(self) -> None:
        """Test that no tender yields the no-tender state."""
        result = change_due(Decimal("15000"), None)

        assert result.status == ChangeStatusEnum.NO_TENDER
        assert result.change is None


@pytest.mark.unit
class TestParseTendered:
    """Test suite for parse_tendered."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [
            ("20000", Decimal("20000")),
            (" 150.5 ", Decimal("150.5")),
            (50000, Decimal("50000")),
            (Decimal("10"), Decimal("10")),
        ],
    )
    def test_valid_amounts(self, raw: object, expected: Decimal) -> None:
        """Test that numeric input is parsed."""
        assert parse_tendered(raw) == expected  # type: ignore[arg-type]

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "NaN", "Infinity", True])
    def test_invalid_amounts_are_absent(self, raw: object) -> None:
        """Test that unparsable input is treated as no tender."""
        assert parse_tendered(raw) is None  # type: ignore[arg-type]


@pytest.mark.unit
class TestCartTotals:
    """Test suite for cart pricing."""

    def test_cart_total(self, catalog: CatalogSnapshot) -> None:
        """Test that the cart total sums price times quantity."""
        cart = CartLedger(quantities={"dish_soup": 2, "dish_ice": 1})

        assert cart_total(catalog, cart) == Decimal("12000")

    def test_deleted_dishes_are_ignored(self, catalog: CatalogSnapshot) -> None:
        """Test that cart entries for unknown dishes add nothing."""
        cart = CartLedger(quantities={"dish_soup": 1, "gone": 4})

        assert cart_total(catalog, cart) == Decimal("5000")
        assert [line.dish_id for line in cart_lines(catalog, cart)] == ["dish_soup"]

    def test_orphaned_dishes_are_ignored(self, catalog: CatalogSnapshot) -> None:
        """Test that dishes without a category add nothing."""
        catalog.dishes.append(Dish(id="ghost", category_id="gone", name="Ghost", price=Decimal("1")))
        cart = CartLedger(quantities={"ghost": 3})

        assert cart_total(catalog, cart) == Decimal("0")

    def test_empty_cart_total_is_zero(self, catalog: CatalogSnapshot) -> None:
        """Test that an empty cart costs nothing."""
        assert cart_total(catalog, CartLedger()) == Decimal("0")


@pytest.mark.unit
class TestTenderPresets:
    """Test suite for quick-tender presets."""

    def test_exact_amount_comes_first(self) -> None:
        """Test that the exact total leads the preset list."""
        presets = tender_presets(Decimal("12000"))

        assert presets[0] == Decimal("12000")
        assert presets[1:] == list(TENDER_DENOMINATIONS)

    def test_no_exact_preset_for_empty_total(self) -> None:
        """Test that a zero total offers only banknotes."""
        assert tender_presets(Decimal("0")) == list(TENDER_DENOMINATIONS)

    def test_total_matching_a_banknote_is_not_repeated(self) -> None:
        """Test that a total equal to a banknote appears once."""
        presets = tender_presets(Decimal("20000"))

        assert presets.count(Decimal("20000")) == 1


@pytest.mark.unit
class TestCheckoutSession:
    """Test suite for CheckoutSession."""

    def test_quote_reports_change(self, catalog: CatalogSnapshot) -> None:
        """Test a full checkout quote."""
        session = CheckoutSession()
        session.update("dish_soup", 3)
        session.set_tendered("20000")

        quote = session.quote(catalog)

        assert quote.total == Decimal("15000")
        assert quote.tendered == Decimal("20000")
        assert quote.change.change == Decimal("5000")
        assert [line.qty for line in quote.lines] == [3]

    def test_quote_reports_insufficient_funds(self, catalog: CatalogSnapshot) -> None:
        """Test that a short tender is flagged in the quote."""
        session = CheckoutSession()
        session.update("dish_soup", 3)
        session.set_tendered("10000")

        assert session.quote(catalog).change.is_insufficient

    def test_unparsable_tender_clears_amount(self, catalog: CatalogSnapshot) -> None:
        """Test that garbage input resets the tendered amount."""
        session = CheckoutSession()
        session.set_tendered("20000")
        session.set_tendered("twenty")

        assert session.tendered is None
        assert session.quote(catalog).change.status == ChangeStatusEnum.NO_TENDER

    def test_clear_resets_cart_and_tender(self, catalog: CatalogSnapshot) -> None:
        """Test that clearing the session empties everything."""
        session = CheckoutSession()
        session.update("dish_ice", 1)
        session.set_tendered("5000")

        session.clear()
        quote = session.quote(catalog)

        assert session.cart.is_empty
        assert quote.total == Decimal("0")
        assert quote.tendered is None

    def test_removing_last_unit_drops_line(self) -> None:
        """Test that the session cart follows the zero-removal rule."""
        session = CheckoutSession()
        session.update("dish_ice", 1)
        session.update("dish_ice", -1)

        assert "dish_ice" not in session.cart.quantities
