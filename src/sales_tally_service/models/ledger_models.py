"""Unit-count ledger models.

Two ledgers share the same shape (dish id -> quantity) but differ in how they
treat a quantity of zero:

- SaleLedger is the running tally for the shift. A dish brought back to zero
  keeps its key with value 0.
- CartLedger is a pending checkout transaction. A dish brought back to zero is
  removed from the mapping.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator


def _validate_quantities(v: dict[str, int]) -> dict[str, int]:
    for dish_id, qty in v.items():
        if qty < 0:
            raise ValueError(f"quantity for {dish_id} must be non-negative")
    return v


class SaleLedger(BaseModel):
    """Per-dish units sold during the current shift."""

    quantities: dict[str, int] = Field(default_factory=dict, description="Units sold by dish id")

    @field_validator("quantities")
    @classmethod
    def validate_quantities(cls, v: dict[str, int]) -> dict[str, int]:
        """Validate that stored quantities are non-negative."""
        return _validate_quantities(v)

    def quantity_for(self, dish_id: str) -> int:
        """Return units sold for a dish, 0 when absent."""
        return self.quantities.get(dish_id, 0)

    def increment(self, dish_id: str, delta: int) -> int:
        """Adjust the units sold for a dish, clamping at zero.

        Unknown dish ids are created. A result of zero is kept as an explicit
        entry.

        Args:
            dish_id: Dish to adjust
            delta: Units to add (negative to remove)

        Returns:
            int: The new quantity for the dish
        """
        new_qty = max(0, self.quantities.get(dish_id, 0) + delta)
        self.quantities[dish_id] = new_qty
        return new_qty

    def reset(self) -> None:
        """Clear every count. There is no undo."""
        self.quantities = {}

    def to_storage_item(self) -> dict[str, int]:
        """Convert to the plain mapping handed to persistence.

        Returns:
            dict: dish id -> quantity
        """
        return dict(self.quantities)

    @classmethod
    def from_storage_item(cls, item: dict[str, Any]) -> "SaleLedger":
        """Create SaleLedger from a persisted mapping.

        Args:
            item: dish id -> quantity mapping

        Returns:
            SaleLedger: Parsed ledger

        Raises:
            pydantic.ValidationError: If the mapping holds non-integer or negative values
        """
        return cls(quantities=item)


class CartLedger(BaseModel):
    """Dishes in an in-progress checkout transaction."""

    quantities: dict[str, int] = Field(default_factory=dict, description="Cart units by dish id")

    @field_validator("quantities")
    @classmethod
    def validate_quantities(cls, v: dict[str, int]) -> dict[str, int]:
        """Validate that cart quantities are non-negative."""
        return _validate_quantities(v)

    def quantity_for(self, dish_id: str) -> int:
        """Return the cart quantity for a dish, 0 when absent."""
        return self.quantities.get(dish_id, 0)

    def update(self, dish_id: str, delta: int) -> int:
        """Adjust a cart line, removing it when it reaches zero.

        Args:
            dish_id: Dish to adjust
            delta: Units to add (negative to remove)

        Returns:
            int: The new quantity for the dish (0 means the line was removed)
        """
        new_qty = max(0, self.quantities.get(dish_id, 0) + delta)
        if new_qty == 0:
            self.quantities.pop(dish_id, None)
        else:
            self.quantities[dish_id] = new_qty
        return new_qty

    def clear(self) -> None:
        """Remove every line from the cart."""
        self.quantities = {}

    @property
    def is_empty(self) -> bool:
        """Whether the cart has no lines."""
        return not self.quantities
