"""Menu backup import and export.

A backup is a JSON document ``{"menus": [...], "dishes": [...]}`` using the
same record keys as persisted state. Importing replaces the whole catalog.
Parsing never raises; callers branch on ``BackupImportResult.success``.
"""

import json
import logging
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any

from pydantic import ValidationError

from sales_tally_service.models.catalog_models import CatalogSnapshot, Category, Dish

logger = logging.getLogger(__name__)

INVALID_FORMAT_MESSAGE = "The file does not have the correct format."
UNREADABLE_FILE_MESSAGE = "Could not read the file. Try another backup."


@dataclass
class BackupImportResult:
    """Result of parsing a backup file.

    Attributes:
        success: Whether the backup can replace the catalog
        message: User-facing confirmation or rejection message
        catalog: Parsed catalog when successful, None otherwise
    """

    success: bool
    message: str
    catalog: CatalogSnapshot | None = None


def parse_backup(raw: str | bytes) -> BackupImportResult:
    """Validate and parse a backup file.

    Args:
        raw: File contents

    Returns:
        BackupImportResult with the parsed catalog on success, or a rejection message
    """
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Rejected unreadable backup: {e}")
        return BackupImportResult(success=False, message=UNREADABLE_FILE_MESSAGE)

    if not isinstance(data, dict):
        logger.warning("Rejected backup: top-level value is not an object")
        return BackupImportResult(success=False, message=INVALID_FORMAT_MESSAGE)

    menus = data.get("menus")
    dishes = data.get("dishes")
    if not isinstance(menus, list) or not isinstance(dishes, list):
        logger.warning("Rejected backup: menus and dishes must both be lists")
        return BackupImportResult(success=False, message=INVALID_FORMAT_MESSAGE)

    try:
        catalog = CatalogSnapshot(
            categories=[Category.model_validate(menu) for menu in menus],
            dishes=[Dish.model_validate(dish) for dish in dishes],
        )
    except ValidationError as e:
        logger.warning(f"Rejected backup with invalid records: {e.error_count()} errors")
        return BackupImportResult(success=False, message=INVALID_FORMAT_MESSAGE)

    message = (
        f"Menu loaded: {len(catalog.categories)} categories and {len(catalog.dishes)} dishes."
    )
    return BackupImportResult(success=True, message=message, catalog=catalog)


def _json_number(value: Decimal) -> int | float:
    """Render a Decimal as a JSON number, keeping whole amounts integral."""
    if value == value.to_integral_value():
        return int(value)
    return float(value)


def serialize_category(category: Category) -> dict[str, Any]:
    """Serialize a Category using backup keys."""
    item: dict[str, Any] = {"id": category.id, "name": category.name}
    if category.is_special:
        item["isSpecial"] = True
    return item


def serialize_dish(dish: Dish) -> dict[str, Any]:
    """Serialize a Dish using backup keys."""
    item: dict[str, Any] = {
        "id": dish.id,
        "menuId": dish.category_id,
        "name": dish.name,
        "price": _json_number(dish.price),
    }
    if dish.description is not None:
        item["description"] = dish.description
    return item


def catalog_to_payload(catalog: CatalogSnapshot) -> dict[str, list[dict[str, Any]]]:
    """Convert a catalog to the ``{menus, dishes}`` mapping.

    Args:
        catalog: Catalog to convert

    Returns:
        dict: JSON-serializable backup mapping
    """
    return {
        "menus": [serialize_category(category) for category in catalog.categories],
        "dishes": [serialize_dish(dish) for dish in catalog.dishes],
    }


def export_backup(catalog: CatalogSnapshot) -> str:
    """Serialize a catalog to backup file contents."""
    return json.dumps(catalog_to_payload(catalog))


def backup_filename(today: date) -> str:
    """Return the download file name for a backup taken on a given day."""
    return f"menu_backup_{today.isoformat()}.json"
