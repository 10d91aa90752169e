"""DynamoDB repository for shift state.

State is stored as JSON blobs in a key-value table, one item per key:

- ``menus``: list of category records
- ``dishes``: list of dish records
- ``sales``: dish id -> units sold mapping
- ``business_name``: plain string

Following the pattern of the other repositories, expected failures return
empty defaults or False instead of raising. A missing or corrupt blob loads as
empty state and is never surfaced to the operator.
"""

import json
import logging
from typing import Any

from botocore.exceptions import ClientError
from mypy_boto3_dynamodb.service_resource import DynamoDBServiceResource, Table
from pydantic import ValidationError

from sales_tally_service.models.catalog_models import CatalogSnapshot, Category, Dish
from sales_tally_service.models.ledger_models import SaleLedger
from sales_tally_service.services.backup_service import serialize_category, serialize_dish

logger = logging.getLogger(__name__)

MENUS_KEY = "menus"
DISHES_KEY = "dishes"
SALES_KEY = "sales"
BUSINESS_NAME_KEY = "business_name"


class ShiftStateRepository:
    """Repository for persisted shift state.

    Manages JSON blobs in DynamoDB keyed by ``state_key``.
    """

    def __init__(self, dynamodb_resource: DynamoDBServiceResource, table_name: str) -> None:
        """Initialize repository.

        Args:
            dynamodb_resource: Boto3 DynamoDB resource
            table_name: Name of the DynamoDB table
        """
        self.dynamodb = dynamodb_resource
        self.table_name = table_name
        self.table: Table = dynamodb_resource.Table(table_name)

    def _get_payload(self, key: str) -> Any | None:
        """Read and decode the JSON blob stored under a key.

        Args:
            key: State key

        Returns:
            Decoded JSON value, or None if missing, unreadable or corrupt
        """
        try:
            response = self.table.get_item(Key={"state_key": key})
        except ClientError as e:
            logger.error(f"Failed to read state {key}: {e}")  # pragma: no cover
            return None

        # Key never written yet
        item = response.get("Item")
        if item is None or "payload" not in item:
            return None

        try:
            return json.loads(item["payload"])
        except (TypeError, json.JSONDecodeError):
            logger.warning(f"Discarding corrupt state for key {key}")
            return None

    def _put_payload(self, key: str, value: Any) -> bool:
        """Encode and store a JSON blob under a key.

        Args:
            key: State key
            value: JSON-serializable value

        Returns:
            bool: True if save succeeded, False otherwise
        """
        try:
            self.table.put_item(Item={"state_key": key, "payload": json.dumps(value)})
            return True
        except ClientError as e:
            logger.error(f"Failed to save state {key}: {e}")  # pragma: no cover
            return False

    def load_catalog(self) -> CatalogSnapshot:
        """Load the current catalog.

        Each of ``menus`` and ``dishes`` falls back to an empty list on its own
        when missing or corrupt.

        Returns:
            CatalogSnapshot: Stored catalog, possibly empty
        """
        menus = self._get_payload(MENUS_KEY)
        dishes = self._get_payload(DISHES_KEY)

        # One bad record discards that list, not the whole catalog
        categories: list[Category] = []
        if isinstance(menus, list):
            try:
                categories = [Category.model_validate(menu) for menu in menus]
            except ValidationError:
                logger.warning("Discarding stored menus with invalid records")

        dish_records: list[Dish] = []
        if isinstance(dishes, list):
            try:
                dish_records = [Dish.model_validate(dish) for dish in dishes]
            except ValidationError:
                logger.warning("Discarding stored dishes with invalid records")

        return CatalogSnapshot(categories=categories, dishes=dish_records)

    def save_catalog(self, catalog: CatalogSnapshot) -> bool:
        """Replace the stored catalog.

        Args:
            catalog: Catalog to store

        Returns:
            bool: True if both menus and dishes were saved
        """
        menus_saved = self._put_payload(
            MENUS_KEY, [serialize_category(category) for category in catalog.categories]
        )
        dishes_saved = self._put_payload(DISHES_KEY, [serialize_dish(dish) for dish in catalog.dishes])
        return menus_saved and dishes_saved

    def load_sale_ledger(self) -> SaleLedger:
        """Load the shift ledger, or an empty one if missing or corrupt.

        Returns:
            SaleLedger: Stored ledger
        """
        # Stored as a plain {dish_id: units} object
        payload = self._get_payload(SALES_KEY)
        if not isinstance(payload, dict):
            return SaleLedger()

        try:
            return SaleLedger.from_storage_item(payload)
        except ValidationError:
            logger.warning("Discarding stored sales ledger with invalid quantities")
            return SaleLedger()

    def save_sale_ledger(self, ledger: SaleLedger) -> bool:
        """Persist the shift ledger.

        Args:
            ledger: Ledger to store

        Returns:
            bool: True if save succeeded, False otherwise
        """
        return self._put_payload(SALES_KEY, ledger.to_storage_item())

    def load_business_name(self) -> str:
        """Load the business name printed on reports, empty if unset."""
        payload = self._get_payload(BUSINESS_NAME_KEY)
        return payload if isinstance(payload, str) else ""

    def save_business_name(self, name: str) -> bool:
        """Persist the business name printed on reports."""
        return self._put_payload(BUSINESS_NAME_KEY, name)
