"""Unit tests for the shift state repository."""

import json
from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from botocore.exceptions import ClientError

from sales_tally_service.models.catalog_models import CatalogSnapshot
from sales_tally_service.models.ledger_models import SaleLedger
from sales_tally_service.repositories.state_repository import ShiftStateRepository


def _payload_item(key: str, value: object) -> dict:
    return {"Item": {"state_key": key, "payload": json.dumps(value)}}


@pytest.mark.unit
class TestShiftStateRepository:
    """Test suite for ShiftStateRepository."""

    @pytest.fixture
    def mock_dynamodb(self) -> MagicMock:
        """Create a mock DynamoDB resource."""
        return MagicMock()

    @pytest.fixture
    def repository(self, mock_dynamodb: MagicMock) -> ShiftStateRepository:
        """Create a ShiftStateRepository with mocked DynamoDB."""
        return ShiftStateRepository(dynamodb_resource=mock_dynamodb, table_name="test-state")

    @pytest.fixture
    def table(self, mock_dynamodb: MagicMock) -> MagicMock:
        """The mocked table behind the repository."""
        return mock_dynamodb.Table.return_value

    def test_repository_initialization(self, mock_dynamodb: MagicMock) -> None:
        """Test that repository initializes correctly."""
        repo = ShiftStateRepository(dynamodb_resource=mock_dynamodb, table_name="test-table")

        assert repo.table_name == "test-table"
        mock_dynamodb.Table.assert_called_once_with("test-table")

    def test_load_sale_ledger_success(self, repository: ShiftStateRepository, table: MagicMock) -> None:
        """Test loading a stored ledger."""
        table.get_item.return_value = _payload_item("sales", {"dish_1": 3, "dish_2": 0})

        ledger = repository.load_sale_ledger()

        assert ledger.quantities == {"dish_1": 3, "dish_2": 0}
        table.get_item.assert_called_once_with(Key={"state_key": "sales"})

    def test_load_sale_ledger_missing_is_empty(
        self, repository: ShiftStateRepository, table: MagicMock
    ) -> None:
        """Test that an absent ledger loads as empty."""
        table.get_item.return_value = {}

        assert repository.load_sale_ledger() == SaleLedger()

    @pytest.mark.parametrize(
        "item",
        [
            {"Item": {"state_key": "sales", "payload": "{not json"}},
            {"Item": {"state_key": "sales"}},
            _payload_item("sales", [1, 2, 3]),
            _payload_item("sales", {"dish_1": -4}),
            _payload_item("sales", {"dish_1": "many"}),
        ],
    )
    def test_load_sale_ledger_corrupt_is_empty(
        self, repository: ShiftStateRepository, table: MagicMock, item: dict
    ) -> None:
        """Test that corrupt ledgers fall back to empty without raising."""
        table.get_item.return_value = item

        assert repository.load_sale_ledger().quantities == {}

    def test_load_sale_ledger_dynamodb_error(
        self, repository: ShiftStateRepository, table: MagicMock
    ) -> None:
        """Test that DynamoDB errors load an empty ledger."""
        table.get_item.side_effect = ClientError(
            {"Error": {"Code": "InternalServerError", "Message": "Server error"}}, "GetItem"
        )

        assert repository.load_sale_ledger().quantities == {}

    def test_save_sale_ledger_success(self, repository: ShiftStateRepository, table: MagicMock) -> None:
        """Test saving the ledger as a JSON blob."""
        ledger = SaleLedger(quantities={"dish_1": 2})

        assert repository.save_sale_ledger(ledger) is True

        saved = table.put_item.call_args.kwargs["Item"]
        assert saved["state_key"] == "sales"
        assert json.loads(saved["payload"]) == {"dish_1": 2}

    def test_save_sale_ledger_dynamodb_error(
        self, repository: ShiftStateRepository, table: MagicMock
    ) -> None:
        """Test that DynamoDB errors return False on save."""
        table.put_item.side_effect = ClientError(
            {"Error": {"Code": "ValidationException", "Message": "Invalid"}}, "PutItem"
        )

        assert repository.save_sale_ledger(SaleLedger()) is False

    def test_load_catalog_success(
        self, repository: ShiftStateRepository, table: MagicMock, backup_payload: dict
    ) -> None:
        """Test loading menus and dishes from their own keys."""
        blobs = {
            "menus": _payload_item("menus", backup_payload["menus"]),
            "dishes": _payload_item("dishes", backup_payload["dishes"]),
        }
        table.get_item.side_effect = lambda Key: blobs[Key["state_key"]]

        catalog = repository.load_catalog()

        assert [category.name for category in catalog.categories] == ["Lunch", "Other"]
        assert catalog.dishes[0].price == Decimal("5000")
        assert catalog.dishes[1].category_id == "menu_other"

    def test_load_catalog_corrupt_parts_fall_back_independently(
        self, repository: ShiftStateRepository, table: MagicMock, backup_payload: dict
    ) -> None:
        """Test that a corrupt dishes blob does not discard valid menus."""
        blobs = {
            "menus": _payload_item("menus", backup_payload["menus"]),
            "dishes": {"Item": {"state_key": "dishes", "payload": "]["}},
        }
        table.get_item.side_effect = lambda Key: blobs[Key["state_key"]]

        catalog = repository.load_catalog()

        assert len(catalog.categories) == 2
        assert catalog.dishes == []

    def test_load_catalog_invalid_records_fall_back(
        self, repository: ShiftStateRepository, table: MagicMock
    ) -> None:
        """Test that records failing validation are discarded."""
        table.get_item.return_value = _payload_item("menus", [{"name": "missing id"}])

        assert repository.load_catalog() == CatalogSnapshot()

    def test_save_catalog_writes_both_keys(
        self, repository: ShiftStateRepository, table: MagicMock, catalog: CatalogSnapshot
    ) -> None:
        """Test that the catalog is stored as menus and dishes blobs."""
        assert repository.save_catalog(catalog) is True

        saved = {
            call.kwargs["Item"]["state_key"]: json.loads(call.kwargs["Item"]["payload"])
            for call in table.put_item.call_args_list
        }
        assert saved["menus"][1] == {"id": "menu_other", "name": "Other", "isSpecial": True}
        assert saved["dishes"][0] == {
            "id": "dish_soup",
            "menuId": "menu_lunch",
            "name": "Soup",
            "price": 5000,
        }

    def test_business_name_round_trip_defaults(
        self, repository: ShiftStateRepository, table: MagicMock
    ) -> None:
        """Test that a missing or non-string business name loads as empty."""
        table.get_item.return_value = _payload_item("business_name", 42)

        assert repository.load_business_name() == ""

    def test_save_business_name(self, repository: ShiftStateRepository, table: MagicMock) -> None:
        """Test storing the business name."""
        assert repository.save_business_name("La Comanda") is True

        saved = table.put_item.call_args.kwargs["Item"]
        assert saved == {"state_key": "business_name", "payload": '"La Comanda"'}
