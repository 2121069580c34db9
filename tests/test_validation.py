from decimal import Decimal
from uuid import uuid4

import pytest

from models.stock import MovementType
from services.results import ValidationFailed
from services.validation import (
    validate_company,
    validate_movement,
    validate_product,
    validate_product_patch,
)


class TestMovementValidation:

    def test_accepts_camel_case_payload(self):
        pid = uuid4()
        result = validate_movement({"productId": str(pid), "type": "OUT", "quantity": 3, "reason": "  sold  "})

        assert not isinstance(result, ValidationFailed)
        assert result.product_id == pid
        assert result.type == MovementType.OUT
        assert result.quantity == 3
        assert result.reason == "sold"

    def test_accepts_snake_case_payload(self):
        result = validate_movement({"product_id": str(uuid4()), "type": "IN", "quantity": 1})
        assert not isinstance(result, ValidationFailed)
        assert result.reason is None

    @pytest.mark.parametrize("quantity", [0, -5, 2.5, "3"])
    def test_quantity_must_be_a_positive_integer(self, quantity):
        result = validate_movement({"productId": str(uuid4()), "type": "IN", "quantity": quantity})
        assert isinstance(result, ValidationFailed)
        assert result.field == "quantity"

    @pytest.mark.parametrize("kind", ["in", "ADJUSTMENT", "", None])
    def test_type_must_be_in_or_out(self, kind):
        result = validate_movement({"productId": str(uuid4()), "type": kind, "quantity": 1})
        assert isinstance(result, ValidationFailed)
        assert result.field == "type"

    def test_product_id_must_be_a_uuid(self):
        result = validate_movement({"productId": "42", "type": "IN", "quantity": 1})
        assert isinstance(result, ValidationFailed)
        assert result.field == "productId"

    def test_reason_is_limited_to_200_chars(self):
        result = validate_movement({"productId": str(uuid4()), "type": "IN", "quantity": 1, "reason": "x" * 201})
        assert isinstance(result, ValidationFailed)
        assert result.field == "reason"

    def test_non_mapping_input_is_rejected(self):
        result = validate_movement(["IN", 1])
        assert isinstance(result, ValidationFailed)
        assert result.field == "__root__"


class TestProductValidation:

    def test_defaults_stock_figures_to_zero(self):
        result = validate_product({"name": "Hammer"})
        assert result.min_stock == 0
        assert result.current_stock == 0
        assert result.price is None

    def test_price_is_kept_as_decimal(self):
        result = validate_product({"name": "Hammer", "price": "19.99", "minStock": 5, "currentStock": 7})
        assert result.price == Decimal("19.99")
        assert result.min_stock == 5
        assert result.current_stock == 7

    @pytest.mark.parametrize("payload,field", [
        ({"name": ""}, "name"),
        ({"name": "   "}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"name": "Hammer", "description": "x" * 501}, "description"),
        ({"name": "Hammer", "sku": "x" * 51}, "sku"),
        ({"name": "Hammer", "price": 0}, "price"),
        ({"name": "Hammer", "price": -1}, "price"),
        ({"name": "Hammer", "minStock": -1}, "minStock"),
        ({"name": "Hammer", "currentStock": -3}, "currentStock"),
        ({}, "name"),
    ])
    def test_rejects_out_of_range_values(self, payload, field):
        result = validate_product(payload)
        assert isinstance(result, ValidationFailed)
        assert result.field == field

    def test_patch_keeps_only_supplied_fields_and_drops_current_stock(self):
        result = validate_product_patch({"minStock": 4, "currentStock": 999})
        assert result.model_dump(exclude_unset=True) == {"min_stock": 4}

    def test_patch_cannot_null_the_name(self):
        result = validate_product_patch({"name": None})
        assert isinstance(result, ValidationFailed)
        assert result.field == "name"


class TestCompanyValidation:

    def test_optional_fields_may_be_null(self):
        result = validate_company({"name": "Acme", "document": None, "phone": None, "address": None})
        assert result.name == "Acme"
        assert result.document is None

    @pytest.mark.parametrize("payload,field", [
        ({"name": ""}, "name"),
        ({"name": "x" * 101}, "name"),
        ({"name": "Acme", "document": "1" * 21}, "document"),
        ({"name": "Acme", "phone": "1" * 21}, "phone"),
        ({"name": "Acme", "address": "x" * 201}, "address"),
    ])
    def test_rejects_too_long_values(self, payload, field):
        result = validate_company(payload)
        assert isinstance(result, ValidationFailed)
        assert result.field == field

    def test_partial_update_does_not_require_name(self):
        result = validate_company({"phone": "555-0100"}, partial=True)
        assert result.model_dump(exclude_unset=True) == {"phone": "555-0100"}


class TestPriceRounding:

    @pytest.mark.parametrize("price,expected", [
        ("19.999", Decimal("20.00")),
        (19.994, Decimal("19.99")),
        ("0.005", Decimal("0.01")),
        ("99999999.99", Decimal("99999999.99")),
    ])
    def test_price_is_rounded_to_cents(self, price, expected):
        assert validate_product({"name": "Hammer", "price": price}).price == expected
        assert validate_product_patch({"price": price}).price == expected

    @pytest.mark.parametrize("price", ["0.001", "100000000", "1e30"])
    def test_price_outside_the_column_range_is_rejected(self, price):
        result = validate_product({"name": "Hammer", "price": price})
        assert isinstance(result, ValidationFailed)
        assert result.field == "price"
