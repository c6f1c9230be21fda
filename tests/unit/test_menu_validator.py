"""Unit tests for menu payload validation."""

import pytest

from menu_admin_service.exceptions import RequestValidationFailure
from menu_admin_service.validation.menu_validator import parse_item_id, validate_menu_item


def error_fields(exc_info: pytest.ExceptionInfo[RequestValidationFailure]) -> list[str]:
    return [e.field for e in exc_info.value.errors]


@pytest.mark.unit
class TestValidateMenuItem:
    """Test suite for validate_menu_item."""

    def test_valid_payload_is_normalised(self) -> None:
        """Test that strings are trimmed and price is coerced to float."""
        payload = validate_menu_item(
            {
                "name": "  Classic Smush ",
                "category": " smush burgers ",
                "price": 8,
                "description": "  Two patties  ",
            }
        )

        assert payload.name == "Classic Smush"
        assert payload.category == "smush burgers"
        assert payload.price == 8.0
        assert isinstance(payload.price, float)
        assert payload.description == "Two patties"

    def test_html_is_escaped(self) -> None:
        """Test that name and description are HTML-escaped."""
        payload = validate_menu_item(
            {
                "name": "<b>Fish & Chips</b>",
                "category": "starters",
                "price": 4,
                "description": '"quoted"',
            }
        )

        assert payload.name == "&lt;b&gt;Fish &amp; Chips&lt;/b&gt;"
        assert payload.description == "&quot;quoted&quot;"

    def test_description_defaults_to_empty(self) -> None:
        """Test that a missing or null description becomes an empty string."""
        missing = validate_menu_item({"name": "Dip", "category": "dips", "price": 1})
        null = validate_menu_item(
            {"name": "Dip", "category": "dips", "price": 1, "description": None}
        )

        assert missing.description == ""
        assert null.description == ""

    def test_numeric_string_price_is_accepted(self) -> None:
        """Test that a price given as a numeric string is parsed."""
        payload = validate_menu_item({"name": "Cola", "category": "drinks", "price": " 2.50 "})
        assert payload.price == 2.5

    @pytest.mark.parametrize("price", [0, 200, "0", "200.0"])
    def test_price_bounds_are_inclusive(self, price: object) -> None:
        """Test that prices at the range limits are accepted."""
        payload = validate_menu_item({"name": "Cola", "category": "drinks", "price": price})
        assert 0 <= payload.price <= 200

    @pytest.mark.parametrize(
        ("field", "value"),
        [
            ("name", ""),
            ("name", "   "),
            ("name", "x" * 101),
            ("name", 42),
            ("category", "pizza"),
            ("category", ""),
            ("price", -0.01),
            ("price", 200.01),
            ("price", "cheap"),
            ("price", True),
            ("price", "nan"),
            ("price", "1e999"),
            ("price", "1_0"),
            ("price", "\u0661\u0660"),
            ("price", 10**400),
            ("description", "x" * 501),
            ("description", 7),
        ],
    )
    def test_each_rule_rejects_independently(self, field: str, value: object) -> None:
        """Test that each invalid field is reported on its own."""
        raw = {"name": "Cola", "category": "drinks", "price": 2, "description": ""}
        raw[field] = value

        with pytest.raises(RequestValidationFailure) as exc_info:
            validate_menu_item(raw)

        assert error_fields(exc_info) == [field]

    def test_name_length_is_checked_before_escaping(self) -> None:
        """Test that a 100-character name with escapable characters is accepted."""
        payload = validate_menu_item({"name": "&" * 100, "category": "drinks", "price": 1})
        assert payload.name == "&amp;" * 100

    def test_all_errors_reported_at_once(self) -> None:
        """Test that errors accumulate across fields in field order."""
        with pytest.raises(RequestValidationFailure) as exc_info:
            validate_menu_item(
                {"name": "", "category": "pizza", "price": 999, "description": "x" * 600}
            )

        assert error_fields(exc_info) == ["name", "category", "price", "description"]
        assert all(e.message for e in exc_info.value.errors)

    def test_missing_required_fields(self) -> None:
        """Test that an empty object reports every required field."""
        with pytest.raises(RequestValidationFailure) as exc_info:
            validate_menu_item({})

        assert error_fields(exc_info) == ["name", "category", "price"]

    def test_non_object_body_rejected(self) -> None:
        """Test that a JSON array body is rejected as a whole."""
        with pytest.raises(RequestValidationFailure) as exc_info:
            validate_menu_item([1, 2, 3])

        assert error_fields(exc_info) == ["body"]

    def test_custom_category_set(self) -> None:
        """Test that the configured category set replaces the default."""
        payload = validate_menu_item(
            {"name": "Taco", "category": "tacos", "price": 3}, categories=("tacos",)
        )
        assert payload.category == "tacos"

        with pytest.raises(RequestValidationFailure) as exc_info:
            validate_menu_item(
                {"name": "Cola", "category": "drinks", "price": 3}, categories=("tacos",)
            )
        assert error_fields(exc_info) == ["category"]
        assert "tacos" in exc_info.value.errors[0].message

    def test_extra_fields_are_ignored(self) -> None:
        """Test that a client-supplied id does not leak into the payload."""
        payload = validate_menu_item({"id": 99, "name": "Cola", "category": "drinks", "price": 2})
        assert "id" not in payload.model_dump()


@pytest.mark.unit
class TestParseItemId:
    """Test suite for parse_item_id."""

    @pytest.mark.parametrize(
        ("raw", "expected"),
        [("1", 1), ("42", 42), ("007", 7), ("+3", 3), ("0" * 20 + "5", 5)],
    )
    def test_valid_ids(self, raw: str, expected: int) -> None:
        """Test that positive integers are parsed."""
        assert parse_item_id(raw) == expected

    @pytest.mark.parametrize(
        "raw", ["0", "000", "-1", "abc", "1.5", "", "1e3", "\u0663", "9" * 16, "9" * 5000]
    )
    def test_invalid_ids(self, raw: str) -> None:
        """Test that anything but an integer >= 1 is rejected."""
        with pytest.raises(RequestValidationFailure) as exc_info:
            parse_item_id(raw)

        assert error_fields(exc_info) == ["id"]
