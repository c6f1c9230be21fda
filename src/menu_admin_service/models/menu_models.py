"""Menu data models.

MenuItem is the persisted record. MenuItemPayload is the normalising input
model for create/update requests: it trims, range-checks and HTML-escapes the
client-supplied fields. The allowed category set is configuration and is passed
in through the pydantic validation context under the "categories" key.
"""

import html
import math
import re
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

DEFAULT_CATEGORIES: tuple[str, ...] = (
    "starters",
    "smush burgers",
    "burgers",
    "sandwiches",
    "fries",
    "dessert",
    "drinks",
    "add-ons",
    "dips",
)

# Plain ASCII decimal, optionally signed, with an optional exponent
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:[0-9]+(?:\.[0-9]*)?|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

NAME_MAX_LENGTH = 100
DESCRIPTION_MAX_LENGTH = 500
PRICE_MIN = 0.0
PRICE_MAX = 200.0


def _strip_string(value: Any) -> Any:
    # Non-strings fall through so pydantic reports them as type errors
    if isinstance(value, str):
        return value.strip()
    return value


class MenuItemPayload(BaseModel):
    """Client-supplied menu item fields, normalised for storage."""

    model_config = ConfigDict(str_strict=True)

    name: str = Field(..., min_length=1, max_length=NAME_MAX_LENGTH)
    category: str = Field(...)
    price: float = Field(..., ge=PRICE_MIN, le=PRICE_MAX)
    description: str = Field(default="", max_length=DESCRIPTION_MAX_LENGTH)

    @field_validator("name", "category", mode="before")
    @classmethod
    def strip_required_strings(cls, v: Any) -> Any:
        """Trim surrounding whitespace before length checks."""
        return _strip_string(v)

    @field_validator("description", mode="before")
    @classmethod
    def strip_description(cls, v: Any) -> Any:
        """Trim the description, treating null as an empty description."""
        if v is None:
            return ""
        return _strip_string(v)

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v: Any) -> float:
        """Accept numbers and numeric strings, reject booleans and non-finite values."""
        if isinstance(v, bool):
            raise ValueError("price must be a number")
        if isinstance(v, str):
            v = v.strip()
            if not _DECIMAL_PATTERN.fullmatch(v):
                raise ValueError("price must be a number")
        elif not isinstance(v, int | float):
            raise ValueError("price must be a number")
        try:
            v = float(v)
        except (OverflowError, ValueError):
            raise ValueError("price must be a number") from None
        if not math.isfinite(v):
            raise ValueError("price must be a finite number")
        return float(v)

    @field_validator("category")
    @classmethod
    def validate_category(cls, v: str, info: ValidationInfo) -> str:
        """Validate that the category is one of the configured categories."""
        categories = DEFAULT_CATEGORIES
        if info.context and info.context.get("categories"):
            categories = tuple(info.context["categories"])
        if v not in categories:
            raise ValueError(f"category must be one of: {', '.join(categories)}")
        return v

    @field_validator("name", "description")
    @classmethod
    def escape_html(cls, v: str) -> str:
        """HTML-escape free text after its length has been checked."""
        return html.escape(v, quote=True)


class MenuItem(BaseModel):
    """Menu item as persisted in the collection file."""

    id: int = Field(..., description="Unique identifier for the menu item", ge=1)
    name: str = Field(..., description="Item name")
    category: str = Field(..., description="Menu category the item is listed under")
    price: float = Field(..., description="Item price", ge=PRICE_MIN, le=PRICE_MAX)
    description: str = Field(default="", description="Item description")

    @classmethod
    def from_payload(cls, item_id: int, payload: MenuItemPayload) -> "MenuItem":
        """Build a stored item from a validated payload.

        Args:
            item_id: The id to assign to the item
            payload: Normalised client fields

        Returns:
            MenuItem: The record to persist
        """
        return cls(id=item_id, **payload.model_dump())
