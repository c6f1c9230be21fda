"""Request validation for menu item payloads and path identifiers.

Validation accumulates every violated rule before failing, so a client sees all
field errors from a single request. Messages are fixed per field rather than
taken from pydantic, keeping the client-facing wording stable.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from pydantic import ValidationError

from menu_admin_service.exceptions import FieldError, RequestValidationFailure
from menu_admin_service.models.menu_models import (
    DEFAULT_CATEGORIES,
    DESCRIPTION_MAX_LENGTH,
    NAME_MAX_LENGTH,
    PRICE_MAX,
    PRICE_MIN,
    MenuItemPayload,
)

logger = logging.getLogger(__name__)

# ASCII digits only; anything longer than 15 significant digits cannot be a stored id
_ITEM_ID_PATTERN = re.compile(r"\+?0*([0-9]{1,15})")


def _field_messages(categories: tuple[str, ...]) -> dict[str, str]:
    return {
        "name": f"Name is required and must be between 1 and {NAME_MAX_LENGTH} characters",
        "category": f"Category must be one of: {', '.join(categories)}",
        "price": f"Price must be a number between {PRICE_MIN:g} and {PRICE_MAX:g}",
        "description": f"Description must be a string of at most {DESCRIPTION_MAX_LENGTH} characters",
    }


def validate_menu_item(
    raw: Any, categories: Iterable[str] = DEFAULT_CATEGORIES
) -> MenuItemPayload:
    """Validate and normalise a create/update payload.

    Args:
        raw: Decoded JSON request body
        categories: Allowed category names

    Returns:
        MenuItemPayload: Trimmed, range-checked, HTML-escaped fields

    Raises:
        RequestValidationFailure: With one FieldError per violated field
    """
    allowed = tuple(categories)

    if not isinstance(raw, dict):
        raise RequestValidationFailure(
            [FieldError(field="body", message="Request body must be a JSON object")]
        )

    try:
        return MenuItemPayload.model_validate(raw, context={"categories": allowed})
    except ValidationError as e:
        messages = _field_messages(allowed)
        errors: list[FieldError] = []
        seen: set[str] = set()

        # One entry per field, in model field order
        for error in e.errors():
            field = str(error["loc"][0]) if error["loc"] else "body"
            if field in seen:
                continue
            seen.add(field)
            errors.append(FieldError(field=field, message=messages.get(field, error["msg"])))

        logger.info(f"Menu item payload rejected: {', '.join(err.field for err in errors)}")
        raise RequestValidationFailure(errors) from None


def parse_item_id(raw: str) -> int:
    """Parse a path identifier as a positive integer.

    Args:
        raw: The raw path segment

    Returns:
        int: The parsed id

    Raises:
        RequestValidationFailure: If the segment is not an integer >= 1
    """
    match = _ITEM_ID_PATTERN.fullmatch(raw.strip())
    if match and int(match.group(1)) >= 1:
        return int(match.group(1))

    raise RequestValidationFailure(
        [FieldError(field="id", message="Item id must be a positive integer")]
    )
