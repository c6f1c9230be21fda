"""Error taxonomy for the menu admin service.

Every error the HTTP layer knows how to render derives from MenuAdminError and
carries the status code and client-facing message it should be rendered with.
Validation and not-found errors are raised by the handlers and services
directly; persistence failures are raised when a write or its verification
read does not match the intended state.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class FieldError:
    """A single violated field rule.

    Attributes:
        field: Name of the offending field (e.g. 'price', 'id')
        message: Human-readable description of the violation
    """

    field: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return {"field": self.field, "message": self.message}


class MenuAdminError(Exception):
    """Base class for errors rendered into the standard error envelope."""

    status_code: int = 500
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class RequestValidationFailure(MenuAdminError):
    """One or more field rules were violated (400)."""

    status_code = 400
    default_message = "Validation failed"

    def __init__(self, errors: list[FieldError], message: str | None = None) -> None:
        if not errors:
            raise ValueError("RequestValidationFailure requires at least one field error")
        self.errors = list(errors)
        super().__init__(message)


class Unauthorized(MenuAdminError):
    """Missing, expired or invalid session, or a wrong password (401)."""

    status_code = 401
    default_message = "Unauthorized"


class MenuItemNotFound(MenuAdminError):
    """A mutation targeted an id that is not in the collection (404)."""

    status_code = 404
    default_message = "Item not found"

    def __init__(self, item_id: int) -> None:
        self.item_id = item_id
        super().__init__()


class RateLimited(MenuAdminError):
    """A rate window cap was exceeded (429)."""

    status_code = 429
    default_message = "Too many requests, please try again later"

    def __init__(self, retry_after: int, message: str | None = None) -> None:
        self.retry_after = retry_after
        super().__init__(message)


class PersistenceFailure(MenuAdminError):
    """The store could not be written or did not reflect the intended state (500)."""

    status_code = 500
    default_message = "Failed to save menu data"


class InternalError(MenuAdminError):
    """Fallthrough for unexpected exceptions; never carries internal detail (500)."""

    status_code = 500
    default_message = "Internal server error"
