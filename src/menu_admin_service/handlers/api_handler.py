"""FastAPI application exposing the admin and public menu endpoints."""

import json
import logging
from typing import Any

from fastapi import Depends, FastAPI, Request, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from menu_admin_service.auth.password_validator import AdminPasswordValidator
from menu_admin_service.auth.session_dependencies import (
    SessionManager,
    require_authenticated_session,
)
from menu_admin_service.auth.session_store import (
    InMemorySessionStore,
    Session,
    SessionCookieSigner,
)
from menu_admin_service.config.settings import Settings
from menu_admin_service.exceptions import (
    FieldError,
    InternalError,
    MenuAdminError,
    RateLimited,
    RequestValidationFailure,
    Unauthorized,
)
from menu_admin_service.models.menu_models import MenuItem
from menu_admin_service.observability.metrics import (
    record_login_attempt,
    record_rate_limit_rejection,
)
from menu_admin_service.ratelimit.rate_limiter import (
    FixedWindowRateLimiter,
    resolve_client_id,
)
from menu_admin_service.services.menu_service import MenuService
from menu_admin_service.validation.menu_validator import parse_item_id, validate_menu_item

logger = logging.getLogger(__name__)

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str


class AuthStatusResponse(BaseModel):
    """Response model for the session status check."""

    isAuthenticated: bool


class MessageResponse(BaseModel):
    """Response model for operations without a body."""

    success: bool
    message: str


class MenuItemResponse(BaseModel):
    """Response model for create and update."""

    success: bool
    item: MenuItem
    message: str


def error_envelope(error: MenuAdminError) -> dict[str, Any]:
    """Build the standard error body for a client-facing error."""
    body: dict[str, Any] = {"success": False, "message": error.message}
    if isinstance(error, RequestValidationFailure):
        body["errors"] = [e.to_dict() for e in error.errors]
    return body


async def read_json_body(request: Request) -> Any:
    """Decode the request body as JSON.

    Raises:
        RequestValidationFailure: If the body is present but not valid JSON
    """
    raw = await request.body()
    if not raw.strip():
        return {}
    try:
        return json.loads(raw)
    except ValueError:
        raise RequestValidationFailure(
            [FieldError(field="body", message="Request body must be valid JSON")]
        ) from None


def register_exception_handlers(app: FastAPI) -> None:
    """Render every error through the standard envelope."""

    @app.exception_handler(MenuAdminError)
    async def handle_menu_admin_error(request: Request, exc: MenuAdminError) -> JSONResponse:
        headers = None
        if isinstance(exc, RateLimited):
            headers = {"Retry-After": str(exc.retry_after)}
        return JSONResponse(
            status_code=exc.status_code, content=error_envelope(exc), headers=headers
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        messages = {404: "Not found", 405: "Method not allowed"}
        message = messages.get(exc.status_code, str(exc.detail))
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": message},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
        logger.exception(f"Unhandled error on {request.method} {request.url.path}")
        return JSONResponse(status_code=500, content=error_envelope(InternalError()))


def create_app(
    menu_service: MenuService,
    settings: Settings,
    session_store: InMemorySessionStore | None = None,
    login_limiter: FixedWindowRateLimiter | None = None,
    api_limiter: FixedWindowRateLimiter | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        menu_service: Service for reading and mutating the menu
        settings: Runtime configuration
        session_store: Session store (created from settings if omitted)
        login_limiter: Limiter for login attempts (created from settings if omitted)
        api_limiter: Limiter for menu API calls (created from settings if omitted)

    Returns:
        Configured FastAPI application
    """
    app = FastAPI(
        title="Menu Admin Service",
        description="Public menu feed and password-protected menu administration API",
        version="1.0.0",
    )

    # Store collaborators in app state for access in route handlers
    app.state.settings = settings
    app.state.menu_service = menu_service
    app.state.password_validator = AdminPasswordValidator(settings.admin_password)
    app.state.session_manager = SessionManager(
        store=(
            session_store
            if session_store is not None
            else InMemorySessionStore(ttl_seconds=settings.session_ttl_seconds)
        ),
        signer=SessionCookieSigner(settings.session_secret),
        secure_cookies=settings.is_production,
    )
    app.state.login_limiter = login_limiter
    if login_limiter is None:
        app.state.login_limiter = FixedWindowRateLimiter(
            name="login",
            max_requests=settings.login_rate_limit,
            window_seconds=settings.rate_limit_window_seconds,
        )
    app.state.api_limiter = api_limiter
    if api_limiter is None:
        app.state.api_limiter = FixedWindowRateLimiter(
            name="api",
            max_requests=settings.api_rate_limit,
            window_seconds=settings.rate_limit_window_seconds,
        )

    register_exception_handlers(app)

    def client_id(request: Request) -> str:
        return resolve_client_id(request, settings.trusted_proxy_hops)

    def enforce_api_rate_limit(request: Request) -> None:
        """Dependency counting a call against the API rate window."""
        decision = app.state.api_limiter.consume(client_id(request))
        if not decision.allowed:
            record_rate_limit_rejection("api")
            raise RateLimited(retry_after=decision.reset_after)

    def require_session(request: Request, response: Response) -> Session:
        """Dependency rejecting requests without an authenticated session."""
        return require_authenticated_session(request, response, app.state.session_manager)

    protected = [Depends(enforce_api_rate_limit), Depends(require_session)]

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> HealthResponse:
        """Health check endpoint."""
        return HealthResponse(status="healthy")

    # ------------------------------------------------------------------
    # Auth routes
    # ------------------------------------------------------------------

    @app.post("/api/auth/login", response_model=MessageResponse, tags=["Auth"])
    async def login(request: Request, response: Response) -> MessageResponse:
        """Exchange the admin password for an authenticated session.

        Attempts are capped per client; successful logins are not counted.
        """
        client = client_id(request)
        decision = app.state.login_limiter.consume(client)
        if not decision.allowed:
            record_login_attempt("rate_limited")
            record_rate_limit_rejection("login")
            raise RateLimited(
                retry_after=decision.reset_after,
                message="Too many login attempts, please try again later",
            )

        body = await read_json_body(request)
        password = body.get("password") if isinstance(body, dict) else None
        if not isinstance(password, str) or not password:
            record_login_attempt("missing_password")
            raise RequestValidationFailure(
                [FieldError(field="password", message="Password is required")],
                message="Password is required",
            )

        if not app.state.password_validator.validate(password):
            record_login_attempt("invalid_password")
            logger.warning(f"Failed admin login attempt from {client}")
            raise Unauthorized("Incorrect password")

        app.state.login_limiter.release(client)
        app.state.session_manager.start_authenticated_session(request, response)
        record_login_attempt("success")
        logger.info(f"Admin login from {client}")

        return MessageResponse(success=True, message="Login successful")

    @app.post("/api/auth/logout", response_model=MessageResponse, tags=["Auth"])
    async def logout(request: Request, response: Response) -> MessageResponse:
        """Destroy the current session."""
        try:
            app.state.session_manager.end_session(request, response)
        except Exception:
            logger.exception("Session teardown failed")
            raise InternalError("Logout failed") from None

        return MessageResponse(success=True, message="Logged out successfully")

    @app.get("/api/auth/status", response_model=AuthStatusResponse, tags=["Auth"])
    async def auth_status(request: Request) -> AuthStatusResponse:
        """Report whether the request carries an authenticated session.

        Read-only: the session is neither created nor renewed.
        """
        session = app.state.session_manager.load(request)
        return AuthStatusResponse(isAuthenticated=bool(session and session.is_authenticated))

    # ------------------------------------------------------------------
    # Menu CRUD routes (protected)
    # ------------------------------------------------------------------

    @app.get("/api/menu", response_model=list[MenuItem], dependencies=protected, tags=["Menu"])
    async def list_menu_items() -> list[MenuItem]:
        """Return every menu item in stored order."""
        items: list[MenuItem] = await app.state.menu_service.list_items()
        return items

    @app.post("/api/menu", response_model=MenuItemResponse, dependencies=protected, tags=["Menu"])
    async def create_menu_item(request: Request) -> MenuItemResponse:
        """Add a menu item; the id is assigned by the store."""
        payload = validate_menu_item(await read_json_body(request), settings.categories)
        item = await app.state.menu_service.create_item(payload)
        return MenuItemResponse(success=True, item=item, message="Item added successfully")

    @app.put(
        "/api/menu/{item_id}",
        response_model=MenuItemResponse,
        dependencies=protected,
        tags=["Menu"],
    )
    async def update_menu_item(item_id: str, request: Request) -> MenuItemResponse:
        """Replace every field of a menu item except its id."""
        errors: list[FieldError] = []
        parsed_id = 0
        payload = None

        try:
            parsed_id = parse_item_id(item_id)
        except RequestValidationFailure as e:
            errors.extend(e.errors)

        try:
            payload = validate_menu_item(await read_json_body(request), settings.categories)
        except RequestValidationFailure as e:
            errors.extend(e.errors)

        if errors or payload is None:
            raise RequestValidationFailure(errors)

        item = await app.state.menu_service.update_item(parsed_id, payload)
        return MenuItemResponse(success=True, item=item, message="Item updated successfully")

    @app.delete(
        "/api/menu/{item_id}",
        response_model=MessageResponse,
        dependencies=protected,
        tags=["Menu"],
    )
    async def delete_menu_item(item_id: str) -> MessageResponse:
        """Remove a menu item."""
        await app.state.menu_service.delete_item(parse_item_id(item_id))
        return MessageResponse(success=True, message="Item deleted successfully")

    # ------------------------------------------------------------------
    # Public menu route (for the main website)
    # ------------------------------------------------------------------

    @app.get("/data.json", dependencies=[Depends(enforce_api_rate_limit)], tags=["Public"])
    async def public_menu() -> JSONResponse:
        """Serve the menu without authentication; never cached."""
        items: list[MenuItem] = await app.state.menu_service.list_items()
        return JSONResponse(
            content=[item.model_dump() for item in items], headers=NO_CACHE_HEADERS
        )

    return app
