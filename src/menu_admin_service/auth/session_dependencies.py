"""Session cookie handling and the authenticated-session guard.

Provides the SessionManager used by the HTTP layer to resolve a request's
session from its signed cookie, and the guard that protected routes depend on.
"""

import logging
from dataclasses import replace

from fastapi import Request, Response

from menu_admin_service.auth.session_store import (
    InMemorySessionStore,
    Session,
    SessionCookieSigner,
)
from menu_admin_service.exceptions import Unauthorized

logger = logging.getLogger(__name__)

SESSION_COOKIE_NAME = "menu_admin_sid"


class SessionManager:
    """Ties the session store to the signed session cookie."""

    def __init__(
        self,
        store: InMemorySessionStore,
        signer: SessionCookieSigner,
        secure_cookies: bool = False,
        cookie_name: str = SESSION_COOKIE_NAME,
    ) -> None:
        """Initialize the manager.

        Args:
            store: Server-side session store
            signer: Signer for the session id cookie
            secure_cookies: Whether to mark the cookie Secure (HTTPS only)
            cookie_name: Name of the session cookie
        """
        self.store = store
        self.signer = signer
        self.secure_cookies = secure_cookies
        self.cookie_name = cookie_name

    def session_id_from(self, request: Request) -> str | None:
        """Return the verified session id carried by the request, if any."""
        cookie_value = request.cookies.get(self.cookie_name)
        if not cookie_value:
            return None

        session_id = self.signer.unsign(cookie_value)
        if session_id is None:
            logger.warning("Rejected session cookie with invalid signature")
        return session_id

    def load(self, request: Request) -> Session | None:
        """Resolve the live session for a request without modifying it."""
        session_id = self.session_id_from(request)
        if session_id is None:
            return None
        return self.store.get(session_id)

    def start_authenticated_session(self, request: Request, response: Response) -> Session:
        """Replace any existing session with a fresh authenticated one.

        The new session is saved to the store before the cookie is attached,
        so a follow-up request carrying the cookie already sees it.

        Args:
            request: The login request
            response: The response that will carry the new cookie

        Returns:
            Session: The saved, authenticated session
        """
        previous_id = self.session_id_from(request)
        if previous_id is not None:
            self.store.destroy(previous_id)
        self.store.purge_expired()

        session = replace(self.store.create(), is_authenticated=True)
        self.store.save(session)
        self.set_cookie(response, session)
        return session

    def end_session(self, request: Request, response: Response) -> None:
        """Destroy the request's session and clear its cookie."""
        session_id = self.session_id_from(request)
        if session_id is not None:
            self.store.destroy(session_id)
        response.delete_cookie(
            self.cookie_name, path="/", secure=self.secure_cookies, httponly=True, samesite="lax"
        )

    def set_cookie(self, response: Response, session: Session) -> None:
        response.set_cookie(
            key=self.cookie_name,
            value=self.signer.sign(session.session_id),
            max_age=self.store.ttl_seconds,
            path="/",
            secure=self.secure_cookies,
            httponly=True,
            samesite="lax",
        )


def require_authenticated_session(
    request: Request, response: Response, manager: SessionManager
) -> Session:
    """Guard for protected routes.

    Renews the session's expiry and refreshes its cookie on success.

    Args:
        request: The incoming request
        response: The outgoing response (receives the refreshed cookie)
        manager: SessionManager for the application

    Returns:
        Session: The renewed authenticated session

    Raises:
        Unauthorized: If there is no live authenticated session
    """
    session = manager.load(request)
    if session is None or not session.is_authenticated:
        raise Unauthorized()

    session = manager.store.touch(session)
    manager.set_cookie(response, session)
    return session
