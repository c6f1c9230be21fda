"""Server-side session storage and session cookie signing.

Sessions are held in an injected store keyed by an opaque session id. The id is
delivered to the browser in a cookie signed with the configured session secret;
a cookie whose signature does not verify is treated as if it were absent.
"""

import base64
import hashlib
import hmac
import logging
import secrets
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace

logger = logging.getLogger(__name__)

DEFAULT_SESSION_TTL_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class Session:
    """Authentication state for one browser session.

    Attributes:
        session_id: Opaque identifier delivered in the session cookie
        is_authenticated: Whether the admin password was accepted
        expires_at: Epoch seconds after which the session is no longer valid
    """

    session_id: str
    is_authenticated: bool
    expires_at: float


class InMemorySessionStore:
    """Process-local session store with a rolling inactivity timeout."""

    def __init__(
        self,
        ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """Initialize the store.

        Args:
            ttl_seconds: Inactivity window after which a session expires
            clock: Time source returning epoch seconds

        Raises:
            ValueError: If ttl_seconds is not positive
        """
        if ttl_seconds <= 0:
            raise ValueError("ttl_seconds must be positive")

        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._sessions: dict[str, Session] = {}
        self._lock = threading.Lock()

    def create(self) -> Session:
        """Create a new, unsaved anonymous session with a fresh id."""
        return Session(
            session_id=secrets.token_urlsafe(32),
            is_authenticated=False,
            expires_at=self._clock() + self.ttl_seconds,
        )

    def get(self, session_id: str) -> Session | None:
        """Retrieve a live session.

        Args:
            session_id: The session identifier

        Returns:
            Session if present and unexpired, None otherwise
        """
        with self._lock:
            session = self._sessions.get(session_id)
            if session is None:
                return None

            if session.expires_at <= self._clock():
                del self._sessions[session_id]
                logger.info("Session expired and was evicted")
                return None

            return session

    def save(self, session: Session) -> None:
        """Persist a session, replacing any previous state for its id."""
        with self._lock:
            self._sessions[session.session_id] = session

    def touch(self, session: Session) -> Session:
        """Renew a session's expiry from the current time.

        Args:
            session: The session to renew

        Returns:
            Session: The renewed session, already saved
        """
        renewed = replace(session, expires_at=self._clock() + self.ttl_seconds)
        self.save(renewed)
        return renewed

    def destroy(self, session_id: str) -> bool:
        """Remove a session.

        Args:
            session_id: The session identifier

        Returns:
            bool: True if a session was removed, False if none existed
        """
        with self._lock:
            return self._sessions.pop(session_id, None) is not None

    def purge_expired(self) -> int:
        """Drop every expired session.

        Returns:
            int: Number of sessions removed
        """
        now = self._clock()
        with self._lock:
            expired = [sid for sid, s in self._sessions.items() if s.expires_at <= now]
            for sid in expired:
                del self._sessions[sid]
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._sessions)


class SessionCookieSigner:
    """Signs session ids with HMAC-SHA256 for use as cookie values."""

    def __init__(self, secret: str) -> None:
        """Initialize signer.

        Args:
            secret: The session secret

        Raises:
            ValueError: If secret is empty
        """
        if not secret:
            raise ValueError("A session secret must be provided")

        self._key = secret.encode("utf-8")

    def _signature(self, session_id: str) -> str:
        digest = hmac.new(self._key, session_id.encode("utf-8"), hashlib.sha256).digest()
        return base64.urlsafe_b64encode(digest).rstrip(b"=").decode("ascii")

    def sign(self, session_id: str) -> str:
        """Return the cookie value for a session id."""
        return f"{session_id}.{self._signature(session_id)}"

    def unsign(self, cookie_value: str) -> str | None:
        """Recover the session id from a cookie value.

        Args:
            cookie_value: Raw cookie value

        Returns:
            The session id if the signature verifies, None otherwise
        """
        session_id, sep, signature = cookie_value.rpartition(".")
        if not sep or not session_id:
            return None

        expected = self._signature(session_id)
        if not hmac.compare_digest(signature.encode("utf-8"), expected.encode("utf-8")):
            return None

        return session_id
