"""Environment-sourced settings for the menu admin service."""

import os
from dataclasses import dataclass, field

from menu_admin_service.auth.session_store import DEFAULT_SESSION_TTL_SECONDS
from menu_admin_service.models.menu_models import DEFAULT_CATEGORIES


@dataclass(frozen=True)
class Settings:
    """Runtime configuration.

    Attributes:
        admin_password: Secret accepted by the login endpoint
        session_secret: Key used to sign session cookies
        environment: Deployment environment ("production" enables Secure cookies)
        data_file: Path of the JSON menu collection
        categories: Allowed menu categories
        session_ttl_seconds: Session inactivity window
        login_rate_limit: Login attempts allowed per client per window
        api_rate_limit: API calls allowed per client per window
        rate_limit_window_seconds: Length of a rate window
        trusted_proxy_hops: Reverse proxies trusted to set X-Forwarded-For
    """

    admin_password: str
    session_secret: str
    environment: str = "development"
    data_file: str = "data.json"
    categories: tuple[str, ...] = field(default=DEFAULT_CATEGORIES)
    session_ttl_seconds: int = DEFAULT_SESSION_TTL_SECONDS
    login_rate_limit: int = 5
    api_rate_limit: int = 100
    rate_limit_window_seconds: int = 15 * 60
    trusted_proxy_hops: int = 0

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @classmethod
    def from_env(cls) -> "Settings":
        """Load settings from environment variables.

        Returns:
            Settings: The loaded configuration

        Raises:
            ValueError: If ADMIN_PASSWORD or SESSION_SECRET is not set, or a
                numeric variable cannot be parsed
        """
        admin_password = os.getenv("ADMIN_PASSWORD")
        session_secret = os.getenv("SESSION_SECRET")

        if not admin_password or not session_secret:
            raise ValueError("ADMIN_PASSWORD and SESSION_SECRET must be set in environment")

        categories_str = os.getenv("MENU_CATEGORIES", "")
        categories = tuple(c.strip() for c in categories_str.split(",") if c.strip())

        return cls(
            admin_password=admin_password,
            session_secret=session_secret,
            environment=os.getenv("ENVIRONMENT", "development"),
            data_file=os.getenv("MENU_DATA_FILE", "data.json"),
            categories=categories or DEFAULT_CATEGORIES,
            session_ttl_seconds=int(
                os.getenv("SESSION_TTL_SECONDS", str(DEFAULT_SESSION_TTL_SECONDS))
            ),
            login_rate_limit=int(os.getenv("LOGIN_RATE_LIMIT", "5")),
            api_rate_limit=int(os.getenv("API_RATE_LIMIT", "100")),
            rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900")),
            trusted_proxy_hops=int(os.getenv("TRUSTED_PROXY_HOPS", "0")),
        )
