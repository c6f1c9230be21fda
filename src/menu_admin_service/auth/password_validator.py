"""Admin password validation for the login endpoint.

There is a single configured admin secret. Candidates are compared in constant
time so response timing does not reveal how much of a guess was correct.
"""

import secrets


class AdminPasswordValidator:
    """Validates submitted passwords against the configured admin password."""

    def __init__(self, password: str) -> None:
        """Initialize validator with the admin password.

        Args:
            password: The configured admin password

        Raises:
            ValueError: If password is empty
        """
        if not password:
            raise ValueError("An admin password must be provided")

        self._password = password.encode("utf-8", "surrogatepass")

    def validate(self, candidate: str) -> bool:
        """Validate a submitted password.

        Args:
            candidate: The password submitted by the client

        Returns:
            bool: True if it matches exactly, False otherwise
        """
        # JSON bodies may carry lone surrogates
        return secrets.compare_digest(candidate.encode("utf-8", "surrogatepass"), self._password)
