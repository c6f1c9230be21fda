"""Unit tests for admin password validation."""

import pytest

from menu_admin_service.auth.password_validator import AdminPasswordValidator


@pytest.mark.unit
class TestAdminPasswordValidator:
    """Test suite for AdminPasswordValidator."""

    def test_initialization_with_empty_password_raises_error(self) -> None:
        """Test that an empty configured password is refused."""
        with pytest.raises(ValueError, match="An admin password must be provided"):
            AdminPasswordValidator(password="")

    def test_validate_returns_true_for_correct_password(self) -> None:
        """Test that the configured password is accepted."""
        validator = AdminPasswordValidator(password="smushadmin2025")
        assert validator.validate("smushadmin2025") is True

    def test_validate_returns_false_for_wrong_password(self) -> None:
        """Test that a different password is rejected."""
        validator = AdminPasswordValidator(password="smushadmin2025")
        assert validator.validate("letmein") is False

    def test_validate_returns_false_for_empty_password(self) -> None:
        """Test that an empty candidate is rejected."""
        validator = AdminPasswordValidator(password="smushadmin2025")
        assert validator.validate("") is False

    def test_validate_is_case_sensitive(self) -> None:
        """Test that comparison is exact."""
        validator = AdminPasswordValidator(password="SmushAdmin")
        assert validator.validate("smushadmin") is False
        assert validator.validate("SMUSHADMIN") is False

    def test_validate_does_not_strip_whitespace(self) -> None:
        """Test that surrounding whitespace is significant."""
        validator = AdminPasswordValidator(password="secret")
        assert validator.validate(" secret") is False
        assert validator.validate("secret ") is False

    def test_validate_handles_non_ascii(self) -> None:
        """Test that non-ASCII passwords compare correctly."""
        validator = AdminPasswordValidator(password="crème-brûlée")
        assert validator.validate("crème-brûlée") is True
        assert validator.validate("creme-brulee") is False

    def test_validate_rejects_lone_surrogate(self) -> None:
        """Test that a candidate that is not valid UTF-8 is rejected, not raised."""
        validator = AdminPasswordValidator(password="secret")
        assert validator.validate("\ud800") is False
