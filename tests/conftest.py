"""Shared pytest fixtures and configuration for all tests."""

import os

# Keep src/main.py from building the real application at import time
os.environ.setdefault("ENVIRONMENT", "test")

from pathlib import Path  # noqa: E402

import pytest  # noqa: E402

from menu_admin_service.config.settings import Settings  # noqa: E402
from tests.fakes import TEST_PASSWORD, TEST_SECRET, FakeClock  # noqa: E402


@pytest.fixture
def clock() -> FakeClock:
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def data_file(tmp_path: Path) -> Path:
    """Fixture providing a path for the menu collection file."""
    return tmp_path / "data.json"


@pytest.fixture
def settings(data_file: Path) -> Settings:
    """Fixture providing settings for tests."""
    return Settings(
        admin_password=TEST_PASSWORD,
        session_secret=TEST_SECRET,
        environment="test",
        data_file=str(data_file),
    )


@pytest.fixture
def burger_payload() -> dict:
    """Fixture providing a valid create/update request body."""
    return {
        "name": "Classic Smush",
        "category": "smush burgers",
        "price": 8.5,
        "description": "",
    }


@pytest.fixture
def sample_menu() -> list[dict]:
    """Fixture providing a stored menu collection."""
    return [
        {
            "id": 1,
            "name": "Classic Smush",
            "category": "smush burgers",
            "price": 8.5,
            "description": "Two smashed patties",
        },
        {
            "id": 2,
            "name": "Seasoned Fries",
            "category": "fries",
            "price": 3.75,
            "description": "",
        },
        {
            "id": 5,
            "name": "Chocolate Shake",
            "category": "drinks",
            "price": 5.0,
            "description": "Thick &amp; creamy",
        },
    ]
