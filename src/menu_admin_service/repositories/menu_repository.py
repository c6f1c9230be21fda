"""File-backed repository for the menu item collection.

The whole collection lives in a single JSON array file that is rewritten on
every mutation. Following the repository convention used across the service,
expected failures are reported through simple return values (an empty list or
False) rather than exceptions.
"""

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from menu_admin_service.models.menu_models import MenuItem

logger = logging.getLogger(__name__)


class MenuRepository:
    """Repository owning the on-disk representation of the menu.

    Writes go to a temporary file in the same directory which is then atomically
    renamed over the data file, so readers never observe a partial write.
    """

    def __init__(self, data_file: str | os.PathLike[str]) -> None:
        """Initialize repository.

        Args:
            data_file: Path of the JSON collection file
        """
        self.data_file = Path(data_file)

    def read_all(self) -> list[MenuItem]:
        """Load the full collection.

        An absent file is initialised to an empty array. An unreadable file, a
        file that is not valid JSON, or one whose top-level value is not an
        array is treated as an empty collection.

        Returns:
            list: Menu items in stored order (empty list on any failure)
        """
        if not self.data_file.exists():
            logger.info(f"Menu data file {self.data_file} not found, initialising empty menu")
            self.write_all([])
            return []

        try:
            raw = json.loads(self.data_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error(f"Failed to read menu data: {e}")
            return []

        if not isinstance(raw, list):
            logger.error(f"Menu data in {self.data_file} is not an array, treating as empty")
            return []

        return self._parse_items(raw)

    def write_all(self, items: list[MenuItem]) -> bool:
        """Replace the persisted collection.

        Args:
            items: The complete collection to persist

        Returns:
            bool: True if the file was replaced, False otherwise
        """
        payload = json.dumps([item.model_dump() for item in items], indent=2)
        tmp_path: str | None = None

        try:
            self.data_file.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.data_file.parent, prefix=f".{self.data_file.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_path, self.data_file)
            return True

        except OSError as e:
            logger.error(f"Failed to write menu data: {e}")
            if tmp_path is not None:
                self._remove_temp_file(tmp_path)
            return False

    def _parse_items(self, raw: list[Any]) -> list[MenuItem]:
        items: list[MenuItem] = []
        for entry in raw:
            try:
                items.append(MenuItem.model_validate(entry))
            except ValidationError as e:
                logger.warning(f"Skipping invalid menu entry {entry!r}: {e.error_count()} error(s)")
        return items

    @staticmethod
    def _remove_temp_file(tmp_path: str) -> None:
        try:
            os.unlink(tmp_path)
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.error(f"Failed to remove temporary menu file {tmp_path}: {e}")
