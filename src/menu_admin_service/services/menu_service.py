"""Menu service implementing CRUD over the file-backed collection."""

import asyncio
import logging

from menu_admin_service.exceptions import MenuItemNotFound, PersistenceFailure
from menu_admin_service.models.menu_models import MenuItem, MenuItemPayload
from menu_admin_service.observability.decorators import traced
from menu_admin_service.observability.metrics import record_menu_mutation
from menu_admin_service.repositories.menu_repository import MenuRepository

logger = logging.getLogger(__name__)


class MenuService:
    """Service for reading and mutating the menu collection.

    Every mutation reads the entire collection, changes it in memory, writes it
    back as a whole, then re-reads it to confirm the store reflects the change.
    A failed write or a mismatch on the verification read raises
    PersistenceFailure instead of reporting success.

    Mutations are serialised on an asyncio lock, so interleaved requests within
    one process cannot issue duplicate ids or overwrite each other's changes.
    Separate processes sharing the same file are not coordinated.
    """

    def __init__(self, repository: MenuRepository) -> None:
        """Initialize the MenuService.

        Args:
            repository: Repository owning the persisted collection
        """
        self.repository = repository
        self._write_lock = asyncio.Lock()

    async def list_items(self) -> list[MenuItem]:
        """Return the full collection in stored order."""
        return self.repository.read_all()

    @traced("menu_create_item", service_name="menu-admin-svc")
    async def create_item(self, payload: MenuItemPayload) -> MenuItem:
        """Append a new item with the next available id.

        Args:
            payload: Validated item fields

        Returns:
            MenuItem: The created item

        Raises:
            PersistenceFailure: If the write or its verification fails
        """
        async with self._write_lock:
            items = self.repository.read_all()
            new_id = max((item.id for item in items), default=0) + 1
            new_item = MenuItem.from_payload(new_id, payload)
            items.append(new_item)

            self._write(items, "create")

            stored = self._find(self.repository.read_all(), new_id)
            if stored != new_item:
                self._verification_failed("create", new_id)

        logger.info(f"Created menu item {new_id}")
        record_menu_mutation("create")
        return new_item

    @traced("menu_update_item", service_name="menu-admin-svc")
    async def update_item(self, item_id: int, payload: MenuItemPayload) -> MenuItem:
        """Replace every field of an existing item except its id.

        Args:
            item_id: The item to replace
            payload: Validated item fields

        Returns:
            MenuItem: The updated item

        Raises:
            MenuItemNotFound: If no item has the id
            PersistenceFailure: If the write or its verification fails
        """
        async with self._write_lock:
            items = self.repository.read_all()
            index = next((i for i, item in enumerate(items) if item.id == item_id), None)
            if index is None:
                raise MenuItemNotFound(item_id)

            updated = MenuItem.from_payload(item_id, payload)
            items[index] = updated

            self._write(items, "update")

            stored = self._find(self.repository.read_all(), item_id)
            if stored != updated:
                self._verification_failed("update", item_id)

        logger.info(f"Updated menu item {item_id}")
        record_menu_mutation("update")
        return updated

    @traced("menu_delete_item", service_name="menu-admin-svc")
    async def delete_item(self, item_id: int) -> None:
        """Remove an item.

        Args:
            item_id: The item to remove

        Raises:
            MenuItemNotFound: If no item has the id (nothing is written)
            PersistenceFailure: If the write or its verification fails
        """
        async with self._write_lock:
            items = self.repository.read_all()
            remaining = [item for item in items if item.id != item_id]
            if len(remaining) == len(items):
                raise MenuItemNotFound(item_id)

            self._write(remaining, "delete")

            if self._find(self.repository.read_all(), item_id) is not None:
                self._verification_failed("delete", item_id)

        logger.info(f"Deleted menu item {item_id}")
        record_menu_mutation("delete")

    def _write(self, items: list[MenuItem], operation: str) -> None:
        if not self.repository.write_all(items):
            logger.error(f"Menu {operation} failed: could not write collection")
            record_menu_mutation(operation, success=False)
            raise PersistenceFailure()

    def _verification_failed(self, operation: str, item_id: int) -> None:
        logger.error(f"Menu {operation} of item {item_id} not reflected in stored data")
        record_menu_mutation(operation, success=False)
        raise PersistenceFailure("Saved menu data could not be verified")

    @staticmethod
    def _find(items: list[MenuItem], item_id: int) -> MenuItem | None:
        return next((item for item in items if item.id == item_id), None)
