"""Item master factory.

Provides get_item_master() / set_item_master() to swap implementations:
- JsonItemMaster reading the product master export (default)
- InMemoryItemMaster for development and testing
"""

from godown.catalog.port import Item, ItemMaster
from godown.utils import settings

_current_item_master: ItemMaster | None = None


def get_item_master() -> ItemMaster:
    """Return the configured item master (singleton).

    Chosen by the GODOWN_ITEM_MASTER environment variable.
    """
    global _current_item_master
    if _current_item_master is None:
        adapter = settings.item_master_adapter()
        if adapter == "json":
            from godown.catalog.json_adapter import JsonItemMaster

            _current_item_master = JsonItemMaster(settings.item_master_path())
        elif adapter == "memory":
            from godown.catalog.memory_adapter import InMemoryItemMaster

            _current_item_master = InMemoryItemMaster()
        else:
            raise ValueError(f"Unknown item master adapter: {adapter}")
    return _current_item_master


def set_item_master(item_master: ItemMaster) -> None:
    """Override the active item master (useful for tests)."""
    global _current_item_master
    _current_item_master = item_master


def reset_item_master() -> None:
    global _current_item_master
    _current_item_master = None


__all__ = ["Item", "ItemMaster", "get_item_master", "set_item_master", "reset_item_master"]
