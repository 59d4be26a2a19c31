"""Read-only lookup of item names, MRPs and pack sizes.

The item master is owned by the wider ERP; the ledger only reads it.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class Item:
    """An item master entry."""

    code: str
    name: str
    mrp: str = ""
    multiplier: int = 1

    @property
    def label(self) -> str:
        """Display label ``[CODE] NAME {MRP}``."""
        return f"[{self.code}] {self.name} {{{self.mrp or 'N/A'}}}"


class ItemMaster(ABC):
    """Abstract item master interface."""

    @abstractmethod
    def lookup(self, item_code: str) -> Item | None:
        """Return the item with this code, or None when it is unknown."""
        ...

    def label_for(self, item_code: str) -> str:
        """Display label of an item, falling back to the bare code."""
        item = self.lookup(item_code)
        return item.label if item else item_code

    def multiplier_for(self, item_code: str) -> int:
        """Pieces per box; 1 for unknown items."""
        item = self.lookup(item_code)
        return item.multiplier if item else 1
