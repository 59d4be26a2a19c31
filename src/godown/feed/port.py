"""Current on-hand pieces per item and godown, as reported by the ERP.

The feed is computed elsewhere in the ERP (from purchases, bills and
transfers) and is consumed here read-only.
"""

from abc import ABC, abstractmethod


class LiveStockFeed(ABC):
    """Abstract live stock feed."""

    @abstractmethod
    def fetch(self) -> dict[str, dict[str, int]]:
        """Return ``{item_code: {warehouse_code: pieces}}`` as of now."""
        ...
