"""StockQueryIndex — read-only snapshot of on-hand pieces per item and godown.

Built once per request or refresh from a live stock feed. There is no way to
change it; build a new index to see newer stock.
"""

from collections.abc import Mapping
from types import MappingProxyType

from godown.feed.port import LiveStockFeed


class StockQueryIndex:
    def __init__(self, stock: Mapping[str, Mapping[str, int]]):
        self._stock = MappingProxyType(
            {
                str(code): MappingProxyType({str(gdn): int(qty) for gdn, qty in by_godown.items()})
                for code, by_godown in stock.items()
            }
        )

    @classmethod
    def from_feed(cls, feed: LiveStockFeed) -> "StockQueryIndex":
        return cls(feed.fetch())

    def quantity(self, item_code: str, warehouse_code: str) -> int:
        """On-hand pieces; a pair missing from the feed holds nothing."""
        return self._stock.get(item_code, {}).get(warehouse_code, 0)

    def warehouse_codes(self) -> list[str]:
        return sorted({gdn for by_godown in self._stock.values() for gdn in by_godown})

    def warehouse_stock(self, warehouse_code: str) -> dict[str, int]:
        return {
            code: by_godown[warehouse_code]
            for code, by_godown in sorted(self._stock.items())
            if by_godown.get(warehouse_code, 0) != 0
        }

    def items_in_stock(self, warehouse_code: str) -> list[str]:
        """Item codes with positive stock in a godown, i.e. what can be transferred out."""
        return [code for code, qty in self.warehouse_stock(warehouse_code).items() if qty > 0]

    def as_dict(self) -> dict[str, dict[str, int]]:
        return {code: dict(by_godown) for code, by_godown in self._stock.items()}

    def __len__(self) -> int:
        return len(self._stock)
