"""In-memory live stock feed for development and testing."""

from godown.feed.port import LiveStockFeed


class InMemoryLiveStockFeed(LiveStockFeed):
    def __init__(self, stock: dict[str, dict[str, int]] | None = None):
        self.stock = {code: dict(by_godown) for code, by_godown in (stock or {}).items()}

    def set(self, item_code: str, warehouse_code: str, quantity: int) -> None:
        self.stock.setdefault(item_code, {})[warehouse_code] = quantity

    def fetch(self) -> dict[str, dict[str, int]]:
        return {code: dict(by_godown) for code, by_godown in self.stock.items()}
