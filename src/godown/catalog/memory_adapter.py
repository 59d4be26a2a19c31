"""In-memory item master for development and testing."""

from godown.catalog.port import Item, ItemMaster


class InMemoryItemMaster(ItemMaster):
    def __init__(self, items=()):
        self.items: dict[str, Item] = {}
        for item in items:
            self.add(item)

    def add(self, item: Item) -> None:
        self.items[item.code] = item

    def lookup(self, item_code: str) -> Item | None:
        return self.items.get(item_code)
