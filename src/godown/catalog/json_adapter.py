"""Reads the item master from the ERP's JSON product master export.

The export is a JSON list of product records; the fields used here are
``CODE``, ``PRODUCT``, ``MRP1`` and ``MULT_F``.
"""

import json
from pathlib import Path

import structlog

from godown.catalog.port import Item, ItemMaster

logger = structlog.get_logger(__name__)


def _multiplier(value) -> int:
    try:
        multiplier = int(float(value))
    except (TypeError, ValueError):
        return 1
    return multiplier if multiplier > 0 else 1


def _mrp(value) -> str:
    # A zero MRP means the export left it unset
    if not value:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def item_from_record(record: dict) -> Item:
    return Item(
        code=str(record["CODE"]).strip(),
        # Commas would break the ledger's delimited rows
        name=str(record.get("PRODUCT") or "").replace(",", "").strip(),
        mrp=_mrp(record.get("MRP1")),
        multiplier=_multiplier(record.get("MULT_F")),
    )


class JsonItemMaster(ItemMaster):
    """Item master backed by a JSON export, loaded lazily and cached."""

    def __init__(self, path: Path | str):
        self.path = Path(path)
        self._items: dict[str, Item] | None = None

    def _load(self) -> dict[str, Item]:
        if self._items is None:
            records = json.loads(self.path.read_text(encoding="utf-8"))
            items = {}
            for record in records:
                if not record.get("CODE"):
                    continue
                item = item_from_record(record)
                items[item.code] = item
            logger.debug("Item master loaded", path=str(self.path), items=len(items))
            self._items = items
        return self._items

    def lookup(self, item_code: str) -> Item | None:
        return self._load().get(item_code)

    def reload(self) -> None:
        self._items = None
