"""Reads live stock from a ``{item: {godown: pieces}}`` snapshot file."""

import json
from pathlib import Path

import structlog

from godown.feed.port import LiveStockFeed

logger = structlog.get_logger(__name__)


class JsonLiveStockFeed(LiveStockFeed):
    def __init__(self, path: Path | str):
        self.path = Path(path)

    def fetch(self) -> dict[str, dict[str, int]]:
        raw = json.loads(self.path.read_text(encoding="utf-8"))
        stock = {
            str(item_code): {str(gdn): int(float(qty or 0)) for gdn, qty in by_godown.items()}
            for item_code, by_godown in raw.items()
        }
        logger.debug("Live stock fetched", path=str(self.path), items=len(stock))
        return stock
