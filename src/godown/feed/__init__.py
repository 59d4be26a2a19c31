"""Live stock feed factory.

Provides get_stock_feed() / set_stock_feed() to swap implementations:
- JsonLiveStockFeed reading the exported stock snapshot (default)
- InMemoryLiveStockFeed for development and testing
"""

from godown.feed.port import LiveStockFeed
from godown.utils import settings

_current_feed: LiveStockFeed | None = None


def get_stock_feed() -> LiveStockFeed:
    """Return the configured live stock feed (singleton).

    Chosen by the GODOWN_STOCK_FEED environment variable.
    """
    global _current_feed
    if _current_feed is None:
        adapter = settings.stock_feed_adapter()
        if adapter == "json":
            from godown.feed.json_adapter import JsonLiveStockFeed

            _current_feed = JsonLiveStockFeed(settings.stock_feed_path())
        elif adapter == "memory":
            from godown.feed.memory_adapter import InMemoryLiveStockFeed

            _current_feed = InMemoryLiveStockFeed()
        else:
            raise ValueError(f"Unknown stock feed adapter: {adapter}")
    return _current_feed


def set_stock_feed(feed: LiveStockFeed) -> None:
    """Override the active stock feed (useful for tests)."""
    global _current_feed
    _current_feed = feed


def reset_stock_feed() -> None:
    global _current_feed
    _current_feed = None


__all__ = ["LiveStockFeed", "get_stock_feed", "set_stock_feed", "reset_stock_feed"]
