"""Ledger store factory.

Provides get_store() / set_store() so the API and tests share one store,
and with it one set of per-godown writer locks.
"""

from godown.ledger.store import StockLedgerStore

_current_store: StockLedgerStore | None = None


def get_store() -> StockLedgerStore:
    """Return the active ledger store, rooted at GODOWN_LEDGER_DIR by default."""
    global _current_store
    if _current_store is None:
        _current_store = StockLedgerStore()
    return _current_store


def set_store(store: StockLedgerStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    global _current_store
    _current_store = None


__all__ = ["StockLedgerStore", "get_store", "set_store", "reset_store"]
