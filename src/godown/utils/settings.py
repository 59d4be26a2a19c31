"""Environment-driven settings for ledger storage and external collaborators."""

import os
from pathlib import Path

LEDGER_DIR_ENV = "GODOWN_LEDGER_DIR"
ITEM_MASTER_ENV = "GODOWN_ITEM_MASTER"
ITEM_MASTER_PATH_ENV = "GODOWN_ITEM_MASTER_PATH"
STOCK_FEED_ENV = "GODOWN_STOCK_FEED"
STOCK_FEED_PATH_ENV = "GODOWN_STOCK_FEED_PATH"


def ledger_dir() -> Path:
    """Directory holding the ``daily_stock_<godown>.csv`` ledgers."""
    return Path(os.getenv(LEDGER_DIR_ENV, "db")).expanduser()


def item_master_adapter() -> str:
    return os.getenv(ITEM_MASTER_ENV, "json").lower()


def item_master_path() -> Path:
    return Path(os.getenv(ITEM_MASTER_PATH_ENV, str(ledger_dir() / "pmpl.json"))).expanduser()


def stock_feed_adapter() -> str:
    return os.getenv(STOCK_FEED_ENV, "json").lower()


def stock_feed_path() -> Path:
    return Path(os.getenv(STOCK_FEED_PATH_ENV, str(ledger_dir() / "stock.json"))).expanduser()
