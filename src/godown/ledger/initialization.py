"""Start ledgers from live stock and add new items to them.

A godown's ledger starts with one OPENING row holding the pieces on hand of
every item the godown stocks. Items that show up in the godown later are
added as new columns at the end of the header.
"""

from dataclasses import dataclass
from datetime import date

import structlog

from godown.ledger.records import LedgerFile, LedgerRecord, RowKind, parse_ledger_date
from godown.ledger.store import StockLedgerStore, validate_warehouse_code
from godown.stock.index import StockQueryIndex

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class InitializationResult:
    created: tuple[str, ...]
    skipped: tuple[str, ...]


class LedgerInitializer:
    def __init__(self, store: StockLedgerStore):
        self.store = store

    def initialize(self, index: StockQueryIndex, on=None, warehouse_codes=None) -> InitializationResult:
        """Create a ledger for every godown in ``index`` that has none yet."""
        if on is None:
            day = date.today()
        elif isinstance(on, date):
            day = on
        else:
            day = parse_ledger_date(on)

        codes = warehouse_codes if warehouse_codes is not None else index.warehouse_codes()
        created, skipped = [], []
        for code in codes:
            code = validate_warehouse_code(code)
            if self.store.exists(code):
                logger.info("Stock ledger already exists, skipping", warehouse_code=code)
                skipped.append(code)
                continue

            stock = {item: qty for item, qty in index.warehouse_stock(code).items() if qty > 0}
            header = sorted(stock)
            ledger = LedgerFile(
                warehouse_code=code,
                header=header,
                records=[LedgerRecord(date=day, kind=RowKind.OPENING, quantities=tuple(stock[i] for i in header))],
            )
            self.store.create(ledger)
            created.append(code)

        return InitializationResult(created=tuple(created), skipped=tuple(skipped))

    def add_items(self, warehouse_code: str, item_codes, opening: dict[str, int] | None = None) -> list[str]:
        """Register new item columns on an existing ledger. Returns the new header."""
        code = validate_warehouse_code(warehouse_code)
        with self.store.lock(code):
            ledger = self.store.read_all(code)
            collapsed = ledger.collapse_duplicates()
            added = ledger.add_items(item_codes, opening)
            if added or collapsed:
                self.store.append(ledger)
                logger.info("Added items to stock ledger", warehouse_code=code, items=added)
        return list(ledger.header)
