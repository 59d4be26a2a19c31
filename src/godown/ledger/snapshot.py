"""Stock snapshot — per-item stock breakdown of a godown for one day.

Closing stock is recomputed from the day's own rows; a later OPENING row is
never consulted, even when one exists.
"""

from dataclasses import dataclass, field
from datetime import date

from protean.exceptions import ObjectNotFoundError

from godown.catalog.port import ItemMaster
from godown.ledger.records import RowKind, format_ledger_date, parse_ledger_date
from godown.ledger.rollover import closing_balance
from godown.ledger.store import StockLedgerStore, validate_warehouse_code


@dataclass(frozen=True)
class SnapshotRow:
    item_code: str
    item: str
    opening: int
    purchase: int
    sales: int
    transfer: int
    closing: int


@dataclass(frozen=True)
class StockSnapshot:
    date: str
    warehouse_code: str
    version: int
    rows: list[SnapshotRow] = field(default_factory=list)


class StockSnapshotReporter:
    def __init__(self, store: StockLedgerStore, item_master: ItemMaster):
        self.store = store
        self.item_master = item_master

    def snapshot(self, warehouse_code: str, on) -> StockSnapshot:
        day = on if isinstance(on, date) else parse_ledger_date(on)
        code = validate_warehouse_code(warehouse_code)
        ledger = self.store.read_all(code)

        if ledger.record(day, RowKind.OPENING) is None:
            raise ObjectNotFoundError(f"No opening stock found for date {format_ledger_date(day)} in godown {code}")

        opening = ledger.quantities(day, RowKind.OPENING)
        purchase = ledger.quantities(day, RowKind.PURCHASE_TOTAL)
        sales = ledger.quantities(day, RowKind.SALES_TOTAL)
        transfer = ledger.quantities(day, RowKind.TRANSFER_TOTAL)
        closing = closing_balance(opening, purchase, sales, transfer)

        rows = [
            SnapshotRow(
                item_code=item_code,
                item=self.item_master.label_for(item_code),
                opening=opening[i],
                purchase=purchase[i],
                sales=sales[i],
                transfer=transfer[i],
                closing=closing[i],
            )
            for i, item_code in enumerate(ledger.header)
            if closing[i] != 0
        ]
        # Ordinal, case-sensitive ordering of item codes
        rows.sort(key=lambda row: row.item_code)

        return StockSnapshot(date=format_ledger_date(day), warehouse_code=code, version=ledger.version, rows=rows)
