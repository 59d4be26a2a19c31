"""Day rollover — compute and record the next day's opening stock of a godown.

The rollover for ``next_date`` closes out ``previous_date = next_date - 1``:

    closing[i] = opening[i] + purchase[i] - sales[i] - transfer[i]

and records it as the OPENING row of ``next_date``. Running it again for the
same dates replaces the rows it wrote earlier instead of adding new ones.

Purchase and sales totals are always zero: no purchase or sales feed is wired
into the ledger yet. Results say so through ``purchase_sales_integrated``.
"""

from dataclasses import dataclass
from datetime import date, timedelta

import structlog
from protean.exceptions import ObjectNotFoundError
from protean.fields import Integer, String

from godown.domain import godown
from godown.ledger.records import (
    SUMMARY_KINDS,
    LedgerFile,
    LedgerRecord,
    RowKind,
    format_ledger_date,
    parse_ledger_date,
)
from godown.ledger.store import StockLedgerStore, validate_warehouse_code

logger = structlog.get_logger(__name__)


@godown.value_object
class TransferOutItem:
    """Pieces of one item sent from a godown to retail during a day."""

    item_code: String(required=True, max_length=50)
    quantity: Integer(required=True, min_value=0)


@dataclass(frozen=True)
class RolloverResult:
    """Outcome of a successful rollover."""

    message: str
    warehouse_code: str
    previous_date: str
    next_date: str
    closing: dict[str, int]
    dropped_item_codes: tuple[str, ...] = ()
    version: int = 0
    purchase_sales_integrated: bool = False


def closing_balance(opening, purchase, sales, transfer) -> list[int]:
    """Column-wise closing stock. Negative balances are kept as they are."""
    return [o + p - s - t for o, p, s, t in zip(opening, purchase, sales, transfer, strict=True)]


def _as_transfer_item(item) -> TransferOutItem:
    if isinstance(item, TransferOutItem):
        return item
    if isinstance(item, dict):
        return TransferOutItem(**item)
    return TransferOutItem(item_code=item.item_code, quantity=item.quantity)


class DayRolloverCalculator:
    """Rolls a godown's ledger forward by one day."""

    def __init__(self, store: StockLedgerStore):
        self.store = store

    def compute(self, next_date, warehouse_code: str, transfer_out_items=()) -> RolloverResult:
        next_day = next_date if isinstance(next_date, date) else parse_ledger_date(next_date, "next_date")
        previous_day = next_day - timedelta(days=1)
        code = validate_warehouse_code(warehouse_code)
        items = [_as_transfer_item(item) for item in transfer_out_items]

        with self.store.lock(code):
            ledger = self.store.read_all(code)
            ledger.collapse_duplicates()

            replaced = ledger.remove(previous_day, SUMMARY_KINDS)
            replaced += ledger.remove(next_day, (RowKind.OPENING,))
            if replaced:
                logger.info(
                    "Replacing previously computed rollover rows",
                    warehouse_code=code,
                    previous_date=format_ledger_date(previous_day),
                    next_date=format_ledger_date(next_day),
                    replaced=replaced,
                )

            opening_index = ledger.find(previous_day, RowKind.OPENING)
            if opening_index is None:
                raise ObjectNotFoundError(
                    f"Opening stock for {format_ledger_date(previous_day)} not found in ledger for godown {code}"
                )

            opening = list(ledger.records[opening_index].quantities)
            # TODO: feed purchase and sales totals once purchase/bill data is wired into the ledger
            purchase = ledger.zeros()
            sales = ledger.zeros()
            transfer, dropped = self._scatter(ledger, items)
            closing = closing_balance(opening, purchase, sales, transfer)

            summary = [
                LedgerRecord(date=previous_day, kind=kind, quantities=tuple(values))
                for kind, values in zip(SUMMARY_KINDS, (purchase, sales, transfer), strict=True)
            ]
            ledger.records[opening_index + 1 : opening_index + 1] = summary
            ledger.records.append(LedgerRecord(date=next_day, kind=RowKind.OPENING, quantities=tuple(closing)))

            version = self.store.append(ledger)

        next_text = format_ledger_date(next_day)
        logger.info(
            "Computed next day opening stock",
            warehouse_code=code,
            next_date=next_text,
            transfer_items=len(items),
            dropped=len(dropped),
            version=version,
        )
        return RolloverResult(
            message=f"Successfully calculated and appended stock for {next_text} for godown {code}.",
            warehouse_code=code,
            previous_date=format_ledger_date(previous_day),
            next_date=next_text,
            closing=dict(zip(ledger.header, closing, strict=True)),
            dropped_item_codes=tuple(dropped),
            version=version,
        )

    @staticmethod
    def _scatter(ledger: LedgerFile, items: list[TransferOutItem]) -> tuple[list[int], list[str]]:
        transfer = ledger.zeros()
        dropped = []
        for item in items:
            column = ledger.column(item.item_code)
            if column is None:
                logger.warning(
                    "Transfer item not in ledger header, dropped",
                    warehouse_code=ledger.warehouse_code,
                    item_code=item.item_code,
                    quantity=item.quantity,
                )
                dropped.append(item.item_code)
                continue
            transfer[column] += item.quantity
        return transfer, dropped
