"""FastAPI routes for daily stock ledgers and godown transfers.

Ledger routes are plain ``def`` handlers: they do blocking file I/O and take
the per-godown writer lock, so they run in the threadpool.
"""

from fastapi import APIRouter, Response
from protean.exceptions import ValidationError

from godown.api.schemas import (
    AddItemsRequest,
    CheckTransferRequest,
    CheckTransferResponse,
    ConvertQuantityRequest,
    ConvertQuantityResponse,
    InitializeLedgersRequest,
    InitializeLedgersResponse,
    LedgerItemsResponse,
    QuantityBoundResponse,
    RolloverRequest,
    RolloverResponse,
    SnapshotResponse,
    SnapshotRowSchema,
    TransferLineSchema,
    ValidateTransferRequest,
)
from godown.catalog import get_item_master
from godown.feed import get_stock_feed
from godown.ledger import get_store
from godown.ledger.initialization import LedgerInitializer
from godown.ledger.rollover import DayRolloverCalculator, TransferOutItem
from godown.ledger.snapshot import StockSnapshotReporter
from godown.stock.index import StockQueryIndex
from godown.stock.transfer import TransferLine, TransferQuantityValidator, convert_quantity

# ---------------------------------------------------------------------------
# Ledger Router
# ---------------------------------------------------------------------------
ledger_router = APIRouter(prefix="/godowns", tags=["godowns"])


@ledger_router.post("/ledgers/initialize", status_code=201, response_model=InitializeLedgersResponse)
def initialize_ledgers(body: InitializeLedgersRequest) -> InitializeLedgersResponse:
    index = StockQueryIndex.from_feed(get_stock_feed())
    result = LedgerInitializer(get_store()).initialize(index, on=body.date, warehouse_codes=body.warehouse_codes)
    return InitializeLedgersResponse(created=list(result.created), skipped=list(result.skipped))


@ledger_router.post("/{warehouse_code}/rollover", response_model=RolloverResponse)
def compute_rollover(warehouse_code: str, body: RolloverRequest) -> RolloverResponse:
    items = [TransferOutItem(item_code=item.item_code, quantity=item.quantity) for item in body.transfer_items]
    result = DayRolloverCalculator(get_store()).compute(body.next_date, warehouse_code, items)
    return RolloverResponse(
        message=result.message,
        warehouse_code=result.warehouse_code,
        previous_date=result.previous_date,
        next_date=result.next_date,
        closing=result.closing,
        dropped_item_codes=list(result.dropped_item_codes),
        version=result.version,
        purchase_sales_integrated=result.purchase_sales_integrated,
    )


@ledger_router.get("/{warehouse_code}/stock", response_model=SnapshotResponse)
def get_snapshot(warehouse_code: str, date: str, response: Response) -> SnapshotResponse:
    snapshot = StockSnapshotReporter(get_store(), get_item_master()).snapshot(warehouse_code, date)
    response.headers["ETag"] = f'W/"{snapshot.warehouse_code}-{snapshot.version}"'
    return SnapshotResponse(
        date=snapshot.date,
        warehouse_code=snapshot.warehouse_code,
        version=snapshot.version,
        rows=[SnapshotRowSchema(**row.__dict__) for row in snapshot.rows],
    )


@ledger_router.post("/{warehouse_code}/items", response_model=LedgerItemsResponse)
def add_ledger_items(warehouse_code: str, body: AddItemsRequest) -> LedgerItemsResponse:
    header = LedgerInitializer(get_store()).add_items(warehouse_code, body.item_codes, body.opening)
    return LedgerItemsResponse(warehouse_code=warehouse_code, items=header)


# ---------------------------------------------------------------------------
# Stock Router
# ---------------------------------------------------------------------------
stock_router = APIRouter(prefix="/stock", tags=["stock"])


@stock_router.get("/live", response_model=dict[str, dict[str, int]])
def get_live_stock() -> dict[str, dict[str, int]]:
    return StockQueryIndex.from_feed(get_stock_feed()).as_dict()


@stock_router.get("/live/{warehouse_code}/items", response_model=LedgerItemsResponse)
def get_items_in_stock(warehouse_code: str) -> LedgerItemsResponse:
    index = StockQueryIndex.from_feed(get_stock_feed())
    return LedgerItemsResponse(warehouse_code=warehouse_code, items=index.items_in_stock(warehouse_code))


def _transfer_line(line: TransferLineSchema) -> TransferLine:
    return TransferLine(
        item_code=line.item_code,
        quantity=line.quantity,
        unit=line.unit,
        original_quantity=line.original_quantity,
    )


def _bound_response(line: TransferLine, bound, warehouse_code: str, index, item_master) -> QuantityBoundResponse:
    return QuantityBoundResponse(
        item_code=line.item_code,
        unit=bound.unit,
        stock_on_hand=index.quantity(line.item_code, warehouse_code),
        multiplier=item_master.multiplier_for(line.item_code),
        effective_stock=bound.effective_stock,
        max_allowed=bound.max_allowed,
    )


@stock_router.post("/transfers/validate", response_model=QuantityBoundResponse)
def validate_transfer_quantity(body: ValidateTransferRequest) -> QuantityBoundResponse:
    index = StockQueryIndex.from_feed(get_stock_feed())
    item_master = get_item_master()
    line = _transfer_line(body)
    bound = TransferQuantityValidator().validate_line(line, body.warehouse_code, index, item_master)
    return _bound_response(line, bound, body.warehouse_code, index, item_master)


@stock_router.post("/transfers/check", response_model=CheckTransferResponse)
def check_transfer(body: CheckTransferRequest) -> CheckTransferResponse:
    """Submission-time re-check of a whole transfer against fresh stock."""
    index = StockQueryIndex.from_feed(get_stock_feed())
    item_master = get_item_master()
    lines = [_transfer_line(line) for line in body.lines]
    bounds = TransferQuantityValidator().validate_lines(lines, body.warehouse_code, index, item_master)
    return CheckTransferResponse(
        lines=[
            _bound_response(line, bound, body.warehouse_code, index, item_master)
            for line, bound in zip(lines, bounds, strict=True)
        ]
    )


@stock_router.post("/transfers/convert", response_model=ConvertQuantityResponse)
def convert_transfer_quantity(body: ConvertQuantityRequest) -> ConvertQuantityResponse:
    if body.multiplier is not None:
        multiplier = body.multiplier
    elif body.item_code:
        multiplier = get_item_master().multiplier_for(body.item_code)
    else:
        raise ValidationError({"multiplier": ["Provide an item_code or a multiplier"]})

    quantity = convert_quantity(body.quantity, body.from_unit, body.to_unit, multiplier)
    return ConvertQuantityResponse(quantity=quantity, unit=body.to_unit, multiplier=multiplier)
