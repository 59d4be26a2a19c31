"""Pydantic request/response schemas for the Godown API.

These are external contracts, kept separate from the ledger records and the
protean value objects used internally.
"""

from typing import Literal

from pydantic import BaseModel, Field

Unit = Literal["pieces", "boxes"]


# ---------------------------------------------------------------------------
# Ledger Request Schemas
# ---------------------------------------------------------------------------
class TransferOutItemSchema(BaseModel):
    item_code: str
    quantity: int = Field(ge=0)


class RolloverRequest(BaseModel):
    next_date: str = Field(description="DD-MM-YYYY")
    transfer_items: list[TransferOutItemSchema] = Field(default_factory=list)


class InitializeLedgersRequest(BaseModel):
    date: str | None = Field(default=None, description="DD-MM-YYYY, defaults to today")
    warehouse_codes: list[str] | None = None


class AddItemsRequest(BaseModel):
    item_codes: list[str] = Field(min_length=1)
    opening: dict[str, int] = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Stock Request Schemas
# ---------------------------------------------------------------------------
class TransferLineSchema(BaseModel):
    item_code: str
    quantity: int = Field(ge=0)
    unit: Unit = "pieces"
    original_quantity: int = Field(ge=0, default=0)


class ValidateTransferRequest(TransferLineSchema):
    warehouse_code: str


class CheckTransferRequest(BaseModel):
    warehouse_code: str
    lines: list[TransferLineSchema] = Field(min_length=1)


class ConvertQuantityRequest(BaseModel):
    quantity: int = Field(ge=0)
    from_unit: Unit
    to_unit: Unit
    item_code: str | None = None
    multiplier: int | None = Field(default=None, ge=1)


# ---------------------------------------------------------------------------
# Response Schemas
# ---------------------------------------------------------------------------
class RolloverResponse(BaseModel):
    message: str
    warehouse_code: str
    previous_date: str
    next_date: str
    closing: dict[str, int]
    dropped_item_codes: list[str] = Field(default_factory=list)
    version: int
    purchase_sales_integrated: bool = False


class SnapshotRowSchema(BaseModel):
    item_code: str
    item: str
    opening: int
    purchase: int
    sales: int
    transfer: int
    closing: int


class SnapshotResponse(BaseModel):
    date: str
    warehouse_code: str
    version: int
    rows: list[SnapshotRowSchema]


class InitializeLedgersResponse(BaseModel):
    created: list[str]
    skipped: list[str]


class LedgerItemsResponse(BaseModel):
    warehouse_code: str
    items: list[str]


class QuantityBoundResponse(BaseModel):
    status: str = "ok"
    item_code: str
    unit: Unit
    stock_on_hand: int
    multiplier: int
    effective_stock: int
    max_allowed: int


class CheckTransferResponse(BaseModel):
    status: str = "ok"
    lines: list[QuantityBoundResponse]


class ConvertQuantityResponse(BaseModel):
    quantity: int
    unit: Unit
    multiplier: int
