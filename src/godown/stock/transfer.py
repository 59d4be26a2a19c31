"""Unit conversion and the stock bound of a godown transfer line.

A godown transfer line is entered either in pieces or in boxes. The largest
quantity it may carry is what the source godown holds, plus whatever this
transfer already committed when an existing transfer is being edited:

    boxes:  effective = floor((stock + original * multiplier) / multiplier)
    pieces: effective = stock + original
    max_allowed = max(original, effective)

Validation is a pure function of its inputs. It runs on every edit of a line
and again when the transfer is submitted, against a fresh stock index.
"""

from dataclasses import dataclass
from enum import Enum

import structlog
from protean.exceptions import ValidationError
from protean.fields import Integer, String

from godown.catalog.port import ItemMaster
from godown.domain import godown
from godown.stock.index import StockQueryIndex

logger = structlog.get_logger(__name__)


class TransferUnit(Enum):
    PIECES = "pieces"
    BOXES = "boxes"


@godown.value_object
class TransferLine:
    """One item on a godown transfer."""

    item_code: String(required=True, max_length=50)
    quantity: Integer(required=True, min_value=0)
    unit: String(choices=TransferUnit, default=TransferUnit.PIECES.value)
    original_quantity: Integer(default=0, min_value=0)  # committed earlier, same unit


@dataclass(frozen=True)
class QuantityBound:
    """Upper bound for a transfer line, in the line's unit."""

    unit: str
    effective_stock: int
    max_allowed: int


def _unit(value) -> TransferUnit:
    if isinstance(value, TransferUnit):
        return value
    try:
        return TransferUnit(str(value).lower())
    except ValueError:
        raise ValidationError({"unit": [f"Unknown unit '{value}', expected pieces or boxes"]}) from None


def _check_multiplier(multiplier) -> int:
    if multiplier is None or int(multiplier) <= 0:
        raise ValidationError({"multiplier": ["Multiplier must be a positive number of pieces per box"]})
    return int(multiplier)


def convert_quantity(quantity: int, from_unit, to_unit, multiplier: int) -> int:
    """Swap a quantity between pieces and boxes.

    Pieces to boxes rounds down and loses the remainder; boxes to pieces is
    exact.
    """
    source, target = _unit(from_unit), _unit(to_unit)
    if source is target:
        return quantity
    multiplier = _check_multiplier(multiplier)
    if source is TransferUnit.PIECES:
        return quantity // multiplier
    return quantity * multiplier


def quantity_bound(unit, stock_on_hand: int, multiplier: int, original_quantity: int = 0) -> QuantityBound:
    unit = _unit(unit)
    original = original_quantity or 0
    if unit is TransferUnit.BOXES:
        multiplier = _check_multiplier(multiplier)
        effective = (stock_on_hand + original * multiplier) // multiplier
    else:
        effective = stock_on_hand + original
    return QuantityBound(unit=unit.value, effective_stock=effective, max_allowed=max(original, effective))


class TransferQuantityValidator:
    """Rejects transfer quantities larger than the source godown can supply."""

    def validate(
        self,
        item_code: str,
        proposed_quantity: int,
        unit,
        stock_on_hand: int,
        multiplier: int,
        original_quantity: int = 0,
    ) -> QuantityBound:
        bound = quantity_bound(unit, stock_on_hand, multiplier, original_quantity)
        if proposed_quantity > bound.max_allowed:
            if original_quantity:
                message = (
                    f"Quantity {proposed_quantity} exceeds available stock: cannot exceed {bound.max_allowed} "
                    f"(original: {original_quantity}, stock: {stock_on_hand})"
                )
            else:
                message = f"Quantity {proposed_quantity} exceeds available stock ({bound.effective_stock})"
            logger.debug(
                "Transfer quantity rejected",
                item_code=item_code,
                proposed=proposed_quantity,
                max_allowed=bound.max_allowed,
                unit=bound.unit,
            )
            raise ValidationError({"quantity": [message]})
        return bound

    def validate_line(
        self,
        line: TransferLine,
        warehouse_code: str,
        index: StockQueryIndex,
        item_master: ItemMaster,
    ) -> QuantityBound:
        """Check one line against a stock index snapshot."""
        return self.validate(
            item_code=line.item_code,
            proposed_quantity=line.quantity,
            unit=line.unit,
            stock_on_hand=index.quantity(line.item_code, warehouse_code),
            multiplier=item_master.multiplier_for(line.item_code),
            original_quantity=line.original_quantity or 0,
        )

    def validate_lines(
        self,
        lines,
        warehouse_code: str,
        index: StockQueryIndex,
        item_master: ItemMaster,
    ) -> list[QuantityBound]:
        """Submission-time check of every line; all failures are reported together."""
        bounds = []
        errors = {}
        for position, line in enumerate(lines):
            try:
                bounds.append(self.validate_line(line, warehouse_code, index, item_master))
            except ValidationError as exc:
                for field_name, messages in exc.messages.items():
                    errors[f"lines.{position}.{field_name}"] = messages
        if errors:
            raise ValidationError(errors)
        return bounds
