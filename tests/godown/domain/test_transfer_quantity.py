"""Tests for transfer quantity bounds and unit conversion."""

import pytest
from godown.stock.transfer import (
    TransferLine,
    TransferQuantityValidator,
    TransferUnit,
    convert_quantity,
    quantity_bound,
)
from protean.exceptions import ValidationError


@pytest.fixture()
def validator():
    return TransferQuantityValidator()


class TestBoxBound:
    def test_new_line_in_boxes(self):
        # 50 pieces at 12 a box is 4 whole boxes
        bound = quantity_bound("boxes", stock_on_hand=50, multiplier=12)
        assert bound.effective_stock == 4
        assert bound.max_allowed == 4
        assert bound.unit == "boxes"

    def test_four_boxes_pass(self, validator):
        validator.validate("A", 4, "boxes", stock_on_hand=50, multiplier=12, original_quantity=0)

    def test_five_boxes_fail(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("A", 5, "boxes", stock_on_hand=50, multiplier=12, original_quantity=0)
        assert "quantity" in exc_info.value.messages
        assert "exceeds available stock" in exc_info.value.messages["quantity"][0]

    def test_edit_adds_back_committed_boxes(self):
        # 2 boxes already committed by this transfer: (10 + 24) // 12 = 2
        bound = quantity_bound(TransferUnit.BOXES, stock_on_hand=10, multiplier=12, original_quantity=2)
        assert bound.effective_stock == 2
        assert bound.max_allowed == 2

    def test_original_quantity_is_a_floor(self):
        # Stock went negative elsewhere; the committed quantity can still be kept
        bound = quantity_bound("boxes", stock_on_hand=-30, multiplier=12, original_quantity=3)
        assert bound.effective_stock == 0
        assert bound.max_allowed == 3


class TestPieceBound:
    def test_new_line_in_pieces(self):
        bound = quantity_bound("pieces", stock_on_hand=50, multiplier=12)
        assert bound.max_allowed == 50

    def test_edit_adds_back_committed_pieces(self):
        bound = quantity_bound("pieces", stock_on_hand=5, multiplier=12, original_quantity=7)
        assert bound.effective_stock == 12
        assert bound.max_allowed == 12

    def test_multiplier_not_needed_for_pieces(self):
        assert quantity_bound("pieces", stock_on_hand=3, multiplier=0).max_allowed == 3


class TestBoundEnforcement:
    @pytest.mark.parametrize(
        "unit, stock, multiplier, original",
        [
            ("boxes", 50, 12, 0),
            ("boxes", 7, 6, 1),
            ("boxes", 0, 24, 0),
            ("pieces", 50, 12, 0),
            ("pieces", 0, 1, 4),
        ],
    )
    def test_max_allowed_passes_and_one_more_fails(self, validator, unit, stock, multiplier, original):
        bound = quantity_bound(unit, stock, multiplier, original)
        assert validator.validate("A", bound.max_allowed, unit, stock, multiplier, original) == bound
        with pytest.raises(ValidationError):
            validator.validate("A", bound.max_allowed + 1, unit, stock, multiplier, original)

    def test_edit_message_mentions_original(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("A", 20, "pieces", stock_on_hand=5, multiplier=1, original_quantity=7)
        assert "original: 7" in exc_info.value.messages["quantity"][0]

    def test_same_inputs_same_result(self, validator):
        first = validator.validate("A", 3, "boxes", 50, 12, 0)
        second = validator.validate("A", 3, "boxes", 50, 12, 0)
        assert first == second

    def test_zero_multiplier_rejected_for_boxes(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("A", 1, "boxes", 50, 0, 0)
        assert "multiplier" in exc_info.value.messages

    def test_unknown_unit_rejected(self, validator):
        with pytest.raises(ValidationError) as exc_info:
            validator.validate("A", 1, "crates", 50, 12, 0)
        assert "unit" in exc_info.value.messages


class TestConversion:
    def test_pieces_to_boxes_rounds_down(self):
        assert convert_quantity(50, "pieces", "boxes", 12) == 4

    def test_boxes_to_pieces_is_exact(self):
        assert convert_quantity(4, "boxes", "pieces", 12) == 48

    def test_same_unit_unchanged(self):
        assert convert_quantity(7, "boxes", "boxes", 12) == 7

    @pytest.mark.parametrize("quantity", [0, 1, 11, 12, 13, 24, 50])
    def test_round_trip_never_gains(self, quantity):
        back = convert_quantity(convert_quantity(quantity, "pieces", "boxes", 12), "boxes", "pieces", 12)
        assert back <= quantity
        assert (back == quantity) == (quantity % 12 == 0)

    def test_non_positive_multiplier_rejected(self):
        with pytest.raises(ValidationError):
            convert_quantity(10, "pieces", "boxes", 0)


class TestTransferLine:
    def test_defaults(self):
        line = TransferLine(item_code="A", quantity=3)
        assert line.unit == TransferUnit.PIECES.value
        assert line.original_quantity == 0

    def test_negative_quantity_rejected(self):
        with pytest.raises(ValidationError):
            TransferLine(item_code="A", quantity=-1)

    def test_unknown_unit_rejected(self):
        with pytest.raises(ValidationError):
            TransferLine(item_code="A", quantity=1, unit="crates")

    def test_item_code_required(self):
        with pytest.raises(ValidationError):
            TransferLine(quantity=1)
