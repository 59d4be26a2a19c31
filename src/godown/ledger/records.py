"""Ledger records — typed rows of a godown's daily stock file.

A ledger is a plain comma-separated text file, one per godown:

    Date,ITEMS:,<code1>,<code2>,...
    <DD-MM-YYYY>,OPENING:,<qty1>,<qty2>,...
    <DD-MM-YYYY>,total purchase,...
    <DD-MM-YYYY>,total sales,...
    <DD-MM-YYYY>,transfer to retail,...

The header fixes the column order for the godown. Row labels are matched by
substring once, at load time, and carried as a ``RowKind`` from then on.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum

import structlog
from protean.exceptions import ValidationError

logger = structlog.get_logger(__name__)

DATE_FORMAT = "%d-%m-%Y"
HEADER_PREFIX = ("Date", "ITEMS:")
SEPARATOR = ","


class RowKind(Enum):
    OPENING = "OPENING:"
    PURCHASE_TOTAL = "total purchase"
    SALES_TOTAL = "total sales"
    TRANSFER_TOTAL = "transfer to retail"

    @classmethod
    def from_label(cls, label: str) -> "RowKind":
        for kind in cls:
            if kind.value in label:
                return kind
        raise ValidationError({"row_kind": [f"Unknown ledger row label '{label}'"]})


SUMMARY_KINDS = (RowKind.PURCHASE_TOTAL, RowKind.SALES_TOTAL, RowKind.TRANSFER_TOTAL)


def parse_ledger_date(value: str, field_name: str = "date") -> date:
    """Parse a ``DD-MM-YYYY`` date, raising ValidationError when malformed."""
    try:
        return datetime.strptime(str(value).strip(), DATE_FORMAT).date()
    except (TypeError, ValueError):
        raise ValidationError({field_name: [f"Invalid date '{value}', expected DD-MM-YYYY"]}) from None


def format_ledger_date(value: date) -> str:
    return value.strftime(DATE_FORMAT)


def parse_quantity(cell: str | None) -> int:
    """Parse a quantity cell. Blank or missing cells count as zero."""
    if cell is None:
        return 0
    cell = cell.strip()
    if not cell:
        return 0
    try:
        return int(cell)
    except ValueError:
        pass
    try:
        return int(float(cell))
    except (ValueError, OverflowError):
        raise ValidationError({"quantity": [f"Invalid quantity '{cell}'"]}) from None


@dataclass(frozen=True)
class LedgerRecord:
    """One dated row of a ledger: an opening balance or a day's movement total."""

    date: date
    kind: RowKind
    quantities: tuple[int, ...]

    @property
    def date_text(self) -> str:
        return format_ledger_date(self.date)

    def to_line(self) -> str:
        cells = [self.date_text, self.kind.value, *(str(q) for q in self.quantities)]
        return SEPARATOR.join(cells)

    @classmethod
    def from_line(cls, line: str, width: int) -> "LedgerRecord":
        cells = line.split(SEPARATOR)
        if len(cells) < 2:
            raise ValidationError({"record": [f"Malformed ledger row '{line}'"]})

        values = [parse_quantity(c) for c in cells[2:]]
        if len(values) > width:
            logger.warning(
                "Ledger row wider than header, extra cells ignored",
                row_date=cells[0],
                width=width,
                cells=len(values),
            )
        values = (values + [0] * width)[:width]

        return cls(
            date=parse_ledger_date(cells[0], field_name="record_date"),
            kind=RowKind.from_label(cells[1]),
            quantities=tuple(values),
        )


@dataclass
class LedgerFile:
    """The full content of one godown's ledger, held in memory."""

    warehouse_code: str
    header: list[str]
    records: list[LedgerRecord] = field(default_factory=list)
    version: int = 0

    @property
    def width(self) -> int:
        return len(self.header)

    def zeros(self) -> list[int]:
        return [0] * self.width

    def column(self, item_code: str) -> int | None:
        try:
            return self.header.index(item_code)
        except ValueError:
            return None

    def find(self, on: date, kind: RowKind) -> int | None:
        """Index of the matching record; the most recently appended one wins."""
        for index in range(len(self.records) - 1, -1, -1):
            record = self.records[index]
            if record.date == on and record.kind is kind:
                return index
        return None

    def record(self, on: date, kind: RowKind) -> LedgerRecord | None:
        index = self.find(on, kind)
        return None if index is None else self.records[index]

    def quantities(self, on: date, kind: RowKind) -> list[int]:
        """Quantities of a row, or zeros when the row is absent."""
        record = self.record(on, kind)
        return list(record.quantities) if record else self.zeros()

    def remove(self, on: date, kinds) -> int:
        """Drop every record dated ``on`` whose kind is in ``kinds``."""
        kinds = set(kinds)
        before = len(self.records)
        self.records = [r for r in self.records if not (r.date == on and r.kind in kinds)]
        return before - len(self.records)

    def duplicates(self) -> list[tuple[date, RowKind]]:
        seen = set()
        repeated = []
        for record in self.records:
            key = (record.date, record.kind)
            if key in seen and key not in repeated:
                repeated.append(key)
            seen.add(key)
        return repeated

    def collapse_duplicates(self) -> int:
        """Keep only the last row of every repeated ``(date, kind)`` pair.

        Returns the number of rows dropped.
        """
        last = {(r.date, r.kind): index for index, r in enumerate(self.records)}
        kept = [r for index, r in enumerate(self.records) if last[(r.date, r.kind)] == index]
        dropped = len(self.records) - len(kept)
        if dropped:
            logger.warning(
                "Duplicate ledger rows collapsed, last one kept",
                warehouse_code=self.warehouse_code,
                rows=[f"{format_ledger_date(on)} {kind.value}" for on, kind in self.duplicates()],
                dropped=dropped,
            )
            self.records = kept
        return dropped

    def latest_opening(self) -> LedgerRecord | None:
        openings = [r for r in self.records if r.kind is RowKind.OPENING]
        return max(openings, key=lambda r: r.date) if openings else None

    def add_items(self, item_codes, opening: dict[str, int] | None = None) -> list[str]:
        """Append new item columns, keeping the existing column order.

        Every existing record gets a zero for the new columns, except the
        latest OPENING row, which is seeded from ``opening`` when given.
        Returns the codes that were actually added.
        """
        opening = opening or {}
        added = []
        for code in item_codes:
            if code not in self.header and code not in added:
                added.append(code)
        if not added:
            return added

        latest = self.latest_opening()
        latest_index = self.find(latest.date, RowKind.OPENING) if latest else None
        self.header.extend(added)

        extended = []
        for index, record in enumerate(self.records):
            if index == latest_index:
                extra = [int(opening.get(code, 0)) for code in added]
            else:
                extra = [0] * len(added)
            extended.append(
                LedgerRecord(date=record.date, kind=record.kind, quantities=record.quantities + tuple(extra))
            )
        self.records = extended
        return added

    def to_lines(self) -> list[str]:
        return [SEPARATOR.join([*HEADER_PREFIX, *self.header]), *(r.to_line() for r in self.records)]

    def render(self) -> str:
        return "\n".join(self.to_lines()) + "\n"

    @classmethod
    def parse(cls, warehouse_code: str, text: str, version: int = 0) -> "LedgerFile":
        lines = [line.rstrip("\r") for line in text.split("\n") if line.strip()]
        if not lines:
            raise ValidationError({"ledger": [f"Ledger for godown {warehouse_code} is empty"]})

        header = [cell.strip() for cell in lines[0].split(SEPARATOR)[2:]]
        records = [LedgerRecord.from_line(line, len(header)) for line in lines[1:]]
        return cls(warehouse_code=warehouse_code, header=header, records=records, version=version)
