"""Shared BDD fixtures and step definitions for godown ledgers."""

import pytest
from godown.ledger.records import RowKind, parse_ledger_date
from godown.ledger.rollover import DayRolloverCalculator
from pytest_bdd import given, parsers, then


def _quantities(text: str) -> list[int]:
    return [int(value) for value in text.split(",")]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def calculator(store):
    return DayRolloverCalculator(store)


@pytest.fixture()
def error():
    """Container for captured rollover failures."""
    return {"exc": None}


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('godown "{code}" has a ledger for items "{items}"'), target_fixture="godown_ledger")
def godown_ledger(code, items):
    return {"code": code, "items": items.split(",")}


@given(parsers.cfparse('the opening stock on "{day}" is "{quantities}"'))
def opening_stock_recorded(godown_ledger, write_ledger, day, quantities):
    header = ",".join(["Date", "ITEMS:"] + godown_ledger["items"])
    write_ledger(godown_ledger["code"], f"{header}\n{day},OPENING:,{quantities}\n")


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the opening stock on "{day}" is "{quantities}"'))
def opening_stock_is(store, godown_ledger, day, quantities):
    ledger = store.read_all(godown_ledger["code"])
    assert ledger.record(parse_ledger_date(day), RowKind.OPENING) is not None
    assert ledger.quantities(parse_ledger_date(day), RowKind.OPENING) == _quantities(quantities)


@then("the ledger has no duplicate rows")
def no_duplicate_rows(store, godown_ledger):
    assert store.read_all(godown_ledger["code"]).duplicates() == []
