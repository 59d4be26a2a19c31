import pytest
from protean.integrations.pytest import DomainFixture

from godown.catalog import reset_item_master, set_item_master
from godown.catalog.memory_adapter import InMemoryItemMaster
from godown.catalog.port import Item
from godown.feed import reset_stock_feed, set_stock_feed
from godown.feed.memory_adapter import InMemoryLiveStockFeed
from godown.ledger import reset_store, set_store
from godown.ledger.store import StockLedgerStore


@pytest.fixture(scope="session")
def godown_bed():
    from godown.domain import godown

    bed = DomainFixture(godown)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(godown_bed):
    with godown_bed.domain_context():
        yield


@pytest.fixture()
def store(tmp_path):
    ledger_store = StockLedgerStore(tmp_path / "db")
    set_store(ledger_store)
    yield ledger_store
    reset_store()


@pytest.fixture()
def item_master():
    master = InMemoryItemMaster(
        [
            Item(code="A", name="Parle G 50g", mrp="10", multiplier=12),
            Item(code="B", name="Good Day 100g", mrp="30", multiplier=24),
            Item(code="C", name="Hide & Seek", mrp="", multiplier=6),
        ]
    )
    set_item_master(master)
    yield master
    reset_item_master()


@pytest.fixture()
def stock_feed():
    feed = InMemoryLiveStockFeed(
        {
            "A": {"G1": 50, "G2": 0},
            "B": {"G1": 240},
            "C": {"G2": 7},
        }
    )
    set_stock_feed(feed)
    yield feed
    reset_stock_feed()


@pytest.fixture()
def write_ledger(store):
    """Drop a raw ledger file into the store, bypassing validation."""

    def _write(warehouse_code: str, text: str) -> None:
        store.root.mkdir(parents=True, exist_ok=True)
        store.path_for(warehouse_code).write_text(text, encoding="utf-8")

    return _write


@pytest.fixture()
def ledger_lines(store):
    def _lines(warehouse_code: str) -> list[str]:
        return store.path_for(warehouse_code).read_text(encoding="utf-8").splitlines()

    return _lines
