"""Daily stock ledgers and inter-godown transfers.

Keeps one delimited ledger file per godown (warehouse), rolls opening stock
forward day by day, reports stock snapshots, and bounds the quantities a
godown transfer may move.
"""

from protean.domain import Domain

from godown.utils.logging import configure_logging

configure_logging()

godown = Domain(name="godown")
