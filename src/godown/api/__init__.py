from godown.api.routes import ledger_router, stock_router

__all__ = ["ledger_router", "stock_router"]
