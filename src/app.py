"""Godown stock FastAPI application.

Serves the daily stock ledgers of every godown and the transfer quantity
checks of the godown transfer form.

Usage:
    uvicorn src.app:app --host 0.0.0.0 --port 8000 --reload
"""

# ---------------------------------------------------------------------------
# Domain initialization
# ---------------------------------------------------------------------------
# The domain is initialized at module level so uvicorn workers share it.
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from godown.api.errors import register_error_handlers
from godown.domain import godown
from godown.utils.logging import add_context, clear_context

godown.init()

# ---------------------------------------------------------------------------
# FastAPI app
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Godown Stock API",
    description="Daily godown stock ledgers and transfer quantity checks",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ValidationError -> 400, ObjectNotFoundError -> 404
register_error_handlers(app)


@app.middleware("http")
async def domain_context_middleware(request: Request, call_next):
    """Push the Protean domain context and request log context for each request."""
    clear_context()
    add_context(method=request.method, path=request.url.path)
    with godown.domain_context():
        return await call_next(request)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------
from godown.api import ledger_router, stock_router  # noqa: E402

app.include_router(ledger_router)
app.include_router(stock_router)


# ---------------------------------------------------------------------------
# Health / root
# ---------------------------------------------------------------------------
@app.get("/health")
async def health():
    from godown.ledger import get_store

    store = get_store()
    return JSONResponse(
        content={
            "status": "ok",
            "domain": godown.name,
            "ledger_dir": str(store.root),
            "godowns": store.warehouse_codes(),
        }
    )
