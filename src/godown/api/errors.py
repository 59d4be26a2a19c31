"""Exception handlers for the Godown API."""

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from protean.exceptions import ObjectNotFoundError
from protean.integrations.fastapi import register_exception_handlers


async def _not_found_handler(request: Request, exc: ObjectNotFoundError) -> JSONResponse:
    messages = getattr(exc, "messages", None) or str(exc)
    return JSONResponse(status_code=404, content={"error": messages})


def register_error_handlers(app: FastAPI) -> None:
    """Protean's handlers (ValidationError -> 400, ...) plus missing ledgers and rows -> 404."""
    register_exception_handlers(app)
    app.add_exception_handler(ObjectNotFoundError, _not_found_handler)
