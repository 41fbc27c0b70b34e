"""FastAPI adapter – search-request dependency and Result → HTTP response mapping.

Annotations stay eager here: FastAPI reads the dependency signature at runtime.
"""

from typing import Any, Callable

from erp_commons.application.search import SearchQueryParser, SearchRequest
from erp_commons.kernel.errors import (
    BaseError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    ValidationError,
)
from erp_commons.kernel.types import Err, Result
from erp_commons.observability.correlation import CorrelationContext


def _require_fastapi() -> None:
    try:
        import fastapi  # noqa: F401
    except ImportError as exc:
        raise ImportError(
            "Install 'erp-commons[fastapi]' to use the FastAPI adapter"
        ) from exc


# ORDER MATTERS: more-specific subtypes first
_STATUS_MAP: list[tuple[type[BaseError], int]] = [
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (InfrastructureError, 503),
]


def search_request_dependency(parser: SearchQueryParser | None = None) -> Callable[..., Any]:
    """Return a FastAPI dependency that binds the query string to a :class:`SearchRequest`.

    Usage::

        @app.get("/companies")
        async def list_companies(request: SearchRequest = Depends(search_request_dependency())):
            ...
    """
    _require_fastapi()
    from fastapi import Request

    bound = parser or SearchQueryParser()

    async def search_request(request: Request) -> SearchRequest:
        return bound.parse(request.query_params.multi_items())

    return search_request


def result_status(result: Result[Any], success: int = 200) -> int:
    """HTTP status for *result*: *success* for ``Ok``, mapped status for ``Err``."""
    if not isinstance(result, Err):
        return success
    for error_type, status in _STATUS_MAP:
        if isinstance(result.error, error_type):
            return status
    return 500


def result_response(result: Result[Any], success: int = 200) -> Any:
    """Render *result* as a ``JSONResponse``.

    Error body schema::

        {"code": "not_found", "message": "...", "detail": {...}, "correlation_id": "..."}
    """
    _require_fastapi()
    from fastapi.encoders import jsonable_encoder
    from fastapi.responses import JSONResponse

    status = result_status(result, success)
    if not isinstance(result, Err):
        return JSONResponse(status_code=status, content=jsonable_encoder(result.unwrap()))

    body = result.error.to_dict()
    body.pop("cause", None)
    ctx = CorrelationContext.get()
    if ctx is not None:
        body["correlation_id"] = ctx.correlation_id
    return JSONResponse(status_code=status, content=jsonable_encoder(body))


__all__ = ["result_response", "result_status", "search_request_dependency"]
