"""Per-route middleware chain for the storage routers.

Middleware are async callables ``(request, call_next) -> response``. They are
composed around the FastAPI route handler, so they see every request to the
routes they are attached to, after path and query parsing.
"""

import logging
import time
import uuid
from collections.abc import Callable, Sequence
from typing import Any

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"


def build_middleware_chain(
    handler: Callable[..., Any],
    middleware_stack: Sequence[Callable[..., Any]],
) -> Callable[..., Any]:
    """Wrap a handler function with a middleware chain.

    Composes middleware in order so that the first middleware in the list
    is the outermost (executes first).

    Args:
        handler: The route handler function.
        middleware_stack: Ordered sequence of middleware (outermost first).

    Returns:
        A wrapped handler function that executes the middleware chain.
        If middleware_stack is empty, returns the handler unchanged.
    """
    if not middleware_stack:
        return handler

    chain = handler
    for mw in reversed(middleware_stack):
        chain = _wrap_with_middleware(chain, mw)
    return chain


def _wrap_with_middleware(
    next_handler: Callable[..., Any],
    middleware: Callable[..., Any],
) -> Callable[..., Any]:
    async def wrapped(request: Any) -> Any:
        async def call_next(req: Any) -> Any:
            return await next_handler(req)

        return await middleware(request, call_next)

    wrapped.__name__ = (
        f"{middleware.__name__}_wrapping_{getattr(next_handler, '__name__', 'handler')}"
    )
    wrapped.__qualname__ = wrapped.__name__

    return wrapped


async def request_logging(request: Any, call_next: Any) -> Any:
    """Log every request with its outcome and stamp a request id header.

    An inbound X-Request-ID is echoed back; otherwise a new one is minted.
    All context travels in the log call itself.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    context = {
        "request_id": request_id,
        "method": request.method,
        "url_path": request.url.path,
    }
    started = time.perf_counter()
    try:
        response = await call_next(request)
    except Exception:
        logger.exception(
            "Request failed",
            extra={**context, "elapsed_ms": _elapsed_ms(started)},
        )
        raise

    response.headers[REQUEST_ID_HEADER] = request_id
    logger.info(
        "Request handled",
        extra={**context, "status": response.status_code, "elapsed_ms": _elapsed_ms(started)},
    )
    return response


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)
