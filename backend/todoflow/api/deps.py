"""Shared API helpers for request parsing and cross-cutting concerns."""

from __future__ import annotations

import functools
import time
from collections.abc import Callable
from typing import Any, TypeVar

from flask import Response, current_app, jsonify, request
from flask_jwt_extended import get_jwt_identity, verify_jwt_in_request

from todoflow.core.errors import Unauthorized
from todoflow.core.logger import ensure_request_id
from todoflow.services._shared.base import ServiceContext

F = TypeVar("F", bound=Callable[..., Any])


def require_auth(func: F) -> F:
    """Ensure the request carries a valid, unexpired JWT access token."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        verify_jwt_in_request(optional=False)
        return func(*args, **kwargs)

    return wrapper  # type: ignore[return-value]


def current_context() -> ServiceContext:
    """Build a :class:`ServiceContext` for the verified caller.

    :raises Unauthorized: If no identity is attached to the request.
    """
    identity = get_jwt_identity()
    if not identity:
        raise Unauthorized("Missing identity")
    return ServiceContext(actor_id=str(identity), request_id=ensure_request_id())


def remote_address() -> str:
    """Return the client address (after ProxyFix), blank when unknown."""
    return request.remote_addr or ""


def json_response(payload: Any, *, status: int = 200) -> Response:
    """Return a JSON response enforcing a consistent MIME type."""

    response = jsonify(payload)
    response.status_code = status
    return response


def timing(func: F) -> F:
    """Decorator capturing handler execution time in milliseconds."""

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any):
        start = time.perf_counter()
        try:
            return func(*args, **kwargs)
        finally:
            elapsed_ms = (time.perf_counter() - start) * 1000
            request_endpoint = getattr(request, "endpoint", None)
            current_app.logger.debug(
                "request.elapsed",
                extra={"endpoint": request_endpoint, "elapsed_ms": round(elapsed_ms, 2)},
            )

    return wrapper  # type: ignore[return-value]
