from __future__ import annotations

import logging
from http import HTTPStatus

from .config import ServeConfig
from .errors import MalformedPath, ServerFault
from .http import HttpRequest, HttpResponse
from .resolver import Resolution, resolve, resolve_not_found_page

logger = logging.getLogger("sigma_serve.responses")

NOT_FOUND_BODY = b"404 Not Found"


def make_text_response(status: HTTPStatus | int, body: bytes) -> HttpResponse:
    response = HttpResponse(int(status), body)
    response.ensure_headers()
    return response


def method_not_allowed() -> HttpResponse:
    return make_text_response(HTTPStatus.METHOD_NOT_ALLOWED, b"Method Not Allowed")


def bad_request() -> HttpResponse:
    return make_text_response(HTTPStatus.BAD_REQUEST, b"Bad Request")


def internal_server_error() -> HttpResponse:
    return make_text_response(HTTPStatus.INTERNAL_SERVER_ERROR, b"Internal Server Error")


def not_found(config: ServeConfig) -> HttpResponse:
    """404 carrying ``404.html`` when it can be read, else a literal body."""

    body = NOT_FOUND_BODY
    try:
        page = resolve_not_found_page(config)
        if page.found:
            body = page.path.read_bytes()
    except (OSError, ServerFault) as exc:
        logger.debug("fallback page unavailable: %s", exc)
    return make_text_response(HTTPStatus.NOT_FOUND, body)


def serve_resolution(resolution: Resolution, config: ServeConfig) -> HttpResponse:
    if not resolution.found:
        return not_found(config)
    try:
        body = resolution.path.read_bytes()
    except OSError as exc:
        # a directory, a file removed since resolving, or an unreadable file
        logger.debug("cannot read %s as a file: %s", resolution.path, exc)
        return not_found(config)
    return make_text_response(HTTPStatus.OK, body)


def reject_malformed_path(exc: MalformedPath) -> HttpResponse:
    if exc.method != "GET":
        return method_not_allowed()
    return bad_request()


def build_response(request: HttpRequest, config: ServeConfig) -> HttpResponse:
    """Produce the response for a parsed request.

    Raises :class:`~sigma_serve.errors.ServerFault` when the path cannot be
    resolved for reasons other than it being absent.
    """

    if request.method != "GET":
        return method_not_allowed()
    return serve_resolution(resolve(request.decoded_path, config), config)


__all__ = [
    "NOT_FOUND_BODY",
    "bad_request",
    "build_response",
    "internal_server_error",
    "make_text_response",
    "method_not_allowed",
    "not_found",
    "reject_malformed_path",
    "serve_resolution",
]
