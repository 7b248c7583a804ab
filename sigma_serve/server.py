from __future__ import annotations

"""Single-request HTTP server implemented directly over sockets."""

import logging
import socket
import threading
from contextlib import suppress
from typing import BinaryIO, Optional, Tuple

from .config import ServeConfig
from .errors import ConnectionFault, MalformedPath, MalformedRequest, ServerFault
from .http import HttpResponse
from .parser import read_request
from .responses import (
    bad_request,
    build_response,
    internal_server_error,
    reject_malformed_path,
)

logger = logging.getLogger("sigma_serve.server")

LISTEN_BACKLOG = 128


def handle_stream(
    stream: BinaryIO,
    config: ServeConfig,
    client: Optional[Tuple[str, int]] = None,
) -> HttpResponse | None:
    """Read one request from ``stream`` and build its response.

    Returns ``None`` when the peer disconnected before sending a request line,
    in which case nothing should be written back.
    """

    peer = _describe(client)
    try:
        request = read_request(stream, client)
    except (ConnectionFault, OSError) as exc:
        logger.debug("%s dropped before sending a request: %s", peer, exc)
        return None
    except MalformedPath as exc:
        response = reject_malformed_path(exc)
        logger.info('%s "%s %s" %s rejected: %s', peer, exc.method, exc.raw_path, response.status, exc)
        return response
    except MalformedRequest as exc:
        response = bad_request()
        logger.info("%s sent a malformed request: %s -> %s", peer, exc, response.status)
        return response

    try:
        response = build_response(request, config)
    except ServerFault:
        logger.exception('%s "%s %s" failed', peer, request.method, request.raw_path)
        return internal_server_error()
    except Exception:  # noqa: BLE001
        logger.exception('%s "%s %s" failed unexpectedly', peer, request.method, request.raw_path)
        return internal_server_error()

    logger.info('%s "%s %s" %s %s', peer, request.method, request.raw_path, response.status, len(response.body))
    return response


def serve_connection(conn: socket.socket, addr: Tuple[str, int], config: ServeConfig) -> None:
    with conn:
        conn.settimeout(config.read_timeout)
        with conn.makefile("rb") as stream:
            response = handle_stream(stream, config, addr)
        if response is None:
            return
        try:
            conn.sendall(response.serialize())
        except OSError as exc:
            logger.debug("%s went away while writing the response: %s", _describe(addr), exc)
            return
        with suppress(OSError):
            conn.shutdown(socket.SHUT_WR)


def create_listener(config: ServeConfig) -> socket.socket:
    """Bind the listening socket; raises :class:`OSError` if the address is unavailable."""

    family = socket.AF_INET6 if ":" in config.host else socket.AF_INET
    infos = socket.getaddrinfo(config.host, config.port, family, socket.SOCK_STREAM)
    family, socktype, proto, _, sockaddr = infos[0]
    sock = socket.socket(family, socktype, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(sockaddr)
        sock.listen(LISTEN_BACKLOG)
    except OSError:
        sock.close()
        raise
    return sock


def serve_forever(
    sock: socket.socket,
    config: ServeConfig,
    stop_event: Optional[threading.Event] = None,
) -> None:
    """Accept connections on ``sock`` and serve each on its own thread.

    Once ``stop_event`` is set the loop exits on the next accepted connection
    (or when ``sock`` is closed); connections already being served finish.
    """

    while stop_event is None or not stop_event.is_set():
        try:
            conn, addr = sock.accept()
        except OSError as exc:
            if sock.fileno() == -1 or (stop_event is not None and stop_event.is_set()):
                break
            logger.warning("connection failed: %s", exc)
            continue
        if stop_event is not None and stop_event.is_set():
            conn.close()
            break
        thread = threading.Thread(target=serve_connection, args=(conn, addr, config), daemon=True)
        thread.start()


def run_server(config: ServeConfig) -> None:
    """Start a blocking server for ``config`` until interrupted."""

    with create_listener(config) as sock:
        host, port = sock.getsockname()[:2]
        logger.info("serving %s on http://%s:%s", config.root, host, port)
        try:
            serve_forever(sock, config)
        except KeyboardInterrupt:
            logger.info("shutting down")


def _describe(client: Optional[Tuple[str, int]]) -> str:
    if not client:
        return "-"
    return f"{client[0]}:{client[1]}"


__all__ = [
    "create_listener",
    "handle_stream",
    "run_server",
    "serve_connection",
    "serve_forever",
]
