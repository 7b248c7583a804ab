from __future__ import annotations

"""Request-line reader and decoder.

Only the first line of a request is consumed. Headers and body, if the client
sent any, are left unread on the connection.
"""

import re
from typing import BinaryIO, Optional, Tuple
from urllib.parse import unquote_to_bytes

from .errors import ConnectionClosed, MalformedPath, MalformedRequest
from .http import HttpRequest

MAX_REQUEST_LINE_BYTES = 8 * 1024

_BAD_PERCENT = re.compile(r"%(?![0-9A-Fa-f]{2})")


def read_request_line(stream: BinaryIO) -> bytes:
    """Read bytes up to and including the first ``\\n`` from ``stream``."""

    line = stream.readline(MAX_REQUEST_LINE_BYTES + 1)
    if not line.endswith(b"\n"):
        if len(line) > MAX_REQUEST_LINE_BYTES:
            raise MalformedRequest("request line too long")
        raise ConnectionClosed("connection closed before a full request line was received")
    return line


def decode_path(raw_path: str) -> str:
    """Percent-decode ``raw_path`` strictly as UTF-8.

    ``raw_path`` is the iso-8859-1 view of the bytes on the wire, so raw
    non-ASCII bytes are decoded together with the percent-escapes. Raises
    :class:`ValueError` on a stray ``%``, invalid UTF-8 or an embedded NUL,
    none of which can name a file.
    """

    if _BAD_PERCENT.search(raw_path):
        raise ValueError("invalid percent-escape")
    try:
        wire = raw_path.encode("iso-8859-1")
    except UnicodeEncodeError as exc:
        raise ValueError("path is not a wire string") from exc
    try:
        decoded = unquote_to_bytes(wire).decode("utf-8")
    except UnicodeDecodeError as exc:
        raise ValueError("path is not valid UTF-8") from exc
    if "\x00" in decoded:
        raise ValueError("path contains a NUL byte")
    return decoded


def parse_request_line(line: bytes, client: Optional[Tuple[str, int]] = None) -> HttpRequest:
    # split as bytes so only ASCII whitespace separates tokens; iso-8859-1
    # never fails, so the method is known before the path is judged
    parts = [token.decode("iso-8859-1") for token in line.split()]
    if not parts:
        raise MalformedRequest("empty request line")
    method = parts[0]
    raw_path = parts[1] if len(parts) > 1 else "/"

    try:
        decoded_path = decode_path(raw_path)
    except ValueError as exc:
        raise MalformedPath(method, raw_path, str(exc)) from exc

    return HttpRequest(method=method, raw_path=raw_path, decoded_path=decoded_path, client=client)


def read_request(stream: BinaryIO, client: Optional[Tuple[str, int]] = None) -> HttpRequest:
    return parse_request_line(read_request_line(stream), client)


__all__ = [
    "MAX_REQUEST_LINE_BYTES",
    "decode_path",
    "parse_request_line",
    "read_request",
    "read_request_line",
]
