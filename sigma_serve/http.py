from __future__ import annotations

"""Minimal HTTP primitives for the single-request file server.

Only the request line is ever parsed, so a request carries no headers and no
body. Responses always close the connection after being written.
"""

from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Dict, Optional, Tuple

CONTENT_TYPE = "text/html"


@dataclass(frozen=True, slots=True)
class HttpRequest:
    """The first line of an HTTP request received by the server."""

    method: str
    raw_path: str
    decoded_path: str
    client: Optional[Tuple[str, int]] = None


@dataclass(slots=True)
class HttpResponse:
    """Represents an HTTP/1.1 response produced by the builder."""

    status: int
    body: bytes = b""
    headers: Dict[str, str] = field(default_factory=dict)

    @property
    def reason(self) -> str:
        try:
            return HTTPStatus(self.status).phrase
        except ValueError:
            return "Unknown"

    def ensure_headers(self) -> None:
        """Guarantee ``Content-Length`` and ``Content-Type`` are present."""

        self.headers["Content-Length"] = str(len(self.body))
        self.headers.setdefault("Content-Type", CONTENT_TYPE)

    def serialize(self) -> bytes:
        self.ensure_headers()
        status_line = f"HTTP/1.1 {int(self.status)} {self.reason}\r\n"
        header_lines = "".join(f"{name}: {value}\r\n" for name, value in self.headers.items())
        return (status_line + header_lines + "\r\n").encode("iso-8859-1") + self.body


__all__ = ["CONTENT_TYPE", "HttpRequest", "HttpResponse"]
