from __future__ import annotations


class ServeError(Exception):
    """Base class for every failure raised by the request pipeline."""


class ClientInputError(ServeError):
    """The client sent something we refuse to act on (400/405)."""


class MalformedRequest(ClientInputError):
    """The request line is blank or longer than the read limit."""


class MalformedPath(ClientInputError):
    """The request path could not be percent-decoded as UTF-8."""

    def __init__(self, method: str, raw_path: str, reason: str) -> None:
        super().__init__(f"malformed path {raw_path!r}: {reason}")
        self.method = method
        self.raw_path = raw_path


class ConnectionFault(ServeError):
    """The peer went away before a request could be read."""


class ConnectionClosed(ConnectionFault):
    """The stream ended before a line terminator arrived."""


class ServerFault(ServeError):
    """Unexpected I/O failure that is not attributable to a missing file."""


__all__ = [
    "ServeError",
    "ClientInputError",
    "MalformedRequest",
    "MalformedPath",
    "ConnectionFault",
    "ConnectionClosed",
    "ServerFault",
]
