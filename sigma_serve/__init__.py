"""Static HTML file server answering one request per connection."""

from .config import ServeConfig, load_config, make_config
from .http import HttpRequest, HttpResponse
from .resolver import Outcome, Resolution, resolve
from .responses import build_response
from .server import create_listener, handle_stream, run_server, serve_forever

__all__ = [
    "HttpRequest",
    "HttpResponse",
    "Outcome",
    "Resolution",
    "ServeConfig",
    "build_response",
    "create_listener",
    "handle_stream",
    "load_config",
    "make_config",
    "resolve",
    "run_server",
    "serve_forever",
]
