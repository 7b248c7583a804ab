from __future__ import annotations

import argparse
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple

DEFAULT_BIND = "localhost:8080"
DEFAULT_SUFFIX = ".html"
DEFAULT_READ_TIMEOUT = 30.0
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True, slots=True)
class ServeConfig:
    root: Path
    host: str = "localhost"
    port: int = 8080
    suffix: str = DEFAULT_SUFFIX
    read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def bind(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{host}:{self.port}"


def parse_bind(raw: str) -> Tuple[str, int]:
    """Split ``host:port`` (or ``[v6addr]:port``) into its parts."""

    value = raw.strip()
    if value.startswith("["):
        host, sep, rest = value[1:].partition("]")
        if not sep or not rest.startswith(":"):
            raise ValueError(f"invalid bind address: {raw!r}")
        port_str = rest[1:]
    else:
        host, sep, port_str = value.rpartition(":")
        if not sep:
            raise ValueError(f"invalid bind address: {raw!r}")
    if not host:
        raise ValueError(f"invalid bind address: {raw!r}")
    return host, _coerce_port(port_str)


def _coerce_port(raw: str) -> int:
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValueError(f"invalid port number: {raw}") from exc
    if value < 0 or value > 65535:
        raise ValueError(f"invalid port number: {raw}")
    return value


def _canonical_root(raw: str | os.PathLike[str]) -> Path:
    try:
        root = Path(raw).resolve(strict=True)
    except FileNotFoundError as exc:
        raise ValueError(f"root directory does not exist: {raw}") from exc
    if not root.is_dir():
        raise ValueError(f"root is not a directory: {raw}")
    return root


def make_config(
    root: str | os.PathLike[str],
    bind: str = DEFAULT_BIND,
    suffix: str = DEFAULT_SUFFIX,
    read_timeout: Optional[float] = DEFAULT_READ_TIMEOUT,
    log_level: str = DEFAULT_LOG_LEVEL,
) -> ServeConfig:
    host, port = parse_bind(bind)
    if read_timeout is not None:
        if read_timeout < 0:
            raise ValueError(f"read timeout must not be negative: {read_timeout}")
        # 0 means block forever
        read_timeout = read_timeout or None
    return ServeConfig(
        root=_canonical_root(root),
        host=host,
        port=port,
        suffix=suffix,
        read_timeout=read_timeout,
        log_level=log_level.upper(),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sigma-serve",
        description="Serve the HTML files beneath a directory over plain HTTP.",
    )
    parser.add_argument("root", help="Directory whose files are served.")
    parser.add_argument(
        "--bind",
        default=os.environ.get("SIGMA_SERVE_BIND", DEFAULT_BIND),
        help="Address to listen on as HOST:PORT (default: %(default)s).",
    )
    parser.add_argument(
        "--suffix",
        default=os.environ.get("SIGMA_SERVE_SUFFIX", DEFAULT_SUFFIX),
        help="Suffix appended to every request path except / (default: %(default)s).",
    )
    parser.add_argument(
        "--read-timeout",
        type=float,
        default=float(os.environ.get("SIGMA_SERVE_READ_TIMEOUT", str(DEFAULT_READ_TIMEOUT))),
        help="Seconds to wait for the request line, 0 to wait forever (default: %(default)s).",
    )
    parser.add_argument(
        "--log-level",
        default=os.environ.get("SIGMA_SERVE_LOG_LEVEL", DEFAULT_LOG_LEVEL),
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        type=str.upper,
        help="Logging verbosity (default: %(default)s).",
    )
    return parser


def load_config(argv: Optional[Sequence[str]] = None) -> ServeConfig:
    args = build_parser().parse_args(argv)
    return make_config(
        args.root,
        bind=args.bind,
        suffix=args.suffix,
        read_timeout=args.read_timeout,
        log_level=args.log_level,
    )


__all__ = ["ServeConfig", "build_parser", "load_config", "make_config", "parse_bind"]
