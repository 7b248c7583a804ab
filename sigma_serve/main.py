from __future__ import annotations

import logging
import sys
from typing import Optional, Sequence

from .config import load_config
from .server import run_server

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def main(argv: Optional[Sequence[str]] = None) -> None:
    try:
        config = load_config(argv)
        logging.basicConfig(level=config.log_level, format=LOG_FORMAT)
        run_server(config)
    except Exception as exc:  # noqa: BLE001
        print(f"[sigma-serve] fatal error: {exc}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":  # pragma: no cover - cli entry point
    main()
