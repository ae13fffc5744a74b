"""
Process entry point: configure logging and serve the app with uvicorn.

Run with:
    python -m products_backend [--host HOST] [--port PORT]
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Optional, Sequence

import uvicorn

from products_backend.app import create_app
from products_backend.config import get_settings

logger = logging.getLogger(__name__)


def _parse_args(argv: Optional[Sequence[str]], default_host: str, default_port: int):
    parser = argparse.ArgumentParser(description="Serve the products backend API.")
    parser.add_argument("--host", default=default_host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=default_port, help="Port to listen on")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    settings = get_settings()
    args = _parse_args(argv, settings.host, settings.port)

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(name)s %(levelname)s %(asctime)s %(message)s",
        datefmt="%m/%d/%Y %I:%M:%S %p",
    )

    try:
        app = create_app(settings)
        logger.info("Starting server on %s:%d", args.host, args.port)
        uvicorn.run(app, host=args.host, port=args.port, log_config=None)
    except SystemExit as exc:
        # uvicorn exits on its own when the socket cannot be bound.
        if exc.code:
            logger.error("Server failed to start on %s:%d", args.host, args.port)
            return 1
        return 0
    except Exception:
        logger.exception("Server failed to start on %s:%d", args.host, args.port)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
