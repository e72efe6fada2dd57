#!/usr/bin/env python3
"""
NoteKeeper -- personal notes behind stateless token authentication.

Usage:
  python main.py
  python main.py --port 8000
  python main.py --host 127.0.0.1 --reload
  notekeeper --port 8000            (installed console script)

Environment variables (see core/config.py for the full list):
  SECRET_KEY / JWT_SECRET     Token signing key, at least 32 characters.
                              Required unless DEBUG=true.
  TOKEN_EXPIRE_SECONDS        Token lifetime: 60, "60s", "5m", "1h" ...
  DATABASE_URL                SQLAlchemy URL, e.g. sqlite:///notekeeper.db
  PORT                        Listen port (default 5000).
"""

import argparse
import logging
from typing import Optional

import uvicorn

from core.config import get_settings
from core.logging import setup_logging

logger = logging.getLogger("notekeeper.main")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="notekeeper",
        description="Run the NoteKeeper REST API.",
    )
    parser.add_argument("--host", default=None, help="Interface to bind (default: HOST setting)")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on (default: PORT setting)")
    parser.add_argument("--reload", action="store_true", help="Restart on code changes (development only)")
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    args = _build_parser().parse_args(argv)
    settings = get_settings()
    host = args.host or settings.host
    port = args.port or settings.port
    setup_logging(settings)
    logger.info("NoteKeeper server starting, listening on %s:%d", host, port)
    uvicorn.run(
        "api.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
