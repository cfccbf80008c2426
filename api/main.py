"""Command line entry point for the clinical records web service."""
from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from api.app import create_app
from api.config import Settings

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None, settings: Optional[Settings] = None) -> argparse.Namespace:
    settings = settings or Settings.from_env()
    parser = argparse.ArgumentParser(description="Clinical records service")
    parser.add_argument("--host", default=settings.host, help="Interface to bind")
    parser.add_argument("--port", type=int, default=settings.port, help="Port to listen on")
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        type=str.upper,
        help="Logging verbosity",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        default=settings.debug,
        help="Run Flask in debug mode",
    )
    return parser.parse_args(argv)


def configure_logging(level: str) -> None:
    logging.basicConfig(level=getattr(logging, level, logging.INFO), format=LOG_FORMAT)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level)

    app = create_app()
    logger.info("Starting clinical records service on %s:%s", args.host, args.port)
    app.run(host=args.host, port=args.port, debug=args.debug, threaded=True)
    return 0


if __name__ == "__main__":
    sys.exit(main())
