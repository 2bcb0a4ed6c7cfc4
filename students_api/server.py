"""Command line entry point: load config, then serve the API with uvicorn."""

import argparse
import logging
import sys
from typing import List, Optional

import uvicorn

from students_api.core.config import ConfigError, load_settings
from students_api.core.logging import setup_logging
from students_api.main import create_app

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="students-api", description="Students CRUD API server")
    parser.add_argument("--config", default=None, help="path to the configuration file")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    try:
        settings = load_settings(args.config)
    except ConfigError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    setup_logging(settings.log_level)

    host, port = settings.http_server.host_port()
    app = create_app(settings)

    logger.info(f"server starting at {settings.http_server.address}")

    # uvicorn handles SIGINT/SIGTERM and drains in-flight requests
    config = uvicorn.Config(
        app,
        host=host,
        port=port,
        timeout_graceful_shutdown=settings.shutdown_timeout,
        log_config=None,
    )
    uvicorn.Server(config).run()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
