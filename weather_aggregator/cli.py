import argparse
import sys
from typing import List, Optional

import uvicorn
from fastapi import FastAPI
from loguru import logger

from weather_aggregator import __version__
from weather_aggregator.aggregator import DEFAULT_SHUTDOWN_TIMEOUT
from weather_aggregator.config import ConfigError, Settings, load_settings
from weather_aggregator.core import configure_logging, create_app, mark_shutdown_started


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="weather-aggregator", description="Weather forecast aggregation service")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subcommands = parser.add_subparsers(dest="command")

    server = subcommands.add_parser("server", help="run the HTTP server")
    server.add_argument("-c", "--config", default=None, help="path to the YAML config file")
    return parser


class AggregatorServer(uvicorn.Server):
    """uvicorn server whose connection drain and lifespan shutdown share one budget."""

    def __init__(self, config: uvicorn.Config, app: FastAPI):
        super().__init__(config)
        self.app = app

    async def shutdown(self, sockets=None):
        mark_shutdown_started(self.app, DEFAULT_SHUTDOWN_TIMEOUT)
        await super().shutdown(sockets=sockets)


def build_server(settings: Settings) -> AggregatorServer:
    app = create_app(settings)
    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        timeout_keep_alive=max(int(settings.server.idle_timeout), 1),
        timeout_graceful_shutdown=int(DEFAULT_SHUTDOWN_TIMEOUT),
        lifespan="on",
        log_config=None,
        access_log=False,
    )
    return AggregatorServer(config, app)


def run_server(config_path: Optional[str] = None) -> int:
    try:
        settings = load_settings(config_path)
    except ConfigError as e:
        print(f"failed to load config: {e}", file=sys.stderr)
        return 1

    configure_logging(settings.logging)
    server = build_server(settings)

    try:
        server.run()
    except Exception:
        logger.exception("Server exited with an error")
        return 1

    if not server.started:
        logger.error("Server failed to start")
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command == "server":
        return run_server(args.config)

    parser.print_help()
    return 1


if __name__ == "__main__":
    sys.exit(main())
