"""
Weather server

Answers weather requests on a UDP port until interrupted:

    meteo-server -p 56700
"""
import argparse
import random
import sys
from typing import List, Optional

import structlog

from meteo.config import settings
from meteo.engine.providers import WeatherValueProvider
from meteo.engine.request_handler import RequestHandler
from meteo.engine.server import WeatherServer
from meteo.engine.transport import UDPServerTransport
from meteo.exceptions import BindError
from meteo.logging import setup_logging
from meteo_cli.arguments import port_type

logger = structlog.get_logger()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Synthetic weather server over UDP")
    parser.add_argument(
        "-p",
        "--port",
        type=port_type,
        default=settings.server_port,
        help="UDP port to listen on",
    )
    parser.add_argument(
        "--host",
        default=settings.server_host,
        help="Interface to bind (0.0.0.0 for all interfaces)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        help="Seed for the value generator (random if omitted)",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level",
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("server", args.log_level)

    provider = WeatherValueProvider(random.Random(args.seed))
    transport = UDPServerTransport(
        host=args.host,
        port=args.port,
        buffer_size=settings.receive_buffer_size,
    )

    try:
        host, port = transport.bind()
    except BindError as e:
        print(f"Server setup failed: {e.message}")
        logger.error("server_bind_failed", error=e.message, details=e.details)
        return 1

    print(f"UDP weather server listening on {host}:{port}...")
    with transport:
        WeatherServer(transport, RequestHandler(provider=provider)).serve_forever()

    print("Server stopped.")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
