"""
Weather client

Sends one "<type> <city>" request to a weather server and prints the reply:

    meteo-client -s localhost -p 56700 -r "t roma"
"""
import argparse
import sys
from typing import List, Optional

from meteo.config import settings
from meteo.engine.exchange import ClientExchange, parse_request_string
from meteo.engine.transport import UDPClientTransport, resolve_host, reverse_lookup
from meteo.exceptions import InvalidInputError, ResolutionError, TransportError
from meteo.logging import setup_logging
from meteo_cli.arguments import port_type, timeout_type


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Query a weather server over UDP")
    parser.add_argument(
        "-s",
        "--server",
        default=settings.client_server_host,
        help="Server host name or address",
    )
    parser.add_argument(
        "-p",
        "--port",
        type=port_type,
        default=settings.server_port,
        help="Server UDP port",
    )
    parser.add_argument(
        "-r",
        "--request",
        required=True,
        help='Request of the form "type city", type one of t, h, w, p',
    )
    parser.add_argument(
        "--timeout",
        type=timeout_type,
        default=settings.receive_timeout_sec,
        help="Seconds to wait for the reply (0 waits forever)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        help="Logging level for diagnostics written to stderr",
    )
    return parser


def run(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging("client", args.log_level)

    try:
        parse_request_string(args.request)
    except InvalidInputError as e:
        print(f"Invalid request: {e.message}. Expected -r \"type city\"")
        return 1

    try:
        server_ip = resolve_host(args.server)
    except ResolutionError as e:
        print(f"DNS resolution failed: {e.message}")
        return 1

    try:
        transport = UDPClientTransport(
            server_ip,
            args.port,
            timeout_sec=args.timeout,
            buffer_size=settings.receive_buffer_size,
        )
    except TransportError as e:
        print(f"Error: {e.message}")
        return 1

    with transport:
        result = ClientExchange(transport).run(args.request)

    if not result.ok:
        print(f"Error: {result.message}")
        return 1

    server_name = reverse_lookup(server_ip, fallback=args.server)
    print(f"Result received from server {server_name} (ip {server_ip}). {result.rendered}")
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
