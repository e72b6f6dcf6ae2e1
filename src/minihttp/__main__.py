"""
Command-line entry point.

    python -m minihttp                         # 127.0.0.1:8993, hello.html
    python -m minihttp --port 3000             # Custom port
    python -m minihttp --body-file index.html  # Serve another file
    python -m minihttp --log-format json       # JSON log lines

Defaults come from ServerConfig.from_env(), so HTTP_PORT=3000 works too.
Flags win over environment variables.
"""

import argparse
import sys
from typing import List, Optional

from . import __version__
from .config import LOG_FORMATS, LOG_LEVELS, ServerConfig
from .log import setup_logging
from .server import HTTPServer


def build_parser(defaults: ServerConfig) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minihttp",
        description="Minimal HTTP/1.1 server that answers every request with one file",
    )

    parser.add_argument(
        "--host", "-H",
        default=defaults.host,
        help=f"Host to bind to (default: {defaults.host})"
    )
    parser.add_argument(
        "--port", "-p",
        type=int,
        default=defaults.port,
        help=f"Port to listen on (default: {defaults.port})"
    )
    parser.add_argument(
        "--body-file", "-f",
        default=defaults.body_file,
        help=f"File served as the response body (default: {defaults.body_file})"
    )
    parser.add_argument(
        "--log-level", "-l",
        type=str.upper,
        choices=LOG_LEVELS,
        default=defaults.log_level.upper(),
        help=f"Logging level (default: {defaults.log_level})"
    )
    parser.add_argument(
        "--log-format",
        choices=LOG_FORMATS,
        default=defaults.log_format,
        help=f"Log output format (default: {defaults.log_format})"
    )
    parser.add_argument(
        "--version", "-v",
        action="version",
        version=f"minihttp {__version__}"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    try:
        defaults = ServerConfig.from_env()
    except ValueError as e:
        print(f"Error: invalid environment setting: {e}", file=sys.stderr)
        return 2

    args = build_parser(defaults).parse_args(argv)

    config = ServerConfig(
        host=args.host,
        port=args.port,
        timeout=defaults.timeout,
        body_file=args.body_file,
        log_level=args.log_level,
        log_format=args.log_format,
    )

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    setup_logging(config.log_level, config.log_format)

    server = HTTPServer(config)
    try:
        server.run()
    except OSError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
