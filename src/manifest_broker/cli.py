# SPDX-License-Identifier: LGPL-3.0-only
# Copyright (c) 2026 Mirrowel

# src/manifest_broker/cli.py
"""
Command line entry point.

Usage:
    manifest-broker
    manifest-broker --port 4567 --callback-url https://example.com/api/auth/callback/github
    manifest-broker --no-browser --json > app.json

Every option can also be set through a MANIFEST_BROKER_* environment variable
or a .env file in the working directory; flags win.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from dotenv import load_dotenv

from . import __version__
from .config import BrokerSettings
from .display import print_credentials, print_credentials_json, print_error, print_header
from .errors import SessionError
from .logging_setup import setup_logging
from .session import SessionController

lib_logger = logging.getLogger("manifest_broker")

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="manifest-broker",
        description="Create a GitHub App from a manifest and print its OAuth credentials.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--host", help="Interface for the local listener (default: localhost)")
    parser.add_argument("--port", type=int, help="Port for the local listener (default: 3456)")
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds to wait for the browser callback (default: 300)",
    )
    parser.add_argument("--callback-url", help="OAuth callback URL of your application")
    parser.add_argument("--app-name", help="GitHub App name (default: better-auth-<timestamp>)")
    parser.add_argument("--github-url", help="GitHub web URL, for GitHub Enterprise")
    parser.add_argument("--api-url", help="GitHub API URL, for GitHub Enterprise")
    parser.add_argument(
        "--no-browser",
        dest="open_browser",
        action="store_false",
        default=None,
        help="Only print the URL, do not open a browser",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Print the credentials as a single JSON object",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Console log level (default: WARNING)",
    )
    parser.add_argument("--log-file", help="Also write JSON logs to this file")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> BrokerSettings:
    if args.port is not None and not 1 <= args.port <= 65535:
        raise SystemExit(f"--port must be between 1 and 65535, got {args.port}")
    if args.timeout is not None and args.timeout <= 0:
        raise SystemExit("--timeout must be positive")

    return BrokerSettings.from_env().with_overrides(
        host=args.host,
        port=args.port,
        timeout=args.timeout,
        callback_url=args.callback_url,
        app_name=args.app_name,
        github_url=args.github_url,
        api_url=args.api_url,
        open_browser=args.open_browser,
    )


def main(argv: Optional[List[str]] = None) -> int:
    # Load environment variables from .env file
    load_dotenv()

    args = build_parser().parse_args(argv)
    setup_logging(args.log_level, args.log_file)
    settings = settings_from_args(args)

    if not args.json:
        print_header()

    controller = SessionController(settings)
    try:
        credentials = asyncio.run(controller.run())
    except SessionError as e:
        print_error(str(e))
        return EXIT_FAILURE
    except KeyboardInterrupt:
        print_error("Interrupted")
        return EXIT_INTERRUPTED
    except Exception as e:
        lib_logger.exception("Unexpected error during the session")
        print_error(str(e) or type(e).__name__)
        return EXIT_FAILURE

    if args.json:
        print_credentials_json(credentials)
    else:
        print_credentials(credentials)
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
