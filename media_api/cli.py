"""
Command-line interface for the media API client.

Issues a single request and prints the decoded JSON body.
"""

import argparse
import json
import sys

from media_api.config import REQUEST_TIMEOUT
from media_api.errors import APIError, ErrorKind
from media_api.indicator import default_indicator
from media_api.logging_setup import log, setup_logging
from media_api.manager import build_request
from media_api.outcome import Failure
from media_api.request import HTTPMethod
from media_api.session import build_session
from media_api.transport import RequestsTransport

EXIT_CODES = {
    ErrorKind.OTHER: 1,
    ErrorKind.ENCODING_FAILURE: 2,
    ErrorKind.UNAUTHORIZED: 3,
    ErrorKind.NO_CONNECTION: 4,
}


def _key_value(text: str) -> tuple[str, str]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected key=value, got {text!r}")
    return key, value


def _json_object(text: str) -> dict:
    try:
        value = json.loads(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid JSON: {exc}") from exc
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("--json must be a JSON object")
    return value


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="media-api",
        description="Send one HTTP request and print the JSON response.",
        epilog=(
            "GET/HEAD parameters go into the query string, all other methods "
            "send them as a JSON body."
        ),
    )
    parser.add_argument("url", help="Target address")
    parser.add_argument(
        "-X", "--method", default=HTTPMethod.GET.value,
        type=str.upper, choices=[m.value for m in HTTPMethod],
        help="HTTP method (default: GET)",
    )
    parser.add_argument(
        "-d", "--data", dest="params", action="append", type=_key_value, default=[],
        metavar="KEY=VALUE", help="Request parameter (repeatable)",
    )
    parser.add_argument(
        "--json", dest="json_params", type=_json_object, default=None,
        help="Request parameters as a JSON object (merged before -d values)",
    )
    parser.add_argument(
        "--indicator", action="store_true",
        help="Show a loading indicator while waiting",
    )
    parser.add_argument(
        "--timeout", type=float, default=REQUEST_TIMEOUT,
        help=f"Request timeout in seconds (default: {REQUEST_TIMEOUT:g})",
    )
    parser.add_argument(
        "--no-verify-ssl", dest="verify_ssl", action="store_false", default=True,
        help="Disable TLS certificate verification",
    )
    parser.add_argument(
        "--debug", action="store_true",
        help="Enable verbose debug logging (prints the cURL equivalent)",
    )
    parser.add_argument(
        "--log-file", default=None,
        help="Also write debug-level logs to this file",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point for the CLI.

    Returns the process exit code.
    """
    args = parse_args(argv)

    setup_logging(debug=args.debug, log_file=args.log_file)

    if not args.verify_ssl:
        log.warning("TLS certificate verification is DISABLED (--no-verify-ssl)")

    params = dict(args.json_params or {})
    params.update(args.params)

    with RequestsTransport(session=build_session(verify_ssl=args.verify_ssl), max_workers=1) as transport:
        req = build_request(
            args.url,
            method=args.method,
            parameters=params or None,
            show_indicator=args.indicator,
            transport=transport,
            indicator=default_indicator() if args.indicator else None,
            timeout=args.timeout,
        )
        try:
            future = req.execute()
        except APIError as exc:
            outcome = Failure(exc)
        else:
            try:
                outcome = future.result()
            except KeyboardInterrupt:
                future.cancel()
                log.warning("Interrupted")
                return 130
        transport.session.close()

    if outcome.ok:
        print(json.dumps(outcome.value, indent=2, ensure_ascii=False))
        return 0

    log.error("%s: %s", outcome.kind.value, outcome.error)
    return EXIT_CODES[outcome.kind]


if __name__ == "__main__":
    sys.exit(main())
