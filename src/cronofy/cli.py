"""CLI for the Cronofy client.

Usage:
    cronofy status                                   # Show configured credentials
    cronofy auth-link --redirect-uri <uri>           # Print authorization URL
    cronofy token --code <code> --redirect-uri <uri> # Exchange code for tokens
    cronofy refresh                                  # Refresh the access token
    cronofy calendars                                # List calendars
    cronofy events [--from <iso>] [--to <iso>]       # Read events
    cronofy channels                                 # List notification channels
    cronofy create-channel <callback-url>            # Create a notification channel

Credentials are read from CRONOFY_CLIENT_ID, CRONOFY_CLIENT_SECRET,
CRONOFY_ACCESS_TOKEN and CRONOFY_REFRESH_TOKEN (or a .env file).
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from typing import Any


def cmd_status() -> int:
    """Show status of configured credentials."""
    from cronofy.config import get_credential_status

    status = get_credential_status()

    print("=" * 60)
    print("CRONOFY CREDENTIAL STATUS")
    print("=" * 60)
    print()
    print(f"API:  {status['api_url']}")
    print(f"App:  {status['app_url']}")
    print(f".env: {'[x]' if status['env_file'] else '[ ]'}")
    print()
    for name, configured in status["credentials"].items():
        mark = "[x]" if configured else "[ ]"
        print(f"  {mark} {name}")
    print()

    return 0


def _make_client():
    """Build a client from environment credentials, or None if unconfigured."""
    from cronofy import Client
    from cronofy.config import get_credentials_from_env

    creds = get_credentials_from_env()
    if not creds["client_id"] or not creds["client_secret"]:
        print(
            "Error: CRONOFY_CLIENT_ID and CRONOFY_CLIENT_SECRET must be set",
            file=sys.stderr,
        )
        return None

    return Client(**creds)


def _print_json(data: Any) -> None:
    print(json.dumps(data, indent=2, sort_keys=True))


def _parse_time(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def parse_scopes(scope_str: str | None) -> list[str] | None:
    """Parse comma-separated scopes."""
    if not scope_str:
        return None  # Client default
    return [s.strip() for s in scope_str.split(",") if s.strip()]


def run_command(args: argparse.Namespace) -> int:
    """Run a client-backed command."""
    from cronofy.exceptions import CronofyError

    client = _make_client()
    if client is None:
        return 1

    with client:
        try:
            if args.command == "auth-link":
                print(client.user_auth_link(args.redirect_uri, parse_scopes(args.scopes)))
            elif args.command == "token":
                _print_json(client.get_token_from_code(args.code, args.redirect_uri).to_dict())
            elif args.command == "refresh":
                _print_json(client.refresh_access_token().to_dict())
            elif args.command == "calendars":
                _print_json(client.list_calendars())
            elif args.command == "channels":
                _print_json(client.list_channels())
            elif args.command == "create-channel":
                _print_json(client.create_channel(args.callback_url))
            elif args.command == "events":
                _print_json(
                    client.read_events(
                        from_=_parse_time(args.from_),
                        to=_parse_time(args.to),
                        tzid=args.tzid,
                        include_deleted=args.include_deleted or None,
                        include_moved=args.include_moved or None,
                    )
                )
        except CronofyError as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1

    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="cronofy",
        description="Command-line access to the Cronofy calendar API",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # status
    subparsers.add_parser("status", help="Show configured credentials")

    # auth-link
    link_parser = subparsers.add_parser("auth-link", help="Print authorization URL")
    link_parser.add_argument("--redirect-uri", required=True, help="OAuth redirect URI")
    link_parser.add_argument(
        "--scopes",
        type=str,
        default=None,
        help="Comma-separated scopes (default: all scopes)",
    )

    # token
    token_parser = subparsers.add_parser("token", help="Exchange authorization code")
    token_parser.add_argument("--code", required=True, help="Authorization code")
    token_parser.add_argument("--redirect-uri", required=True, help="OAuth redirect URI")

    # refresh
    subparsers.add_parser("refresh", help="Refresh access token")

    # calendars / channels
    subparsers.add_parser("calendars", help="List calendars")
    subparsers.add_parser("channels", help="List notification channels")

    # create-channel
    channel_parser = subparsers.add_parser("create-channel", help="Create notification channel")
    channel_parser.add_argument("callback_url", help="URL to receive notifications")

    # events
    events_parser = subparsers.add_parser("events", help="Read events")
    events_parser.add_argument("--from", dest="from_", help="Start time (ISO-8601)")
    events_parser.add_argument("--to", help="End time (ISO-8601)")
    events_parser.add_argument("--tzid", default="Etc/UTC", help="Time zone (default: Etc/UTC)")
    events_parser.add_argument("--include-deleted", action="store_true")
    events_parser.add_argument("--include-moved", action="store_true")

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        level=logging.DEBUG if args.verbose else logging.WARNING,
    )

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    return run_command(args)


if __name__ == "__main__":
    sys.exit(main())
