# websolve_leads/cli.py
"""
Command line access to the lead service: headers, lead status and submission.
"""
from __future__ import annotations

import argparse
import json
import os
import sys
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from websolve_leads.core.config import Settings
from websolve_leads.core.exceptions import LeadsClientError
from websolve_leads.core.logging import configure_structlog
from websolve_leads.services.client import LeadsClient, LeadSession
from websolve_leads.services.transport import HttpSoapTransport


# Output formatting utilities
def _supports_color() -> bool:
    """Check if terminal supports ANSI color codes."""
    if sys.platform == "win32":
        return os.getenv("TERM") == "xterm" or os.getenv("ANSICON") is not None
    return sys.stdout.isatty()


SUPPORTS_COLOR = _supports_color()

GREEN = '\033[92m' if SUPPORTS_COLOR else ''
RED = '\033[91m' if SUPPORTS_COLOR else ''
YELLOW = '\033[93m' if SUPPORTS_COLOR else ''
RESET = '\033[0m' if SUPPORTS_COLOR else ''


def print_success(message: str):
    print(f"{GREEN}[✓]{RESET} {message}", file=sys.stderr)


def print_error(message: str):
    print(f"{RED}[✗]{RESET} {message}", file=sys.stderr)


def print_warning(message: str):
    print(f"{YELLOW}[!]{RESET} {message}", file=sys.stderr)


def print_result(result: Any) -> None:
    if isinstance(result, (dict, list)):
        print(json.dumps(result, indent=2, ensure_ascii=False))
    else:
        print(result)


# Command functions
def cmd_headers(client: LeadsClient, session: LeadSession, args: argparse.Namespace) -> int:
    """Command: Print the lead headers (field schema)."""
    print_result(client.get_lead_headers(session, args.format, refresh=args.refresh))
    return 0


def cmd_status(client: LeadsClient, session: LeadSession, args: argparse.Namespace) -> int:
    """Command: Print the status of a submitted lead."""
    print_result(client.get_lead_status(session, args.reference_id, args.format))
    return 0


def cmd_submit(client: LeadsClient, session: LeadSession, args: argparse.Namespace) -> int:
    """Command: Submit a lead read from a JSON file."""
    data = json.loads(Path(args.file).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        print_error("Lead file must contain a JSON object")
        return 1

    if args.dry_run:
        fields = client.route_lead(session, data)
        for dropped in fields.dropped:
            print_warning(f"Dropped {dropped.key} ({dropped.reason})")
        print_result(client.build_lead_document(session, data))
        return 0

    result = client.set_lead(session, data, args.format)
    if result is False or result is None:
        print_error("Lead was not created")
        return 1
    print_result(result)
    print_success("Lead submitted")
    return 0


# Command registry
COMMANDS: Dict[str, Callable[[LeadsClient, LeadSession, argparse.Namespace], int]] = {
    'headers': cmd_headers,
    'status': cmd_status,
    'submit': cmd_submit,
}


def create_parser() -> argparse.ArgumentParser:
    """Create argument parser with all commands."""
    parser = argparse.ArgumentParser(
        prog='websolve-leads',
        description='Websolve automotive leads client',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--provider-code', help='Lead provider code (defaults to LEADS_PROVIDER_CODE)')
    parser.add_argument('--environment', choices=['live', 'dev'], help='Service environment')
    parser.add_argument('--log-format', choices=['json', 'console'], default='console', help='Log output format')

    subparsers = parser.add_subparsers(dest='command', help='Command to execute')

    headers_parser = subparsers.add_parser('headers', help='Show accepted lead and customer fields')
    headers_parser.add_argument('--format', default='xml', help='xml or array')
    headers_parser.add_argument('--refresh', action='store_true', help='Bypass the headers cache')

    status_parser = subparsers.add_parser('status', help='Show the status of a submitted lead')
    status_parser.add_argument('reference_id', help='Lead reference id')
    status_parser.add_argument('--format', default='xml', help='xml or array')

    submit_parser = subparsers.add_parser('submit', help='Submit a lead from a JSON file')
    submit_parser.add_argument('file', help='JSON file with lead and customer data')
    submit_parser.add_argument('--format', default='xml', help='xml, array, bool or int')
    submit_parser.add_argument('--dry-run', action='store_true', help='Print the request document only')

    return parser


def main(args: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = create_parser()
    parsed_args = parser.parse_args(args)

    if not parsed_args.command:
        parser.print_help()
        return 1

    command_func = COMMANDS[parsed_args.command]
    configure_structlog(log_format=parsed_args.log_format)

    overrides = {}
    if parsed_args.environment:
        overrides['LEADS_ENVIRONMENT'] = parsed_args.environment
    try:
        config = Settings(**overrides)
        with HttpSoapTransport(config) as transport:
            client = LeadsClient(transport, config)
            session = client.session(provider_code=parsed_args.provider_code)
            return command_func(client, session, parsed_args)
    except LeadsClientError as e:
        print_error(f"{e.code}: {e.message}")
        return 1
    except (OSError, ValueError) as e:
        print_error(f"Error executing command: {e}")
        return 1
    except KeyboardInterrupt:
        print_error("\nInterrupted by user")
        return 130


if __name__ == '__main__':
    sys.exit(main())
