"""
BMLT Meeting Finder: interactive CLI
===================================
Thin wrapper around the bmlt_query library.

Usage:
    bmlt-query                               # interactive mode
    bmlt-query "Times Square, New York" 2    # single search, radius in miles

Configuration is read from environment variables:
    BMLT_ROOT_SERVER_URL   Root server to query
    BMLT_USER_AGENT        User-Agent sent to the server and to Nominatim
    BMLT_LOG_LEVEL         Logging level (default WARNING)
"""

import logging
import os
import sys

from bmlt_query import BmltClient
from bmlt_query._version import DEFAULT_USER_AGENT
from bmlt_query.exceptions import BmltQueryError, ErrorType
from bmlt_query.models import Meeting

_DEFAULT_ROOT = os.environ.get(
    "BMLT_ROOT_SERVER_URL", "https://latest.aws.bmlt.app/main_server"
)
_USER_AGENT = os.environ.get("BMLT_USER_AGENT", DEFAULT_USER_AGENT)
_LOG_LEVEL = os.environ.get("BMLT_LOG_LEVEL", "WARNING").upper()

_DEFAULT_RADIUS = 5.0
_PAGE_SIZE = 10

_DAY_NAMES = ("", "Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")

_BANNER = """\
╔══════════════════════════════════════╗
║         BMLT Meeting Finder          ║
║   Address → Nearby Meetings          ║
╚══════════════════════════════════════╝
Type 'q' to quit.
"""


def _format_meeting(meeting: Meeting) -> str:
    day = (
        _DAY_NAMES[meeting.weekday_tinyint]
        if 1 <= meeting.weekday_tinyint <= 7
        else "?"
    )
    line = f"  {day} {meeting.start_time[:5]}  {meeting.meeting_name}"
    if meeting.distance_in_miles is not None:
        line += f"  ({meeting.distance_in_miles:.1f} mi)"
    where = meeting.location_text or meeting.location_street
    if where:
        line += f"\n             {where}"
    if meeting.virtual_meeting_link:
        line += f"\n             {meeting.virtual_meeting_link}"
    return line


def _search(client: BmltClient, address: str, radius: float) -> list[Meeting]:
    return client.search_meetings_by_address(
        address, radius, search_params={"page_size": _PAGE_SIZE}
    )


def _run_interactive(client: BmltClient) -> None:
    print(_BANNER)
    print(f"Server: {client.root_server_url}")

    while True:
        # -- Address ----------------------------------------------------
        try:
            address = input("\nAddress:         ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        if address.lower() in ("q", "quit", "exit"):
            print("Bye!")
            break
        if not address:
            print("  ✗ Address is required.")
            continue

        # -- Radius -----------------------------------------------------
        try:
            raw_radius = input(f"Radius (miles) [{_DEFAULT_RADIUS:g}]: ").strip()
        except (EOFError, KeyboardInterrupt):
            print("\nBye!")
            break

        try:
            radius = float(raw_radius) if raw_radius else _DEFAULT_RADIUS
        except ValueError:
            print(f"  ✗ Invalid radius: '{raw_radius}'")
            continue

        # -- Search -----------------------------------------------------
        print("  ⏳ Searching …", end="", flush=True)
        try:
            meetings = _search(client, address, radius)
        except BmltQueryError as exc:
            print(f"\r  ✗ {exc.user_message}")
            if exc.is_type(ErrorType.VALIDATION_ERROR):
                print(f"    {exc}")
            continue

        # -- Display ----------------------------------------------------
        if not meetings:
            print(f"\r  ✗ No meetings within {radius:g} miles of '{address}'")
            continue
        print(f"\r  ✓ {len(meetings)} meeting(s) found")
        print()
        for meeting in meetings:
            print(_format_meeting(meeting))


def main() -> None:
    """Entry point: supports both CLI args and interactive mode."""
    logging.basicConfig(
        level=_LOG_LEVEL,
        format="%(asctime)s %(name)s %(levelname)s %(message)s",
    )

    try:
        client = BmltClient(_DEFAULT_ROOT, user_agent=_USER_AGENT)
    except BmltQueryError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        print(
            "Set BMLT_ROOT_SERVER_URL to the root server of a BMLT "
            "installation, e.g. https://bmlt.example.org/main_server",
            file=sys.stderr,
        )
        sys.exit(2)

    try:
        if len(sys.argv) == 3:
            # Single-shot mode
            try:
                meetings = _search(client, sys.argv[1], float(sys.argv[2]))
            except ValueError:
                print(f"Invalid radius: {sys.argv[2]}", file=sys.stderr)
                sys.exit(1)
            except BmltQueryError as exc:
                print(f"Search failed: {exc}", file=sys.stderr)
                sys.exit(1)
            for meeting in meetings:
                print(_format_meeting(meeting))
        else:
            _run_interactive(client)
    finally:
        client.close()


if __name__ == "__main__":
    main()
