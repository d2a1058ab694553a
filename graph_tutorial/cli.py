#!/usr/bin/env python3
"""
Graph Tutorial Command Line Interface

Main entry point for the `graph-tutorial` command.

Usage:
    graph-tutorial serve                          # Start the web app
    graph-tutorial week-start --tz "Pacific Standard Time"
    graph-tutorial week-start --date 2024-03-13 --tz Europe/Berlin
    graph-tutorial --version                      # Show version
"""

import argparse
import sys
from datetime import date, datetime


def cmd_serve(args):
    """Handle serve subcommand."""
    import uvicorn

    from graph_tutorial.config import load_config

    config = load_config()
    host = args.host or config.get("host", "127.0.0.1")
    port = args.port or config.get("port", 5000)

    print(f"Starting Graph Tutorial at http://{host}:{port}")
    print("Press Ctrl+C to stop")

    uvicorn.run(
        "graph_tutorial.web.main:app",
        host=host,
        port=port,
        reload=args.reload,
        log_level="info",
    )


def cmd_week_start(args):
    """Print the UTC start of the Sunday-start week containing a date."""
    from graph_tutorial.graph.timezones import UnknownTimeZone, get_zone
    from graph_tutorial.graph.week import resolve_week_start_utc

    try:
        zone = get_zone(args.tz)
    except UnknownTimeZone as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.date:
        try:
            reference = date.fromisoformat(args.date)
        except ValueError:
            print(f"Error: invalid date {args.date!r}, expected YYYY-MM-DD", file=sys.stderr)
            return 1
    else:
        reference = datetime.now(zone).date()

    start = resolve_week_start_utc(reference, zone)
    print(f"Reference date: {reference.isoformat()} ({reference.strftime('%A')})")
    print(f"Week start ({args.tz}): {start.astimezone(zone).isoformat()}")
    print(f"Week start (UTC): {start.isoformat()}")
    return 0


def cmd_version(args):
    """Show version information."""
    try:
        from importlib.metadata import version

        v = version("graph-tutorial")
    except Exception:
        from graph_tutorial import __version__

        v = f"{__version__} (development)"

    print(f"Graph Tutorial version {v}")


def main():
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="graph-tutorial",
        description="Graph Tutorial - mail and calendar over Microsoft Graph",
    )
    parser.add_argument(
        "--version", "-V", action="store_true", help="Show version and exit"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    serve_parser = subparsers.add_parser("serve", help="Start the web app")
    serve_parser.add_argument("--host", help="Host to bind to (default from config)")
    serve_parser.add_argument("--port", type=int, help="Port to bind to (default from config)")
    serve_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )
    serve_parser.set_defaults(func=cmd_serve)

    week_parser = subparsers.add_parser(
        "week-start", help="Show the UTC start of the week containing a date"
    )
    week_parser.add_argument("--date", help="Reference date YYYY-MM-DD (default: today in --tz)")
    week_parser.add_argument("--tz", default="UTC", help="IANA or Windows time zone name")
    week_parser.set_defaults(func=cmd_week_start)

    args = parser.parse_args()

    if args.version:
        cmd_version(args)
        return 0

    if not args.command:
        parser.print_help()
        return 0

    return args.func(args) or 0


if __name__ == "__main__":
    sys.exit(main())
