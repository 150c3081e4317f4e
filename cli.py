#!/usr/bin/env python3
"""
Command-line interface for the quote notification backend.

Usage:
    uv run python cli.py [command] [options]

Commands:
    demo          Run demo scenarios
    process-all   Backfill notifications for every accepted quote
    summary       Print the notification summary
    test          Run the test suite
    serve         Start the API server

Examples:
    uv run python cli.py demo quote-accepted
    uv run python cli.py demo all
    uv run python cli.py process-all
    uv run python cli.py serve
"""

import argparse
import asyncio
import logging
import subprocess
import sys

from core.config import get_settings


def _configure_logging() -> None:
    logging.basicConfig(
        level=get_settings().log_level,
        format="%(asctime)s | %(name)-24s | %(levelname)-5s | %(message)s",
        datefmt="%H:%M:%S",
    )


def run_demo(scenario: str) -> None:
    """Run a demo scenario."""
    from notifications.demo import (
        run_all_demos,
        run_backfill_demo,
        run_quote_accepted_demo,
        run_quote_unaccepted_demo,
    )

    if scenario == "quote-accepted":
        asyncio.run(run_quote_accepted_demo())
    elif scenario == "quote-unaccepted":
        asyncio.run(run_quote_unaccepted_demo())
    elif scenario == "backfill":
        asyncio.run(run_backfill_demo())
    elif scenario == "all":
        asyncio.run(run_all_demos())
    else:
        print(f"Unknown scenario: {scenario}")
        sys.exit(1)


def run_process_all() -> None:
    """Backfill notifications over the seeded quotes and print the outcome."""
    from notifications.backend import Backend

    _configure_logging()
    backend = Backend()
    result = asyncio.run(backend.generator.process_all_accepted())
    print(f"Processed {result.processados} accepted quote(s)")
    print(f"Created {result.notificacoes_criadas} notification(s)")


def run_summary(backfill: bool) -> None:
    """Print the dashboard counters."""
    from notifications.backend import Backend

    _configure_logging()
    backend = Backend()

    async def _summary():
        if backfill:
            await backend.generator.process_all_accepted()
        return await backend.notification_service.obtain_summary()

    summary = asyncio.run(_summary())
    print(f"Total:     {summary.total}")
    print(f"Unread:    {summary.nao_lidas}")
    print(f"Overdue:   {summary.vencidas}")
    print(f"Upcoming:  {summary.proximas_vencer}")
    print(f"Active:    {summary.ativas}")


def run_tests(args: list[str]) -> None:
    """Run the test suite."""
    cmd = ["uv", "run", "pytest"] + args
    subprocess.run(cmd)


def run_server(host: str, port: int, reload: bool) -> None:
    """Start the API server."""
    cmd = ["uv", "run", "uvicorn", "api.main:app", f"--host={host}", f"--port={port}"]
    if reload:
        cmd.append("--reload")

    print(f"Starting server at http://{host}:{port}")
    print(f"API docs available at http://{host}:{port}/docs")
    subprocess.run(cmd)


def main() -> None:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Quote Notifications CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s demo quote-accepted
  %(prog)s demo all
  %(prog)s process-all
  %(prog)s summary --backfill
  %(prog)s test -v
  %(prog)s serve --reload
        """,
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # Demo command
    demo_parser = subparsers.add_parser("demo", help="Run demo scenarios")
    demo_parser.add_argument(
        "scenario",
        choices=["quote-accepted", "quote-unaccepted", "backfill", "all"],
        help="Which scenario to run",
    )

    # Process-all command
    subparsers.add_parser("process-all", help="Backfill notifications for every accepted quote")

    # Summary command
    summary_parser = subparsers.add_parser("summary", help="Print the notification summary")
    summary_parser.add_argument(
        "--backfill",
        action="store_true",
        help="Generate notifications for accepted quotes first",
    )

    # Test command
    test_parser = subparsers.add_parser("test", help="Run the test suite")
    test_parser.add_argument(
        "pytest_args",
        nargs="*",
        default=[],
        help="Arguments to pass to pytest",
    )

    # Serve command
    serve_parser = subparsers.add_parser("serve", help="Start the API server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to")
    serve_parser.add_argument("--port", type=int, default=8000, help="Port to bind to")
    serve_parser.add_argument("--reload", action="store_true", help="Enable auto-reload")

    args = parser.parse_args()

    if args.command == "demo":
        run_demo(args.scenario)
    elif args.command == "process-all":
        run_process_all()
    elif args.command == "summary":
        run_summary(args.backfill)
    elif args.command == "test":
        run_tests(args.pytest_args)
    elif args.command == "serve":
        run_server(args.host, args.port, args.reload)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
