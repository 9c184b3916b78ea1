#!/usr/bin/env python3
"""
Command-line interface for the shopping trip redirection suite.
"""

import argparse
import asyncio
import sys
import traceback
from typing import List, Optional

from shopping_trip.config import DEFAULT_INPUT_FILE, get_run_output_dir, load_settings
from shopping_trip.errors import StoreFileError
from shopping_trip.runner import ShoppingTripRunner
from shopping_trip.session import open_session
from shopping_trip.stores import filter_stores, load_stores


async def run_suite(settings: dict, store_ids: Optional[List[int]] = None, limit: Optional[int] = None) -> int:
    """
    Load stores, open the shared session and run every store.

    Returns:
        Process exit code: 0 if all stores redirected, 1 otherwise
    """
    try:
        stores = filter_stores(load_stores(settings['input_file']), store_ids=store_ids, limit=limit)
    except StoreFileError as e:
        print(f"Error: {e}")
        return 1

    if not stores:
        print(f"Error: no runnable stores in {settings['input_file']}")
        return 1

    output_dir = settings.get('output_dir') or get_run_output_dir()

    print("=" * 60)
    print("Shopping Trip Redirection Tests")
    print("=" * 60)
    print(f"Input: {settings['input_file']}")
    print(f"Stores: {len(stores)}")
    print(f"Output: {output_dir}")

    async with open_session(settings, output_dir=output_dir) as session:
        runner = ShoppingTripRunner(session)
        await runner.run(stores)
        report_path = runner.write_report()
        runner.print_summary()
        print(f"Report: {report_path}")

    return 1 if runner.failed else 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Verify that affiliate tracking URLs redirect to the expected merchant",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run every store in the default spreadsheet
  python -m shopping_trip

  # Watch the browser, only two stores
  python -m shopping_trip --headed --store-id 12 --store-id 40

  # Skip sign-in and trace failed tracking links over HTTP
  python -m shopping_trip --skip-sign-in --trace-failures

Credentials are read from RAKUTEN_EMAIL / RAKUTEN_PASSWORD (.env supported).
        """
    )

    parser.add_argument(
        '--input', '-i',
        type=str,
        default=None,
        help=f'Path to the store spreadsheet (.xlsx or .csv, default: {DEFAULT_INPUT_FILE})'
    )
    parser.add_argument(
        '--output-dir', '-o',
        type=str,
        default=None,
        help='Directory for screenshots and report.json (default: output/runs/<timestamp>)'
    )
    parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Optional JSON config file overriding defaults'
    )
    parser.add_argument('--headed', action='store_true', help='Show the browser window')
    parser.add_argument('--no-stealth', action='store_true', help='Launch without playwright-stealth')
    parser.add_argument('--skip-sign-in', action='store_true', help='Run signed out')
    parser.add_argument('--no-screenshots', action='store_true', help='Do not capture screenshots')
    parser.add_argument(
        '--redirect-timeout',
        type=float,
        default=None,
        help='Seconds to wait for each redirect chain (default: 45)'
    )
    parser.add_argument(
        '--store-id',
        type=int,
        action='append',
        default=None,
        help='Only run this store id (repeatable)'
    )
    parser.add_argument('--limit', type=int, default=None, help='Run at most N stores')
    parser.add_argument(
        '--trace-failures',
        action='store_true',
        help='Trace the HTTP redirect chain of every failed tracking URL'
    )
    parser.add_argument('--verbose', '-v', action='store_true', help='Print tracebacks for unexpected errors')
    return parser


def settings_from_args(args: argparse.Namespace) -> dict:
    """Turn parsed CLI flags into settings overrides (unset flags keep config/env values)"""
    overrides = {
        'input_file': args.input,
        'output_dir': args.output_dir,
        'headless': False if args.headed else None,
        'stealth': False if args.no_stealth else None,
        'sign_in': False if args.skip_sign_in else None,
        'screenshots': False if args.no_screenshots else None,
        'trace_failures': True if args.trace_failures else None,
        'verbose': True if args.verbose else None,
    }
    if args.redirect_timeout is not None:
        overrides['redirect_timeout_ms'] = int(args.redirect_timeout * 1000)
    return load_settings(config_path=args.config, overrides=overrides)


def main(argv: Optional[List[str]] = None) -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)
    settings = settings_from_args(args)

    try:
        exit_code = asyncio.run(run_suite(settings, store_ids=args.store_id, limit=args.limit))
    except KeyboardInterrupt:
        print("\n\n⚠️  Run interrupted by user")
        sys.exit(1)
    except Exception as e:
        print(f"\n\nError during run: {e}")
        if args.verbose:
            traceback.print_exc()
        sys.exit(1)

    sys.exit(exit_code)


if __name__ == "__main__":
    main()
