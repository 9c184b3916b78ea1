"""
Shopping trip redirection suite.

Drives one signed-in browser session through each store's affiliate tracking
(xfas) URL and checks the redirect chain lands on the store's merchant domain.

Main pieces:
    normalize_domain: Canonical lowercase hostname, 'www.' stripped
    wait_for_redirect: Poll page.url until the merchant domain shows up
    load_stores: Read store records from the spreadsheet
    open_session: Shared browser session, signed in once
    ShoppingTripRunner: Run every store serially and report

Usage:
    # Full run from the CLI
    python -m shopping_trip --input shopping_trip_redirection.xlsx

    # Or programmatically
    from shopping_trip import load_settings, load_stores, open_session, ShoppingTripRunner

    settings = load_settings()
    stores = load_stores(settings['input_file'])
    async with open_session(settings) as session:
        results = await ShoppingTripRunner(session).run(stores)
"""

from shopping_trip.config import load_settings
from shopping_trip.errors import (
    ShoppingTripError,
    RedirectTimeout,
    RedirectMismatch,
    SignInFailure,
    StoreFileError,
)
from shopping_trip.redirects.waiter import wait_for_redirect
from shopping_trip.runner import ShoppingTripRunner, run_store_case
from shopping_trip.session import ShoppingTripSession, open_session
from shopping_trip.stores import StoreRecord, load_stores
from shopping_trip.utils.domains import normalize_domain, domain_matches

__all__ = [
    'load_settings',
    'ShoppingTripError',
    'RedirectTimeout',
    'RedirectMismatch',
    'SignInFailure',
    'StoreFileError',
    'wait_for_redirect',
    'ShoppingTripRunner',
    'run_store_case',
    'ShoppingTripSession',
    'open_session',
    'StoreRecord',
    'load_stores',
    'normalize_domain',
    'domain_matches',
]
