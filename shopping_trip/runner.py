"""
Shopping Trip Runner
Drives the shared session through every store's tracking URL, one at a time,
and records whether each landed on the expected merchant domain
"""

import asyncio
import json
import time
import traceback
from datetime import datetime
from typing import Dict, List, Optional

from shopping_trip.errors import RedirectMismatch, ShoppingTripError
from shopping_trip.redirects.waiter import wait_for_redirect
from shopping_trip.stores import StoreRecord
from shopping_trip.utils.domains import normalize_domain, domain_matches
from shopping_trip.utils.url_resolver import trace_redirect_chain

REPORT_FILENAME = 'report.json'


async def capture_screenshot(session, result: Dict, filename: str, label: str) -> None:
    """Full-page screenshot into the run directory, recorded on the result"""
    if not session.settings.get('screenshots', True):
        return
    path = session.artifact_path(filename)
    await session.page.screenshot(path=str(path), full_page=True)
    result['screenshots'].append({'label': label, 'path': str(path)})


async def _drive_store(session, store: StoreRecord, result: Dict) -> None:
    page = session.page
    settings = session.settings

    await page.goto(store.xfas_url, wait_until='domcontentloaded')

    # Tracking landing page
    try:
        await page.wait_for_load_state('networkidle', timeout=settings['landing_idle_timeout_ms'])
    except Exception as e:
        print(f"  ├─ Landing page never went idle: {str(e)[:80]}")
    await page.wait_for_timeout(settings['landing_settle_ms'])
    await capture_screenshot(session, result, f"tracking-{store.store_id}.png", 'Redirect Start')

    await wait_for_redirect(
        page,
        store.merchant_site_url,
        timeout_ms=settings['redirect_timeout_ms'],
        poll_interval_ms=settings['poll_interval_ms']
    )

    # Let the merchant page finish loading, but don't fail the store over it
    try:
        await page.wait_for_load_state('domcontentloaded', timeout=settings['merchant_load_timeout_ms'])
        await page.wait_for_load_state('networkidle', timeout=settings['merchant_load_timeout_ms'])
        await page.wait_for_timeout(settings['merchant_settle_ms'])
        print("  ├─ Page fully loaded")
    except Exception:
        print("  ├─ ⚠️  Page did not fully load in time, taking screenshot and continuing...")
        await capture_screenshot(session, result, f"timeout-{store.store_id}.png", 'Page Load Timeout')

    await capture_screenshot(session, result, f"merchant-{store.store_id}.png", 'Merchant Redirect Complete')

    final_url = page.url
    result['final_url'] = final_url
    result['final_domain'] = normalize_domain(final_url)

    if not domain_matches(final_url, store.merchant_site_url):
        raise RedirectMismatch(result['expected_domain'], result['final_domain'], final_url)


async def run_store_case(session, store: StoreRecord) -> Dict:
    """
    Run one store through the shared session.

    Steps:
    1. Navigate to the tracking (xfas) URL
    2. Screenshot the landing page
    3. Poll until the merchant domain is reached
    4. Screenshot the merchant page (plus a timeout shot if it loads slowly)
    5. Check the final domain suffix-matches the expected one

    The whole case is bounded by settings['case_timeout_ms']. Failures are
    recorded on the result instead of raised, so later stores still run.

    Args:
        session: ShoppingTripSession
        store: StoreRecord to test

    Returns:
        Dict with store fields, final_url, final_domain, success, error,
        screenshots and elapsed_seconds
    """
    settings = session.settings
    result = {
        'store_id': store.store_id,
        'store_name': store.store_name,
        'network_id': store.network_id,
        'xfas_url': store.xfas_url,
        'merchant_site_url': store.merchant_site_url,
        'expected_domain': normalize_domain(store.merchant_site_url),
        'final_url': None,
        'final_domain': None,
        'success': False,
        'error': None,
        'screenshots': [],
        'redirect_chain': None,
        'elapsed_seconds': 0.0,
    }

    print(f"\n🛒 Testing: {store.label}")
    print(f"  ├─ Visiting Xfas URL: {store.xfas_url}")

    start_time = time.monotonic()
    try:
        await asyncio.wait_for(
            _drive_store(session, store, result),
            timeout=settings['case_timeout_ms'] / 1000
        )
        result['success'] = True
        print(f"  └─ ✓ {store.store_name} - Redirected successfully to {result['final_domain']}")

    except asyncio.TimeoutError:
        result['error'] = f"Case timed out after {settings['case_timeout_ms'] / 1000:g}s. Last URL: {session.page.url}"
    except ShoppingTripError as e:
        result['error'] = str(e)
    except Exception as e:
        # Navigation/browser errors fail this store only
        result['error'] = f"{type(e).__name__}: {str(e)[:300]}"
        if settings.get('verbose'):
            traceback.print_exc()

    result['elapsed_seconds'] = round(time.monotonic() - start_time, 1)

    if not result['success']:
        if result['final_url'] is None:
            result['final_url'] = session.page.url
            result['final_domain'] = normalize_domain(session.page.url)

        if settings.get('trace_failures'):
            print("  ├─ Tracing redirect chain over HTTP...")
            result['redirect_chain'] = await asyncio.to_thread(trace_redirect_chain, store.xfas_url)
            for hop in result['redirect_chain'] or []:
                print(f"  │  ├─ {hop}")

        print(f"  └─ ✗ {store.store_name} - {result['error']}")

    return result


class ShoppingTripRunner:
    """
    Runs every store case against one shared session.

    Cases run strictly in input order, never concurrently: they all
    navigate the same page.
    """

    def __init__(self, session):
        self.session = session
        self.results: List[Dict] = []

    async def run(self, stores) -> List[Dict]:
        """
        Run all stores sequentially.

        Args:
            stores: Sequence of StoreRecord

        Returns:
            List of per-store result dicts, in input order
        """
        total = len(stores)
        for i, store in enumerate(stores, 1):
            print(f"\nProgress: {i}/{total}")
            result = await run_store_case(self.session, store)
            self.results.append(result)
        return self.results

    @property
    def failed(self) -> List[Dict]:
        return [r for r in self.results if not r['success']]

    @property
    def passed(self) -> List[Dict]:
        return [r for r in self.results if r['success']]

    def get_summary(self) -> Dict:
        """Aggregate counts for the report"""
        return {
            'total': len(self.results),
            'passed': len(self.passed),
            'failed': len(self.failed),
            'signed_in': self.session.signed_in,
            'output_dir': str(self.session.output_dir),
        }

    def write_report(self, filename: str = REPORT_FILENAME, generated_at: Optional[datetime] = None) -> str:
        """
        Save summary and per-store results as JSON.

        Returns:
            Path of the written report
        """
        generated_at = generated_at or datetime.now()
        report = {
            'generated_at': generated_at.isoformat(timespec='seconds'),
            'summary': self.get_summary(),
            'results': self.results,
        }
        path = self.session.artifact_path(filename)
        with open(path, 'w') as f:
            json.dump(report, f, indent=2)
        return str(path)

    def print_summary(self) -> None:
        summary = self.get_summary()
        print(f"\n{'=' * 60}")
        print("SHOPPING TRIP REDIRECTION RESULTS")
        print('=' * 60)
        print(f"Signed in: {'yes' if summary['signed_in'] else 'no'}")
        print(f"Passed: {summary['passed']}/{summary['total']}")

        if self.failed:
            print("\n✗ Failed stores:")
            for r in self.failed:
                print(f"  - {r['store_name']} (ID: {r['store_id']}): {r['error']}")

        print(f"\nArtifacts saved to: {summary['output_dir']}")

    def __repr__(self) -> str:
        return f"ShoppingTripRunner({len(self.passed)}/{len(self.results)} passed)"
