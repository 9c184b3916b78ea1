"""
Redirect Waiter
Polls the browser location until it reaches the expected merchant domain
"""

import time

from shopping_trip.errors import RedirectTimeout
from shopping_trip.utils.domains import normalize_domain

DEFAULT_POLL_INTERVAL_MS = 1000


async def wait_for_redirect(page, expected: str, timeout_ms: int = 30000,
                            poll_interval_ms: int = DEFAULT_POLL_INTERVAL_MS) -> str:
    """
    Wait actively for the redirect chain to land on the merchant.

    Reads page.url every poll_interval_ms and returns as soon as its normalized
    domain ends with the normalized expected domain. Each distinct URL seen on
    the way is logged.

    Args:
        page: Playwright page object (or anything with .url and .wait_for_timeout)
        expected: Expected merchant URL or bare domain
        timeout_ms: Total time to wait
        poll_interval_ms: Sleep between checks

    Returns:
        The URL that matched

    Raises:
        RedirectTimeout: Expected domain not observed within timeout_ms
    """
    expected_domain = normalize_domain(expected)
    start = time.monotonic()
    last_url = ''

    while (time.monotonic() - start) * 1000 < timeout_ms:
        current_url = page.url
        current_domain = normalize_domain(current_url)

        if expected_domain and current_domain.endswith(expected_domain):
            print(f"  ├─ ✓ Reached merchant domain: {current_domain}")
            return current_url

        if current_url != last_url:
            print(f"  ├─ ↪ Redirecting: {current_url}")
            last_url = current_url

        await page.wait_for_timeout(poll_interval_ms)

    raise RedirectTimeout(expected_domain, page.url, timeout_ms)
