"""
Redirect Chain Tracer
Follows HTTP redirects of a tracking URL without a browser, hop by hop
"""

from typing import List, Optional
from urllib.parse import urljoin

import requests

from shopping_trip.config import USER_AGENT


def trace_redirect_chain(tracking_url: str, timeout: int = 10, max_redirects: int = 10) -> Optional[List[str]]:
    """
    Follow the redirect chain of a tracking URL and record every hop.

    Only HTTP-level redirects (3xx + Location) are visible here. JavaScript or
    meta-refresh hops that the browser follows will show up as the last entry
    instead of being followed.

    Args:
        tracking_url: The tracking/affiliate URL to trace
        timeout: Request timeout in seconds per hop
        max_redirects: Maximum number of redirects to follow

    Returns:
        List of URLs starting with tracking_url, or None if the first request failed

    Example:
        >>> trace_redirect_chain("https://track.example/go?id=1")
        ['https://track.example/go?id=1', 'https://www.awin1.com/...', 'https://www.merchant.com/landing']
    """
    hops = [tracking_url]
    headers = {'User-Agent': USER_AGENT}

    try:
        for _ in range(max_redirects):
            # stream=True so only headers are fetched
            response = requests.get(
                hops[-1],
                allow_redirects=False,
                timeout=timeout,
                stream=True,
                headers=headers
            )
            try:
                if not 300 <= response.status_code < 400:
                    return hops

                next_url = response.headers.get('Location')
                if not next_url:
                    return hops

                hops.append(urljoin(hops[-1], next_url))
            finally:
                response.close()

        print(f"  ├─ ⚠️  Hit max redirects ({max_redirects}), returning chain so far")
        return hops

    except requests.exceptions.RequestException as e:
        if len(hops) > 1:
            # Slow or unreachable hop after progress was made
            print(f"  ├─ ⚠️  Trace stopped at hop {len(hops)}: {str(e)[:100]}")
            return hops
        print(f"  ├─ ✗ Failed to trace tracking URL: {str(e)[:100]}")
        return None
