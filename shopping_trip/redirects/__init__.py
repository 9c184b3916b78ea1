"""
Redirect detection
"""

from shopping_trip.redirects.waiter import wait_for_redirect

__all__ = [
    'wait_for_redirect',
]
