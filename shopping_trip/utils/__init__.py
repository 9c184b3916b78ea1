"""
Shared URL helpers
"""

from shopping_trip.utils.domains import normalize_domain, domain_matches
from shopping_trip.utils.url_resolver import trace_redirect_chain

__all__ = [
    'normalize_domain',
    'domain_matches',
    'trace_redirect_chain',
]
