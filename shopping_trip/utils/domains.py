"""
Domain normalization and matching
"""

from urllib.parse import urlparse


def _strip_www(host: str) -> str:
    # repeated so the result is stable under re-normalization
    host = host.strip()
    while host.startswith('www.'):
        host = host[4:].strip()
    return host


def normalize_domain(value: str) -> str:
    """
    Convert a URL or bare hostname into a comparable domain name.

    Two branches:
    1. Input parses as a URL with a hostname -> use the hostname
    2. Otherwise (bare hostname, malformed input) -> use the trimmed raw string

    Both branches strip leading 'www.' labels and lowercase. Never raises.

    Examples:
        >>> normalize_domain('https://WWW.Example.com/path')
        'example.com'
        >>> normalize_domain('example.com')
        'example.com'
    """
    # prefix removed before parsing so 'www. https://...' takes the URL branch
    raw = _strip_www((value or '').lower())

    try:
        hostname = urlparse(raw).hostname if '://' in raw else None
    except ValueError:
        # e.g. invalid IPv6 literal in netloc
        hostname = None

    if hostname:
        return _strip_www(hostname.lower())

    return raw


def domain_matches(observed: str, expected: str) -> bool:
    """
    Suffix match of normalized domains.

    Tolerates subdomains ('shop.merchant.com' matches 'merchant.com'). Any domain
    that merely ends with the same characters matches too ('evilmerchant.com').
    """
    expected_domain = normalize_domain(expected)
    if not expected_domain:
        return False
    return normalize_domain(observed).endswith(expected_domain)
