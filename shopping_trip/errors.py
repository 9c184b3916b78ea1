"""
Error types raised by the redirection suite
"""


class ShoppingTripError(Exception):
    """Base class for all suite errors"""


class RedirectTimeout(ShoppingTripError):
    """The expected merchant domain was never observed within the allotted time"""

    def __init__(self, expected_domain: str, last_url: str, timeout_ms: int):
        self.expected_domain = expected_domain
        self.last_url = last_url
        self.timeout_ms = timeout_ms
        super().__init__(
            f"Timed out after {timeout_ms / 1000:g}s waiting for redirect to merchant domain "
            f"({expected_domain}). Last URL: {last_url}"
        )


class RedirectMismatch(ShoppingTripError):
    """The browser settled on a domain that does not match the expected merchant"""

    def __init__(self, expected_domain: str, final_domain: str, final_url: str):
        self.expected_domain = expected_domain
        self.final_domain = final_domain
        self.final_url = final_url
        super().__init__(
            f"Final domain '{final_domain}' does not match expected '{expected_domain}'. "
            f"Final URL: {final_url}"
        )


class SignInFailure(ShoppingTripError):
    """Sign-in could not be completed"""


class StoreFileError(ShoppingTripError):
    """The store input file is missing or malformed"""
