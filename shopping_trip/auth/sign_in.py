"""
Rakuten Sign-In
One-time interactive login for the shared session, including the optional
reCAPTCHA checkbox
"""

from typing import Dict

from shopping_trip.config import (
    SIGN_IN_URL,
    SIGN_IN_HEADER_BUTTON,
    AUTH_MODAL_FRAME,
    EMAIL_INPUT,
    PASSWORD_INPUT,
    RECAPTCHA_FRAME,
    RECAPTCHA_CHECKBOX,
    SUBMIT_BUTTON,
)
from shopping_trip.errors import SignInFailure


async def is_visible_within(locator, timeout_ms: int) -> bool:
    """
    Bounded presence check.

    Locator.is_visible() returns immediately, so wait for the visible state
    instead and treat any failure as "not there".
    """
    try:
        await locator.wait_for(state='visible', timeout=timeout_ms)
        return True
    except Exception:
        return False


async def handle_recaptcha(page, auth_frame, settings: Dict) -> bool:
    """
    Click the reCAPTCHA checkbox if it shows up.

    Returns:
        True if a challenge was found and clicked, False if none appeared
    """
    print("  ├─ Checking for reCAPTCHA...")
    checkbox = auth_frame.frame_locator(RECAPTCHA_FRAME).locator(RECAPTCHA_CHECKBOX)

    if not await is_visible_within(checkbox, settings['challenge_check_timeout_ms']):
        print("  ├─ ✓ No reCAPTCHA detected")
        return False

    await page.wait_for_timeout(settings['challenge_pre_click_ms'])
    print("  ├─ ⚠️  reCAPTCHA detected, clicking...")
    await checkbox.click(delay=settings['challenge_click_delay_ms'])
    await page.wait_for_timeout(settings['challenge_grace_ms'])
    return True


async def attempt_sign_in(page, settings: Dict) -> bool:
    """
    Sign in to Rakuten on the shared page.

    Failure is never fatal: some tracking links work without an account, so
    any error is logged and the run carries on signed out.

    Args:
        page: Playwright page object
        settings: Run settings (credentials and sign-in timings)

    Returns:
        True if the sign-in form was submitted, False otherwise
    """
    try:
        print("🔐 Starting Rakuten sign-in...")
        email = settings.get('email')
        password = settings.get('password')
        if not email or not password:
            raise SignInFailure("RAKUTEN_EMAIL / RAKUTEN_PASSWORD not configured")

        await page.goto(SIGN_IN_URL, wait_until='domcontentloaded')
        await page.locator(SIGN_IN_HEADER_BUTTON).click(timeout=settings['sign_in_button_timeout_ms'])
        await page.wait_for_timeout(settings['sign_in_modal_wait_ms'])

        auth_frame = page.frame_locator(AUTH_MODAL_FRAME)
        await auth_frame.locator(EMAIL_INPUT).fill(email)
        await auth_frame.locator(PASSWORD_INPUT).fill(password)

        await handle_recaptcha(page, auth_frame, settings)

        await auth_frame.locator(SUBMIT_BUTTON).click()
        await page.wait_for_timeout(settings['sign_in_settle_ms'])
        print("  └─ ✓ Sign-in completed")
        return True

    except Exception as e:
        print(f"  └─ ⚠️  Sign-in skipped or failed: {str(e)[:200]}")
        return False
