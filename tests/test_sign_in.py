"""Tests for the Rakuten sign-in flow."""

from unittest.mock import AsyncMock, MagicMock, call

import pytest

from shopping_trip.auth.sign_in import attempt_sign_in, is_visible_within
from shopping_trip.config import (
    AUTH_MODAL_FRAME,
    EMAIL_INPUT,
    PASSWORD_INPUT,
    RECAPTCHA_FRAME,
    SIGN_IN_URL,
    SUBMIT_BUTTON,
)


def make_sign_in_page(captcha_visible=False):
    """Mock page exposing the header button, the auth iframe and the reCAPTCHA frame."""
    page = MagicMock()
    page.goto = AsyncMock()
    page.wait_for_timeout = AsyncMock()

    header_button = MagicMock()
    header_button.click = AsyncMock()
    page.locator = MagicMock(return_value=header_button)

    fields = {
        selector: MagicMock(fill=AsyncMock(), click=AsyncMock())
        for selector in (EMAIL_INPUT, PASSWORD_INPUT, SUBMIT_BUTTON)
    }

    checkbox = MagicMock(click=AsyncMock())
    if captcha_visible:
        checkbox.wait_for = AsyncMock()
    else:
        checkbox.wait_for = AsyncMock(side_effect=Exception("Timeout 3000ms exceeded."))

    recaptcha_frame = MagicMock()
    recaptcha_frame.locator = MagicMock(return_value=checkbox)

    auth_frame = MagicMock()
    auth_frame.locator = MagicMock(side_effect=lambda selector: fields[selector])
    auth_frame.frame_locator = MagicMock(return_value=recaptcha_frame)
    page.frame_locator = MagicMock(return_value=auth_frame)

    return page, header_button, fields, checkbox, auth_frame


@pytest.fixture
def sign_in_settings(fast_settings):
    return dict(fast_settings, email="shopper@example.com", password="s3cret")


class TestAttemptSignIn:
    """Tests for attempt_sign_in."""

    @pytest.mark.asyncio
    async def test_missing_credentials_is_logged_not_raised(self, fast_settings, capsys):
        page, *_ = make_sign_in_page()

        assert await attempt_sign_in(page, fast_settings) is False

        page.goto.assert_not_awaited()
        assert "not configured" in capsys.readouterr().out

    @pytest.mark.asyncio
    async def test_sign_in_without_captcha(self, sign_in_settings, capsys):
        page, header_button, fields, checkbox, auth_frame = make_sign_in_page(captcha_visible=False)

        assert await attempt_sign_in(page, sign_in_settings) is True

        page.goto.assert_awaited_once_with(SIGN_IN_URL, wait_until='domcontentloaded')
        header_button.click.assert_awaited_once_with(timeout=sign_in_settings['sign_in_button_timeout_ms'])
        page.frame_locator.assert_called_once_with(AUTH_MODAL_FRAME)
        auth_frame.frame_locator.assert_called_once_with(RECAPTCHA_FRAME)
        fields[EMAIL_INPUT].fill.assert_awaited_once_with("shopper@example.com")
        fields[PASSWORD_INPUT].fill.assert_awaited_once_with("s3cret")
        checkbox.click.assert_not_awaited()
        fields[SUBMIT_BUTTON].click.assert_awaited_once()
        assert page.wait_for_timeout.await_args_list[-1] == call(sign_in_settings['sign_in_settle_ms'])

        out = capsys.readouterr().out
        assert "No reCAPTCHA detected" in out
        assert "Sign-in completed" in out

    @pytest.mark.asyncio
    async def test_sign_in_with_captcha_clicks_and_waits(self, sign_in_settings):
        sign_in_settings.update({'challenge_pre_click_ms': 7, 'challenge_grace_ms': 15, 'challenge_click_delay_ms': 200})
        page, _, fields, checkbox, _ = make_sign_in_page(captcha_visible=True)

        assert await attempt_sign_in(page, sign_in_settings) is True

        checkbox.wait_for.assert_awaited_once_with(
            state='visible', timeout=sign_in_settings['challenge_check_timeout_ms']
        )
        checkbox.click.assert_awaited_once_with(delay=200)
        waits = [c.args[0] for c in page.wait_for_timeout.await_args_list]
        assert waits.index(7) < waits.index(15)
        fields[SUBMIT_BUTTON].click.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failure_mid_flow_is_swallowed(self, sign_in_settings, capsys):
        page, header_button, fields, _, _ = make_sign_in_page()
        header_button.click = AsyncMock(side_effect=Exception("Timeout 5000ms exceeded."))

        assert await attempt_sign_in(page, sign_in_settings) is False

        fields[EMAIL_INPUT].fill.assert_not_awaited()
        assert "Sign-in skipped or failed: Timeout 5000ms exceeded." in capsys.readouterr().out


class TestIsVisibleWithin:
    """Bounded visibility check."""

    @pytest.mark.asyncio
    async def test_visible(self):
        locator = MagicMock(wait_for=AsyncMock())
        assert await is_visible_within(locator, 3000) is True

    @pytest.mark.asyncio
    async def test_not_visible(self):
        locator = MagicMock(wait_for=AsyncMock(side_effect=Exception("Timeout")))
        assert await is_visible_within(locator, 3000) is False
