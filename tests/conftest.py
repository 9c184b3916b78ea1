"""Shared fixtures: a scripted fake page and fast settings."""

import asyncio
import copy
from pathlib import Path

import pytest

from shopping_trip.config import DEFAULT_SETTINGS
from shopping_trip.session import ShoppingTripSession


class FakePage:
    """
    Stand-in for a Playwright page.

    goto(url) lands on url and queues the redirect chain registered for it in
    `routes`; every wait_for_timeout() sleeps for real and then advances one hop.
    """

    def __init__(self, url='about:blank', routes=None, goto_errors=None, failing_load_states=()):
        self.url = url
        self.routes = routes or {}
        self.goto_errors = goto_errors or {}
        self.failing_load_states = set(failing_load_states)
        self.visited = []
        self.screenshots = []
        self._pending = []

    async def goto(self, url, wait_until=None, timeout=None):
        self.visited.append(url)
        if url in self.goto_errors:
            raise self.goto_errors[url]
        self.url = url
        self._pending = list(self.routes.get(url, []))

    async def wait_for_timeout(self, ms):
        await asyncio.sleep(ms / 1000)
        if self._pending:
            self.url = self._pending.pop(0)

    async def wait_for_load_state(self, state='load', timeout=None):
        if state in self.failing_load_states:
            raise TimeoutError(f"Timeout {timeout}ms exceeded waiting for '{state}'")

    async def screenshot(self, path=None, full_page=False):
        Path(path).write_bytes(b'\x89PNG')
        self.screenshots.append(path)


@pytest.fixture
def fast_settings(tmp_path):
    """Default settings with every wait shrunk to milliseconds"""
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    settings.update({
        'output_dir': str(tmp_path / 'run'),
        'sign_in': False,
        'stealth': False,
        'case_timeout_ms': 2000,
        'redirect_timeout_ms': 300,
        'poll_interval_ms': 5,
        'landing_idle_timeout_ms': 10,
        'landing_settle_ms': 1,
        'merchant_load_timeout_ms': 10,
        'merchant_settle_ms': 1,
        'sign_in_button_timeout_ms': 10,
        'sign_in_modal_wait_ms': 1,
        'challenge_check_timeout_ms': 10,
        'challenge_pre_click_ms': 1,
        'challenge_click_delay_ms': 0,
        'challenge_grace_ms': 1,
        'sign_in_settle_ms': 1,
    })
    return settings


@pytest.fixture
def make_session(fast_settings, tmp_path):
    def _make(page, **settings_overrides):
        settings = dict(fast_settings, **settings_overrides)
        return ShoppingTripSession(page, settings, Path(settings['output_dir']))
    return _make
