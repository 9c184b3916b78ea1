"""
Shared Browser Session
One browser, one context and one page shared by every store case in a run
"""

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Dict, Optional

from playwright.async_api import async_playwright
from playwright_stealth import Stealth

from shopping_trip.auth.sign_in import attempt_sign_in
from shopping_trip.config import SCREEN_WIDTH, SCREEN_HEIGHT, USER_AGENT, get_run_output_dir


class ShoppingTripSession:
    """
    Handle passed explicitly to every store case.

    Cases share one mutable page, so they must run one at a time.
    """

    def __init__(self, page, settings: Dict, output_dir: Path, context=None):
        self.page = page
        self.context = context
        self.settings = settings
        self.output_dir = Path(output_dir)
        self.signed_in = False

    def artifact_path(self, name: str) -> Path:
        """Path for a screenshot or report inside this run's output directory"""
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self.output_dir / name

    def __repr__(self) -> str:
        return f"ShoppingTripSession(signed_in={self.signed_in}, output_dir='{self.output_dir}')"


def _playwright_manager(stealth: bool):
    if stealth:
        return Stealth().use_async(async_playwright())
    return async_playwright()


@asynccontextmanager
async def open_session(settings: Dict, output_dir: Optional[Path] = None):
    """
    Launch the browser, sign in once and yield a ShoppingTripSession.

    The context and browser are closed when the block exits, whatever
    happened inside it.

    Args:
        settings: Run settings (headless, stealth, sign_in, credentials, timings)
        output_dir: Where screenshots and the report go (default: settings['output_dir']
                    or a fresh timestamped directory)
    """
    output_dir = Path(output_dir or settings.get('output_dir') or get_run_output_dir())

    async with _playwright_manager(settings.get('stealth', True)) as p:
        browser = await p.chromium.launch(
            headless=settings.get('headless', True),
            args=['--disable-blink-features=AutomationControlled']
        )
        context = None
        try:
            context = await browser.new_context(
                viewport={'width': SCREEN_WIDTH, 'height': SCREEN_HEIGHT},
                user_agent=USER_AGENT
            )
            page = await context.new_page()
            session = ShoppingTripSession(page, settings, output_dir, context=context)

            if settings.get('sign_in', True):
                session.signed_in = await attempt_sign_in(page, settings)
            else:
                print("🔐 Sign-in disabled, running signed out")

            yield session
        finally:
            if context:
                await context.close()
            await browser.close()
