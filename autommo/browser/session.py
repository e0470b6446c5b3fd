"""Browser bootstrap and authentication.

Auth reuses a saved cookie jar when one exists. Without it, the worker logs
in with the configured credentials and saves the resulting cookies for the
next start.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

from playwright.async_api import Browser, Page, Playwright

if TYPE_CHECKING:
    from autommo.config import WorkerConfig
    from autommo.runner.metrics import EventCounterSink

logger = logging.getLogger(__name__)

COOKIE_FIELDS: tuple[str, ...] = (
    "domain",
    "expires",
    "httpOnly",
    "name",
    "partitionKey",
    "path",
    "sameSite",
    "secure",
    "value",
)

LOGIN_SETTLE_MS = 300


class LoginError(RuntimeError):
    """Interactive login could not start or finish."""


def load_cookies(path: str | Path) -> list[dict[str, Any]] | None:
    """Read a saved cookie jar. Returns None when no jar exists."""
    path = Path(path)
    if not path.exists():
        return None
    with open(path) as f:
        cookies = json.load(f)
    # Playwright rejects explicit nulls for optional fields.
    return [{k: v for k, v in cookie.items() if v is not None} for cookie in cookies]


def save_cookies(path: str | Path, cookies: list[dict[str, Any]]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    records = [{key: cookie.get(key) for key in COOKIE_FIELDS} for cookie in cookies]
    with open(path, "w") as f:
        json.dump(records, f, indent=2)


async def launch(playwright: Playwright, headless: bool = False) -> tuple[Browser, Page]:
    """Start Chromium and open the page the worker drives.

    Signal handling is left to the worker's event loop so that Ctrl+C
    cancels the loop instead of killing the browser underneath it.
    """
    browser = await playwright.chromium.launch(
        headless=headless,
        handle_sigint=False,
        handle_sigterm=False,
        handle_sighup=False,
    )
    page = await browser.new_page()
    return browser, page


async def authenticate(page: Page, config: WorkerConfig, sink: EventCounterSink) -> None:
    cookies_path = config.browser.cookies_path
    cookies = load_cookies(cookies_path)
    if cookies is not None:
        logger.info(f"Loaded {len(cookies)} cookies from {cookies_path}")
        await page.context.add_cookies(cookies)
        return

    site = config.site
    await page.goto(site.travel_url)
    await page.wait_for_timeout(LOGIN_SETTLE_MS)

    if page.url != site.login_url:
        raise LoginError(
            f"Unexpected URL after loading auth page. Expected '{site.login_url}', "
            f"but got: {page.url}"
        )

    await page.fill("#email", config.login)
    await page.fill("#password", config.password)
    await page.click("button[type='submit']")
    await page.wait_for_load_state()

    if page.url == site.travel_url:
        save_cookies(cookies_path, await page.context.cookies())
        sink.increment_auth_requests()
        logger.info(f"Logged in, cookies saved to {cookies_path}")
    else:
        logger.warning(f"Login did not land on the travel page (at {page.url})")
