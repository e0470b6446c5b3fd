#!/usr/bin/env python3
"""Debug script: open the game with saved cookies and print what the worker sees.

Does not click anything. Useful after a site update to check that the
selectors still resolve.
"""

import asyncio
import sys

from dotenv import load_dotenv
from playwright.async_api import async_playwright

from autommo.browser.dom import PlaywrightDom
from autommo.browser.session import load_cookies
from autommo.config import PROJECT_ROOT, load_config
from autommo.engine import PageClassifier, PageState, VisibilityResolver, read_item, step_outcome
from autommo.engine import locators

load_dotenv(PROJECT_ROOT / ".env")


async def probe(url: str | None) -> None:
    config = load_config()
    async with async_playwright() as playwright:
        browser = await playwright.chromium.launch(headless=True)
        page = await browser.new_page()
        cookies = load_cookies(config.browser.cookies_path)
        if cookies:
            await page.context.add_cookies(cookies)
        await page.goto(url or config.site.travel_url)
        await page.wait_for_timeout(1000)

        dom = PlaywrightDom(page)
        classifier = PageClassifier(config.site.base_url)
        state = classifier.classify(dom.url)
        print(f"URL:   {dom.url}")
        print(f"State: {state.value}")

        if state is PageState.TRAVEL:
            headings = await dom.query_all(locators.TRAVEL_HEADING)
            heading = await dom.text(headings[0]) if headings else ""
            print(f"Heading: {heading!r} -> {step_outcome(heading).value}")
            print(f"Action:  {(await classifier.classify_sub_action(dom)).value}")

        print("=" * 60)
        for name in sorted(n for n in dir(locators) if n.isupper() and isinstance(getattr(locators, n), str)):
            resolver = VisibilityResolver(dom, getattr(locators, name))
            candidates = await resolver.candidates()
            visible = await resolver.first_visible()
            live = await resolver.first_not_enclosed_by_hidden_ancestor()
            print(
                f"{name:24s} matches={len(candidates):2d} "
                f"visible={'yes' if visible else 'no ':3s} "
                f"unenclosed={'yes' if live else 'no'}"
            )

        item = await read_item(VisibilityResolver(dom, locators.ITEM_RARITY))
        print("=" * 60)
        print(f"Item on page: {item}")

        await browser.close()


if __name__ == "__main__":
    asyncio.run(probe(sys.argv[1] if len(sys.argv) > 1 else None))
