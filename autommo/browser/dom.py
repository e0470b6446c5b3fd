"""Minimal DOM capability interface and its Playwright implementation.

The engine never touches Playwright types directly; it only sees the
``DomProbe`` protocol below. ``PlaywrightDom`` adapts an async Playwright
``Page`` to it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, Protocol

from playwright.async_api import ElementHandle, Error as PlaywrightError, Locator, Page, Request

logger = logging.getLogger(__name__)

# Same test for an element and for its parent: hidden means fully
# transparent or not displayed at all.
_IS_HIDDEN_JS = """\
el => {
    const style = window.getComputedStyle(el);
    return style.opacity == 0 || style.display === 'none';
}
"""

_PARENT_JS = "el => el.parentElement"


async def _close_page(page: Page) -> None:
    await page.close()


class DomProbe(Protocol):
    """What the engine needs from a live page."""

    @property
    def url(self) -> str: ...

    async def query_all(self, selector: str) -> list[Any]: ...

    async def is_hidden(self, element: Any) -> bool: ...

    async def parent(self, element: Any) -> Any | None: ...

    async def attribute(self, element: Any, name: str) -> str | None: ...

    async def text(self, element: Any) -> str: ...

    async def click(self, element: Any, timeout: float | None = None) -> None: ...

    async def wait_enabled(self, element: Any) -> None: ...

    async def click_and_wait_for_page(self, element: Any) -> "DomProbe": ...

    async def wait_for(self, selector: str) -> None: ...

    async def reload(self) -> None: ...

    async def close(self) -> None: ...

    def on_request_finished(
        self, url_prefix: str, callback: Callable[[bytes | None], Any]
    ) -> None: ...


class PlaywrightDom:
    """``DomProbe`` over an async Playwright page.

    Locators are built once per selector and reused; element handles are
    fetched fresh on every ``query_all`` call.
    """

    def __init__(self, page: Page):
        self.page = page
        self._locators: dict[str, Locator] = {}

    @property
    def url(self) -> str:
        return self.page.url

    def _locator(self, selector: str) -> Locator:
        locator = self._locators.get(selector)
        if locator is None:
            locator = self.page.locator(selector)
            self._locators[selector] = locator
        return locator

    async def query_all(self, selector: str) -> list[ElementHandle]:
        return await self._locator(selector).element_handles()

    async def is_hidden(self, element: ElementHandle) -> bool:
        return bool(await element.evaluate(_IS_HIDDEN_JS))

    async def parent(self, element: ElementHandle) -> ElementHandle | None:
        handle = await element.evaluate_handle(_PARENT_JS)
        return handle.as_element()

    async def attribute(self, element: ElementHandle, name: str) -> str | None:
        return await element.get_attribute(name)

    async def text(self, element: ElementHandle) -> str:
        return (await element.text_content() or "").strip()

    async def click(self, element: ElementHandle, timeout: float | None = None) -> None:
        if timeout is None:
            await element.click()
        else:
            await element.click(timeout=timeout)

    async def wait_enabled(self, element: ElementHandle) -> None:
        await element.wait_for_element_state("enabled")

    async def click_and_wait_for_page(self, element: ElementHandle) -> PlaywrightDom:
        """Click *element* and return the page it opens.

        The wait for the new page is armed before the click and has no
        timeout. If the wait is cancelled, the next page the context opens
        is closed as soon as it appears.
        """
        context = self.page.context
        try:
            async with context.expect_page(timeout=0) as page_info:
                await element.click()
            new_page = await page_info.value
        except asyncio.CancelledError:
            context.once("page", _close_page)
            raise
        return PlaywrightDom(new_page)

    async def wait_for(self, selector: str) -> None:
        await self._locator(selector).first.wait_for(timeout=0)

    async def reload(self) -> None:
        await self.page.reload()

    async def close(self) -> None:
        await self.page.close()

    def on_request_finished(
        self, url_prefix: str, callback: Callable[[bytes | None], Any]
    ) -> None:
        """Call *callback* with the raw response body of every finished request
        whose URL starts with *url_prefix*. Decoding is left to the callback.

        The body is ``None`` when the request has no response or the body
        can no longer be read.
        """

        async def _relay(request: Request) -> None:
            if not request.url.startswith(url_prefix):
                return
            body: bytes | None = None
            try:
                response = await request.response()
                if response is not None:
                    body = await response.body()
            except PlaywrightError as e:
                logger.warning(f"Could not read response body for {request.url}: {e}")
            callback(body)

        self.page.on("requestfinished", _relay)
