from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable

import pytest
from playwright.async_api import Error as PlaywrightError
from prometheus_client import CollectorRegistry

from autommo.browser.dom import PlaywrightDom
from autommo.engine.rewards import RewardExtractor
from autommo.runner.metrics import MmoMetrics
from tests.conftest import BASE_URL


class FakeResponse:
    """Mirrors Playwright: ``text()`` is a strict UTF-8 decode of ``body()``."""

    def __init__(self, body: bytes = b"", error: str | None = None):
        self._body = body
        self.error = error

    async def body(self) -> bytes:
        if self.error is not None:
            raise PlaywrightError(self.error)
        return self._body

    async def text(self) -> str:
        return (await self.body()).decode()


class FakeRequest:
    def __init__(self, url: str, response: FakeResponse | None):
        self.url = url
        self._response = response

    async def response(self) -> FakeResponse | None:
        return self._response


class FakePage:
    def __init__(self) -> None:
        self.url = BASE_URL + "/travel"
        self.handlers: dict[str, list[Callable[..., Any]]] = {}
        self.locator_calls: list[str] = []

    def on(self, event: str, handler: Callable[..., Any]) -> None:
        self.handlers.setdefault(event, []).append(handler)

    def locator(self, selector: str) -> object:
        self.locator_calls.append(selector)
        return object()

    async def emit(self, event: str, *args: Any) -> None:
        for handler in self.handlers.get(event, []):
            await handler(*args)


def _relay(requests: list[FakeRequest]) -> list[bytes | None]:
    page = FakePage()
    bodies: list[bytes | None] = []
    PlaywrightDom(page).on_request_finished(BASE_URL + "/api/npcs/attack", bodies.append)

    async def _main() -> None:
        for request in requests:
            await page.emit("requestfinished", request)

    asyncio.run(_main())
    return bodies


def test_relay_filters_by_prefix() -> None:
    bodies = _relay(
        [
            FakeRequest(BASE_URL + "/api/npcs/attack/12", FakeResponse(b'{"rewards": []}')),
            FakeRequest(BASE_URL + "/api/travel/perform", FakeResponse(b"{}")),
        ]
    )

    assert bodies == [b'{"rewards": []}']


def test_unreadable_body_is_relayed_as_none() -> None:
    bodies = _relay(
        [
            FakeRequest(BASE_URL + "/api/npcs/attack/1", FakeResponse(error="Target closed")),
            FakeRequest(BASE_URL + "/api/npcs/attack/2", None),
        ]
    )

    assert bodies == [None, None]


def test_locators_are_cached_per_selector() -> None:
    page = FakePage()
    dom = PlaywrightDom(page)

    first = dom._locator("#a")
    assert dom._locator("#a") is first
    dom._locator("#b")

    assert page.locator_calls == ["#a", "#b"]
    assert dom.url == BASE_URL + "/travel"


def test_non_utf8_attack_body_reaches_parser_without_raising(
    registry: CollectorRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    page = FakePage()
    extractor = RewardExtractor(MmoMetrics(registry=registry), BASE_URL)
    PlaywrightDom(page).on_request_finished(extractor.url_prefix, extractor.on_response)
    request = FakeRequest(BASE_URL + "/api/npcs/attack/9", FakeResponse(b'{"rewards": ["\x80"]}'))

    with caplog.at_level(logging.WARNING):
        asyncio.run(page.emit("requestfinished", request))

    assert "not valid JSON" in caplog.text
    assert "Attack has no rewards" in caplog.text
    assert all(family.samples == [] for family in registry.collect() if family.name == "mmo_found_items")


class PendingPageInfo:
    @property
    def value(self) -> asyncio.Future:
        return asyncio.get_running_loop().create_future()


class PendingPageWait:
    async def __aenter__(self) -> PendingPageInfo:
        return PendingPageInfo()

    async def __aexit__(self, *exc_info: Any) -> None:
        # The new tab never shows up while we wait.
        await asyncio.Event().wait()


class FakeContext:
    def __init__(self) -> None:
        self.once_handlers: dict[str, Callable[..., Any]] = {}

    def expect_page(self, timeout: float | None = None) -> PendingPageWait:
        return PendingPageWait()

    def once(self, event: str, handler: Callable[..., Any]) -> None:
        self.once_handlers[event] = handler


class FakeElementHandle:
    def __init__(self) -> None:
        self.clicks = 0

    async def click(self) -> None:
        self.clicks += 1


class LatePage:
    def __init__(self) -> None:
        self.closed = False

    async def close(self) -> None:
        self.closed = True


def test_cancelled_page_wait_closes_the_late_tab() -> None:
    page = FakePage()
    page.context = FakeContext()
    button = FakeElementHandle()
    late = LatePage()

    async def _main() -> None:
        task = asyncio.create_task(PlaywrightDom(page).click_and_wait_for_page(button))
        while not button.clicks:
            await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
        await page.context.once_handlers["page"](late)

    asyncio.run(_main())

    assert late.closed is True
