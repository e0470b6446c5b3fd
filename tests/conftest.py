from __future__ import annotations

import asyncio
import io
from dataclasses import dataclass, field
from typing import Any, Callable

import pytest
from prometheus_client import CollectorRegistry

from autommo.config import EnabledFlag
from autommo.engine.alarm import Alarm
from autommo.runner.metrics import MmoMetrics

BASE_URL = "https://web.simple-mmo.com"


@dataclass(eq=False)
class FakeElement:
    label: str = ""
    hidden: bool = False
    parent: FakeElement | None = None
    attributes: dict[str, str] = field(default_factory=dict)
    text: str = ""

    def __repr__(self) -> str:
        return f"FakeElement({self.label!r})"


class FakeDom:
    """In-memory ``DomProbe``. Selectors map straight to element lists."""

    def __init__(self, url: str = BASE_URL + "/travel", elements: dict[str, list[FakeElement]] | None = None):
        self.url = url
        self.elements: dict[str, list[FakeElement]] = elements or {}
        self.clicks: list[tuple[FakeElement, float | None]] = []
        self.events: list[str] = []
        self.queries: list[str] = []
        self.reloads = 0
        self.closed = False
        self.challenge: FakeDom | None = None
        self.success_ready = True
        self.subscriptions: list[tuple[str, Callable[[Any], Any]]] = []

    def add(self, selector: str, *elements: FakeElement) -> FakeDom:
        self.elements.setdefault(selector, []).extend(elements)
        return self

    @property
    def clicked(self) -> list[FakeElement]:
        return [element for element, _ in self.clicks]

    async def query_all(self, selector: str) -> list[FakeElement]:
        self.queries.append(selector)
        return list(self.elements.get(selector, []))

    async def is_hidden(self, element: FakeElement) -> bool:
        return element.hidden

    async def parent(self, element: FakeElement) -> FakeElement | None:
        return element.parent

    async def attribute(self, element: FakeElement, name: str) -> str | None:
        return element.attributes.get(name)

    async def text(self, element: FakeElement) -> str:
        return element.text.strip()

    async def click(self, element: FakeElement, timeout: float | None = None) -> None:
        self.events.append(f"click:{element.label}")
        self.clicks.append((element, timeout))

    async def wait_enabled(self, element: FakeElement) -> None:
        self.events.append(f"wait_enabled:{element.label}")
        await asyncio.sleep(0)
        element.attributes.pop("disabled", None)

    async def click_and_wait_for_page(self, element: FakeElement) -> FakeDom:
        await self.click(element)
        assert self.challenge is not None, "no challenge page configured"
        return self.challenge

    async def wait_for(self, selector: str) -> None:
        self.events.append(f"wait_for:{selector}")
        if not self.success_ready:
            await asyncio.Event().wait()

    async def reload(self) -> None:
        self.reloads += 1

    async def close(self) -> None:
        self.closed = True

    def on_request_finished(self, url_prefix: str, callback: Callable[[Any], Any]) -> None:
        self.subscriptions.append((url_prefix, callback))

    def finish_request(self, url: str, body: Any) -> None:
        for prefix, callback in self.subscriptions:
            if url.startswith(prefix):
                callback(body)


def hidden_parent() -> FakeElement:
    return FakeElement("hidden-container", hidden=True)


def visible_parent() -> FakeElement:
    return FakeElement("container")


@pytest.fixture
def registry() -> CollectorRegistry:
    return CollectorRegistry()


@pytest.fixture
def enabled() -> EnabledFlag:
    return EnabledFlag(True)


@pytest.fixture
def metrics(registry: CollectorRegistry, enabled: EnabledFlag) -> MmoMetrics:
    return MmoMetrics(enabled, registry=registry)


@pytest.fixture
def bell() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def alarm(bell: io.StringIO) -> Alarm:
    return Alarm(stream=bell)


def sample(registry: CollectorRegistry, metric: str, /, **labels: str) -> float | None:
    return registry.get_sample_value(metric, labels)
