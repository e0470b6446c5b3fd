"""Per-page action logic: pick the live control, wait for it, click it.

Every handler follows the same shape: resolve the target element, await
it becoming enabled when it carries ``disabled``, click, then report to
the counter sink. A missing control is never an error; the handler simply
does nothing this tick.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any, Awaitable, Callable

from autommo.engine import locators
from autommo.engine.alarm import Alarm
from autommo.engine.items import ItemRecord, read_item
from autommo.engine.page_classifier import (
    PageClassifier,
    PageState,
    StepOutcome,
    TravelSubAction,
    step_outcome,
)
from autommo.engine.visibility import VisibilityResolver

if TYPE_CHECKING:
    from autommo.browser.dom import DomProbe
    from autommo.runner.metrics import EventCounterSink

logger = logging.getLogger(__name__)

ATTACK_CLICK_TIMEOUT_MS = 100_000
UNKNOWN_PAGE_BACKOFF_SECONDS = 5.0
UNKNOWN_HEADING = "Unknown"


class ActionDispatcher:
    """Performs the one action the current page calls for."""

    def __init__(
        self,
        dom: DomProbe,
        sink: EventCounterSink,
        classifier: PageClassifier,
        alarm: Alarm | None = None,
        attack_click_timeout_ms: float = ATTACK_CLICK_TIMEOUT_MS,
        unknown_page_backoff: float = UNKNOWN_PAGE_BACKOFF_SECONDS,
    ):
        self.dom = dom
        self.sink = sink
        self.classifier = classifier
        self.alarm = alarm or Alarm()
        self.attack_click_timeout_ms = attack_click_timeout_ms
        self.unknown_page_backoff = unknown_page_backoff

        # Selector objects live for the whole session; candidates are
        # re-queried on every call.
        self.item_rarity = self._resolver(locators.ITEM_RARITY)
        self.travel_heading = self._resolver(locators.TRAVEL_HEADING)
        self.travel_buttons: dict[TravelSubAction, VisibilityResolver] = {
            TravelSubAction.ATTACK: self._resolver(locators.TRAVEL_ATTACK_BUTTON),
            TravelSubAction.MINE: self._resolver(locators.TRAVEL_MINE_BUTTON),
            TravelSubAction.CHOP: self._resolver(locators.TRAVEL_CHOP_BUTTON),
            TravelSubAction.SALVAGE: self._resolver(locators.TRAVEL_SALVAGE_BUTTON),
            TravelSubAction.CATCH: self._resolver(locators.TRAVEL_CATCH_BUTTON),
            TravelSubAction.STEP: self._resolver(locators.TRAVEL_STEP_BUTTON),
        }
        self.attack_button = self._resolver(locators.ATTACK_BUTTON)
        self.attack_leave_button = self._resolver(locators.ATTACK_LEAVE_BUTTON)
        self.crafting_button = self._resolver(locators.GATHER_CRAFTING_BUTTON)
        self.gather_close_button = self._resolver(locators.GATHER_CLOSE_BUTTON)

        self._page_handlers: dict[PageState, Callable[[], Awaitable[None]]] = {
            PageState.TRAVEL: self.handle_travel_page,
            PageState.ATTACK: self.handle_attack_page,
            PageState.GATHER: self.handle_gather_page,
            PageState.UNKNOWN: self.handle_unknown_page,
        }
        self._travel_handlers: dict[TravelSubAction, Callable[[str, TravelSubAction], Awaitable[None]]] = {
            TravelSubAction.ATTACK: self._travel_attack,
            TravelSubAction.MINE: self._travel_resource,
            TravelSubAction.CHOP: self._travel_resource,
            TravelSubAction.SALVAGE: self._travel_resource,
            TravelSubAction.CATCH: self._travel_resource,
            TravelSubAction.STEP: self._travel_step,
        }

    def _resolver(self, selector: str) -> VisibilityResolver:
        return VisibilityResolver(self.dom, selector)

    async def dispatch(self, state: PageState) -> None:
        await self._page_handlers[state]()

    # ------------------------------------------------------------------
    # Shared helpers
    # ------------------------------------------------------------------

    async def await_enabled(self, element: Any) -> None:
        """Block until *element* loses its ``disabled`` attribute."""
        if await self.dom.attribute(element, "disabled") is not None:
            await self.dom.wait_enabled(element)

    async def click_first_visible(self, resolver: VisibilityResolver) -> bool:
        element = await resolver.first_visible()
        if element is None:
            return False
        await self.dom.click(element)
        return True

    async def read_heading(self) -> str:
        headings = await self.travel_heading.candidates()
        if not headings:
            return UNKNOWN_HEADING
        return await self.dom.text(headings[0]) or UNKNOWN_HEADING

    # ------------------------------------------------------------------
    # Travel page
    # ------------------------------------------------------------------

    async def handle_travel_page(self) -> None:
        heading = await self.read_heading()
        action = await self.classifier.classify_sub_action(self.dom)
        logger.debug(f"Travel action {action.value} (heading {heading!r})")
        await self._travel_handlers[action](heading, action)

    async def _travel_attack(self, heading: str, action: TravelSubAction) -> None:
        self.sink.increment_attacks(heading)
        await self.click_first_visible(self.travel_buttons[action])

    async def _travel_resource(self, heading: str, action: TravelSubAction) -> None:
        self.sink.increment_resources(action.value)

        item = await read_item(self.item_rarity)
        if item is not None:
            logger.warning(f"Found resource: {item.rarity.value} - {heading}")
            self.sink.increment_resources_stats(item.rarity.value, heading)

        await self.click_first_visible(self.travel_buttons[action])

    async def _travel_step(self, heading: str, action: TravelSubAction) -> None:
        step_buttons = self.travel_buttons[action]
        if not await step_buttons.exists():
            logger.debug("No step button on travel page yet")
            return

        outcome = step_outcome(heading)
        if outcome is StepOutcome.ITEM:
            item = await read_item(self.item_rarity)
            if item is not None:
                logger.warning(f"Found item: {item.rarity.value} - {item.name}")
                self.sink.increment_items(item.rarity.value, item.name)
            else:
                logger.error("Failed to find item in step with item")

        self.sink.increment_steps(outcome.value)

        # Several step buttons coexist; stale ones sit inside hidden
        # containers, so the live one is the first with a visible parent.
        button = await step_buttons.first_not_enclosed_by_hidden_ancestor()
        if button is None:
            return
        await self.await_enabled(button)
        await self.dom.click(button)

    # ------------------------------------------------------------------
    # Attack page
    # ------------------------------------------------------------------

    async def handle_attack_page(self) -> None:
        button = await self.attack_button.first_visible()
        if button is None:
            await self.click_first_visible(self.attack_leave_button)
            return

        # A finished fight leaves the attack button inside a hidden container.
        if await self.attack_button.is_enclosed_by_hidden_ancestor(button):
            logger.info("Fight finished, leaving")
            await self.click_first_visible(self.attack_leave_button)
            return

        await self.await_enabled(button)
        await self.dom.click(button, timeout=self.attack_click_timeout_ms)
        self.sink.increment_attack_clicks()

    # ------------------------------------------------------------------
    # Gather page
    # ------------------------------------------------------------------

    async def handle_gather_page(self) -> None:
        item: ItemRecord | None = await read_item(self.item_rarity)

        button = await self.crafting_button.first_visible()
        if button is None:
            await self.click_first_visible(self.gather_close_button)
            return

        await self.await_enabled(button)
        await self.dom.click(button)
        if item is not None:
            self.sink.increment_resource_clicks(item.rarity.value, item.name)

    # ------------------------------------------------------------------
    # Anything else
    # ------------------------------------------------------------------

    async def handle_unknown_page(self) -> None:
        logger.error(f"Unknown page. Current URL: {self.dom.url}")
        self.alarm.beep()
        await asyncio.sleep(self.unknown_page_backoff)
