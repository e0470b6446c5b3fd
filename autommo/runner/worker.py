"""The tick loop.

Each tick: settle, resolve any verification interrupt, classify the page,
perform its one action. Reward capture runs on its own, driven by the
page's network events.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from playwright.async_api import Error as PlaywrightError

from autommo.engine.alarm import Alarm
from autommo.engine.dispatcher import ActionDispatcher
from autommo.engine.interrupt import InterruptHandler
from autommo.engine.page_classifier import PageClassifier, PageState
from autommo.engine.rewards import RewardExtractor

if TYPE_CHECKING:
    from autommo.browser.dom import DomProbe
    from autommo.config import EnabledFlag, WorkerConfig
    from autommo.runner.metrics import EventCounterSink

logger = logging.getLogger(__name__)


class Worker:
    """Drives one page until cancelled."""

    def __init__(
        self,
        dom: DomProbe,
        config: WorkerConfig,
        sink: EventCounterSink,
        enabled: EnabledFlag,
        alarm: Alarm | None = None,
    ):
        self.dom = dom
        self.config = config
        self.enabled = enabled
        alarm = alarm or Alarm()
        loop_cfg = config.loop

        self.classifier = PageClassifier(config.site.base_url)
        self.interrupt = InterruptHandler(
            dom, sink, alarm=alarm, alert_interval=loop_cfg.alert_interval_seconds
        )
        self.dispatcher = ActionDispatcher(
            dom,
            sink,
            self.classifier,
            alarm=alarm,
            attack_click_timeout_ms=loop_cfg.attack_click_timeout_ms,
            unknown_page_backoff=loop_cfg.unknown_page_backoff_seconds,
        )
        self.rewards = RewardExtractor(sink, config.site.base_url)
        self.ticks = 0

    def subscribe(self) -> None:
        """Start recording attack rewards from finished network requests."""
        self.dom.on_request_finished(self.rewards.url_prefix, self.rewards.on_response)

    async def tick(self) -> PageState:
        # Give the page time to finish loading and animating.
        await asyncio.sleep(self.config.loop.tick_delay_seconds)

        await self.interrupt.check()

        state = self.classifier.classify(self.dom.url)
        await self.dispatcher.dispatch(state)
        self.ticks += 1
        return state

    async def run(self) -> None:
        """Loop until the surrounding task is cancelled."""
        logger.info("Background worker started.")
        was_enabled = True
        try:
            while True:
                if not self.enabled.is_enabled:
                    if was_enabled:
                        logger.warning("Worker is disabled. Waiting for it to be enabled...")
                    was_enabled = False
                    await asyncio.sleep(self.config.loop.disabled_poll_seconds)
                    continue
                if not was_enabled:
                    logger.info("Worker enabled, resuming")
                was_enabled = True

                try:
                    await self.tick()
                except PlaywrightError as e:
                    logger.warning(f"Tick failed on {self.dom.url}: {e}")
        finally:
            logger.info(f"Background worker finished after {self.ticks} ticks.")
