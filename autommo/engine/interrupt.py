"""Handle the "I am not a bot" verification interrupt.

The game can put a verification link on any page. Following it opens a
new tab with a challenge only a human can solve, so the worker rings an
alarm and waits, without a deadline, until the challenge reports success.
"""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING

from autommo.engine import locators
from autommo.engine.alarm import Alarm
from autommo.engine.visibility import VisibilityResolver

if TYPE_CHECKING:
    from autommo.browser.dom import DomProbe
    from autommo.runner.metrics import EventCounterSink

logger = logging.getLogger(__name__)

ALERT_INTERVAL_SECONDS = 0.5


class InterruptHandler:
    """Detects the verification prompt and blocks until it is solved."""

    def __init__(
        self,
        dom: DomProbe,
        sink: EventCounterSink,
        alarm: Alarm | None = None,
        alert_interval: float = ALERT_INTERVAL_SECONDS,
    ):
        self.dom = dom
        self.sink = sink
        self.alarm = alarm or Alarm()
        self.alert_interval = alert_interval
        self.prompt = VisibilityResolver(dom, locators.NOT_A_BOT_BUTTON)

    async def check(self) -> bool:
        """Resolve a pending verification prompt.

        Returns True if a challenge was handled and the page reloaded,
        False if there was nothing to do. Cancelling the caller while the
        challenge is open stops the alarm and closes the challenge tab.
        """
        if not await self.prompt.exists():
            return False
        button = await self.prompt.first_visible()
        if button is None:
            return False

        logger.warning("Detected 'I am not a bot' button")
        self.sink.increment_captcha()

        challenge = await self.dom.click_and_wait_for_page(button)
        alert = asyncio.create_task(self.alarm.repeat(self.alert_interval))
        try:
            await challenge.wait_for(locators.CAPTCHA_SUCCESS_ICON)
        finally:
            # The tab must close even if shutdown cancels us again here.
            try:
                alert.cancel()
                await asyncio.wait({alert})
            finally:
                await challenge.close()

        logger.info("Verification passed, reloading page")
        await self.dom.reload()
        return True
