"""Audible alerts for situations that need a human."""

from __future__ import annotations

import asyncio
import sys
from typing import TextIO


class Alarm:
    """Rings the terminal bell on *stream* (stdout by default)."""

    def __init__(self, stream: TextIO | None = None):
        self.stream = stream if stream is not None else sys.stdout

    def beep(self) -> None:
        self.stream.write("\a")
        self.stream.flush()

    async def repeat(self, interval: float) -> None:
        """Beep every *interval* seconds until cancelled."""
        while True:
            self.beep()
            await asyncio.sleep(interval)
