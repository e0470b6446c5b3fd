"""Extract item rewards from attack API responses.

The attack endpoint answers with JSON whose ``rewards`` field is a list of
HTML snippets, e.g.::

    {
        "type": "success",
        "rewards": [
            "<img src='/img/icons/S_Light01.png' class='h-4'>70,896 EXP",
            "<img alt='Jewel' src='...' class='h-6'> <span class='common-item'>Jewel</span>"
        ]
    }

Only snippets carrying a ``<span>`` describe an item; EXP and gold lines are
skipped.
"""

from __future__ import annotations

import json
import logging
from typing import TYPE_CHECKING, Any

from bs4 import BeautifulSoup

from autommo.engine.items import ItemRecord, rarity_from_class

if TYPE_CHECKING:
    from autommo.runner.metrics import EventCounterSink

logger = logging.getLogger(__name__)

ATTACK_REWARDS_PATH = "/api/npcs/attack"


def parse_reward_fragments(fragments: list[Any]) -> list[ItemRecord]:
    """Turn reward snippets into item records, keeping their order."""
    items: list[ItemRecord] = []
    for fragment in fragments:
        if not isinstance(fragment, str):
            continue
        soup = BeautifulSoup(fragment, "html.parser")
        span = soup.find("span")
        if span is None:
            continue
        items.append(ItemRecord(rarity_from_class(span.get("class")), span.get_text().strip()))
    return items


def parse_rewards(body: str | bytes | None) -> list[ItemRecord]:
    """Parse a raw attack response body. Never raises."""
    if not body:
        logger.warning("Attack response has no body")
        return []
    try:
        payload = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        logger.warning(f"Attack response is not valid JSON: {e}")
        return []
    if not isinstance(payload, dict):
        logger.warning("Attack response is not a JSON object")
        return []
    rewards = payload.get("rewards")
    if not isinstance(rewards, list):
        logger.warning("Attack response has no rewards list")
        return []
    return parse_reward_fragments(rewards)


class RewardExtractor:
    """Records items won in fights as attack responses complete."""

    def __init__(self, sink: EventCounterSink, base_url: str):
        self.sink = sink
        self.url_prefix = base_url.rstrip("/") + ATTACK_REWARDS_PATH

    def on_response(self, body: str | bytes | None) -> list[ItemRecord]:
        items = parse_rewards(body)
        if not items:
            logger.warning("Attack has no rewards. Skipping...")
            return items
        for item in items:
            logger.warning(f"Found item from attack: {item.rarity.value} - {item.name}")
            self.sink.increment_items(item.rarity.value, item.name)
        return items
