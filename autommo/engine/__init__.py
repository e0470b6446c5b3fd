"""Page interpretation and action resolution for the SimpleMMO web client."""

from __future__ import annotations

from autommo.engine.alarm import Alarm
from autommo.engine.dispatcher import ActionDispatcher
from autommo.engine.interrupt import InterruptHandler
from autommo.engine.items import ItemRecord, RarityTier, rarity_from_class, read_item
from autommo.engine.page_classifier import (
    PageClassifier,
    PageState,
    StepOutcome,
    TravelSubAction,
    step_outcome,
)
from autommo.engine.rewards import RewardExtractor, parse_reward_fragments, parse_rewards
from autommo.engine.visibility import VisibilityResolver

__all__ = [
    "ActionDispatcher",
    "Alarm",
    "InterruptHandler",
    "ItemRecord",
    "PageClassifier",
    "PageState",
    "RarityTier",
    "RewardExtractor",
    "StepOutcome",
    "TravelSubAction",
    "VisibilityResolver",
    "parse_reward_fragments",
    "parse_rewards",
    "rarity_from_class",
    "read_item",
    "step_outcome",
]
