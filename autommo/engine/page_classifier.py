"""Decide which page is on screen and which travel action is offered.

Page state comes from the URL alone. On the travel page the sub-action is
decided by which controls *exist* (visibility is left to the dispatcher,
which uses it to pick the element to click).
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from autommo.engine import locators

if TYPE_CHECKING:
    from autommo.browser.dom import DomProbe


class PageState(Enum):
    TRAVEL = "travel"
    ATTACK = "attack"
    GATHER = "gather"
    UNKNOWN = "unknown"


class TravelSubAction(Enum):
    ATTACK = "attack"
    MINE = "mine"
    CHOP = "chop"
    SALVAGE = "salvage"
    CATCH = "catch"
    STEP = "step"


class StepOutcome(Enum):
    ITEM = "item"
    NOTHING = "nothing"
    START = "start"
    UNKNOWN = "unknown"


PAGE_PATHS: tuple[tuple[PageState, str], ...] = (
    (PageState.TRAVEL, "/travel"),
    (PageState.ATTACK, "/npcs/attack"),
    (PageState.GATHER, "/crafting/material/gather"),
)

# Evaluated in order; the first sub-action whose control exists wins.
SUB_ACTION_PRIORITY: tuple[tuple[TravelSubAction, str], ...] = (
    (TravelSubAction.ATTACK, locators.TRAVEL_ATTACK_BUTTON),
    (TravelSubAction.MINE, locators.TRAVEL_MINE_BUTTON),
    (TravelSubAction.CHOP, locators.TRAVEL_CHOP_BUTTON),
    (TravelSubAction.SALVAGE, locators.TRAVEL_SALVAGE_BUTTON),
    (TravelSubAction.CATCH, locators.TRAVEL_CATCH_BUTTON),
)

STEP_HEADINGS: dict[str, StepOutcome] = {
    "You have found an item!": StepOutcome.ITEM,
    "You take a step...": StepOutcome.NOTHING,
    "The start of your adventure...": StepOutcome.START,
}


def step_outcome(heading: str) -> StepOutcome:
    """Exact match of the travel heading against the known step phrases."""
    return STEP_HEADINGS.get(heading, StepOutcome.UNKNOWN)


class PageClassifier:
    """Maps the live URL and DOM to a page state."""

    def __init__(self, base_url: str):
        base = base_url.rstrip("/")
        self.prefixes: tuple[tuple[PageState, str], ...] = tuple(
            (state, base + path) for state, path in PAGE_PATHS
        )

    def classify(self, url: str) -> PageState:
        for state, prefix in self.prefixes:
            if url.startswith(prefix):
                return state
        return PageState.UNKNOWN

    async def classify_sub_action(self, dom: DomProbe) -> TravelSubAction:
        for action, selector in SUB_ACTION_PRIORITY:
            if await dom.query_all(selector):
                return action
        return TravelSubAction.STEP
