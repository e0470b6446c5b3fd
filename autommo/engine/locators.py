"""Selector vocabulary for the SimpleMMO web client.

All selectors use Playwright syntax (``:has-text`` etc.) and are resolved
through ``DomProbe.query_all``.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------

RARITY_CLASSES: tuple[str, ...] = (
    "common-item",
    "uncommon-item",
    "elite-item",
    "rare-item",
    "epic-item",
    "legendary-item",
    "celestial-item",
    "exotic-item",
)

ITEM_RARITY = ", ".join(f".{cls}" for cls in RARITY_CLASSES)

NOT_A_BOT_BUTTON = "a[href^='/i-am-not-a-bot']"
CAPTCHA_SUCCESS_ICON = ".swal2-animate-success-icon"

# ---------------------------------------------------------------------------
# Travel page
# ---------------------------------------------------------------------------

TRAVEL_HEADING = "[x-text='travel.heading']"
TRAVEL_STEP_BUTTON = "[id^='step_btn']"
TRAVEL_ATTACK_BUTTON = "a:has-text('Attack')"
TRAVEL_MINE_BUTTON = "button:has-text('Mine')"
TRAVEL_CHOP_BUTTON = "button:has-text('Chop')"
TRAVEL_SALVAGE_BUTTON = "button:has-text('Salvage')"
TRAVEL_CATCH_BUTTON = "button:has-text('Catch')"

# ---------------------------------------------------------------------------
# Attack page
# ---------------------------------------------------------------------------

ATTACK_BUTTON = "button:has-text('Attack')"
ATTACK_LEAVE_BUTTON = "button:has-text('Leave')"

# ---------------------------------------------------------------------------
# Gather page
# ---------------------------------------------------------------------------

GATHER_CRAFTING_BUTTON = "[id^='crafting_button']"
GATHER_CLOSE_BUTTON = "button:has-text('Press here to close')"
