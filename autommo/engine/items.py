"""Item rarity vocabulary and DOM item lookup."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from autommo.engine.visibility import VisibilityResolver

logger = logging.getLogger(__name__)


class RarityTier(Enum):
    UNCOMMON = "uncommon"
    COMMON = "common"
    RARE = "rare"
    ELITE = "elite"
    EPIC = "epic"
    LEGENDARY = "legendary"
    CELESTIAL = "celestial"
    EXOTIC = "exotic"
    UNKNOWN = "unknown"


_CLASS_TO_RARITY: dict[str, RarityTier] = {
    f"{tier.value}-item": tier for tier in RarityTier if tier is not RarityTier.UNKNOWN
}


@dataclass(frozen=True)
class ItemRecord:
    rarity: RarityTier
    name: str


def rarity_from_class(class_attr: str | list[str] | None) -> RarityTier:
    """Map an element's class attribute to its rarity tier.

    Accepts the raw attribute string or an already-split token list (as
    BeautifulSoup returns it). Never raises; anything unrecognised is
    ``RarityTier.UNKNOWN``.
    """
    if not class_attr:
        return RarityTier.UNKNOWN
    tokens = class_attr.split() if isinstance(class_attr, str) else class_attr
    for token in tokens:
        tier = _CLASS_TO_RARITY.get(token)
        if tier is not None:
            return tier
    return RarityTier.UNKNOWN


async def read_item(resolver: VisibilityResolver) -> ItemRecord | None:
    """Read the item currently shown on the page, if any.

    *resolver* must be built over the rarity selector. The first visible
    match wins.
    """
    if not await resolver.exists():
        return None
    element = await resolver.first_visible()
    if element is None:
        return None
    dom = resolver.dom
    rarity = rarity_from_class(await dom.attribute(element, "class"))
    name = await dom.text(element)
    return ItemRecord(rarity, name)
