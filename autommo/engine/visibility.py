"""Pick the live element out of a set of selector matches.

The game keeps finished or off-screen copies of its controls in the DOM.
They still match the selector and are only told apart by their own (or
their parent's) computed style, so every query re-reads the live style.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from autommo.browser.dom import DomProbe


class VisibilityResolver:
    """Resolves the candidates matching *selector* on *dom*."""

    def __init__(self, dom: DomProbe, selector: str):
        self.dom = dom
        self.selector = selector

    def __repr__(self) -> str:
        return f"VisibilityResolver({self.selector!r})"

    async def candidates(self) -> list[Any]:
        return await self.dom.query_all(self.selector)

    async def exists(self) -> bool:
        return len(await self.candidates()) > 0

    async def first_visible(self) -> Any | None:
        """First candidate whose own style is not hidden."""
        for element in await self.candidates():
            if not await self.dom.is_hidden(element):
                return element
        return None

    async def first_not_enclosed_by_hidden_ancestor(self) -> Any | None:
        """First candidate whose immediate parent is not hidden.

        The candidate's own style is ignored.
        """
        for element in await self.candidates():
            if not await self.is_enclosed_by_hidden_ancestor(element):
                return element
        return None

    async def is_enclosed_by_hidden_ancestor(self, element: Any) -> bool:
        # Only the immediate parent is checked, not the full chain.
        parent = await self.dom.parent(element)
        if parent is None:
            return False
        return await self.dom.is_hidden(parent)
