"""
Cooperative scheduling for long planning loops.

Dense fills can run thousands of scanlines. The loops call
``cooperative_yield`` every iteration; it suspends to the asyncio event loop
every ``every`` iterations. This is a scheduling hint, not a timing
guarantee: output content and order are unaffected.
"""

import asyncio
from typing import Optional

from coatpath.core.exceptions import PlanningCancelledError


class CancellationToken:
    """Flag checked at every yield point of a planning call."""

    def __init__(self) -> None:
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise PlanningCancelledError("Planning was cancelled")


async def cooperative_yield(
    iteration: int,
    every: int = 50,
    token: Optional[CancellationToken] = None,
) -> None:
    """
    Suspend to the event loop on every ``every``-th iteration.

    An ``every`` of zero or less never yields (and never checks ``token``).
    """
    if every <= 0 or iteration % every != 0:
        return
    if token is not None:
        token.raise_if_cancelled()
    await asyncio.sleep(0)
