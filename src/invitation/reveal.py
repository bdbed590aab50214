"""Letter-to-invitation reveal sequence.

awaiting-delivery -> delivering -> delivered-unopened -> opening -> opened

Delivery and opening are time gated. The only user input is the click on the
delivered letter; clicks at any other point are ignored. The sequence runs once
per page load and cannot be cancelled or rewound.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from enum import Enum

logger = logging.getLogger(__name__)


class RevealState(str, Enum):
    AWAITING_DELIVERY = "awaiting-delivery"
    DELIVERING = "delivering"
    DELIVERED_UNOPENED = "delivered-unopened"
    OPENING = "opening"
    OPENED = "opened"


class LetterReveal:
    def __init__(
        self,
        on_opened: Callable[[], None] | None = None,
        on_state_change: Callable[[RevealState], None] | None = None,
        delivery_seconds: float = 2.0,
        opening_seconds: float = 1.5,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._on_opened = on_opened
        self._on_state_change = on_state_change
        self._delivery_seconds = delivery_seconds
        self._opening_seconds = opening_seconds
        self._sleep = sleep
        self._state = RevealState.AWAITING_DELIVERY
        self.history: list[RevealState] = [self._state]

    @property
    def state(self) -> RevealState:
        return self._state

    @property
    def accepts_click(self) -> bool:
        return self._state == RevealState.DELIVERED_UNOPENED

    def _move_to(self, state: RevealState) -> None:
        logger.debug("Letter reveal %s -> %s", self._state.value, state.value)
        self._state = state
        self.history.append(state)
        if self._on_state_change:
            self._on_state_change(state)

    async def deliver(self) -> None:
        """Play the delivery animation gate. Only the first call has an effect."""
        if self._state != RevealState.AWAITING_DELIVERY:
            return
        self._move_to(RevealState.DELIVERING)
        await self._sleep(self._delivery_seconds)
        self._move_to(RevealState.DELIVERED_UNOPENED)

    async def click(self) -> bool:
        """Open the letter. Returns False when the click was ignored."""
        if not self.accepts_click:
            logger.debug("Ignoring letter click in state %s", self._state.value)
            return False
        self._move_to(RevealState.OPENING)
        await self._sleep(self._opening_seconds)
        self._move_to(RevealState.OPENED)
        if self._on_opened:
            self._on_opened()
        return True
