"""Soft lock in front of the admin dashboard.

This is a UX deterrent, not access control: the expected hash ships with the
client and the hash is trivially reversible by brute force. Anything that needs
real protection must sit behind an external identity provider.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum

logger = logging.getLogger(__name__)


def soft_hash(text: str) -> str:
    """31-multiplier string hash over UTF-16 code units, as a signed 32-bit decimal."""
    data = text.encode("utf-16-le")
    value = 0
    for i in range(0, len(data), 2):
        value = (value * 31 + (data[i] | data[i + 1] << 8)) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return str(value)


class UnlockOutcome(str, Enum):
    GRANTED = "granted"
    DENIED = "denied"
    LOCKED = "locked"


@dataclass(frozen=True)
class UnlockAttempt:
    outcome: UnlockOutcome
    message: str
    attempts: int


class AdminAccessGate:
    """Shared-password prompt with a per-session attempt limit."""

    def __init__(
        self,
        password_hash: str,
        max_attempts: int = 3,
        close_delay_seconds: float = 2.0,
        on_close: Callable[[], None] | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._password_hash = password_hash
        self._max_attempts = max_attempts
        self._close_delay_seconds = close_delay_seconds
        self._on_close = on_close
        self._sleep = sleep
        self.attempts = 0
        self.unlocked = False
        self.closed = False

    @property
    def locked(self) -> bool:
        return self.attempts >= self._max_attempts and not self.unlocked

    def submit(self, password: str) -> UnlockAttempt:
        if self.unlocked:
            return UnlockAttempt(UnlockOutcome.GRANTED, "Access granted.", self.attempts)
        if self.locked:
            return UnlockAttempt(
                UnlockOutcome.LOCKED, "Too many failed attempts. Access denied.", self.attempts
            )

        if soft_hash(password.lower()) == self._password_hash:
            self.unlocked = True
            return UnlockAttempt(UnlockOutcome.GRANTED, "Access granted.", self.attempts)

        self.attempts += 1
        if self.locked:
            logger.warning("Admin soft lock engaged after %d failed attempts", self.attempts)
            return UnlockAttempt(
                UnlockOutcome.LOCKED, "Too many failed attempts. Access denied.", self.attempts
            )
        return UnlockAttempt(
            UnlockOutcome.DENIED,
            f"Incorrect password. Attempt {self.attempts}/{self._max_attempts}",
            self.attempts,
        )

    async def close_after_lockout(self) -> bool:
        """Force-close the prompt after the lockout delay. No-op unless locked."""
        if not self.locked or self.closed:
            return False
        await self._sleep(self._close_delay_seconds)
        self.closed = True
        if self._on_close:
            self._on_close()
        return True
