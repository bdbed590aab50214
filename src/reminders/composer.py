"""Reminder emails for guests who said they are coming.

Reminders go out one at a time with a fixed pause between sends so the relay's
rate limit is respected. A failed send is recorded and the loop moves on to the
next guest.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Protocol

from src.email_service.base import EmailServiceBase
from src.email_service.templates import EmailTemplates, PartyConfig, PartyDetails
from src.rsvps.dtos import RSVPRecord

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ReminderPreview:
    recipient: str
    subject: str
    text_body: str
    html_body: str


@dataclass(frozen=True)
class ReminderResult:
    recipient: str
    success: bool
    error: str | None = None


class ReminderConfig(PartyConfig, Protocol):
    reminder_send_delay_seconds: float


class ReminderComposer:
    def __init__(
        self,
        email_service: EmailServiceBase,
        config: ReminderConfig,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self._email_service = email_service
        self._party = PartyDetails.from_config(config)
        self._delay = config.reminder_send_delay_seconds
        self._sleep = sleep

    def build_preview(self, record: RSVPRecord) -> ReminderPreview:
        subject, text_body, html_body = EmailTemplates.render_reminder(record, self._party)
        return ReminderPreview(
            recipient=record.email,
            subject=subject,
            text_body=text_body,
            html_body=html_body,
        )

    def build_previews(self, records: list[RSVPRecord]) -> list[ReminderPreview]:
        return [self.build_preview(record) for record in records if record.attending]

    async def send_all(self, records: list[RSVPRecord]) -> list[ReminderResult]:
        attending = [record for record in records if record.attending]
        logger.info("Sending reminder emails to %d attending guests", len(attending))

        results: list[ReminderResult] = []
        for index, record in enumerate(attending):
            if index > 0:
                await self._sleep(self._delay)
            try:
                await self._email_service.send_reminder(record)
            except Exception as e:
                logger.error("Failed to send reminder email to %s: %s", record.email, e)
                results.append(ReminderResult(recipient=record.email, success=False, error=str(e)))
            else:
                results.append(ReminderResult(recipient=record.email, success=True))

        succeeded = sum(1 for result in results if result.success)
        logger.info(
            "Reminder emails completed: %d successful, %d failed",
            succeeded,
            len(results) - succeeded,
        )
        return results
