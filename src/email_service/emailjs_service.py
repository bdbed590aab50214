import logging
from typing import Protocol

import httpx

from src.email_service.base import (
    EmailRelayError,
    EmailRelayNotConfiguredError,
    EmailServiceBase,
)
from src.email_service.email_logger import EmailLogger, NoOpEmailLogger
from src.email_service.templates import EmailTemplates, PartyConfig, PartyDetails, template_params
from src.rsvps.dtos import RSVPRecord

logger = logging.getLogger(__name__)


class EmailJSConfig(PartyConfig, Protocol):
    emailjs_api_url: str
    emailjs_service_id: str
    emailjs_public_key: str
    emailjs_private_key: str
    emailjs_notification_template_id: str
    emailjs_confirmation_template_id: str
    emailjs_reminder_template_id: str
    organizer_email: str


class EmailJSService(EmailServiceBase):
    """Sends template emails through the EmailJS REST API."""

    def __init__(
        self,
        config: EmailJSConfig,
        email_logger: EmailLogger | None = None,
        http_client_class: type[httpx.AsyncClient] = httpx.AsyncClient,
    ):
        self._config = config
        self._party = PartyDetails.from_config(config)
        self.email_logger = email_logger or NoOpEmailLogger()
        self._http_client_class = http_client_class

    def _check_configured(self, template_id: str, template_name: str) -> None:
        if not self._config.emailjs_public_key:
            raise EmailRelayNotConfiguredError("public key")
        if not self._config.emailjs_service_id:
            raise EmailRelayNotConfiguredError("service id")
        if not template_id:
            raise EmailRelayNotConfiguredError(f"{template_name} template id")

    async def _send(
        self,
        template_id: str,
        template_name: str,
        to_address: str,
        subject: str,
        params: dict,
        rsvp_id: str | None = None,
    ) -> None:
        """Send one template email via EmailJS and log via injected logger."""
        self._check_configured(template_id, template_name)

        log_uuid = await self.email_logger.log_email_attempt(
            to_address=to_address,
            email_type=template_name,
            template_id=template_id,
            subject=subject,
            rsvp_id=rsvp_id,
        )

        payload = {
            "service_id": self._config.emailjs_service_id,
            "template_id": template_id,
            "user_id": self._config.emailjs_public_key,
            "template_params": params,
        }
        if self._config.emailjs_private_key:
            payload["accessToken"] = self._config.emailjs_private_key

        try:
            async with self._http_client_class() as client:
                response = await client.post(
                    self._config.emailjs_api_url,
                    headers={"Content-Type": "application/json"},
                    json=payload,
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as e:
            await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(e))
            raise EmailRelayError(
                f"Email relay rejected {template_name} email: {e.response.status_code}"
            ) from e
        except httpx.HTTPError as e:
            await self.email_logger.log_email_failure(log_uuid=log_uuid, error_message=str(e))
            raise EmailRelayError(f"Email relay unreachable: {e}") from e

        await self.email_logger.log_email_success(log_uuid=log_uuid)
        logger.info("Sent %s email to %s", template_name, to_address)

    async def send_notification(self, record: RSVPRecord) -> None:
        if not self._config.organizer_email:
            logger.warning("No organizer email configured, skipping RSVP notification")
            return
        subject = EmailTemplates.NOTIFICATION_SUBJECT.format(
            guest_name=record.name, party_name=self._party.name
        )
        await self._send(
            template_id=self._config.emailjs_notification_template_id,
            template_name="notification",
            to_address=self._config.organizer_email,
            subject=subject,
            params=template_params(record, self._party, self._config.organizer_email, subject),
            rsvp_id=record.id,
        )

    async def send_confirmation(self, record: RSVPRecord) -> None:
        subject = EmailTemplates.CONFIRMATION_SUBJECT.format(party_name=self._party.name)
        await self._send(
            template_id=self._config.emailjs_confirmation_template_id,
            template_name="confirmation",
            to_address=record.email,
            subject=subject,
            params=template_params(record, self._party, record.email, subject),
            rsvp_id=record.id,
        )

    async def send_reminder(self, record: RSVPRecord) -> None:
        subject = EmailTemplates.REMINDER_SUBJECT.format(party_name=self._party.name)
        await self._send(
            template_id=self._config.emailjs_reminder_template_id,
            template_name="reminder",
            to_address=record.email,
            subject=subject,
            params=template_params(record, self._party, record.email, subject),
            rsvp_id=record.id,
        )
