from abc import ABC, abstractmethod
from uuid import UUID, uuid4


class EmailLogger(ABC):
    """Abstract base class for recording email relay dispatches."""

    @abstractmethod
    async def log_email_attempt(
        self,
        to_address: str,
        email_type: str,
        template_id: str,
        subject: str,
        rsvp_id: str | None = None,
    ) -> UUID:
        """
        Log an email sending attempt before sending.

        Returns:
            UUID of the created log entry
        """
        pass

    @abstractmethod
    async def log_email_success(self, log_uuid: UUID) -> None:
        pass

    @abstractmethod
    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass


class SQLEmailLogger(EmailLogger):
    """Stores dispatch attempts in the local database."""

    async def log_email_attempt(
        self,
        to_address: str,
        email_type: str,
        template_id: str,
        subject: str,
        rsvp_id: str | None = None,
    ) -> UUID:
        from src.config.database import async_session_manager
        from src.email_service.orm_models import EmailLog

        email_log = EmailLog(
            to_address=to_address,
            email_type=email_type,
            template_id=template_id,
            subject=subject,
            rsvp_id=rsvp_id,
            status="pending",
        )

        async with async_session_manager() as session:
            session.add(email_log)
            await session.flush()
            return email_log.uuid

    async def log_email_success(self, log_uuid: UUID) -> None:
        await self._set_status(log_uuid, "sent")

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        await self._set_status(log_uuid, "failed", error_message)

    async def _set_status(self, log_uuid: UUID, status: str, error_message: str | None = None) -> None:
        from src.config.database import async_session_manager
        from src.email_service.orm_models import EmailLog

        async with async_session_manager() as session:
            email_log = await session.get(EmailLog, log_uuid)
            if email_log:
                email_log.status = status
                email_log.error_message = error_message


class NoOpEmailLogger(EmailLogger):
    """No-op implementation for testing or when logging is disabled."""

    async def log_email_attempt(
        self,
        to_address: str,
        email_type: str,
        template_id: str,
        subject: str,
        rsvp_id: str | None = None,
    ) -> UUID:
        return uuid4()

    async def log_email_success(self, log_uuid: UUID) -> None:
        pass

    async def log_email_failure(self, log_uuid: UUID, error_message: str) -> None:
        pass
