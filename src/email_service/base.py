from abc import ABC, abstractmethod

from src.rsvps.dtos import RSVPRecord


class EmailRelayError(Exception):
    """Raised when the email relay rejects or cannot receive a message."""


class EmailRelayNotConfiguredError(EmailRelayError):
    def __init__(self, missing: str) -> None:
        self.missing = missing
        super().__init__(f"Email relay is not configured: missing {missing}")


class EmailServiceBase(ABC):
    @abstractmethod
    async def send_notification(self, record: RSVPRecord) -> None:
        """Tell the organizer a new RSVP arrived."""
        pass

    @abstractmethod
    async def send_confirmation(self, record: RSVPRecord) -> None:
        """Confirm a submitted RSVP to the guest."""
        pass

    @abstractmethod
    async def send_reminder(self, record: RSVPRecord) -> None:
        """Remind an attending guest about the party."""
        pass
