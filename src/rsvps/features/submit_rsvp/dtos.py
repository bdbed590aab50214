"""DTOs for the submit RSVP feature."""

from pydantic import BaseModel

from src.rsvps.dtos import RSVPRecord, StorageMode


class SubmitRSVPResponse(BaseModel):
    message: str
    rsvp: RSVPRecord
    storage: StorageMode
    degraded: bool
    confirmation_sent: bool
