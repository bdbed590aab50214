import logging

from fastapi import APIRouter, Depends, HTTPException, status

from src.email_service import EmailServiceBase, get_email_service
from src.rsvps.dtos import RSVPRecord, RSVPSubmission, StorageUnavailableError
from src.rsvps.features.submit_rsvp.dtos import SubmitRSVPResponse
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway
from src.rsvps.urls import RSVPS_URL

logger = logging.getLogger(__name__)

router = APIRouter()


async def send_rsvp_emails(email_service: EmailServiceBase, record: RSVPRecord) -> bool:
    """Notify the organizer and confirm to the guest.

    Failures are logged and never undo the saved RSVP. Returns whether the
    guest confirmation went out.
    """
    try:
        await email_service.send_notification(record)
    except Exception as e:
        logger.error("Failed to send RSVP notification for %s: %s", record.id, e)

    try:
        await email_service.send_confirmation(record)
    except Exception as e:
        logger.error("Failed to send RSVP confirmation to %s: %s", record.email, e)
        return False
    return True


@router.post(
    RSVPS_URL,
    response_model=SubmitRSVPResponse,
    status_code=status.HTTP_201_CREATED,
)
async def submit_rsvp(
    submission: RSVPSubmission,
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
    email_service: EmailServiceBase = Depends(get_email_service),
) -> SubmitRSVPResponse:
    """
    Store a guest response and send the confirmation emails.

    Every call creates a new record; clients should disable resubmission while
    a request is in flight.
    """
    try:
        result = await gateway.save_record(submission)
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    confirmation_sent = await send_rsvp_emails(email_service, result.record)

    message = (
        "Your RSVP has been received! We can't wait to see you at the party!"
        if result.record.attending
        else "Your RSVP has been received. We're sorry you can't make it!"
    )
    return SubmitRSVPResponse(
        message=message,
        rsvp=result.record,
        storage=result.storage,
        degraded=result.degraded,
        confirmation_sent=confirmation_sent,
    )
