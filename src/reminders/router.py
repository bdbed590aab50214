from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.config.settings import settings
from src.email_service import get_email_service
from src.reminders.composer import ReminderComposer
from src.rsvps.dtos import StorageUnavailableError
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway

router = APIRouter()

REMINDER_PREVIEWS_URL = "/api/v1/reminders/previews"
SEND_REMINDERS_URL = "/api/v1/reminders/send"


class ReminderPreviewResponse(BaseModel):
    recipient: str
    subject: str
    text_body: str
    html_body: str


class ReminderResultResponse(BaseModel):
    recipient: str
    success: bool
    error: str | None = None


class SendRemindersResponse(BaseModel):
    results: list[ReminderResultResponse]
    successful: int
    failed: int


def get_reminder_composer() -> ReminderComposer:
    """Dependency to get the reminder composer. Override in tests."""
    return ReminderComposer(email_service=get_email_service(), config=settings)


@router.get(REMINDER_PREVIEWS_URL, response_model=list[ReminderPreviewResponse])
async def reminder_previews(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
    composer: ReminderComposer = Depends(get_reminder_composer),
) -> list[ReminderPreviewResponse]:
    """Dry run: the reminder each attending guest would receive."""
    try:
        records = await gateway.list_records()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    return [
        ReminderPreviewResponse(
            recipient=preview.recipient,
            subject=preview.subject,
            text_body=preview.text_body,
            html_body=preview.html_body,
        )
        for preview in composer.build_previews(records)
    ]


@router.post(SEND_REMINDERS_URL, response_model=SendRemindersResponse)
async def send_reminders(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
    composer: ReminderComposer = Depends(get_reminder_composer),
) -> SendRemindersResponse:
    """
    Send a reminder to every attending guest, one at a time.

    The request stays open until the last email has been attempted.
    """
    try:
        records = await gateway.list_records()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    results = await composer.send_all(records)
    successful = sum(1 for result in results if result.success)
    return SendRemindersResponse(
        results=[
            ReminderResultResponse(
                recipient=result.recipient, success=result.success, error=result.error
            )
            for result in results
        ],
        successful=successful,
        failed=len(results) - successful,
    )
