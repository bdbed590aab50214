from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.rsvps.dtos import DeleteOutcome, StorageMode, StorageUnavailableError
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway
from src.rsvps.urls import RSVP_URL

router = APIRouter()


class DeleteRSVPResponse(BaseModel):
    id: str
    outcome: DeleteOutcome
    storage: StorageMode


@router.delete(RSVP_URL, response_model=DeleteRSVPResponse)
async def delete_rsvp(
    rsvp_id: str,
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
) -> DeleteRSVPResponse:
    """Permanently remove one response. There is no undo."""
    try:
        result = await gateway.delete_record(rsvp_id)
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    if not result.deleted:
        raise HTTPException(status_code=404, detail=f"RSVP {rsvp_id} not found")

    return DeleteRSVPResponse(id=rsvp_id, outcome=result.outcome, storage=result.storage)
