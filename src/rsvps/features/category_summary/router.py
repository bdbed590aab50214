from fastapi import APIRouter, Depends, HTTPException

from src.rsvps.dtos import CategorySummary, StorageUnavailableError
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway
from src.rsvps.urls import RSVP_SUMMARY_URL

router = APIRouter()


@router.get(RSVP_SUMMARY_URL, response_model=CategorySummary)
async def category_summary(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
) -> CategorySummary:
    """What attending guests are already bringing, per category."""
    try:
        return await gateway.category_summary()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
