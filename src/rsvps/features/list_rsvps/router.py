from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from src.rsvps.aggregation import compute_totals
from src.rsvps.dtos import RSVPRecord, StorageMode, StorageUnavailableError
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway
from src.rsvps.urls import RSVPS_URL

router = APIRouter()


class ListRSVPsResponse(BaseModel):
    rsvps: list[RSVPRecord]
    storage: StorageMode
    total_rsvps: int
    attending_count: int
    not_attending_count: int
    total_guests: int


@router.get(RSVPS_URL, response_model=ListRSVPsResponse)
async def list_rsvps(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
) -> ListRSVPsResponse:
    """All stored responses in submission order, with dashboard totals."""
    try:
        result = await gateway.read_records()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    totals = compute_totals(result.records)
    return ListRSVPsResponse(
        rsvps=result.records,
        storage=result.storage,
        total_rsvps=totals.total_rsvps,
        attending_count=totals.attending_count,
        not_attending_count=totals.not_attending_count,
        total_guests=totals.total_guests,
    )
