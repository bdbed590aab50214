from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import JSONResponse

from src.rsvps.aggregation import build_export, export_filename
from src.rsvps.dtos import StorageUnavailableError
from src.rsvps.repository.gateway import RSVPGateway, get_rsvp_gateway
from src.rsvps.urls import RSVP_EXPORT_URL

router = APIRouter()


@router.get(RSVP_EXPORT_URL)
async def export_rsvps(
    gateway: RSVPGateway = Depends(get_rsvp_gateway),
) -> JSONResponse:
    """Download every response plus the category summary and totals."""
    try:
        records = await gateway.list_records()
    except StorageUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    exported_at = datetime.now(UTC)
    return JSONResponse(
        content=build_export(records, exported_at),
        headers={
            "Content-Disposition": f'attachment; filename="{export_filename(exported_at)}"',
        },
    )
