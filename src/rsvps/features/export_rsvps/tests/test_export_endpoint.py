import re

import pytest

from src.rsvps.repository.gateway import get_rsvp_gateway
from src.rsvps.tests.inmemory_models import InMemoryRemoteStore, make_gateway, make_record
from src.rsvps.urls import RSVP_EXPORT_URL


@pytest.mark.asyncio
async def test_export_rsvps(client_factory):
    """Test the export is offered as a dated JSON download."""
    document = [
        make_record("1", "Harry", guest_count=2, drinks=["Butterbeer"]).to_document(),
        make_record("2", "Percy", attending=False).to_document(),
    ]
    gateway = make_gateway(remote=InMemoryRemoteStore(document=document))

    async with client_factory({get_rsvp_gateway: lambda: gateway}) as client:
        response = await client.get(RSVP_EXPORT_URL)

    assert response.status_code == 200
    assert re.fullmatch(
        r'attachment; filename="halloween-party-rsvps-\d{4}-\d{2}-\d{2}\.json"',
        response.headers["content-disposition"],
    )
    data = response.json()
    assert len(data["rsvps"]) == 2
    assert data["summary"] == {"drinks": ["Harry: Butterbeer"], "snacks": [], "other": []}
    assert data["totalRSVPs"] == 2
    assert data["attendingCount"] == 1
    assert data["totalGuests"] == 2
    assert "exportDate" in data
