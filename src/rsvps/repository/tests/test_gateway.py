"""Tests for the RSVP gateway over the remote document and local fallback."""

import json

import pytest

from src.rsvps.aggregation import build_export
from src.rsvps.dtos import (
    CategorySummary,
    DeleteOutcome,
    StorageMode,
    StorageNotConfiguredError,
    StorageUnavailableError,
)
from src.rsvps.repository.local_store import InMemoryLocalStore
from src.rsvps.tests.inmemory_models import (
    LOCAL_KEY,
    FakeClock,
    InMemoryRemoteStore,
    make_gateway,
    make_submission,
)


def stored_record(record_id: str, name: str, **fields) -> dict:
    return {
        "id": record_id,
        "timestamp": 1761868800000,
        "name": name,
        "email": f"{name.lower()}@example.com",
        "attending": True,
        "guestCount": 1,
        "dietaryRestrictions": "",
        "bringingItems": {"drinks": [], "snacks": [], "other": []},
        **fields,
    }


async def test_saved_record_is_listed_with_id_and_timestamp():
    remote = InMemoryRemoteStore(document=[])
    gateway = make_gateway(remote=remote, clock=FakeClock(start=1761868800.5))

    result = await gateway.save_record(
        make_submission("Harry", guest_count=2, drinks=["Butterbeer"])
    )
    records = await gateway.list_records()

    assert result.degraded is False
    assert result.storage == StorageMode.REMOTE
    assert result.record.id
    assert result.record.timestamp == 1761868800500
    assert len(records) == 1
    assert records[0] == result.record
    assert remote.document[0]["bringingItems"]["drinks"] == ["Butterbeer"]


async def test_each_save_gets_a_distinct_id():
    gateway = make_gateway(remote=InMemoryRemoteStore(document=[]))

    first = await gateway.save_record(make_submission("Fred"))
    second = await gateway.save_record(make_submission("Fred"))

    assert first.record.id != second.record.id
    assert len(await gateway.list_records()) == 2


async def test_list_preserves_submission_order():
    gateway = make_gateway(remote=InMemoryRemoteStore(document=[]))
    for name in ["Harry", "Ron", "Hermione"]:
        await gateway.save_record(make_submission(name))

    records = await gateway.list_records()

    assert [record.name for record in records] == ["Harry", "Ron", "Hermione"]


async def test_guest_counts_are_normalized_on_read():
    remote = InMemoryRemoteStore(
        document=[
            stored_record("1", "Harry", guestCount="abc"),
            {k: v for k, v in stored_record("2", "Ron").items() if k != "guestCount"},
            stored_record("3", "Hermione", guestCount="4"),
            stored_record("4", "Neville", guestCount=0),
        ]
    )
    gateway = make_gateway(remote=remote)

    records = await gateway.list_records()

    assert [record.guest_count for record in records] == [1, 1, 4, 1]


@pytest.mark.parametrize(
    "document",
    [
        {"rsvps": [stored_record("1", "Harry")]},
        {"data": [stored_record("1", "Harry")]},
        [stored_record("1", "Harry")],
    ],
)
async def test_save_keeps_the_document_envelope(document):
    remote = InMemoryRemoteStore(document=document)
    gateway = make_gateway(remote=remote)

    await gateway.save_record(make_submission("Ron"))

    written = remote.writes[-1]
    assert type(written) is type(document)
    if isinstance(document, dict):
        assert written.keys() == document.keys()
    names = [record.name for record in await gateway.list_records()]
    assert names == ["Harry", "Ron"]


async def test_save_into_empty_remote_writes_bare_list():
    remote = InMemoryRemoteStore(document=None)
    gateway = make_gateway(remote=remote)

    saved = await gateway.save_record(make_submission("Luna"))

    assert remote.document == [saved.record.to_document()]


async def test_save_leaves_existing_legacy_entries_untouched():
    legacy = {
        "id": 1,
        "timestamp": 1761868800000,
        "name": "Neville",
        "email": "neville@example.com",
        "attending": True,
        "guestCount": "2",
        "bringingItems": ["Drinks"],
        "drinksDetails": "Pumpkin juice",
    }
    remote = InMemoryRemoteStore(document={"rsvps": [legacy]})
    gateway = make_gateway(remote=remote)

    await gateway.save_record(make_submission("Luna"))

    assert remote.document["rsvps"][0] == legacy
    summary = await gateway.category_summary()
    assert summary.drinks == ["Neville: Pumpkin juice"]


async def test_delete_removes_exactly_one_record():
    remote = InMemoryRemoteStore(
        document={"rsvps": [stored_record("1", "Harry"), stored_record("2", "Ron")]}
    )
    gateway = make_gateway(remote=remote)

    result = await gateway.delete_record("1")

    assert result.deleted is True
    assert result.outcome == DeleteOutcome.DELETED
    assert result.storage == StorageMode.REMOTE
    assert remote.document == {"rsvps": [stored_record("2", "Ron")]}


async def test_delete_unknown_id_reports_not_found_and_writes_nothing():
    remote = InMemoryRemoteStore(document=[stored_record("1", "Harry")])
    gateway = make_gateway(remote=remote)

    first = await gateway.delete_record("1")
    second = await gateway.delete_record("1")

    assert first.deleted is True
    assert second.outcome == DeleteOutcome.NOT_FOUND
    assert len(remote.writes) == 1
    assert await gateway.list_records() == []


async def test_delete_matches_numeric_legacy_ids():
    remote = InMemoryRemoteStore(document=[stored_record(42, "Dobby")])
    gateway = make_gateway(remote=remote)

    result = await gateway.delete_record("42")

    assert result.deleted is True
    assert remote.document == []


async def test_category_summary_reflects_latest_state():
    remote = InMemoryRemoteStore(document=[])
    gateway = make_gateway(remote=remote)
    await gateway.save_record(make_submission("Harry", drinks=["Butterbeer"]))
    ron = await gateway.save_record(make_submission("Ron", snacks=["Chocolate frogs"]))
    await gateway.save_record(
        make_submission("Percy", attending=False, other=["Cauldron report"])
    )

    assert await gateway.category_summary() == CategorySummary(
        drinks=["Harry: Butterbeer"], snacks=["Ron: Chocolate frogs"], other=[]
    )

    await gateway.delete_record(ron.record.id)

    assert (await gateway.category_summary()).snacks == []


@pytest.mark.parametrize(
    "bad_fields",
    [
        {"bringingItems": {"drinks": 5, "snacks": ["Cauldron cakes"], "other": []}},
        {"bringingItems": {"drinks": {"nested": True}, "snacks": None}},
        {"bringingItems": "Drinks"},
        {"bringingItems": 7},
        {"timestamp": "Infinity"},
        {"timestamp": 1e400},
        {"guestCount": "1e400"},
    ],
)
async def test_malformed_entry_does_not_break_reads(bad_fields):
    """One damaged stored entry is normalized and every other record still reads."""
    remote = InMemoryRemoteStore(
        document=[
            stored_record("1", "Harry", bringingItems={"drinks": ["Butterbeer"]}),
            stored_record("2", "Ron", **bad_fields),
            stored_record("3", "Hermione", guestCount=2),
        ]
    )
    gateway = make_gateway(remote=remote)

    records = await gateway.list_records()
    summary = await gateway.category_summary()
    export = build_export(records)

    assert [record.id for record in records] == ["1", "2", "3"]
    assert records[1].guest_count >= 1
    assert summary.drinks == ["Harry: Butterbeer"]
    assert export["totalGuests"] == sum(record.guest_count for record in records)


async def test_malformed_entry_keeps_usable_categories():
    remote = InMemoryRemoteStore(
        document=[
            stored_record(
                "1", "Ron", bringingItems={"drinks": 5, "snacks": ["Cauldron cakes"]}
            ),
        ]
    )
    gateway = make_gateway(remote=remote)

    summary = await gateway.category_summary()

    assert summary.drinks == []
    assert summary.snacks == ["Ron: Cauldron cakes"]


async def test_unreadable_entry_is_skipped():
    remote = InMemoryRemoteStore(
        document=[
            stored_record("1", "Harry"),
            stored_record("2", "Ron", attending="maybe"),
            ["not", "a", "record"],
            stored_record("3", "Hermione"),
        ]
    )
    gateway = make_gateway(remote=remote)

    records = await gateway.list_records()

    assert [record.id for record in records] == ["1", "3"]


async def test_export_total_guests_matches_saved_submissions():
    """Save mixed responses, read them back and export; totals follow attending guests."""
    gateway = make_gateway(remote=InMemoryRemoteStore(document=[]))
    submissions = [
        ("Harry", True, 2),
        ("Ron", True, "3"),
        ("Percy", False, 5),
        ("Neville", True, "abc"),
        ("Luna", True, 0),
        ("Draco", False, "2"),
        ("Hermione", True, -4),
    ]
    for name, attending, guest_count in submissions:
        await gateway.save_record(
            make_submission(name, attending=attending, guest_count=guest_count)
        )

    export = build_export(await gateway.list_records())

    # Harry 2 + Ron 3 + Neville 1 + Luna 1 + Hermione 1
    assert export["totalGuests"] == 8
    assert export["totalRSVPs"] == 7
    assert export["attendingCount"] == 5
    assert export["totalGuests"] == sum(
        rsvp["guestCount"] for rsvp in export["rsvps"] if rsvp["attending"]
    )


# Fallback mode


async def test_unconfigured_remote_uses_local_store():
    remote = InMemoryRemoteStore(document=[], configured=False)
    local = InMemoryLocalStore()
    gateway = make_gateway(remote=remote, local=local)

    saved = await gateway.save_record(make_submission("Harry"))
    result = await gateway.read_records()

    assert gateway.storage_mode == StorageMode.LOCAL
    assert saved.degraded is True
    assert result.storage == StorageMode.LOCAL
    assert result.records == [saved.record]
    assert remote.writes == []
    assert json.loads(local.items[LOCAL_KEY])[0]["id"] == saved.record.id


async def test_remote_failure_falls_back_to_local_store():
    remote = InMemoryRemoteStore(document=[stored_record("1", "Harry")])
    remote.fail_reads = True
    local = InMemoryLocalStore()
    gateway = make_gateway(remote=remote, local=local)

    saved = await gateway.save_record(make_submission("Ron"))

    assert saved.storage == StorageMode.LOCAL
    assert remote.document == [stored_record("1", "Harry")]
    assert [record.name for record in (await gateway.read_records()).records] == ["Ron"]


async def test_remote_write_failure_falls_back_to_local_store():
    remote = InMemoryRemoteStore(document=[])
    remote.fail_writes = True
    local = InMemoryLocalStore()
    gateway = make_gateway(remote=remote, local=local)

    saved = await gateway.save_record(make_submission("Ron"))

    assert saved.storage == StorageMode.LOCAL
    assert LOCAL_KEY in local.items


async def test_empty_remote_read_is_authoritative():
    """Local records are not consulted when the remote call succeeds."""
    remote = InMemoryRemoteStore(document=[])
    local = InMemoryLocalStore({LOCAL_KEY: json.dumps([stored_record("1", "Harry")])})
    gateway = make_gateway(remote=remote, local=local)

    result = await gateway.read_records()

    assert result.storage == StorageMode.REMOTE
    assert result.records == []


async def test_delete_falls_back_to_local_store():
    remote = InMemoryRemoteStore(configured=False)
    local = InMemoryLocalStore(
        {LOCAL_KEY: json.dumps([stored_record("1", "Harry"), stored_record("2", "Ron")])}
    )
    gateway = make_gateway(remote=remote, local=local)

    result = await gateway.delete_record("2")

    assert result.deleted is True
    assert result.degraded is True
    assert [raw["id"] for raw in json.loads(local.items[LOCAL_KEY])] == ["1"]


@pytest.mark.parametrize("stored", ["{not json", json.dumps({"rsvps": []}), ""])
async def test_unreadable_local_store_reads_as_empty(stored):
    local = InMemoryLocalStore({LOCAL_KEY: stored})
    gateway = make_gateway(remote=InMemoryRemoteStore(configured=False), local=local)

    result = await gateway.read_records()

    assert result.records == []
    assert result.storage == StorageMode.LOCAL


async def test_save_over_malformed_local_store_starts_fresh():
    local = InMemoryLocalStore({LOCAL_KEY: "{not json"})
    gateway = make_gateway(remote=InMemoryRemoteStore(configured=False), local=local)

    saved = await gateway.save_record(make_submission("Harry"))

    assert json.loads(local.items[LOCAL_KEY]) == [saved.record.to_document()]


# Remote-exclusive mode


async def test_unconfigured_remote_without_fallback_raises():
    local = InMemoryLocalStore()
    gateway = make_gateway(
        remote=InMemoryRemoteStore(configured=False), local=local, fallback_enabled=False
    )

    assert gateway.storage_mode == StorageMode.REMOTE
    with pytest.raises(StorageNotConfiguredError):
        await gateway.save_record(make_submission("Harry"))
    with pytest.raises(StorageNotConfiguredError):
        await gateway.read_records()
    assert local.items == {}


async def test_remote_failure_without_fallback_raises():
    remote = InMemoryRemoteStore(document=[])
    remote.fail_reads = True
    local = InMemoryLocalStore()
    gateway = make_gateway(remote=remote, local=local, fallback_enabled=False)

    with pytest.raises(StorageUnavailableError):
        await gateway.save_record(make_submission("Harry"))
    with pytest.raises(StorageUnavailableError):
        await gateway.delete_record("1")
    assert local.items == {}
