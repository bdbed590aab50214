"""Tests for the admin dashboard command."""

from typer.testing import CliRunner

import cli
from src.admin.access_gate import soft_hash
from src.config.settings import settings
from src.rsvps.tests.inmemory_models import InMemoryRemoteStore, make_gateway, make_record

runner = CliRunner()


class CountingRemoteStore(InMemoryRemoteStore):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.reads = 0

    async def fetch_latest(self):
        self.reads += 1
        return await super().fetch_latest()


def test_admin_dashboard_reads_store_once(monkeypatch):
    remote = CountingRemoteStore(
        document=[
            make_record("1", "Harry", guest_count=2, drinks=["Butterbeer"]).to_document(),
            make_record("2", "Percy", attending=False).to_document(),
        ]
    )
    gateway = make_gateway(remote=remote)
    monkeypatch.setattr(settings, "admin_password_hash", soft_hash("alohomora"))
    monkeypatch.setattr(cli, "get_rsvp_gateway", lambda: gateway)

    result = runner.invoke(cli.app, ["admin"], input="alohomora\n")

    assert result.exit_code == 0, result.output
    assert "Attending: 1" in result.output
    assert "Total guests: 2" in result.output
    assert "Harry: Butterbeer" in result.output
    assert remote.reads == 1


def test_admin_lockout_exits_without_reading(monkeypatch):
    remote = CountingRemoteStore(document=[])
    monkeypatch.setattr(settings, "admin_password_hash", soft_hash("alohomora"))
    monkeypatch.setattr(settings, "admin_lockout_close_seconds", 0.0)
    monkeypatch.setattr(cli, "get_rsvp_gateway", lambda: make_gateway(remote=remote))

    result = runner.invoke(cli.app, ["admin"], input="lumos\nnox\naccio\n")

    assert result.exit_code == 1
    assert "Too many failed attempts. Access denied." in result.output
    assert remote.reads == 0
