"""Tests for the admin soft lock."""

import pytest

from src.admin.access_gate import AdminAccessGate, UnlockOutcome, soft_hash
from src.rsvps.tests.inmemory_models import RecordingSleep


@pytest.mark.parametrize(
    "text, expected",
    [
        ("", "0"),
        ("a", "97"),
        ("ab", "3105"),
        ("hello", "99162322"),
        ("polygenelubricants", "-2147483648"),
    ],
)
def test_soft_hash(text, expected):
    assert soft_hash(text) == expected


def make_gate(**kwargs) -> AdminAccessGate:
    return AdminAccessGate(password_hash=soft_hash("alohomora"), sleep=RecordingSleep(), **kwargs)


def test_correct_password_is_case_insensitive():
    gate = make_gate()

    attempt = gate.submit("AloHoMora")

    assert attempt.outcome == UnlockOutcome.GRANTED
    assert gate.unlocked is True
    assert gate.attempts == 0


def test_wrong_passwords_count_attempts():
    gate = make_gate()

    first = gate.submit("lumos")
    second = gate.submit("nox")

    assert first.outcome == UnlockOutcome.DENIED
    assert first.message == "Incorrect password. Attempt 1/3"
    assert second.message == "Incorrect password. Attempt 2/3"
    assert gate.locked is False


def test_third_failure_locks_the_gate():
    gate = make_gate()
    gate.submit("lumos")
    gate.submit("nox")

    third = gate.submit("accio")

    assert third.outcome == UnlockOutcome.LOCKED
    assert third.message == "Too many failed attempts. Access denied."
    assert gate.locked is True


def test_locked_gate_rejects_correct_password():
    gate = make_gate(max_attempts=1)
    gate.submit("lumos")

    attempt = gate.submit("alohomora")

    assert attempt.outcome == UnlockOutcome.LOCKED
    assert gate.unlocked is False
    assert gate.attempts == 1


async def test_close_after_lockout_waits_then_closes():
    sleep = RecordingSleep()
    closed = []
    gate = AdminAccessGate(
        password_hash=soft_hash("alohomora"),
        on_close=lambda: closed.append(True),
        sleep=sleep,
    )
    for guess in ["lumos", "nox", "accio"]:
        gate.submit(guess)

    assert await gate.close_after_lockout() is True
    assert await gate.close_after_lockout() is False

    assert sleep.calls == [2.0]
    assert closed == [True]
    assert gate.closed is True


async def test_close_after_lockout_is_noop_when_not_locked():
    gate = make_gate()
    gate.submit("lumos")

    assert await gate.close_after_lockout() is False
    assert gate.closed is False
