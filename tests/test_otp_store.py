from datetime import datetime, timedelta

import pytest

from clubhub.auth.otp import InMemoryOTPStore, OTPOutcome

from tests.conftest import FakeClock


@pytest.fixture
def clock():
    return FakeClock(datetime(2026, 1, 1, 10, 0, 0))


@pytest.fixture
def store(clock):
    return InMemoryOTPStore(ttl=timedelta(minutes=10), max_attempts=3, clock=clock)


def wrong(code: str) -> str:
    return "000000" if code != "000000" else "111111"


def test_issued_code_is_six_digits(store):
    code = store.issue("ada@example.com")

    assert len(code) == 6
    assert code.isdigit()


def test_correct_code_verifies_once(store):
    code = store.issue("ada@example.com")

    assert store.verify("Ada@Example.com", code).success
    assert store.verify("ada@example.com", code).outcome == OTPOutcome.NOT_FOUND


def test_unknown_email(store):
    assert store.verify("nobody@example.com", "123456").outcome == OTPOutcome.NOT_FOUND


def test_expired_code(store, clock):
    code = store.issue("ada@example.com")
    clock.advance(timedelta(minutes=10, seconds=1))

    result = store.verify("ada@example.com", code)

    assert result.outcome == OTPOutcome.EXPIRED
    assert store.verify("ada@example.com", code).outcome == OTPOutcome.NOT_FOUND


def test_attempt_budget(store):
    code = store.issue("ada@example.com")

    results = [store.verify("ada@example.com", wrong(code)) for _ in range(3)]
    assert [r.outcome for r in results] == [OTPOutcome.INVALID] * 3
    assert [r.attempts_left for r in results] == [2, 1, 0]

    # Budget spent: even the right code is refused and the entry dropped
    assert store.verify("ada@example.com", code).outcome == OTPOutcome.TOO_MANY_ATTEMPTS
    assert store.verify("ada@example.com", code).outcome == OTPOutcome.NOT_FOUND


def test_reissue_replaces_code_and_resets_attempts(store):
    first = store.issue("ada@example.com")
    store.verify("ada@example.com", wrong(first))

    second = store.issue("ada@example.com")

    assert store.verify("ada@example.com", second).success


def test_purge_expired(store, clock):
    store.issue("ada@example.com")
    clock.advance(timedelta(minutes=5))
    store.issue("bob@example.com")
    clock.advance(timedelta(minutes=6))

    assert store.purge_expired() == 1
    assert store.verify("ada@example.com", "123456").outcome == OTPOutcome.NOT_FOUND


def test_issue_sweeps_expired_codes(store, clock):
    for n in range(50):
        store.issue(f"member{n}@example.com")
    assert store.pending_count() == 50

    clock.advance(timedelta(minutes=11))
    store.issue("latecomer@example.com")

    assert store.pending_count() == 1
    assert store.verify("member0@example.com", "123456").outcome == OTPOutcome.NOT_FOUND
