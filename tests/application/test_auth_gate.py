"""Tests for the gate use case: status checks, submissions and lockouts."""
import pytest

from passgate.application.auth_gate import AuthGate
from passgate.domain.outcomes import AuthOutcome
from passgate.domain.session import SessionState
from passgate.infrastructure.auth.attempt_ledger import LOCKOUT_DURATION, MAX_ATTEMPTS
from tests.conftest import T0, TEST_PASSWORD

WRONG = "definitely-not-it"


class TestCheckStatus:
    def test_anonymous_session(self, gate):
        assert gate.check_status(SessionState()).outcome is AuthOutcome.ANONYMOUS

    def test_missing_session_is_anonymous(self, gate):
        result = gate.check_status(None)
        assert result.outcome is AuthOutcome.ANONYMOUS
        assert result.authenticated is False

    def test_authenticated_session(self, gate):
        result = gate.check_status(SessionState(authenticated=True))
        assert result.outcome is AuthOutcome.AUTHENTICATED
        assert result.to_dict() == {"authenticated": True}

    def test_repeated_checks_are_stable(self, gate):
        session = SessionState()
        results = {gate.check_status(session) for _ in range(5)}
        assert len(results) == 1

    def test_does_not_touch_ledger(self, gate, ledger):
        gate.check_status(SessionState())
        assert len(ledger) == 0


class TestSubmitSuccess:
    def test_correct_password_authenticates(self, gate):
        session = SessionState()
        result = gate.submit("5.6.7.8", session, TEST_PASSWORD, now=T0)
        assert result.outcome is AuthOutcome.AUTHENTICATED
        assert session.authenticated

    def test_session_is_saved_once(self, gate):
        saved = []
        session = SessionState()
        gate.submit("5.6.7.8", session, TEST_PASSWORD, now=T0, save=saved.append)
        assert saved == [session]
        assert saved[0].authenticated

    def test_resets_failure_streak(self, gate, ledger):
        for _ in range(3):
            gate.submit("5.6.7.8", SessionState(), WRONG, now=T0)
        gate.submit("5.6.7.8", SessionState(), TEST_PASSWORD, now=T0 + 1)
        rec = ledger.get("5.6.7.8")
        assert rec.failure_count == 0
        assert rec.last_failure_time == T0

    def test_uses_clock_when_now_omitted(self, verifier, ledger):
        gate = AuthGate(verifier, ledger, clock=lambda: T0 + 42)
        gate.submit("c", SessionState(), WRONG)
        assert ledger.get("c").last_failure_time == T0 + 42


class TestSubmitFailure:
    def test_wrong_password_rejected(self, gate):
        result = gate.submit("1.2.3.4", SessionState(), WRONG, now=T0)
        assert result.outcome is AuthOutcome.INVALID_CREDENTIAL
        assert result.to_dict() == {"message": "Invalid password, please try again."}

    def test_wrong_password_never_touches_session(self, gate):
        session = SessionState()
        saved = []
        gate.submit("1.2.3.4", session, WRONG, now=T0, save=saved.append)
        assert not session.authenticated
        assert saved == []

    def test_wrong_password_increments_exactly_one_record(self, gate, ledger):
        gate.submit("1.2.3.4", SessionState(), "one", now=T0)
        gate.submit("1.2.3.4", SessionState(), "two", now=T0)
        assert ledger.get("1.2.3.4").failure_count == 2
        assert len(ledger) == 1

    def test_prefix_of_password_rejected(self, gate):
        result = gate.submit("1.2.3.4", SessionState(), TEST_PASSWORD[:-1], now=T0)
        assert result.outcome is AuthOutcome.INVALID_CREDENTIAL


class TestSubmitInvalidInput:
    @pytest.mark.parametrize("candidate", ["", None])
    def test_empty_submission(self, gate, ledger, candidate):
        result = gate.submit("9.9.9.9", SessionState(), candidate, now=T0)
        assert result.outcome is AuthOutcome.INVALID_INPUT
        assert ledger.get("9.9.9.9") is None

    def test_empty_submission_keeps_existing_record(self, gate, ledger):
        gate.submit("9.9.9.9", SessionState(), WRONG, now=T0)
        gate.submit("9.9.9.9", SessionState(), "", now=T0 + 1)
        rec = ledger.get("9.9.9.9")
        assert rec.failure_count == 1
        assert rec.last_failure_time == T0


class TestLockout:
    def _lock_out(self, gate, identity, now=T0):
        return [
            gate.submit(identity, SessionState(), WRONG, now=now + i).outcome
            for i in range(MAX_ATTEMPTS)
        ]

    def test_scenario_a_ten_failures_then_rate_limited(self, gate):
        outcomes = self._lock_out(gate, "1.2.3.4")
        assert outcomes == [AuthOutcome.INVALID_CREDENTIAL] * MAX_ATTEMPTS

        for offset in (30, 600, LOCKOUT_DURATION - 60):
            wrong = gate.submit("1.2.3.4", SessionState(), WRONG, now=T0 + offset)
            assert wrong.outcome is AuthOutcome.RATE_LIMITED

    def test_correct_password_refused_while_locked(self, gate):
        self._lock_out(gate, "1.2.3.4")
        session = SessionState()
        saved = []
        result = gate.submit("1.2.3.4", session, TEST_PASSWORD, now=T0 + 60, save=saved.append)
        assert result.outcome is AuthOutcome.RATE_LIMITED
        assert result.to_dict() == {"message": "Too many attempts, please try again later."}
        assert not session.authenticated
        assert saved == []

    def test_rate_limited_attempts_do_not_extend_lockout(self, gate, ledger):
        self._lock_out(gate, "1.2.3.4")
        before = ledger.get("1.2.3.4")
        gate.submit("1.2.3.4", SessionState(), WRONG, now=T0 + 60)
        assert ledger.get("1.2.3.4") == before

    def test_empty_submission_while_locked_is_rate_limited(self, gate):
        self._lock_out(gate, "1.2.3.4")
        result = gate.submit("1.2.3.4", SessionState(), "", now=T0 + 60)
        assert result.outcome is AuthOutcome.RATE_LIMITED

    def test_scenario_d_evaluated_normally_after_window(self, gate):
        self._lock_out(gate, "1.2.3.4")
        last_failure = T0 + MAX_ATTEMPTS - 1
        after = last_failure + LOCKOUT_DURATION

        session = SessionState()
        result = gate.submit("1.2.3.4", session, TEST_PASSWORD, now=after)
        assert result.outcome is AuthOutcome.AUTHENTICATED
        assert session.authenticated

    def test_wrong_password_after_window_starts_new_streak(self, gate, ledger):
        self._lock_out(gate, "1.2.3.4")
        after = T0 + MAX_ATTEMPTS - 1 + LOCKOUT_DURATION
        result = gate.submit("1.2.3.4", SessionState(), WRONG, now=after)
        assert result.outcome is AuthOutcome.INVALID_CREDENTIAL
        assert ledger.get("1.2.3.4").failure_count == 1

    def test_lockout_is_per_identity(self, gate):
        self._lock_out(gate, "1.2.3.4")
        result = gate.submit("5.6.7.8", SessionState(), TEST_PASSWORD, now=T0 + 60)
        assert result.outcome is AuthOutcome.AUTHENTICATED
        locked = gate.submit("1.2.3.4", SessionState(), TEST_PASSWORD, now=T0 + 61)
        assert locked.outcome is AuthOutcome.RATE_LIMITED


class TestSessionWriteFailure:
    def _broken_save(self, session):
        raise OSError("cookie jar on fire")

    def test_reported_as_transport_error(self, gate):
        result = gate.submit("5.6.7.8", SessionState(), TEST_PASSWORD, now=T0, save=self._broken_save)
        assert result.outcome is AuthOutcome.TRANSPORT_ERROR
        assert result.status_code == 503

    def test_session_rolled_back(self, gate):
        session = SessionState()
        gate.submit("5.6.7.8", session, TEST_PASSWORD, now=T0, save=self._broken_save)
        assert not session.authenticated

    def test_ledger_not_reset(self, gate, ledger):
        gate.submit("5.6.7.8", SessionState(), WRONG, now=T0)
        gate.submit("5.6.7.8", SessionState(), TEST_PASSWORD, now=T0 + 1, save=self._broken_save)
        assert ledger.get("5.6.7.8").failure_count == 1

    def test_already_authenticated_session_kept(self, gate):
        session = SessionState(authenticated=True)
        gate.submit("5.6.7.8", session, TEST_PASSWORD, now=T0, save=self._broken_save)
        assert session.authenticated


class TestScenarioB:
    def test_first_try_then_status(self, gate):
        session = SessionState()
        result = gate.submit("5.6.7.8", session, TEST_PASSWORD, now=T0)
        assert result.outcome is AuthOutcome.AUTHENTICATED
        assert gate.check_status(session).to_dict() == {"authenticated": True}
