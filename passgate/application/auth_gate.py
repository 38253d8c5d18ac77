"""Use case: decide whether a caller may see the protected content."""
import logging
import time
from typing import Callable

from passgate.domain.outcomes import AuthOutcome, GateResult
from passgate.domain.session import SessionState
from passgate.infrastructure.auth.attempt_ledger import AttemptLedger
from passgate.infrastructure.auth.secret import SecretVerifier

logger = logging.getLogger("passgate.auth")


class AuthGate:
    """Single source of truth for "is this caller unlocked".

    Neither operation raises: every path ends in a GateResult.
    """

    def __init__(
        self,
        verifier: SecretVerifier,
        ledger: AttemptLedger,
        clock: Callable[[], float] = time.time,
    ):
        self._verifier = verifier
        self._ledger = ledger
        self._clock = clock

    @property
    def ledger(self) -> AttemptLedger:
        return self._ledger

    def check_status(self, session: SessionState | None) -> GateResult:
        if session is not None and session.authenticated:
            return GateResult(AuthOutcome.AUTHENTICATED)
        return GateResult(AuthOutcome.ANONYMOUS)

    def submit(
        self,
        identity: str,
        session: SessionState,
        candidate_secret: str | None,
        now: float | None = None,
        save: Callable[[SessionState], None] | None = None,
    ) -> GateResult:
        """Check a candidate secret for ``identity`` and unlock ``session`` on a match.

        The lockout decision uses the ledger state from before this attempt.
        ``save`` persists the session after a successful match; if it raises,
        the session is put back and the attempt is reported as a transport error.
        """
        now = self._clock() if now is None else now

        with self._ledger.hold(identity):
            if self._ledger.is_locked_out(identity, now):
                logger.warning("Rejected attempt from locked out client %s", identity)
                return GateResult(AuthOutcome.RATE_LIMITED)

            # An empty submission is not a guess; it leaves the ledger alone.
            if not candidate_secret:
                return GateResult(AuthOutcome.INVALID_INPUT)

            if not self._verifier.matches(candidate_secret):
                failures = self._ledger.record_failure(identity, now)
                logger.info("Invalid password from %s (%d in a row)", identity, failures)
                if failures >= self._ledger.max_attempts:
                    logger.warning("Client %s locked out after %d failures", identity, failures)
                return GateResult(AuthOutcome.INVALID_CREDENTIAL)

            changed = session.mark_authenticated()
            if save is not None:
                try:
                    save(session)
                except Exception as exc:
                    if changed:
                        session.reset()
                    logger.error(
                        "Session write failed for %s: %s: %s", identity, type(exc).__name__, exc
                    )
                    return GateResult(AuthOutcome.TRANSPORT_ERROR)

            self._ledger.record_success(identity, now)
            logger.info("Client %s unlocked the gate", identity)
            return GateResult(AuthOutcome.AUTHENTICATED)
