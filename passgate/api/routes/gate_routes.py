"""Gate API routes -- session status, password submission, protected content."""
from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from passgate.api.dependencies import (
    client_identity,
    current_session,
    get_codec,
    get_gate,
    get_settings,
    require_authenticated,
)
from passgate.application.auth_gate import AuthGate
from passgate.domain.outcomes import GateResult
from passgate.domain.session import SessionState
from passgate.infrastructure.config import GateSettings
from passgate.infrastructure.session.cookie import SessionCookieCodec


router = APIRouter(prefix="/api", tags=["gate"])

# Verbs served per path; the 405 handler answers with these in Allow.
ALLOWED_METHODS = {
    "/api/session": ("GET", "POST"),
    "/api/protected": ("GET",),
}


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class PasswordSubmission(BaseModel):
    # Emptiness is judged by the gate, not by validation.
    password: str | None = Field(default=None, max_length=1024)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _write_session(
    response: Response,
    session: SessionState,
    codec: SessionCookieCodec,
    settings: GateSettings,
) -> None:
    response.set_cookie(
        key=settings.cookie_name,
        value=codec.encode(session),
        max_age=settings.session_max_age,
        path="/",
        httponly=True,
        secure=settings.cookie_secure,
        samesite="strict",
    )


def _error(result: GateResult) -> JSONResponse:
    return JSONResponse(status_code=result.status_code, content=result.to_dict())


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get("/session")
def api_session_status(
    session: SessionState = Depends(current_session),
    gate: AuthGate = Depends(get_gate),
):
    """Report whether this client's session has unlocked the gate."""
    result = gate.check_status(session)
    if not result.authenticated:
        return _error(result)
    return result.to_dict()


@router.post("/session")
def api_session_submit(
    response: Response,
    body: PasswordSubmission | None = None,
    identity: str = Depends(client_identity),
    session: SessionState = Depends(current_session),
    gate: AuthGate = Depends(get_gate),
    codec: SessionCookieCodec = Depends(get_codec),
    settings: GateSettings = Depends(get_settings),
):
    """Submit the shared password. Sets the session cookie on success."""
    candidate = body.password if body is not None else None
    result = gate.submit(
        identity,
        session,
        candidate,
        save=lambda s: _write_session(response, s, codec, settings),
    )
    if not result.authenticated:
        return _error(result)
    return result.to_dict()


@router.get("/protected")
def api_protected(
    session: SessionState = Depends(require_authenticated),
    settings: GateSettings = Depends(get_settings),
):
    """The content hidden behind the gate."""
    return {"authenticated": True, "content": settings.protected_content}
