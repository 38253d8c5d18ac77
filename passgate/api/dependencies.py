"""FastAPI request dependencies: wired components, client identity, session cookie.

Everything a request needs lives on ``app.state`` (set by ``create_app``), so
several apps in one process never share a gate, a ledger or a cookie key.
"""
from fastapi import Depends, HTTPException, Request, status

from passgate.application.auth_gate import AuthGate
from passgate.domain.session import SessionState
from passgate.infrastructure.config import GateSettings
from passgate.infrastructure.session.cookie import SessionCookieCodec

UNKNOWN_CLIENT = "unknown"


def get_gate(request: Request) -> AuthGate:
    return request.app.state.gate


def get_codec(request: Request) -> SessionCookieCodec:
    return request.app.state.codec


def get_settings(request: Request) -> GateSettings:
    return request.app.state.settings


def client_identity(
    request: Request,
    settings: GateSettings = Depends(get_settings),
) -> str:
    """Rate-limit key for the request: its originating address.

    ``X-Forwarded-For`` is only honoured when TRUST_PROXY_HEADERS is set,
    otherwise any client could pick its own key.
    """
    if settings.trust_proxy_headers:
        forwarded = request.headers.get("x-forwarded-for", "")
        first_hop = forwarded.split(",")[0].strip()
        if first_hop:
            return first_hop
    if request.client and request.client.host:
        return request.client.host
    return UNKNOWN_CLIENT


def current_session(
    request: Request,
    codec: SessionCookieCodec = Depends(get_codec),
    settings: GateSettings = Depends(get_settings),
) -> SessionState:
    """Session carried by the request cookie; anonymous when absent or unreadable."""
    return codec.load(request.cookies.get(settings.cookie_name))


def require_authenticated(
    session: SessionState = Depends(current_session),
) -> SessionState:
    """Guard for protected routes. Raises 401 unless the gate was unlocked."""
    if not session.authenticated:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated.",
        )
    return session
