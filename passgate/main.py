"""Entry point. Wires the gate into routes and serves the API.

Startup fails fast when GATE_PASSWORD / SESSION_SECRET are missing: the
service never runs unprotected by default.
"""
import logging
import os
from dotenv import load_dotenv

BASE_DIR = os.path.dirname(os.path.abspath(__file__))
PROJECT_DIR = os.path.dirname(BASE_DIR)
load_dotenv(os.path.join(PROJECT_DIR, ".env"))

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from passgate.api.errors import register_error_handlers
from passgate.api.routes.gate_routes import ALLOWED_METHODS, router as gate_router
from passgate.application.auth_gate import AuthGate
from passgate.infrastructure.auth.attempt_ledger import AttemptLedger
from passgate.infrastructure.auth.secret import SecretVerifier
from passgate.infrastructure.config import GateSettings, load_settings
from passgate.infrastructure.session.cookie import SessionCookieCodec

VERSION = "1.0.0"

logger = logging.getLogger("passgate.startup")


def create_app(settings: GateSettings | None = None, ledger: AttemptLedger | None = None) -> FastAPI:
    """Build the application. The ledger lives as long as the app does."""
    settings = settings or load_settings()
    ledger = ledger if ledger is not None else AttemptLedger()

    app = FastAPI(
        title="PASSGATE",
        description="Shared-password gate with per-client lockout.",
        version=VERSION,
    )

    # CORS: only explicitly configured origins; cookies are SameSite=Strict anyway.
    if settings.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.allowed_origins),
            allow_credentials=True,
            allow_methods=["GET", "POST"],
            allow_headers=["Content-Type"],
        )

    verifier = SecretVerifier(secret=settings.password, secret_hash=settings.password_hash)
    codec = SessionCookieCodec(settings.session_secret)
    gate = AuthGate(verifier, ledger)

    app.state.settings = settings
    app.state.codec = codec
    app.state.gate = gate
    app.state.ledger = ledger
    register_error_handlers(app, ALLOWED_METHODS)
    app.include_router(gate_router)

    @app.get("/health")
    def health():
        return {
            "status": "online",
            "system": f"PASSGATE v{VERSION}",
            "tracked_clients": len(ledger),
        }

    logger.info(
        "Gate ready (%r, secure cookie=%s)", verifier, settings.cookie_secure
    )
    return app


app = create_app()

