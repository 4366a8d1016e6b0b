"""
Session service.
"""

from datetime import timedelta
from typing import Optional

from fastapi import Depends, Header, Query
from pydantic import BaseModel, ConfigDict, Field

from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.logging import set_session_context
from .keystore import build_secret_resolver
from .tokens import (
    SecretResolver,
    SessionClaims,
    SessionTokenError,
    generate_session,
    verify_session,
)

# A century either way keeps expiries well inside the datetime range.
MAX_LIFETIME_SECONDS = 100 * 365 * 24 * 3600


class GenerateSessionRequest(BaseModel):
    """Request model for minting a session."""
    model_config = ConfigDict(populate_by_name=True)

    origin: str = Field(alias="from")
    src_id: int
    manager_id: int
    user_id: int
    lifetime_seconds: Optional[int] = Field(default=None, ge=-MAX_LIFETIME_SECONDS, le=MAX_LIFETIME_SECONDS)


class VerifySessionRequest(BaseModel):
    """Request model for session verification."""
    model_config = ConfigDict(populate_by_name=True)

    origin: str = Field(alias="from")
    session: str


class SessionService(BaseService):
    """Session service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, secret_resolver: Optional[SecretResolver] = None):
        super().__init__("session", 8020, config)
        if secret_resolver is None:
            secret_resolver = build_secret_resolver(self.config)
        self.secret_resolver = secret_resolver
        self.lifetime = timedelta(seconds=self.config.session_lifetime_seconds)

        self._setup_session_routes()

    def generate(self, request: GenerateSessionRequest) -> str:
        """Mint a session, recording the outcome."""
        lifetime = self.lifetime
        if request.lifetime_seconds is not None:
            lifetime = timedelta(seconds=request.lifetime_seconds)

        with self.metrics.time_operation("session_operation_duration_seconds", operation="generate"):
            try:
                token = generate_session(
                    request.origin,
                    request.src_id,
                    request.manager_id,
                    request.user_id,
                    lifetime,
                    self.secret_resolver
                )
            except SessionTokenError as e:
                self.metrics.increment_counter("session_operations_total", operation="generate", outcome=type(e).__name__)
                raise

        self.metrics.increment_counter("session_operations_total", operation="generate", outcome="ok")
        self.logger.info(
            "session_generated",
            origin=request.origin,
            source_id=request.src_id,
            manager_id=request.manager_id,
            user_id=request.user_id,
            lifetime_seconds=int(lifetime.total_seconds())
        )
        return token

    def verify(self, origin: str, token: str) -> SessionClaims:
        """Verify a session, recording the outcome."""
        with self.metrics.time_operation("session_operation_duration_seconds", operation="verify"):
            try:
                claims = verify_session(origin, token, self.secret_resolver)
            except SessionTokenError as e:
                self.metrics.increment_counter("session_operations_total", operation="verify", outcome=type(e).__name__)
                raise

        self.metrics.increment_counter("session_operations_total", operation="verify", outcome="ok")
        set_session_context(user_id=claims.user_id, source_id=claims.source_id)
        self.logger.info(
            "session_verified",
            origin=claims.origin,
            source_id=claims.source_id,
            manager_id=claims.manager_id,
            user_id=claims.user_id
        )
        return claims

    def _setup_session_routes(self):
        """Set up session-specific routes."""

        async def current_session(
            origin: str = Query(alias="from"),
            session: str = Header()
        ) -> SessionClaims:
            """Claims of the session passed in the ``Session`` header."""
            return self.verify(origin, session)

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "session",
                "message": "Session Layer - Session Service",
                "version": "1.0.0"
            }

        @self.app.post("/session/generate")
        async def generate(request: GenerateSessionRequest):
            """Session minting endpoint."""
            return {"session": self.generate(request)}

        @self.app.post("/session/verify")
        async def verify(request: VerifySessionRequest):
            """Session verification endpoint."""
            claims = self.verify(request.origin, request.session)
            return {
                "valid": True,
                "claims": claims.to_wire()
            }

        @self.app.get("/session/whoami")
        async def whoami(claims: SessionClaims = Depends(current_session)):
            """Return the claims of the caller's session."""
            return claims.to_wire()

    async def _check_dependencies(self):
        """Check session dependencies."""
        # Caller-supplied resolvers need not be sized.
        if not hasattr(self.secret_resolver, "__len__"):
            return {"secrets": "external"}
        return {"secrets": "ok" if len(self.secret_resolver) else "empty"}


def create_app(config: Optional[ServiceConfig] = None, secret_resolver: Optional[SecretResolver] = None):
    """Create FastAPI application."""
    service = SessionService(config, secret_resolver)
    return service.app


if __name__ == "__main__":
    service = SessionService()
    service.run()
