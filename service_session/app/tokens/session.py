"""
Session token minting and verification.

A token is the URL-safe, padded base64 encoding of the compact JSON claims
object::

    {"from":"A","src_id":1,"manager_id":2,"user_id":3,
     "expire":"20240102030405","signature":"<hex>"}

Field names, field order and the expiry format are shared with every other
service holding the same secrets and must not change.
"""

import base64
import binascii
import hmac
import json
import re
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, ValidationError

from .errors import (
    InvalidLifetimeError,
    OriginMismatchError,
    SecretResolutionError,
    SessionDecodeError,
    SessionEncodingError,
    SessionExpiredError,
    SessionParseError,
    UnauthorizedError,
)
from .origins import Origin
from .signing import format_expiry, parse_expiry, sign

SecretResolver = Callable[[int, int], str]

_TOKEN_RE = re.compile(r"[A-Za-z0-9_-]*={0,2}")


class SessionClaims(BaseModel):
    """Claims carried by a session token."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    origin: StrictStr = Field(alias="from")
    source_id: StrictInt = Field(alias="src_id")
    manager_id: StrictInt
    user_id: StrictInt
    expire: StrictStr
    signature: StrictStr

    @property
    def expires_at(self) -> datetime:
        return parse_expiry(self.expire)

    def to_wire(self) -> dict:
        """Claims keyed by their wire names."""
        return self.model_dump(by_alias=True)


def _now(now: Optional[datetime]) -> datetime:
    if now is None:
        return datetime.now(timezone.utc)
    if now.tzinfo is None:
        return now.replace(tzinfo=timezone.utc)
    return now


def _resolve_secret(
    secret_resolver: SecretResolver, origin: str, source_id: int, manager_id: int, user_id: int
) -> str:
    try:
        return secret_resolver(source_id, manager_id)
    except Exception as exc:
        raise SecretResolutionError(
            f"from:{origin} srcID:{source_id} managerID:{manager_id} userID:{user_id} "
            f"get secret error: {exc}",
            origin=origin,
            source_id=source_id,
            manager_id=manager_id,
            user_id=user_id
        ) from exc


def encode_session(claims: SessionClaims) -> str:
    """Serialize claims to the token string."""
    try:
        payload = json.dumps(claims.to_wire(), separators=(",", ":"), ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise SessionEncodingError(f"json marshal error: {exc}") from exc
    return base64.urlsafe_b64encode(payload.encode("utf-8")).decode("ascii")


def decode_session(token: str) -> SessionClaims:
    """Decode a token string into claims without checking them."""
    if not isinstance(token, str) or len(token) % 4 or not _TOKEN_RE.fullmatch(token):
        raise SessionDecodeError("base64 decode error: not URL-safe padded base64")
    try:
        raw = base64.urlsafe_b64decode(token)
    except (binascii.Error, ValueError) as exc:
        raise SessionDecodeError(f"base64 decode error: {exc}") from exc

    try:
        data = json.loads(raw.decode("utf-8"))
        return SessionClaims.model_validate(data)
    except (UnicodeDecodeError, ValueError, RecursionError, ValidationError) as exc:
        raise SessionParseError(f"json unmarshal error: {exc}") from exc


def generate_session(
    origin: Union[Origin, str],
    source_id: int,
    manager_id: int,
    user_id: int,
    lifetime: timedelta,
    secret_resolver: SecretResolver,
    now: Optional[datetime] = None,
) -> str:
    """Mint a signed session token valid for ``lifetime`` from now."""
    origin = Origin.parse(origin)
    try:
        expires_at = _now(now) + lifetime
    except OverflowError as exc:
        raise InvalidLifetimeError(
            f"lifetime {lifetime} is out of range: {exc}",
            lifetime_seconds=lifetime.total_seconds()
        ) from exc
    secret = _resolve_secret(secret_resolver, origin.value, source_id, manager_id, user_id)

    try:
        claims = SessionClaims(
            origin=origin.value,
            source_id=source_id,
            manager_id=manager_id,
            user_id=user_id,
            expire=format_expiry(expires_at),
            signature=sign(origin, source_id, manager_id, user_id, expires_at, secret),
        )
    except ValidationError as exc:
        raise SessionEncodingError(f"invalid claims: {exc}") from exc
    return encode_session(claims)


def verify_session(
    expected_origin: Union[Origin, str],
    token: str,
    secret_resolver: SecretResolver,
    now: Optional[datetime] = None,
) -> SessionClaims:
    """Check a token against ``expected_origin`` and return its claims.

    The checks run in a fixed order and the first failure is raised:
    base64 decoding, claims parsing, origin, expiry format, expiry time,
    secret lookup and finally the signature.
    """
    expected = Origin.parse(expected_origin)
    claims = decode_session(token)

    if claims.origin != expected.value:
        raise OriginMismatchError(
            f"diff from {expected.value}:{claims.origin}",
            expected=expected.value,
            origin=claims.origin
        )

    expires_at = claims.expires_at
    if expires_at <= _now(now):
        raise SessionExpiredError(
            f"session expired at {claims.expire}",
            expire=claims.expire,
            user_id=claims.user_id
        )

    secret = _resolve_secret(secret_resolver, claims.origin, claims.source_id, claims.manager_id, claims.user_id)

    signature = sign(claims.origin, claims.source_id, claims.manager_id, claims.user_id, expires_at, secret)
    if not hmac.compare_digest(signature.encode("ascii"), claims.signature.encode("utf-8", "surrogatepass")):
        raise UnauthorizedError(
            f"unauthorized srcID:{claims.source_id} managerID:{claims.manager_id} userID:{claims.user_id}",
            source_id=claims.source_id,
            manager_id=claims.manager_id,
            user_id=claims.user_id
        )

    return claims
