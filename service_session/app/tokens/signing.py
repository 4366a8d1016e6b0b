"""
Session signature computation.

The signature is SHA-1 over the concatenation, without separators, of the
origin tag, the decimal source, manager and user ids, the expiry in
``TIME_FORMAT`` and the raw secret. Fields are unambiguous only because the
ids are plain integers and the expiry has a fixed width; a free-text field
would need delimiters and a new ``SIGNATURE_SCHEME``.
"""

import hashlib
import re
from datetime import datetime, timezone
from typing import Union

from .errors import ExpiryParseError
from .origins import Origin

SIGNATURE_SCHEME = "sha1-v1"

TIME_FORMAT = "%Y%m%d%H%M%S"

_EXPIRE_RE = re.compile(r"[0-9]{14}")


def _as_utc(value: datetime) -> datetime:
    # Naive datetimes are taken to be UTC already.
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_expiry(expires_at: datetime) -> str:
    """Render an expiry in the token time format, in UTC."""
    return _as_utc(expires_at).strftime(TIME_FORMAT)


def parse_expiry(text: str) -> datetime:
    """Parse a token expiry back into an aware UTC datetime."""
    if not isinstance(text, str) or not _EXPIRE_RE.fullmatch(text):
        raise ExpiryParseError(f"parse expire {text!r}: expected 14 digits", expire=text)
    try:
        parsed = datetime.strptime(text, TIME_FORMAT)
    except ValueError as exc:
        raise ExpiryParseError(f"parse expire {text!r}: {exc}", expire=text) from exc
    return parsed.replace(tzinfo=timezone.utc)


def sign(
    origin: Union[Origin, str],
    source_id: int,
    manager_id: int,
    user_id: int,
    expires_at: datetime,
    secret: str,
) -> str:
    """Return the lowercase hex signature over the claims and ``secret``."""
    origin = Origin.parse(origin)
    source = (
        origin.value
        + str(int(source_id))
        + str(int(manager_id))
        + str(int(user_id))
        + format_expiry(expires_at)
        + secret
    )
    return hashlib.sha1(source.encode("utf-8")).hexdigest()
