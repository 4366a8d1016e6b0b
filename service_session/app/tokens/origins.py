"""Issuing channels a session token can belong to."""

from enum import Enum
from typing import Union

from .errors import UnknownOriginError


class Origin(str, Enum):
    A = "A"
    B = "B"
    C = "C"

    @classmethod
    def parse(cls, value: Union["Origin", str]) -> "Origin":
        """Return the member for ``value`` or raise ``UnknownOriginError``."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownOriginError(f"unknown origin {value!r}", origin=value) from None
