"""Reversible text encoding for admin cookie values.

The transform only keeps tokens from being stored as readable plaintext. It is
URL-safe base64 over UTF-8 and provides no confidentiality: anyone holding the
cookie can reverse it.
"""

from __future__ import annotations

import base64
import binascii
from dataclasses import dataclass
from typing import Optional, TypeVar

T = TypeVar("T")


class DecodeError(ValueError):
    """Raised internally when a stored value is not valid encoded text."""


@dataclass(frozen=True)
class DecodeResult:
    """Outcome of :func:`try_decode`; exactly one of ``value``/``error`` is set."""

    value: Optional[str] = None
    error: Optional[DecodeError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap_or(self, default: T) -> "str | T":
        if self.error is not None or self.value is None:
            return default
        return self.value


def encode(value: str) -> str:
    """Encode ``value``; falls back to the raw input if it cannot be encoded."""
    try:
        return base64.urlsafe_b64encode(value.encode("utf-8")).decode("ascii")
    except (UnicodeEncodeError, AttributeError):
        return value


def try_decode(value: str) -> DecodeResult:
    try:
        raw = base64.b64decode(value.encode("ascii"), altchars=b"-_", validate=True)
        return DecodeResult(value=raw.decode("utf-8"))
    except (binascii.Error, UnicodeError, AttributeError) as exc:
        return DecodeResult(error=DecodeError(str(exc)))


def decode(value: str) -> str:
    """Decode ``value``; returns the input unchanged when it is not decodable."""
    return try_decode(value).unwrap_or(value)


__all__ = ["DecodeError", "DecodeResult", "decode", "encode", "try_decode"]
