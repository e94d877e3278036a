"""
stretch.py - Iterative digest stretching for password hashes.

Responsibilities:
- Validate stretch parameters up front (no digest work on bad input)
- Chain digests: acc = H(acc || password || salt), stretch_count times
- Encode the final digest as raw bytes, lowercase hex, or base64
- Verify a candidate password by recomputing and comparing

Design notes:
- Output is a pure function of (password, salt, algorithm, stretch_count,
  format); there is no state kept between calls.
- Every round depends on the previous one, so the work cannot be split
  across cores by an attacker.
- verify() compares with hmac.compare_digest rather than ==.
"""

from __future__ import annotations

import base64
import enum
import hmac
import re
from dataclasses import dataclass
from typing import Optional, Union

from .digests import DigestAlgorithm, as_digest
from .errors import InvalidArgument


BytesLike = Union[bytes, bytearray, memoryview, str]
StretchedHash = Union[bytes, str]

DEFAULT_ALGORITHM = "sha256"
DEFAULT_STRETCH_COUNT = 5000

_COUNT_RE = re.compile(r"[0-9]+")


class OutputFormat(enum.Enum):
    BINARY = "binary"
    HEX = "hex"
    BASE64 = "base64"

    @classmethod
    def parse(cls, value: object) -> "OutputFormat":
        """None means BINARY; otherwise an OutputFormat or its exact string value."""
        if value is None:
            return cls.BINARY
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value)
            except ValueError:
                pass
        raise InvalidArgument(f"format must be one of binary, hex, base64 (got {value!r})")


def coerce_bytes(value: object, field: str) -> bytes:
    if value is None:
        raise InvalidArgument(f"{field} is required")
    if isinstance(value, str):
        return value.encode("utf-8")
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    raise InvalidArgument(f"{field} must be bytes or str, got {type(value).__name__}")


def _coerce_count(value: object) -> int:
    if value is None:
        raise InvalidArgument("stretch_count is required")
    if isinstance(value, bool):
        raise InvalidArgument("stretch_count must be an integer")
    if isinstance(value, str) and _COUNT_RE.fullmatch(value):
        value = int(value)
    if not isinstance(value, int):
        raise InvalidArgument(f"stretch_count must be an integer, got {value!r}")
    if value < 1:
        raise InvalidArgument(f"stretch_count must be at least 1, got {value}")
    return value


@dataclass(frozen=True)
class StretchParams:
    """
    Validated inputs for one stretch computation.

    Raw values are accepted at construction and normalised in place:
    str password/salt become UTF-8 bytes, algorithm selectors become a
    DigestAlgorithm, digit strings become int, format strings become
    OutputFormat. Anything unusable raises InvalidArgument.
    """

    password: bytes
    salt: bytes
    algorithm: DigestAlgorithm
    stretch_count: int
    format: OutputFormat = OutputFormat.BINARY

    def __post_init__(self) -> None:
        object.__setattr__(self, "password", coerce_bytes(self.password, "password"))
        object.__setattr__(self, "salt", coerce_bytes(self.salt, "salt"))
        object.__setattr__(self, "stretch_count", _coerce_count(self.stretch_count))
        object.__setattr__(self, "format", OutputFormat.parse(self.format))
        object.__setattr__(self, "algorithm", as_digest(self.algorithm))


def stretch_digest(params: StretchParams) -> bytes:
    """Run the chained digest loop and return the raw final digest."""
    digest = params.algorithm
    acc = b""
    for _ in range(params.stretch_count):
        digest.absorb(acc, params.password, params.salt)
        acc = digest.finalize_and_reset()
    return acc


def encode(raw: bytes, fmt: OutputFormat) -> StretchedHash:
    if fmt is OutputFormat.HEX:
        return raw.hex()
    if fmt is OutputFormat.BASE64:
        return base64.b64encode(raw).decode("ascii")
    return raw


def stretch(
    password: Optional[BytesLike],
    salt: Optional[BytesLike],
    algorithm: object,
    stretch_count: object,
    format: object = None,
) -> StretchedHash:
    """
    Return the stretched hash of password + salt.

    bytes for binary format (the default), str for "hex" / "base64".
    """
    params = StretchParams(password, salt, algorithm, stretch_count, format)  # type: ignore[arg-type]
    return encode(stretch_digest(params), params.format)


def verify(
    password: Optional[BytesLike],
    reference_hash: Optional[StretchedHash],
    salt: Optional[BytesLike],
    algorithm: object,
    stretch_count: object,
    format: object = None,
) -> bool:
    """
    Recompute the stretched hash and compare it with reference_hash.

    The comparison is exact (case-sensitive, no normalisation) and
    constant-time.
    """
    params = StretchParams(password, salt, algorithm, stretch_count, format)  # type: ignore[arg-type]
    if reference_hash is None:
        raise InvalidArgument("reference_hash is required")

    if params.format is OutputFormat.BINARY:
        if not isinstance(reference_hash, (bytes, bytearray, memoryview)):
            raise InvalidArgument("reference_hash must be bytes for binary format")
        expected = bytes(reference_hash)
    else:
        if not isinstance(reference_hash, str):
            raise InvalidArgument(f"reference_hash must be str for {params.format.value} format")
        try:
            expected = reference_hash.encode("ascii")
        except UnicodeEncodeError:
            # hex and base64 are pure ASCII; anything else cannot match
            return False

    candidate = encode(stretch_digest(params), params.format)
    if isinstance(candidate, str):
        candidate = candidate.encode("ascii")
    return hmac.compare_digest(candidate, expected)
