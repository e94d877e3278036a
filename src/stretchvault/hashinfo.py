"""
hashinfo.py - Bundled hashing parameters and composite stored strings.

Responsibilities:
- Hold (identifier, algorithm, stretch_count, format, delimiter) for one
  password-hash scheme
- Build storable strings of the form
      <delim><identifier><delim><encoded-salt><delim><encoded-hash>
- Verify a password against such a string

The salt is encoded with the same text encoding as the hash, so the whole
composite stays printable. Binary format is therefore not allowed here.
"""

from __future__ import annotations

import base64
import binascii
import os
import string
from typing import Optional, Tuple

from .errors import InvalidArgument
from .stretch import DEFAULT_STRETCH_COUNT, BytesLike, OutputFormat, StretchParams, coerce_bytes, encode, stretch_digest, verify


SALT_LEN = 16

_ALPHABETS = {
    OutputFormat.HEX: set(string.hexdigits.lower()),
    OutputFormat.BASE64: set(string.ascii_letters + string.digits + "+/="),
}


def new_salt(length: int = SALT_LEN) -> bytes:
    """Generate a random salt."""
    if length < 0:
        raise InvalidArgument("salt length must not be negative")
    return os.urandom(length)


def _encode_salt(salt: bytes, fmt: OutputFormat) -> str:
    if fmt is OutputFormat.HEX:
        return salt.hex()
    return base64.b64encode(salt).decode("ascii")


def _decode_salt(text: str, fmt: OutputFormat) -> bytes:
    if fmt is OutputFormat.HEX:
        if text != text.lower():
            raise ValueError("hex salt must be lowercase")
        return bytes.fromhex(text)
    return base64.b64decode(text.encode("ascii"), validate=True)


class HashInfo:
    """One named password-hash scheme, e.g. HashInfo("s256", "sha256", 5000)."""

    def __init__(
        self,
        identifier: str,
        algorithm: object,
        stretch_count: int = DEFAULT_STRETCH_COUNT,
        format: object = OutputFormat.BASE64,
        delimiter: str = "$",
    ) -> None:
        if not isinstance(delimiter, str) or not delimiter:
            raise InvalidArgument("delimiter must be a non-empty string")
        if not isinstance(identifier, str) or not identifier:
            raise InvalidArgument("identifier must be a non-empty string")
        if delimiter in identifier:
            raise InvalidArgument(f"identifier {identifier!r} must not contain the delimiter {delimiter!r}")

        fmt = OutputFormat.parse(format)
        if fmt is OutputFormat.BINARY:
            raise InvalidArgument("HashInfo needs a text format (hex or base64)")
        if set(delimiter) & _ALPHABETS[fmt]:
            raise InvalidArgument(f"delimiter {delimiter!r} collides with the {fmt.value} alphabet")

        # validate algorithm/count now so a bad scheme fails at definition time
        StretchParams(b"", b"", algorithm, stretch_count, fmt)  # type: ignore[arg-type]

        self.identifier = identifier
        self.algorithm = algorithm
        self.stretch_count = stretch_count
        self.format = fmt
        self.delimiter = delimiter

    def __repr__(self) -> str:
        return (
            f"HashInfo(identifier={self.identifier!r}, algorithm={self.algorithm!r}, "
            f"stretch_count={self.stretch_count!r}, format={self.format.value!r}, delimiter={self.delimiter!r})"
        )

    def crypt(self, password: Optional[BytesLike], salt: Optional[BytesLike] = None) -> str:
        """Return the composite string; a random salt is generated when none is given."""
        if salt is None:
            salt = new_salt()
        params = StretchParams(password, salt, self.algorithm, self.stretch_count, self.format)  # type: ignore[arg-type]
        pwhash = encode(stretch_digest(params), self.format)
        d = self.delimiter
        return f"{d}{self.identifier}{d}{_encode_salt(params.salt, self.format)}{d}{pwhash}"

    def parse(self, stored: str) -> Tuple[str, bytes, str]:
        """Split a composite string into (identifier, salt, encoded_hash)."""
        if not isinstance(stored, str):
            raise InvalidArgument("stored hash must be a string")
        parts = stored.split(self.delimiter)
        if len(parts) != 4 or parts[0] != "":
            raise InvalidArgument("stored hash is not in <d><identifier><d><salt><d><hash> form")
        _, identifier, enc_salt, pwhash = parts
        try:
            salt = _decode_salt(enc_salt, self.format)
        except (ValueError, binascii.Error) as e:
            raise InvalidArgument(f"stored salt is not valid {self.format.value}: {e}") from e
        return identifier, salt, pwhash

    def verify(self, password: Optional[BytesLike], stored: Optional[str]) -> bool:
        """True iff password reproduces the stored composite string."""
        coerce_bytes(password, "password")
        if stored is None:
            raise InvalidArgument("stored hash is required")
        if not isinstance(stored, str):
            raise InvalidArgument("stored hash must be a string")
        try:
            identifier, salt, pwhash = self.parse(stored)
        except InvalidArgument:
            return False
        if identifier != self.identifier:
            return False
        return verify(password, pwhash, salt, self.algorithm, self.stretch_count, self.format)
