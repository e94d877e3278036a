"""
digests.py - Digest capability used by the stretching loop.

Responsibilities:
- Define the absorb / finalize_and_reset contract the loop depends on
- Adapt cryptography's hash primitives, pycryptodome's Keccak and hashlib
  to that contract
- Coerce caller-supplied algorithm selectors (names, hashlib objects,
  cryptography HashAlgorithm instances) into a fresh adapter

Recognised families: SHA-2, FIPS 202 SHA-3, and pre-standard Keccak
(keccak_*). Keccak differs from SHA-3 only in padding, so the two give
different digests for the same input. Hashes produced by older SHA-3
implementations (written before FIPS 202 was final) need keccak_*.
"""

from __future__ import annotations

import hashlib
import re
from typing import Callable, Dict, List, Protocol, runtime_checkable

from Crypto.Hash import keccak
from cryptography.hazmat.primitives import hashes

from .errors import InvalidArgument


@runtime_checkable
class DigestAlgorithm(Protocol):
    """
    Accumulate input, then emit a digest and start over.

    Adapters in this module also expose ``name`` and ``digest_size``;
    caller-supplied objects only need the two methods.
    """

    def absorb(self, *chunks: bytes) -> None:
        ...

    def finalize_and_reset(self) -> bytes:
        ...


class CryptographyDigest:
    """Adapter over cryptography.hazmat.primitives.hashes."""

    def __init__(self, algorithm: hashes.HashAlgorithm) -> None:
        self._algorithm = algorithm
        self._ctx = hashes.Hash(algorithm)

    @property
    def name(self) -> str:
        return normalize_name(self._algorithm.name)

    @property
    def digest_size(self) -> int:
        return self._algorithm.digest_size

    def absorb(self, *chunks: bytes) -> None:
        for chunk in chunks:
            self._ctx.update(chunk)

    def finalize_and_reset(self) -> bytes:
        # a finalized Hash context cannot be reused
        out = self._ctx.finalize()
        self._ctx = hashes.Hash(self._algorithm)
        return out

    def __repr__(self) -> str:
        return f"CryptographyDigest({self.name!r})"


class KeccakDigest:
    """Adapter over pycryptodome's original (pre-FIPS 202) Keccak."""

    def __init__(self, digest_bits: int) -> None:
        self._bits = digest_bits
        self._ctx = keccak.new(digest_bits=digest_bits)

    @property
    def name(self) -> str:
        return f"keccak_{self._bits}"

    @property
    def digest_size(self) -> int:
        return self._bits // 8

    def absorb(self, *chunks: bytes) -> None:
        for chunk in chunks:
            self._ctx.update(chunk)

    def finalize_and_reset(self) -> bytes:
        # no update() is allowed after digest()
        out = self._ctx.digest()
        self._ctx = keccak.new(digest_bits=self._bits)
        return out

    def __repr__(self) -> str:
        return f"KeccakDigest({self._bits})"


class HashlibDigest:
    """Adapter over a hashlib constructor name."""

    def __init__(self, name: str) -> None:
        self._name = normalize_name(name)
        self._ctx = hashlib.new(self._name)

    @property
    def name(self) -> str:
        return self._name

    @property
    def digest_size(self) -> int:
        return self._ctx.digest_size

    def absorb(self, *chunks: bytes) -> None:
        for chunk in chunks:
            self._ctx.update(chunk)

    def finalize_and_reset(self) -> bytes:
        out = self._ctx.digest()
        self._ctx = hashlib.new(self._name)
        return out

    def __repr__(self) -> str:
        return f"HashlibDigest({self._name!r})"


def _crypto(algorithm: Callable[[], hashes.HashAlgorithm]) -> Callable[[], CryptographyDigest]:
    return lambda: CryptographyDigest(algorithm())


def _keccak(bits: int) -> Callable[[], KeccakDigest]:
    return lambda: KeccakDigest(bits)


# name -> fresh adapter
ALGORITHMS: Dict[str, Callable[[], DigestAlgorithm]] = {
    "sha224": _crypto(hashes.SHA224),
    "sha256": _crypto(hashes.SHA256),
    "sha384": _crypto(hashes.SHA384),
    "sha512": _crypto(hashes.SHA512),
    "sha512_224": _crypto(hashes.SHA512_224),
    "sha512_256": _crypto(hashes.SHA512_256),
    "sha3_224": _crypto(hashes.SHA3_224),
    "sha3_256": _crypto(hashes.SHA3_256),
    "sha3_384": _crypto(hashes.SHA3_384),
    "sha3_512": _crypto(hashes.SHA3_512),
    "keccak_224": _keccak(224),
    "keccak_256": _keccak(256),
    "keccak_384": _keccak(384),
    "keccak_512": _keccak(512),
}

# hashlib only knows the standardised families
_HASHLIB_NAMES = frozenset(n for n in ALGORITHMS if not n.startswith("keccak_"))

_SHA2_HYPHEN_RE = re.compile(r"^sha_(?=\d)")


def normalize_name(name: str) -> str:
    """'SHA3-256' -> 'sha3_256', 'SHA-256' -> 'sha256', 'SHA-512/256' -> 'sha512_256'."""
    key = name.strip().lower().replace("-", "_").replace("/", "_")
    return _SHA2_HYPHEN_RE.sub("sha", key)


def available_algorithms() -> List[str]:
    """Return the sorted list of recognised algorithm names."""
    return sorted(ALGORITHMS)


def get_digest(name: str) -> DigestAlgorithm:
    """Return a fresh adapter for a registered algorithm name."""
    factory = ALGORITHMS.get(normalize_name(name))
    if factory is None:
        raise InvalidArgument(
            f"unsupported digest algorithm {name!r} (expected one of: {', '.join(available_algorithms())})"
        )
    return factory()


def digest_name(digest: DigestAlgorithm) -> str:
    """Display name for an adapter or a caller-supplied digest object."""
    return getattr(digest, "name", type(digest).__name__)


def _looks_like_hashlib(obj: object) -> bool:
    return (
        isinstance(getattr(obj, "name", None), str)
        and callable(getattr(obj, "update", None))
        and callable(getattr(obj, "digest", None))
    )


def as_digest(algorithm: object) -> DigestAlgorithm:
    """
    Coerce an algorithm selector into a DigestAlgorithm.

    Accepts an object already satisfying the protocol (returned as-is), a
    registry name, a cryptography HashAlgorithm instance, or a hashlib hash
    object. For the last two only the algorithm identity is used; a fresh
    adapter is built so no previously absorbed data leaks into the loop.
    """
    if algorithm is None:
        raise InvalidArgument("algorithm is required")
    if isinstance(algorithm, DigestAlgorithm):
        return algorithm
    if isinstance(algorithm, str):
        return get_digest(algorithm)
    if isinstance(algorithm, hashes.HashAlgorithm):
        return get_digest(algorithm.name)
    if _looks_like_hashlib(algorithm):
        key = normalize_name(algorithm.name)  # type: ignore[attr-defined]
        if key not in _HASHLIB_NAMES:
            raise InvalidArgument(f"algorithm must be a SHA-2 or SHA-3 digest, got {algorithm.name!r}")  # type: ignore[attr-defined]
        return HashlibDigest(key)
    raise InvalidArgument(f"algorithm must be a SHA-2, SHA-3 or Keccak digest, got {type(algorithm).__name__}")
