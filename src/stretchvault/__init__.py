"""StretchVault - iterative digest stretching for password hashes."""

from .digests import DigestAlgorithm, as_digest, available_algorithms
from .errors import InvalidArgument
from .hashinfo import HashInfo, new_salt
from .stretch import OutputFormat, StretchParams, stretch, verify

__version__ = "0.1.0"

__all__ = [
    "DigestAlgorithm",
    "HashInfo",
    "InvalidArgument",
    "OutputFormat",
    "StretchParams",
    "as_digest",
    "available_algorithms",
    "new_salt",
    "stretch",
    "verify",
]
