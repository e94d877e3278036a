"""
errors.py - Exception types for StretchVault.

Every precondition failure (missing field, wrong type, out-of-range count,
unknown format, unusable digest object) is reported as InvalidArgument,
before any stretching work starts.
"""

from __future__ import annotations


class InvalidArgument(ValueError):
    """Raised when a stretch/verify parameter is absent or malformed."""
