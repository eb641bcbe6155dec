"""Test helpers shared across the proxy test suite."""

from .builders import canonical_hash, make_header, make_pair, native_hash
from .upstream import FakeUpstream

__all__ = [
    "FakeUpstream",
    "canonical_hash",
    "make_header",
    "make_pair",
    "native_hash",
]
