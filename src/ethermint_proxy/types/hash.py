"""
Fixed-size hash type.

Both identifier namespaces use 32-byte hashes. A hash on its own does not
say which namespace it belongs to; that is decided by the translation store.
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterable, SupportsIndex

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema
from typing_extensions import Self


def _coerce_to_bytes(value: Any) -> bytes:
    """
    Coerce a variety of inputs to raw bytes.

    Accepts:
      - `bytes` / `bytearray` (returned as immutable `bytes`)
      - Iterables of integers in [0, 255]
      - Hex strings, with or without a '0x' prefix (e.g. "0xdeadbeef" or "deadbeef")

    Raises:
      ValueError / TypeError if conversion is not possible or out-of-range.
    """
    if isinstance(value, (bytes, bytearray)):
        return bytes(value)
    if isinstance(value, str):
        # bytes.fromhex handles empty string and validates hex characters
        return bytes.fromhex(value.removeprefix("0x").removeprefix("0X"))
    if isinstance(value, Iterable):
        # bytes(bytearray(iterable)) enforces each element is an int in 0..255
        return bytes(bytearray(value))
    return bytes(value)


class Hash32(bytes):
    """
    Immutable 32-byte block hash.

    Instances are plain `bytes` with strict length checking.
    JSON serialization uses the `0x`-prefixed hex form used on the wire.
    """

    LENGTH: ClassVar[int] = 32
    """The exact number of bytes."""

    def __new__(cls, value: Any = b"") -> Self:
        """
        Create and validate a new hash.

        Args:
            value: Any value coercible to bytes (see `_coerce_to_bytes`).

        Raises:
            ValueError: If the resulting byte length differs from `LENGTH`.
        """
        b = _coerce_to_bytes(value)
        if len(b) != cls.LENGTH:
            raise ValueError(f"{cls.__name__} expects exactly {cls.LENGTH} bytes, got {len(b)}")
        return super().__new__(cls, b)

    @classmethod
    def zero(cls) -> Self:
        """Create a hash of all zero bytes."""
        return cls(b"\x00" * cls.LENGTH)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        """
        Hook into Pydantic's validation system.

        1. If the input is already an instance of the class, accept it.
        2. Otherwise, coerce bytes or a hex string and instantiate the class.
        3. For serialization, render as a `0x`-prefixed hex string.
        """

        def validate(value: Any) -> Hash32:
            try:
                return cls(value)
            except TypeError as e:
                raise ValueError(str(e)) from e

        return core_schema.union_schema(
            [
                core_schema.is_instance_schema(cls),
                core_schema.no_info_plain_validator_function(validate),
            ],
            serialization=core_schema.plain_serializer_function_ser_schema(lambda x: x.to_hex()),
        )

    def to_hex(self) -> str:
        """Return the `0x`-prefixed lowercase hex form."""
        return "0x" + bytes(self).hex()

    def __repr__(self) -> str:
        """Return a string representation of the hash."""
        return f"{type(self).__name__}({self.hex()})"

    def __str__(self) -> str:
        """Return the wire form of the hash."""
        return self.to_hex()

    def hex(self, sep: str | bytes | None = None, bytes_per_sep: SupportsIndex = 1) -> str:
        """Return the hexadecimal string representation of the underlying bytes."""
        return bytes(self).hex() if sep is None else bytes(self).hex(sep, bytes_per_sep)


ZERO_HASH = Hash32.zero()
"""The all-zero hash, used as the parent of the genesis block."""
