"""Factories for hashes, pairs and headers with predictable values."""

from __future__ import annotations

from ethermint_proxy.types import ZERO_HASH, Hash32, HashPair, Header

NATIVE_PREFIX = b"\xaa"
CANONICAL_PREFIX = b"\xee"


def native_hash(number: int) -> Hash32:
    """Native hash of block `number` on the synthetic chain."""
    return Hash32(NATIVE_PREFIX + number.to_bytes(31, "big"))


def canonical_hash(number: int) -> Hash32:
    """Canonical hash of block `number` on the synthetic chain."""
    return Hash32(CANONICAL_PREFIX + number.to_bytes(31, "big"))


def make_pair(number: int) -> HashPair:
    """Translation pair of block `number`."""
    return HashPair.model_validate(
        {
            "number": hex(number),
            "hash": canonical_hash(number).to_hex(),
            "tm_hash": native_hash(number).to_hex(),
        }
    )


def make_header(number: int) -> Header:
    """Raw upstream header of block `number`, linked to its parent by native hash."""
    parent = ZERO_HASH if number == 0 else native_hash(number - 1)
    return Header.model_validate(
        {
            "number": hex(number),
            "parentHash": parent.to_hex(),
            "hash": canonical_hash(number).to_hex(),
            "sha3Uncles": "0x" + "1d" * 32,
            "miner": "0x" + "00" * 20,
            "stateRoot": "0x" + "51" * 32,
            "transactionsRoot": "0x" + "56" * 32,
            "receiptsRoot": "0x" + "56" * 32,
            "logsBloom": "0x" + "00" * 256,
            "difficulty": "0x0",
            "gasLimit": "0x1c9c380",
            "gasUsed": "0x0",
            "timestamp": hex(1_700_000_000 + number),
            "extraData": "0x",
        }
    )
