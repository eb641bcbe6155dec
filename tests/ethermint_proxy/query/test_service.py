"""Tests for canonical-namespace header queries."""

from __future__ import annotations

import pytest

from ethermint_proxy.query import QueryService
from ethermint_proxy.storage import HashTranslationStore
from ethermint_proxy.types import ZERO_HASH, Hash32, NotFoundError, TransportError
from tests.ethermint_proxy.helpers import FakeUpstream, canonical_hash, native_hash


def _seed(store: HashTranslationStore, count: int) -> None:
    for number in range(count):
        store.put(number, native_hash(number), canonical_hash(number))


class TestGetHeaderByNumber:
    """Tests for lookups by number or tag."""

    async def test_rewrites_parent_to_canonical(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
    ) -> None:
        """A synced parent is replaced by its canonical hash."""
        _seed(store, 5)

        header = await query_service.get_header_by_number(3)

        assert header.parent_hash == canonical_hash(2)
        assert header.number == 3

    async def test_unsynced_parent_passes_through(self, query_service: QueryService) -> None:
        """A parent with no recorded pair keeps its upstream value."""
        header = await query_service.get_header_by_number(3)
        assert header.parent_hash == native_hash(2)

    async def test_genesis_parent_kept(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
    ) -> None:
        """The zero parent of block 0 is never translated."""
        _seed(store, 5)

        header = await query_service.get_header_by_number(0)

        assert header.parent_hash == ZERO_HASH

    async def test_accepts_tags(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
    ) -> None:
        """Tags are resolved upstream and rewritten the same way."""
        _seed(store, 5)

        header = await query_service.get_header_by_number("latest")

        assert header.number == 4
        assert header.parent_hash == canonical_hash(3)

    async def test_other_fields_untouched(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
        upstream: FakeUpstream,
    ) -> None:
        """Only parentHash changes."""
        _seed(store, 5)
        raw = await upstream.header_by_number(3)

        header = await query_service.get_header_by_number(3)

        assert header.model_dump(exclude={"parent_hash"}) == raw.model_dump(
            exclude={"parent_hash"}
        )

    async def test_missing_block_raises_not_found(self, query_service: QueryService) -> None:
        """Blocks beyond the head are not found."""
        with pytest.raises(NotFoundError):
            await query_service.get_header_by_number(99)


class TestGetHeaderByHash:
    """Tests for lookups by hash in either namespace."""

    async def test_canonical_hash_translated(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
        upstream: FakeUpstream,
    ) -> None:
        """A canonical hash is sent upstream as its native counterpart."""
        _seed(store, 5)

        header = await query_service.get_header_by_hash(canonical_hash(3))

        assert upstream.hash_requests == [native_hash(3)]
        assert header.number == 3
        assert header.parent_hash == canonical_hash(2)

    async def test_native_hash_passes_through(
        self,
        query_service: QueryService,
        store: HashTranslationStore,
        upstream: FakeUpstream,
    ) -> None:
        """A hash with no canonical entry is forwarded unchanged."""
        _seed(store, 5)

        header = await query_service.get_header_by_hash(native_hash(3))

        assert upstream.hash_requests == [native_hash(3)]
        assert header.parent_hash == canonical_hash(2)

    async def test_unknown_hash_raises_not_found(self, query_service: QueryService) -> None:
        """A hash no block has is not found upstream."""
        with pytest.raises(NotFoundError):
            await query_service.get_header_by_hash(Hash32(b"\x42" * 32))

    async def test_upstream_failure_propagates(self, store: HashTranslationStore) -> None:
        """Transport failures reach the caller."""

        class BrokenUpstream(FakeUpstream):
            async def header_by_hash(self, native: Hash32):  # type: ignore[override]
                raise TransportError("connection reset")

        service = QueryService(store=store, upstream=BrokenUpstream(head=5))

        with pytest.raises(TransportError):
            await service.get_header_by_hash(canonical_hash(1))
