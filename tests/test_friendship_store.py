from datetime import datetime, timezone

import pytest

from src.core.exceptions import ConflictError
from src.core.services.friendship_store import FriendshipFilter, FriendshipStore


def now():
    return datetime.now(timezone.utc)


class TestFriendshipStore:

    @pytest.mark.asyncio
    async def test_insert_sets_canonical_pair(self, db, users):
        alice, bobby = users["alice"], users["bobby"]
        edge = await FriendshipStore(db).insert(bobby.id, alice.id, created_at=now())

        assert edge.pair_low == min(alice.id, bobby.id)
        assert edge.pair_high == max(alice.id, bobby.id)

    @pytest.mark.asyncio
    async def test_find_by_pair_in_either_order(self, db, users):
        alice, bobby, carol = users["alice"], users["bobby"], users["carol"]
        store = FriendshipStore(db)
        edge = await store.insert(alice.id, bobby.id, created_at=now())

        assert (await store.find_by_pair(alice.id, bobby.id)).id == edge.id
        assert (await store.find_by_pair(bobby.id, alice.id)).id == edge.id
        assert await store.find_by_pair(alice.id, carol.id) is None

    @pytest.mark.asyncio
    async def test_unique_pair_constraint_maps_to_conflict(self, db, users):
        # simulates two concurrent requests that both passed the existence check
        alice_id, bobby_id = users["alice"].id, users["bobby"].id
        store = FriendshipStore(db)
        await store.insert(alice_id, bobby_id, created_at=now())
        await db.commit()

        with pytest.raises(ConflictError):
            await store.insert(bobby_id, alice_id, created_at=now())

        assert await store.count_edges(bobby_id, FriendshipFilter.REQUESTS) == 1

    @pytest.mark.asyncio
    async def test_update_flags(self, db, users):
        alice, bobby = users["alice"], users["bobby"]
        store = FriendshipStore(db)
        edge = await store.insert(alice.id, bobby.id, created_at=now())
        decided_at = now()

        await store.update_flags(edge, accepted=True, decided_at=decided_at)
        await db.commit()

        stored = await store.find_by_id(edge.id)
        assert stored.accepted
        assert not stored.rejected
        assert stored.decided_at is not None

    @pytest.mark.asyncio
    async def test_rejected_filter_is_rejected_or_cancelled(self, db, users):
        alice, bobby, carol = users["alice"], users["bobby"], users["carol"]
        store = FriendshipStore(db)
        rejected = await store.insert(alice.id, carol.id, created_at=now())
        cancelled = await store.insert(bobby.id, carol.id, created_at=now())
        await store.update_flags(rejected, rejected=True)
        await store.update_flags(cancelled, cancelled=True)

        assert await store.count_edges(carol.id, FriendshipFilter.REJECTED) == 2
        assert await store.count_edges(carol.id, FriendshipFilter.REQUESTS) == 0
        assert await store.count_edges(carol.id, FriendshipFilter.FRIENDS) == 0

        rows = await store.list_edges(carol.id, FriendshipFilter.REJECTED, offset=0, limit=25)
        assert [screen_name for _, screen_name in rows] == ["alice", "bobby"]

    @pytest.mark.asyncio
    async def test_friends_filter_names_the_other_party(self, db, users):
        alice, bobby, carol = users["alice"], users["bobby"], users["carol"]
        store = FriendshipStore(db)
        outgoing = await store.insert(bobby.id, alice.id, created_at=now())
        incoming = await store.insert(bobby.id, carol.id, created_at=now())
        await store.update_flags(outgoing, accepted=True)
        await store.update_flags(incoming, accepted=True)

        rows = await store.list_edges(bobby.id, FriendshipFilter.FRIENDS, offset=0, limit=25)
        assert [screen_name for _, screen_name in rows] == ["alice", "carol"]
        rows = await store.list_edges(alice.id, FriendshipFilter.FRIENDS, offset=0, limit=25)
        assert [screen_name for _, screen_name in rows] == ["bobby"]
