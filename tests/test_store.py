"""Tests for the in-memory store and its JSON form."""

from datetime import datetime, timezone

import pytest
from partyviews.core.merge import default_snapshot
from partyviews.core.models import ActivityMessage, Delta, Issue, Profile, ProfileUpdateEvent
from partyviews.services.store import ViewsStore


class TestViewsStore:
    """Test snapshot storage and serialization."""

    def setup_method(self):
        self.store = ViewsStore()
        self.snapshot = default_snapshot()
        self.snapshot.top_issues.append(Issue("Housing", "Rent"))

    def test_snapshots_are_copied(self):
        self.store.put_snapshot("u1", self.snapshot)
        self.snapshot.pillars["economy"].score = 99
        stored = self.store.get_snapshot("u1")
        assert stored.pillars["economy"].score == 50
        stored.top_issues.clear()
        assert len(self.store.get_snapshot("u1").top_issues) == 1

    def test_missing_and_deleted(self):
        assert self.store.get_snapshot("nobody") is None
        self.store.put_snapshot("u1", self.snapshot)
        self.store.delete_snapshot("u1")
        self.store.delete_snapshot("u1")
        assert self.store.all_snapshots() == []

    def test_insertion_order(self):
        for user_id in ("c", "a", "b"):
            self.store.put_snapshot(user_id, self.snapshot)
        assert [u for u, _ in self.store.all_snapshots()] == ["c", "a", "b"]

    def test_profiles_unavailable_by_default(self):
        assert self.store.active_profiles() is None

    def test_dump_and_load(self, tmp_path):
        when = datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        self.store.put_snapshot("u1", self.snapshot)
        self.store.profiles = [Profile("u1", "Alex")]
        self.store.add_message(ActivityMessage("u1", "Rent is too high", when, topic="housing"))
        self.store.record_update(ProfileUpdateEvent("u1", Delta(pillars_delta={"economy": 3}), when))

        path = tmp_path / "store.json"
        self.store.dump_json(str(path))
        loaded = ViewsStore.load_json(str(path))

        assert loaded.get_snapshot("u1") == self.snapshot
        assert loaded.active_profiles() == [Profile("u1", "Alex")]
        assert loaded.messages == self.store.messages
        assert loaded.updates[0].delta.pillars_delta == {"economy": 3}
        assert loaded.updates[0].created_at == when

    def test_from_dict_accepts_zulu_times(self):
        store = ViewsStore.from_dict({
            "messages": [{"user_id": "u1", "content": "NHS", "created_at": "2026-03-01T09:30:00Z"}],
        })
        assert store.messages[0].created_at == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert store.messages[0].role == "user"

    def test_offset_less_times_are_utc(self):
        store = ViewsStore.from_dict({
            "messages": [{"user_id": "u1", "content": "NHS", "created_at": "2026-03-01T09:30:00"}],
            "view_updates": [{"user_id": "u1", "delta": {}, "created_at": "2026-03-01T09:31:00"}],
        })
        assert store.messages[0].created_at == datetime(2026, 3, 1, 9, 30, tzinfo=timezone.utc)
        assert store.updates[0].created_at.tzinfo is not None


if __name__ == "__main__":
    pytest.main([__file__])
