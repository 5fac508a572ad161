"""In-memory persistence collaborator with JSON load/dump."""

import json
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple, Union

from ..core.models import (
    Snapshot, Aggregate, NoData, Profile, ActivityMessage, ProfileUpdateEvent, ActivityLog, as_utc,
)
from ..core.payloads import parse_delta_payload

logger = logging.getLogger(__name__)


def _parse_time(value: Any) -> Optional[datetime]:
    """ISO timestamp to an aware datetime; offset-less values are read as UTC."""
    if isinstance(value, datetime):
        return as_utc(value)
    if isinstance(value, str) and value:
        try:
            return as_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
        except ValueError:
            logger.warning(f"Unparsable timestamp: {value!r}")
    return None


class ViewsStore:
    """
    Snapshot, aggregate, profile and activity rows keyed by user id.

    Snapshots keep insertion order, which is the iteration order seen by the
    aggregate builder.
    """

    def __init__(self):
        self.snapshots: Dict[str, Snapshot] = {}
        self.aggregate: Optional[Union[Aggregate, NoData]] = None
        self.profiles: Optional[List[Profile]] = None
        self.messages: List[ActivityMessage] = []
        self.updates: List[ProfileUpdateEvent] = []

    # Snapshots
    def get_snapshot(self, user_id: str) -> Optional[Snapshot]:
        snapshot = self.snapshots.get(user_id)
        return snapshot.copy() if snapshot is not None else None

    def put_snapshot(self, user_id: str, snapshot: Snapshot) -> None:
        self.snapshots[user_id] = snapshot.copy()

    def delete_snapshot(self, user_id: str) -> None:
        self.snapshots.pop(user_id, None)

    def all_snapshots(self) -> List[Tuple[str, Snapshot]]:
        return [(user_id, snapshot.copy()) for user_id, snapshot in self.snapshots.items()]

    # Aggregate
    def get_aggregate(self) -> Optional[Union[Aggregate, NoData]]:
        return self.aggregate

    def put_aggregate(self, aggregate: Union[Aggregate, NoData]) -> None:
        self.aggregate = aggregate

    # Profiles and activity
    def active_profiles(self) -> Optional[List[Profile]]:
        return list(self.profiles) if self.profiles is not None else None

    def add_message(self, message: ActivityMessage) -> None:
        self.messages.append(message)

    def record_update(self, event: ProfileUpdateEvent) -> None:
        self.updates.append(event)

    def activity(self, as_of: Optional[datetime] = None) -> ActivityLog:
        return ActivityLog(messages=list(self.messages), updates=list(self.updates), as_of=as_of)

    # Serialization
    def to_dict(self) -> Dict[str, Any]:
        return {
            "snapshots": {user_id: s.to_dict() for user_id, s in self.snapshots.items()},
            "aggregate": self.aggregate.to_dict() if self.aggregate is not None else None,
            "profiles": None if self.profiles is None else [
                {"user_id": p.user_id, "display_name": p.display_name} for p in self.profiles
            ],
            "messages": [
                {
                    "user_id": m.user_id,
                    "content": m.content,
                    "created_at": m.created_at.isoformat() if m.created_at else None,
                    "role": m.role,
                    "topic": m.topic,
                }
                for m in self.messages
            ],
            "view_updates": [
                {
                    "user_id": u.user_id,
                    "delta": u.delta.to_dict(),
                    "created_at": u.created_at.isoformat() if u.created_at else None,
                    "source": u.source,
                }
                for u in self.updates
            ],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ViewsStore":
        store = cls()
        for user_id, raw in (data.get("snapshots") or {}).items():
            store.snapshots[user_id] = Snapshot.from_dict(raw)

        if data.get("profiles") is not None:
            store.profiles = [
                Profile(user_id=p["user_id"], display_name=p.get("display_name"))
                for p in data["profiles"] if isinstance(p, dict) and p.get("user_id")
            ]

        for raw in data.get("messages") or []:
            store.messages.append(ActivityMessage(
                user_id=raw.get("user_id", ""),
                content=raw.get("content") or "",
                created_at=_parse_time(raw.get("created_at")),
                role=raw.get("role", "user"),
                topic=raw.get("topic"),
            ))

        for raw in data.get("view_updates") or []:
            store.updates.append(ProfileUpdateEvent(
                user_id=raw.get("user_id", ""),
                delta=parse_delta_payload(raw.get("delta")),
                created_at=_parse_time(raw.get("created_at")),
                source=raw.get("source", "chat"),
            ))

        logger.info(f"Loaded {len(store.snapshots)} snapshots, {len(store.messages)} messages")
        return store

    @classmethod
    def load_json(cls, filename: str) -> "ViewsStore":
        with open(filename, "r", encoding="utf-8") as f:
            return cls.from_dict(json.load(f))

    def dump_json(self, filename: str) -> None:
        with open(filename, "w", encoding="utf-8") as f:
            json.dump(self.to_dict(), f, indent=2, ensure_ascii=False)
