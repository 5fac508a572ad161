"""Boundary orchestration: serialized per-user merges and gated aggregate refreshes."""

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence, Union

from ..core.baseline import build_baseline
from ..core.merge import merge_snapshot, validate_snapshot
from ..core.models import (
    Snapshot, Delta, Aggregate, NoData, SurveyAnswer, ActivityMessage, ProfileUpdateEvent,
)
from ..core.payloads import parse_delta_payload
from ..core.scoring import build_aggregate, party_summary_prompt
from ..core.topics import parse_topic_tag, infer_topic
from .cooldown import CooldownGate
from .oracle import OracleServiceFactory
from .store import ViewsStore

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ProfileService:
    """
    Runs the pure core against the store, the oracle and the clock.

    Merges for one user are serialized behind a per-user lock because the
    merge is a read-modify-write with no compare-and-swap. Aggregate
    refreshes are full replacements gated by a cooldown.
    """

    def __init__(
        self,
        store: ViewsStore,
        oracle=None,
        cooldown: Optional[CooldownGate] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.oracle = oracle or OracleServiceFactory.create()
        self.cooldown = cooldown if cooldown is not None else CooldownGate()
        self.clock = clock or _utcnow
        self._locks: Dict[str, threading.Lock] = {}
        self._locks_guard = threading.Lock()

    def _user_lock(self, user_id: str) -> threading.Lock:
        with self._locks_guard:
            lock = self._locks.get(user_id)
            if lock is None:
                lock = self._locks[user_id] = threading.Lock()
            return lock

    def create_baseline(self, user_id: str, answers: Sequence[SurveyAnswer]) -> Snapshot:
        """Build and store a first snapshot from survey answers."""
        with self._user_lock(user_id):
            analysis = self.oracle.analyze_survey(answers)
            snapshot = build_baseline(answers, analysis)
            self.store.put_snapshot(user_id, snapshot)
        logger.info(f"Stored baseline snapshot for {user_id}")
        return snapshot

    def _merge_locked(
        self,
        user_id: str,
        delta: Delta,
        rationales: Optional[Dict[str, str]],
        source: str,
    ) -> Snapshot:
        prior = self.store.get_snapshot(user_id)
        merged = merge_snapshot(prior, delta, rationales)
        if not validate_snapshot(merged):
            logger.error(f"Merge produced an invalid snapshot for {user_id}: {merged.to_dict()}")
        self.store.put_snapshot(user_id, merged)
        self.store.record_update(ProfileUpdateEvent(user_id=user_id, delta=delta, created_at=self.clock(), source=source))
        return merged

    def apply_delta(
        self,
        user_id: str,
        delta: Delta,
        rationales: Optional[Dict[str, str]] = None,
        source: str = "chat",
    ) -> Snapshot:
        """Merge an already repaired delta into the user's snapshot."""
        with self._user_lock(user_id):
            merged = self._merge_locked(user_id, delta, rationales, source)
        logger.info(
            f"Applied delta for {user_id}: {delta.nonzero_pillars} pillar shifts, "
            f"{len(delta.top_issues_delta)} issue ops"
        )
        return merged

    def apply_analysis(self, user_id: str, payload: Any, source: str = "chat") -> Snapshot:
        """Repair a raw oracle payload and merge it."""
        return self.apply_delta(user_id, parse_delta_payload(payload), source=source)

    def record_exchange(self, user_id: str, user_message: str, assistant_reply: str) -> str:
        """
        Log one chat turn with its topic and return the reply without its tag.

        The topic comes from the trailing ``[[topic: ...]]`` tag on the
        assistant reply, or from keyword inference over the user message
        when the reply is untagged. Both messages are stored with that topic.
        """
        topic, confidence, reply = parse_topic_tag(assistant_reply)
        if not topic:
            topic, confidence = infer_topic(user_message)
        logger.debug(f"Topic for {user_id}: {topic} ({confidence})")

        now = self.clock()
        self.store.add_message(ActivityMessage(user_id, user_message, now, role="user", topic=topic))
        self.store.add_message(ActivityMessage(user_id, reply, now, role="assistant", topic=topic))
        return reply

    def analyze_conversation(self, user_id: str, messages: Sequence[ActivityMessage]) -> Snapshot:
        """Ask the oracle for a delta over new messages and merge it."""
        with self._user_lock(user_id):
            prior = self.store.get_snapshot(user_id)
            delta = self.oracle.extract_delta(messages, prior)
            return self._merge_locked(user_id, delta, None, "chat")

    def refresh_aggregate(self, requested_by: Optional[str] = None) -> Union[Aggregate, NoData]:
        """
        Recompute and replace the party aggregate.

        Raises:
            RefreshCooldownError: if a refresh ran too recently.
        """
        self.cooldown.acquire(requested_by)

        result = build_aggregate(
            self.store.all_snapshots(),
            activity=self.store.activity(as_of=self.clock()),
            profiles=self.store.active_profiles(),
        )
        if isinstance(result, NoData):
            logger.info(f"Aggregate refresh skipped: {result.reason}")
            return result

        prompt = party_summary_prompt(result.member_count, result.pillar_means, result.top_issues)
        summary = self.oracle.summarize_party(prompt)
        if summary:
            result.party_summary = summary

        self.store.put_aggregate(result)
        logger.info(f"Aggregate refreshed for {result.member_count} members")
        return result
