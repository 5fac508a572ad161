"""Data models for partyviews."""

import copy
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional, List, Dict, Any

from .constants import PillarConstants, IssueConstants, ContributorConstants


def as_number(value: Any) -> Optional[float]:
    """Return ``value`` as a finite float, or None when it is not numeric."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if math.isnan(value) or math.isinf(value):
        return None
    return float(value)


def clamp(value: float, lo: float, hi: float) -> float:
    """Saturating clamp of value to [lo, hi]."""
    return max(lo, min(hi, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up, unlike the built-in round."""
    return int(math.floor(value + 0.5))


def as_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Treat naive datetimes as UTC so they compare with aware ones."""
    if isinstance(value, datetime) and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def clamp_score(value: float) -> int:
    """Round and clamp a pillar score to [0, 100]."""
    return int(clamp(round_half_up(value), PillarConstants.MIN_SCORE, PillarConstants.MAX_SCORE))


@dataclass
class PillarScore:
    """Score on a single ideological axis."""
    score: int = PillarConstants.DEFAULT_SCORE
    rationale: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return {"score": self.score, "rationale": self.rationale}


@dataclass
class Issue:
    """A political topic relevant to one user."""
    title: str
    summary: str
    mentions: Optional[int] = None
    quotes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"title": self.title, "summary": self.summary}
        if self.mentions is not None:
            data["mentions"] = self.mentions
        if self.quotes:
            data["quotes"] = list(self.quotes)
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Issue":
        mentions = as_number(data.get("mentions"))
        quotes = [q for q in (data.get("quotes") or []) if isinstance(q, str) and q.strip()]
        return cls(
            title=str(data.get("title") or ""),
            summary=str(data.get("summary") or ""),
            mentions=int(mentions) if mentions is not None else None,
            quotes=quotes[:IssueConstants.MAX_QUOTES],
        )


@dataclass
class Snapshot:
    """One user's current profile: five pillar scores plus an ordered issue list."""
    pillars: Dict[str, PillarScore]
    top_issues: List[Issue] = field(default_factory=list)

    def score(self, axis: str) -> int:
        pillar = self.pillars.get(axis)
        return pillar.score if pillar is not None else PillarConstants.DEFAULT_SCORE

    def copy(self) -> "Snapshot":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pillars": {axis: p.to_dict() for axis, p in self.pillars.items()},
            "top_issues": [issue.to_dict() for issue in self.top_issues],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Snapshot":
        """Rebuild a stored snapshot, repairing pillars that are missing or malformed."""
        raw_pillars = data.get("pillars") if isinstance(data, dict) else None
        raw_pillars = raw_pillars if isinstance(raw_pillars, dict) else {}

        pillars = {}
        for axis in PillarConstants.AXES:
            raw = raw_pillars.get(axis)
            if isinstance(raw, dict):
                value = as_number(raw.get("score"))
                rationale = str(raw.get("rationale") or "")
            else:
                value = as_number(raw)
                rationale = ""
            if value is None:
                value = PillarConstants.DEFAULT_SCORE
            pillars[axis] = PillarScore(score=clamp_score(value), rationale=rationale)

        raw_issues = data.get("top_issues") if isinstance(data, dict) else None
        issues = [Issue.from_dict(i) for i in (raw_issues or []) if isinstance(i, dict)]
        return cls(pillars=pillars, top_issues=issues)


@dataclass
class IssueOp:
    """A single add/update/remove instruction against an issue list."""
    op: str
    title: Optional[str] = None
    summary: Optional[str] = None
    mentions: Optional[int] = None
    quote: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"op": self.op}
        for key in ("title", "summary", "mentions", "quote"):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data


@dataclass
class Delta:
    """Bounded adjustment to a snapshot, produced once per analysis pass."""
    pillars_delta: Dict[str, float] = field(default_factory=dict)
    top_issues_delta: List[IssueOp] = field(default_factory=list)

    @property
    def nonzero_pillars(self) -> int:
        return sum(1 for v in self.pillars_delta.values() if as_number(v))

    def is_empty(self) -> bool:
        return not self.nonzero_pillars and not self.top_issues_delta

    def to_dict(self) -> Dict[str, Any]:
        return {
            "pillarsDelta": dict(self.pillars_delta),
            "topIssuesDelta": [op.to_dict() for op in self.top_issues_delta],
        }


@dataclass
class CompassPoint:
    """2-D ideological coordinate, each axis in [-100, 100]."""
    x: float
    y: float

    def to_dict(self) -> Dict[str, float]:
        return {"x": self.x, "y": self.y}


@dataclass
class CompassDistribution:
    """10x10 histogram of compass points; counts are indexed [y][x]."""
    x_bins: List[float]
    y_bins: List[float]
    counts: List[List[int]]
    points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bins": {"x": list(self.x_bins), "y": list(self.y_bins), "counts": [list(r) for r in self.counts]},
            "points": self.points,
        }


@dataclass
class RankedIssue:
    """Party-wide issue group."""
    title: str
    count: int  # distinct members
    mentions: int  # summed mentions
    quotes: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"title": self.title, "count": self.count, "mentions": self.mentions, "quotes": list(self.quotes)}


@dataclass
class TopContributor:
    """Highest scoring member over the recent activity window."""
    user_id: str
    display_name: str
    score: float
    examples: List[str] = field(default_factory=list)

    @classmethod
    def no_activity(cls) -> "TopContributor":
        return cls(user_id="", display_name=ContributorConstants.NO_ACTIVITY_LABEL, score=0.0)

    @property
    def is_sentinel(self) -> bool:
        return not self.user_id

    def to_dict(self) -> Dict[str, Any]:
        return {
            "user_id": self.user_id,
            "display_name": self.display_name,
            "score": self.score,
            "examples": list(self.examples),
        }


@dataclass
class Aggregate:
    """Party-wide rollup of all members' snapshots."""
    member_count: int
    pillar_means: Dict[str, float]
    top_issues: List[RankedIssue]
    compass_distribution: CompassDistribution
    party_summary: str
    top_contributor: TopContributor

    def to_dict(self) -> Dict[str, Any]:
        return {
            "member_count": self.member_count,
            "pillar_means": dict(self.pillar_means),
            "top_issues": [i.to_dict() for i in self.top_issues],
            "compass_distribution": self.compass_distribution.to_dict(),
            "party_summary": self.party_summary,
            "top_contributor": self.top_contributor.to_dict(),
        }


@dataclass(frozen=True)
class NoData:
    """Explicit result when there are no snapshots to aggregate."""
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {"no_data": True, "reason": self.reason}


@dataclass
class Profile:
    """A known-active member profile."""
    user_id: str
    display_name: Optional[str] = None


@dataclass
class SurveyAnswer:
    """One questionnaire response."""
    question_id: str
    choice: str
    text: Optional[str] = None


@dataclass
class ActivityMessage:
    """A chat message with its political-relevance signal."""
    user_id: str
    content: str
    created_at: datetime
    role: str = "user"
    topic: Optional[str] = None


@dataclass
class ProfileUpdateEvent:
    """Audit record of a delta applied to a user's snapshot."""
    user_id: str
    delta: Delta
    created_at: datetime
    source: str = "chat"


@dataclass
class ActivityLog:
    """Recent activity supplied by the activity-log collaborator."""
    messages: List[ActivityMessage] = field(default_factory=list)
    updates: List[ProfileUpdateEvent] = field(default_factory=list)
    as_of: Optional[datetime] = None
