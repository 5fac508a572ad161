"""Party-wide aggregation: means, ranked issues, compass histogram, top contributor."""

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

from .compass import project, compass_distribution
from .constants import PillarConstants, AggregateConstants, ContributorConstants, PromptConstants
from .models import (
    Snapshot, Issue, RankedIssue, TopContributor, Aggregate, NoData, Profile,
    ActivityLog, ActivityMessage, as_number, as_utc, round_half_up,
)
from .normalize import normalize_title
from .topics import effective_topic, is_politically_relevant

logger = logging.getLogger(__name__)

Member = Tuple[str, Snapshot]


def _as_snapshot(value: Any) -> Snapshot:
    return value if isinstance(value, Snapshot) else Snapshot.from_dict(value or {})


def filter_members(snapshots: Iterable[Tuple[str, Any]], profiles: Optional[Iterable[Profile]] = None) -> List[Member]:
    """
    Keep snapshot holders that also have an active profile.

    One snapshot per user (first seen wins). When ``profiles`` is None the
    active-profile list is unavailable and every snapshot holder counts.
    """
    active = None if profiles is None else {p.user_id for p in profiles}

    members: List[Member] = []
    seen = set()
    for user_id, snapshot in snapshots:
        if user_id in seen:
            continue
        seen.add(user_id)
        if active is not None and user_id not in active:
            continue
        members.append((user_id, _as_snapshot(snapshot)))

    if active is None:
        logger.info(f"No active profile list, treating all {len(members)} snapshot holders as members")
    return members


def pillar_means(members: Sequence[Member]) -> Dict[str, float]:
    """Mean score per axis; 50 for every axis when there are no members."""
    if not members:
        return {axis: float(PillarConstants.DEFAULT_SCORE) for axis in PillarConstants.AXES}
    return {
        axis: sum(snapshot.score(axis) for _, snapshot in members) / len(members)
        for axis in PillarConstants.AXES
    }


def _issue_mentions(issue: Issue) -> int:
    value = as_number(issue.mentions)
    if value is None or value < 1:
        return 1
    return int(value)


def aggregate_issues(members: Sequence[Member], limit: int = AggregateConstants.MAX_TOP_ISSUES) -> List[RankedIssue]:
    """
    Group every member's issues by normalized title.

    ``count`` is distinct members, ``mentions`` the summed per-issue mentions
    (1 when absent). Groups are ranked by mentions, ties keep first-seen
    order. The display title is the first-seen title of the group.
    """
    groups: Dict[str, Dict[str, Any]] = {}
    for user_id, snapshot in members:
        for issue in snapshot.top_issues:
            key = normalize_title(issue.title)
            group = groups.get(key)
            if group is None:
                group = groups[key] = {"title": issue.title, "members": set(), "mentions": 0, "quotes": []}
            group["members"].add(user_id)
            group["mentions"] += _issue_mentions(issue)
            for quote in issue.quotes:
                if len(group["quotes"]) >= AggregateConstants.MAX_QUOTES_PER_ISSUE:
                    break
                if quote not in group["quotes"]:
                    group["quotes"].append(quote)

    ranked = [
        RankedIssue(title=g["title"], count=len(g["members"]), mentions=g["mentions"], quotes=g["quotes"])
        for g in groups.values()
    ]
    ranked.sort(key=lambda item: -item.mentions)
    return ranked[:limit]


def _in_window(created_at, start, end) -> bool:
    created_at = as_utc(created_at)
    return created_at is not None and start <= created_at <= end


def _window_bounds(activity: ActivityLog, window_days: int):
    timestamps = [m.created_at for m in activity.messages] + [u.created_at for u in activity.updates]
    end = as_utc(activity.as_of) or max((as_utc(t) for t in timestamps if t is not None), default=None)
    if end is None:
        return None, None
    return end - timedelta(days=window_days), end


def score_contributors(
    activity: Optional[ActivityLog],
    window_days: int = ContributorConstants.WINDOW_DAYS,
) -> List[Tuple[str, float, List[ActivityMessage]]]:
    """
    Score users by recent political activity, highest first.

    Per user over the trailing window:
      1.0 per politically relevant message
      + 0.5 per distinct topic tag
      + 0.2 per profile-update event
      + 0.5 per nonzero pillar delta in each event
      + 0.3 per issue op in each event

    Returns (user_id, score, relevant_messages) for users scoring above zero.
    """
    if activity is None:
        return []
    start, end = _window_bounds(activity, window_days)
    if end is None:
        return []

    scores: Dict[str, float] = defaultdict(float)
    topics: Dict[str, set] = defaultdict(set)
    relevant: Dict[str, List[ActivityMessage]] = defaultdict(list)

    for message in activity.messages:
        if message.role != "user" or not _in_window(message.created_at, start, end):
            continue
        topic = effective_topic(message.topic)
        if topic:
            topics[message.user_id].add(topic)
        if is_politically_relevant(message.content, message.topic):
            scores[message.user_id] += ContributorConstants.RELEVANT_MESSAGE_WEIGHT
            relevant[message.user_id].append(message)

    for user_id, user_topics in topics.items():
        scores[user_id] += ContributorConstants.DISTINCT_TOPIC_WEIGHT * len(user_topics)

    for update in activity.updates:
        if not _in_window(update.created_at, start, end):
            continue
        scores[update.user_id] += (
            ContributorConstants.UPDATE_EVENT_WEIGHT
            + ContributorConstants.NONZERO_PILLAR_DELTA_WEIGHT * update.delta.nonzero_pillars
            + ContributorConstants.ISSUE_OP_WEIGHT * len(update.delta.top_issues_delta)
        )

    ranked = [(user_id, score, relevant[user_id]) for user_id, score in scores.items() if score > 0]
    ranked.sort(key=lambda item: -item[1])
    return ranked


def _display_name(user_id: str, profiles: Dict[str, Profile]) -> str:
    profile = profiles.get(user_id)
    if profile is not None and profile.display_name:
        return profile.display_name
    return f"Member {user_id[-4:]}"


def top_contributor(
    activity: Optional[ActivityLog],
    profiles: Optional[Iterable[Profile]] = None,
    window_days: int = ContributorConstants.WINDOW_DAYS,
) -> TopContributor:
    """Highest scoring user, or the no-activity sentinel."""
    ranked = score_contributors(activity, window_days)
    if not ranked:
        return TopContributor.no_activity()

    user_id, score, messages = ranked[0]
    recent = sorted(messages, key=lambda m: as_utc(m.created_at), reverse=True)
    examples = [m.content[:ContributorConstants.EXCERPT_LENGTH] for m in recent[:ContributorConstants.MAX_EXAMPLES]]
    by_id = {p.user_id: p for p in (profiles or [])}
    logger.info(f"Top contributor {user_id} scored {score:.2f} over {len(ranked)} active users")
    return TopContributor(
        user_id=user_id,
        display_name=_display_name(user_id, by_id),
        score=round(score, 2),
        examples=examples,
    )


def describe_score(score: float) -> str:
    """Plain-language position for a 0-100 pillar score."""
    if score < 20:
        return "strongly left/liberal"
    if score < 40:
        return "leans left/liberal"
    if score <= 60:
        return "centre"
    if score <= 80:
        return "leans right/conservative"
    return "strongly right/conservative"


def party_summary_prompt(member_count: int, means: Dict[str, float], top_issues: Sequence[RankedIssue]) -> str:
    """Assemble the oracle input for the party summary."""
    pillar_lines = "\n".join(
        f"- {axis}: {round_half_up(score)} ({describe_score(score)})" for axis, score in means.items()
    )
    issue_lines = []
    for issue in top_issues[:PromptConstants.MAX_SUMMARY_ISSUES]:
        line = f"- {issue.title} ({issue.mentions} mentions from {issue.count} members)"
        if issue.quotes:
            line += ": " + "; ".join(f'"{q}"' for q in issue.quotes)
        issue_lines.append(line)

    return (
        f"Members: {member_count}\n\n"
        f"Pillar positions:\n{pillar_lines}\n\n"
        f"Top issues:\n{chr(10).join(issue_lines) if issue_lines else '- none yet'}"
    )


def fallback_party_summary(member_count: int, top_issues: Sequence[RankedIssue]) -> str:
    """Deterministic summary used when the oracle is unavailable."""
    titles = [issue.title for issue in top_issues[:3]]
    if not titles:
        return f"Our {member_count} members are focused on key political issues."
    if len(titles) == 1:
        focus = titles[0]
    else:
        focus = ", ".join(titles[:-1]) + f" and {titles[-1]}"
    return f"Our {member_count} members are focused on key political issues, led by {focus}."


def build_aggregate(
    snapshots: Sequence[Tuple[str, Any]],
    activity: Optional[ActivityLog] = None,
    profiles: Optional[Iterable[Profile]] = None,
    window_days: int = ContributorConstants.WINDOW_DAYS,
) -> Union[Aggregate, NoData]:
    """
    Recompute the party aggregate from every user's snapshot.

    Args:
        snapshots: (user_id, Snapshot or stored snapshot dict) pairs.
        activity: Recent messages and profile updates, for the top contributor.
        profiles: Known-active profiles, or None if the list is unavailable.
        window_days: Trailing activity window.

    Returns:
        An Aggregate with a deterministic fallback ``party_summary``, or
        NoData when there are no snapshots at all.
    """
    if not snapshots:
        logger.info("No snapshots to aggregate")
        return NoData(reason=AggregateConstants.NO_DATA_REASON)

    profiles = list(profiles) if profiles is not None else None
    members = filter_members(snapshots, profiles)
    means = pillar_means(members)
    issues = aggregate_issues(members)
    distribution = compass_distribution(project(snapshot) for _, snapshot in members)
    contributor = top_contributor(activity, profiles, window_days)

    logger.info(f"Aggregated {len(members)} members, {len(issues)} top issues")
    return Aggregate(
        member_count=len(members),
        pillar_means=means,
        top_issues=issues,
        compass_distribution=distribution,
        party_summary=fallback_party_summary(len(members), issues),
        top_contributor=contributor,
    )
