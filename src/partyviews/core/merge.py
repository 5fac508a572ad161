"""Snapshot merge engine: folds a bounded delta into a prior profile."""

import logging
from typing import Dict, List, Optional

from .constants import PillarConstants, IssueConstants
from .models import Snapshot, PillarScore, Issue, IssueOp, Delta, as_number, clamp, clamp_score, round_half_up
from .normalize import normalize_title

logger = logging.getLogger(__name__)


def default_snapshot(rationale: str = PillarConstants.DEFAULT_RATIONALE) -> Snapshot:
    """Neutral scaffold: every axis at 50 and no issues."""
    return Snapshot(
        pillars={axis: PillarScore(PillarConstants.DEFAULT_SCORE, rationale) for axis in PillarConstants.AXES},
        top_issues=[],
    )


def _find_issue(issues: List[Issue], title: str) -> int:
    key = normalize_title(title)
    for i, issue in enumerate(issues):
        if normalize_title(issue.title) == key:
            return i
    return -1


def _clean_summary(summary: Optional[str]) -> Optional[str]:
    if not isinstance(summary, str) or not summary.strip():
        return None
    return summary.strip()[:IssueConstants.MAX_SUMMARY_LENGTH]


def _clean_mentions(mentions) -> Optional[int]:
    value = as_number(mentions)
    if value is None:
        return None
    return int(clamp(round_half_up(value), IssueConstants.MIN_MENTIONS, IssueConstants.MAX_MENTIONS))


def _add_quote(issue: Issue, quote: Optional[str]) -> None:
    if not isinstance(quote, str) or not quote.strip():
        return
    quote = quote.strip()
    if quote not in issue.quotes and len(issue.quotes) < IssueConstants.MAX_QUOTES:
        issue.quotes.append(quote)


def _new_issue(title: str, summary: str, op: IssueOp) -> Issue:
    issue = Issue(title=title, summary=summary, mentions=_clean_mentions(op.mentions))
    _add_quote(issue, op.quote)
    return issue


def _apply_issue_op(issues: List[Issue], op: IssueOp) -> None:
    if not isinstance(op, IssueOp):
        logger.debug(f"Skipping malformed issue op: {op!r}")
        return

    title = op.title.strip() if isinstance(op.title, str) else ""
    if not title:
        logger.debug(f"Skipping '{op.op}' op without a title")
        return

    summary = _clean_summary(op.summary)
    index = _find_issue(issues, title)

    if op.op == "add":
        # Adding an issue that is already present is absorbed.
        if index == -1 and summary:
            issues.append(_new_issue(title, summary, op))

    elif op.op == "update":
        if index != -1:
            existing = issues[index]
            existing.title = title
            if summary:
                existing.summary = summary
            mentions = _clean_mentions(op.mentions)
            if mentions is not None:
                existing.mentions = mentions
            _add_quote(existing, op.quote)
        elif summary:
            issues.append(_new_issue(title, summary, op))

    elif op.op == "remove":
        if index != -1:
            del issues[index]

    else:
        logger.debug(f"Ignoring unknown issue op '{op.op}'")


def merge_snapshot(
    prior: Optional[Snapshot],
    delta: Delta,
    rationales: Optional[Dict[str, str]] = None,
) -> Snapshot:
    """
    Apply ``delta`` to ``prior`` and return a new snapshot.

    Pillar scores are summed with their adjustment first and clamped to
    [0, 100] afterwards. Unknown axes in the delta are ignored. Issue ops run
    in order, matched by normalized title, and the resulting list is cut to
    the first 10 entries. ``prior`` is never mutated.

    Args:
        prior: The user's current snapshot, or None for a first merge.
        delta: Repaired delta from the oracle boundary.
        rationales: Optional replacement narrative per axis.

    Returns:
        A new Snapshot; deterministic for identical inputs.
    """
    base = prior.copy() if prior is not None else default_snapshot()
    rationales = rationales or {}

    pillars = {}
    for axis in PillarConstants.AXES:
        current = base.pillars.get(axis) or PillarScore(
            PillarConstants.DEFAULT_SCORE, PillarConstants.DEFAULT_RATIONALE
        )
        adjustment = as_number(delta.pillars_delta.get(axis)) or 0.0
        rationale = rationales.get(axis)
        if not isinstance(rationale, str) or not rationale.strip():
            rationale = current.rationale
        pillars[axis] = PillarScore(score=clamp_score(current.score + adjustment), rationale=rationale)

    issues = base.top_issues
    for op in delta.top_issues_delta:
        _apply_issue_op(issues, op)

    if len(issues) > IssueConstants.MAX_ISSUES:
        logger.debug(f"Truncating issue list from {len(issues)} to {IssueConstants.MAX_ISSUES}")
        issues = issues[:IssueConstants.MAX_ISSUES]

    return Snapshot(pillars=pillars, top_issues=issues)


def validate_snapshot(snapshot: Snapshot) -> bool:
    """Check the structural invariants of a snapshot."""
    if not isinstance(snapshot, Snapshot):
        return False

    for axis in PillarConstants.AXES:
        pillar = snapshot.pillars.get(axis)
        if not isinstance(pillar, PillarScore):
            return False
        if isinstance(pillar.score, bool) or not isinstance(pillar.score, int):
            return False
        if not PillarConstants.MIN_SCORE <= pillar.score <= PillarConstants.MAX_SCORE:
            return False
        if not isinstance(pillar.rationale, str):
            return False

    if len(snapshot.top_issues) > IssueConstants.MAX_ISSUES:
        return False
    for issue in snapshot.top_issues:
        if not isinstance(issue.title, str) or not issue.title:
            return False
        if not isinstance(issue.summary, str) or not issue.summary:
            return False

    return True
