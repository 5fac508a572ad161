"""Survey baseline builder: first snapshot from questionnaire answers."""

import logging
from typing import Any, Dict, List, Optional, Sequence

from .constants import PillarConstants
from .models import Snapshot, PillarScore, Issue, SurveyAnswer, as_number, clamp_score

logger = logging.getLogger(__name__)


def format_survey_answers(answers: Sequence[SurveyAnswer]) -> str:
    """Render answers as the text block sent to the oracle."""
    lines = []
    for answer in answers:
        line = f"Question {answer.question_id}: {answer.choice}"
        if answer.text:
            line += f" (Additional: {answer.text})"
        lines.append(line)
    return "\n\n".join(lines)


def _repair_pillar(axis: str, raw: Any) -> PillarScore:
    if isinstance(raw, dict):
        value = as_number(raw.get("score"))
        rationale = raw.get("rationale")
    else:
        value = as_number(raw)
        rationale = None

    if value is None:
        logger.warning(f"Baseline analysis missing numeric score for '{axis}', using neutral default")
        return PillarScore(PillarConstants.DEFAULT_SCORE, PillarConstants.INCOMPLETE_RATIONALE)

    score = clamp_score(value)
    if score != value:
        logger.warning(f"Baseline score for '{axis}' repaired from {value} to {score}")
    return PillarScore(score, rationale if isinstance(rationale, str) else "")


def _repair_issues(raw_issues: Any) -> List[Issue]:
    if not isinstance(raw_issues, list):
        return []
    issues = []
    for raw in raw_issues:
        if not isinstance(raw, dict):
            continue
        title = raw.get("title")
        summary = raw.get("summary")
        if not isinstance(title, str) or not title.strip():
            logger.debug(f"Dropping seed issue without a title: {raw!r}")
            continue
        issues.append(Issue(title=title.strip(), summary=summary.strip() if isinstance(summary, str) else ""))
    return issues


def build_baseline(answers: Sequence[SurveyAnswer], analysis: Optional[Dict[str, Any]]) -> Snapshot:
    """
    Build a user's first snapshot from the oracle's survey analysis.

    The analysis is untrusted: every axis missing a numeric score becomes
    ``{score: 50, rationale: "incomplete"}`` and every present score is
    clamped to [0, 100]. Seed issues are kept as returned; the 10-issue cap
    is only enforced by later merges.
    """
    if not isinstance(analysis, dict):
        logger.warning(f"Baseline analysis for {len(answers)} answers is not an object, using neutral defaults")
        analysis = {}

    raw_pillars = analysis.get("pillars")
    raw_pillars = raw_pillars if isinstance(raw_pillars, dict) else {}
    pillars = {axis: _repair_pillar(axis, raw_pillars.get(axis)) for axis in PillarConstants.AXES}

    issues = _repair_issues(analysis.get("issues"))
    logger.info(f"Built baseline from {len(answers)} answers with {len(issues)} seed issues")
    return Snapshot(pillars=pillars, top_issues=issues)
