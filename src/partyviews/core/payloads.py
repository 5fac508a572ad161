"""Parse-or-repair of untrusted oracle payloads into typed deltas."""

import json
import logging
import re
from typing import Any, Dict, List

from .constants import PillarConstants, IssueConstants
from .models import Delta, IssueOp, as_number, clamp, round_half_up

logger = logging.getLogger(__name__)


def _strip_code_fences(s: str) -> str:
    s = s.strip()
    return re.sub(r"^```(?:json)?|```$", "", s, flags=re.IGNORECASE | re.MULTILINE).strip()


def safe_json(s: str) -> Any:
    """Leniently parse JSON from an oracle reply; {} when nothing parses."""
    cleaned = _strip_code_fences(s or "")
    try:
        return json.loads(cleaned)
    except ValueError:
        pass

    # remove trailing commas before } or ]
    cleaned = re.sub(r",\s*([}\]])", r"\1", cleaned)
    try:
        return json.loads(cleaned)
    except ValueError:
        pass

    # last-ditch: first {...} block
    m = re.search(r"\{.*\}", cleaned, re.S)
    if m:
        try:
            return json.loads(m.group(0))
        except ValueError:
            pass

    logger.warning(f"Could not parse JSON from oracle reply: {cleaned[:200]}...")
    return {}


def coerce_payload(raw: Any) -> Dict[str, Any]:
    """Accept a dict or JSON text; anything else becomes {}."""
    if isinstance(raw, (str, bytes)):
        raw = safe_json(raw.decode("utf-8", "replace") if isinstance(raw, bytes) else raw)
    if not isinstance(raw, dict):
        if raw is not None:
            logger.warning(f"Oracle payload is {type(raw).__name__}, expected an object")
        return {}
    return raw


def repair_pillar_deltas(raw: Any) -> Dict[str, int]:
    """Keep known axes with numeric values, rounded and clamped to [-10, 10]."""
    if not isinstance(raw, dict):
        return {}
    deltas = {}
    for axis, value in raw.items():
        if axis not in PillarConstants.AXES:
            logger.debug(f"Dropping delta for unknown axis '{axis}'")
            continue
        number = as_number(value)
        if number is None:
            logger.warning(f"Dropping non-numeric delta for '{axis}': {value!r}")
            continue
        repaired = int(clamp(round_half_up(number), PillarConstants.MIN_DELTA, PillarConstants.MAX_DELTA))
        if repaired != number:
            logger.warning(f"Delta for '{axis}' repaired from {number} to {repaired}")
        deltas[axis] = repaired
    return deltas


def _text(value: Any, limit: int = None) -> Any:
    if not isinstance(value, str) or not value.strip():
        return None
    value = value.strip()
    return value[:limit] if limit else value


def _mentions(value: Any) -> Any:
    number = as_number(value)
    if number is None:
        return None
    return int(clamp(round_half_up(number), IssueConstants.MIN_MENTIONS, IssueConstants.MAX_MENTIONS))


def repair_issue_ops(raw: Any) -> List[IssueOp]:
    """Keep well-formed add/update/remove ops in order."""
    if not isinstance(raw, list):
        return []
    ops = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        op = item.get("op")
        title = _text(item.get("title"))
        if op not in IssueConstants.OPS or title is None:
            logger.warning(f"Dropping malformed issue op: {item!r}")
            continue
        ops.append(IssueOp(
            op=op,
            title=title,
            summary=_text(item.get("summary"), IssueConstants.MAX_SUMMARY_LENGTH),
            mentions=_mentions(item.get("mentions")),
            quote=_text(item.get("quote")),
        ))
    return ops


def analyzer_issue_ops(raw: Any) -> List[IssueOp]:
    """Turn analyzer ``top_issues`` entries into add ops."""
    if not isinstance(raw, list):
        return []
    ops = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        title = _text(item.get("issue")) or _text(item.get("title"))
        if title is None:
            logger.warning(f"Dropping analyzer issue without a name: {item!r}")
            continue
        mentions = _mentions(item.get("mentions")) or IssueConstants.MIN_MENTIONS
        ops.append(IssueOp(
            op="add",
            title=title,
            summary=f"Mentioned {mentions} time(s)",
            mentions=mentions,
            quote=_text(item.get("user_quote")),
        ))
    return ops


def parse_delta_payload(raw: Any) -> Delta:
    """
    Repair an oracle reply into a Delta.

    Understands the delta-extraction shape (``pillarsDelta`` /
    ``topIssuesDelta``) and the conversation-analyzer shape
    (``pillar_deltas`` / ``top_issues``). Malformed input degrades to an
    empty Delta; this function never raises.
    """
    data = coerce_payload(raw)

    if "pillarsDelta" in data or "topIssuesDelta" in data:
        return Delta(
            pillars_delta=repair_pillar_deltas(data.get("pillarsDelta")),
            top_issues_delta=repair_issue_ops(data.get("topIssuesDelta")),
        )

    if "pillar_deltas" in data or "top_issues" in data:
        return Delta(
            pillars_delta=repair_pillar_deltas(data.get("pillar_deltas")),
            top_issues_delta=analyzer_issue_ops(data.get("top_issues")),
        )

    if data:
        logger.warning(f"Unrecognized delta payload keys: {sorted(data)}")
    return Delta()
