"""Core modules for partyviews."""

from .models import *
from .config import settings
from .normalize import normalize_title
from .merge import default_snapshot, merge_snapshot, validate_snapshot
from .baseline import build_baseline
from .compass import project, compass_distribution
from .scoring import build_aggregate

__all__ = [
    "settings",
    "PillarScore",
    "Issue",
    "Snapshot",
    "IssueOp",
    "Delta",
    "CompassPoint",
    "Aggregate",
    "NoData",
    "normalize_title",
    "default_snapshot",
    "merge_snapshot",
    "validate_snapshot",
    "build_baseline",
    "project",
    "compass_distribution",
    "build_aggregate",
]
