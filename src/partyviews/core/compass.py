"""Compass projection of a snapshot onto a 2-D ideological plane."""

import math
from typing import Iterable

from .constants import PillarConstants, AggregateConstants
from .models import Snapshot, CompassPoint, CompassDistribution, as_number, clamp

_LO = AggregateConstants.COMPASS_MIN
_HI = AggregateConstants.COMPASS_MAX
_BINS = AggregateConstants.COMPASS_BINS
_BIN_WIDTH = (_HI - _LO) / _BINS


def _axis_score(snapshot: Snapshot, axis: str) -> float:
    pillar = snapshot.pillars.get(axis) if snapshot is not None else None
    value = as_number(getattr(pillar, "score", None))
    if value is None:
        return PillarConstants.DEFAULT_SCORE
    return clamp(value, PillarConstants.MIN_SCORE, PillarConstants.MAX_SCORE)


def project(snapshot: Snapshot) -> CompassPoint:
    """
    Map economy and governance onto x and y.

    x = (economy - 50) * 2, y = (50 - governance) * 2, both clamped to
    [-100, 100]. Higher governance is more authoritarian, which is negative y.
    Other pillars do not participate. Missing axes count as 50.
    """
    economy = _axis_score(snapshot, "economy")
    governance = _axis_score(snapshot, "governance")
    x = clamp((economy - 50) * 2, _LO, _HI)
    y = clamp((50 - governance) * 2, _LO, _HI)
    return CompassPoint(x=x, y=y)


def bin_index(coordinate: float) -> int:
    """Histogram bin for a coordinate; +100 lands in the last bin."""
    index = math.floor((coordinate - _LO) / _BIN_WIDTH)
    return int(clamp(index, 0, _BINS - 1))


def compass_distribution(points: Iterable[CompassPoint], cap: int = AggregateConstants.COMPASS_POINT_CAP) -> CompassDistribution:
    """Bin the first ``cap`` points into a 10x10 grid spanning [-100, 100]^2."""
    edges = [_LO + i * _BIN_WIDTH for i in range(_BINS)]
    counts = [[0] * _BINS for _ in range(_BINS)]

    used = 0
    for point in points:
        if used >= cap:
            break
        counts[bin_index(point.y)][bin_index(point.x)] += 1
        used += 1

    return CompassDistribution(x_bins=list(edges), y_bins=list(edges), counts=counts, points=used)
