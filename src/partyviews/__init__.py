"""partyviews - political profile merge and party aggregation engine."""

__version__ = "1.0.0"
__author__ = "partyviews Team"

from .core.models import *
from .core.config import settings
from .core.merge import merge_snapshot
from .core.scoring import build_aggregate
from .services.oracle import OracleServiceFactory
from .services.profile_service import ProfileService

__all__ = [
    "settings",
    "merge_snapshot",
    "build_aggregate",
    "OracleServiceFactory",
    "ProfileService",
]
