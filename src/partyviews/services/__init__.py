"""Services for partyviews."""

from .oracle import OracleServiceFactory
from .cooldown import CooldownGate, RefreshCooldownError
from .store import ViewsStore
from .profile_service import ProfileService

__all__ = [
    "OracleServiceFactory",
    "CooldownGate",
    "RefreshCooldownError",
    "ViewsStore",
    "ProfileService",
]
