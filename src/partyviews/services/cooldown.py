"""Keyed cooldown rows gating aggregate refreshes."""

import logging
import time
from typing import Optional

from diskcache import Cache

from ..core.config import settings

logger = logging.getLogger(__name__)

GLOBAL_KEY = "cooldown:global"


class RefreshCooldownError(Exception):
    """Raised when a refresh is requested inside a cooldown window."""

    def __init__(self, scope: str, retry_after: float):
        self.scope = scope
        self.retry_after = retry_after
        super().__init__(f"{scope.capitalize()} cooldown active. Please wait {retry_after:.0f} seconds.")


class CooldownGate:
    """
    Global and per-user cooldowns stored as expiring diskcache rows.

    ``Cache.add`` only writes when the key is absent, so acquiring a
    cooldown is atomic across processes sharing the directory.
    """

    def __init__(
        self,
        directory: Optional[str] = None,
        global_cooldown: Optional[float] = None,
        user_cooldown: Optional[float] = None,
    ):
        self.cache = Cache(directory or settings.cooldown_dir)
        self.global_cooldown = settings.party_refresh_global_cooldown if global_cooldown is None else global_cooldown
        self.user_cooldown = settings.party_refresh_user_cooldown if user_cooldown is None else user_cooldown

    def _retry_after(self, key: str, fallback: float) -> float:
        _, expire_time = self.cache.get(key, expire_time=True)
        if expire_time is None:
            return fallback
        return max(0.0, expire_time - time.time())

    def acquire(self, user_id: Optional[str] = None) -> None:
        """Start the cooldown windows or raise RefreshCooldownError."""
        user_key = f"cooldown:user:{user_id}" if user_id else None

        if user_key and self.user_cooldown > 0:
            if not self.cache.add(user_key, True, expire=self.user_cooldown):
                raise RefreshCooldownError("user", self._retry_after(user_key, self.user_cooldown))

        if self.global_cooldown > 0:
            if not self.cache.add(GLOBAL_KEY, True, expire=self.global_cooldown):
                if user_key:
                    self.cache.delete(user_key)
                raise RefreshCooldownError("global", self._retry_after(GLOBAL_KEY, self.global_cooldown))

        logger.debug(f"Refresh cooldown acquired for {user_id or 'system'}")

    def reset(self) -> None:
        self.cache.clear()
