"""Tests for refresh cooldowns."""

import pytest
from partyviews.services.cooldown import CooldownGate, RefreshCooldownError


class TestCooldownGate:
    """Test global and per-user refresh windows."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path):
        self.gate = CooldownGate(directory=str(tmp_path / "cooldowns"), global_cooldown=30, user_cooldown=60)
        yield
        self.gate.cache.close()

    def test_first_refresh_passes(self):
        self.gate.acquire("user-1")

    def test_same_user_blocked(self):
        self.gate.acquire("user-1")
        with pytest.raises(RefreshCooldownError) as exc_info:
            self.gate.acquire("user-1")
        assert exc_info.value.scope == "user"
        assert 0 < exc_info.value.retry_after <= 60
        assert "User cooldown active" in str(exc_info.value)

    def test_other_user_hits_global_window(self):
        self.gate.acquire("user-1")
        with pytest.raises(RefreshCooldownError) as exc_info:
            self.gate.acquire("user-2")
        assert exc_info.value.scope == "global"
        assert 0 < exc_info.value.retry_after <= 30

    def test_global_rejection_releases_user_window(self):
        self.gate.acquire("user-1")
        with pytest.raises(RefreshCooldownError):
            self.gate.acquire("user-2")
        assert "cooldown:user:user-2" not in self.gate.cache

    def test_system_refresh_only_uses_global_window(self):
        self.gate.acquire()
        with pytest.raises(RefreshCooldownError) as exc_info:
            self.gate.acquire()
        assert exc_info.value.scope == "global"

    def test_reset(self):
        self.gate.acquire("user-1")
        self.gate.reset()
        self.gate.acquire("user-1")


def test_zero_cooldowns_never_block(tmp_path):
    gate = CooldownGate(directory=str(tmp_path), global_cooldown=0, user_cooldown=0)
    for _ in range(3):
        gate.acquire("user-1")


if __name__ == "__main__":
    pytest.main([__file__])
