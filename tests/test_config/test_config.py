"""Tests for GatekeepConfig and the global configuration."""

from __future__ import annotations

import dataclasses

import pytest

from gatekeep.config import GatekeepConfig, configure, get_global_config
from gatekeep.config._config import _reset_global_config, _set_global_config


class TestDefaults:
    def test_default_values(self) -> None:
        cfg = GatekeepConfig()
        assert cfg.default_reason == "unauthorized"
        assert cfg.error_message == "not authorized"
        assert cfg.error_status == 403
        assert cfg.verify_error_message == "no authorization run"
        assert cfg.verify_error_status == 500
        assert cfg.policy_suffix == "Policy"
        assert cfg.actor_key == "current_user"
        assert cfg.log_policy_decisions is False

    def test_frozen(self) -> None:
        with pytest.raises(dataclasses.FrozenInstanceError):
            GatekeepConfig().error_status = 404  # type: ignore[misc]


class TestValidation:
    @pytest.mark.parametrize("status", [99, 600, True, "403"])
    def test_rejects_bad_error_status(self, status: object) -> None:
        with pytest.raises(ValueError, match="error_status"):
            GatekeepConfig(error_status=status)  # type: ignore[arg-type]

    def test_rejects_bad_verify_status(self) -> None:
        with pytest.raises(ValueError, match="verify_error_status"):
            GatekeepConfig(verify_error_status=42)

    def test_rejects_empty_suffix(self) -> None:
        with pytest.raises(ValueError, match="policy_suffix"):
            GatekeepConfig(policy_suffix="")

    def test_rejects_empty_actor_key(self) -> None:
        with pytest.raises(ValueError, match="actor_key"):
            GatekeepConfig(actor_key="")


class TestMerge:
    def test_merge_overrides(self) -> None:
        merged = GatekeepConfig().merge(error_status=404, default_reason="not_found")
        assert merged.error_status == 404
        assert merged.default_reason == "not_found"
        assert merged.error_message == "not authorized"

    def test_merge_none_keeps_values(self) -> None:
        base = GatekeepConfig(actor_key="user")
        assert base.merge() == base

    def test_merge_false_flag(self) -> None:
        base = GatekeepConfig(log_policy_decisions=True)
        assert base.merge(log_policy_decisions=False).log_policy_decisions is False

    def test_merge_returns_new_instance(self) -> None:
        base = GatekeepConfig()
        merged = base.merge(error_status=401)
        assert base.error_status == 403
        assert merged is not base

    def test_merge_validates(self) -> None:
        with pytest.raises(ValueError):
            GatekeepConfig().merge(error_status=1000)


class TestGlobalConfig:
    def test_configure_updates_global(self) -> None:
        result = configure(default_reason="forbidden")
        assert result.default_reason == "forbidden"
        assert get_global_config() is result

    def test_configure_is_cumulative(self) -> None:
        configure(default_reason="forbidden")
        configure(error_status=404)
        cfg = get_global_config()
        assert cfg.default_reason == "forbidden"
        assert cfg.error_status == 404

    def test_reset(self) -> None:
        configure(default_reason="forbidden")
        _reset_global_config()
        assert get_global_config() == GatekeepConfig()

    def test_set_snapshot(self) -> None:
        snapshot = GatekeepConfig(actor_key="account")
        _set_global_config(snapshot)
        assert get_global_config() is snapshot
