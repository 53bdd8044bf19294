"""Configuration module for gatekeep."""

from __future__ import annotations

from gatekeep.config._config import GatekeepConfig, configure, get_global_config

__all__ = ["GatekeepConfig", "configure", "get_global_config"]
