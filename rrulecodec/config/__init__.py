"""Configuration package."""

from .settings import LoggingSettings, RRuleCodecSettings, get_settings, reset_settings

__all__ = ["LoggingSettings", "RRuleCodecSettings", "get_settings", "reset_settings"]
