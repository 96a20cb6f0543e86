"""Annotator settings and their environment overrides."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping, Optional

from .errors import ConfigError

# ---------------------------------------------------------------------------
# Defaults / environment keys
# ---------------------------------------------------------------------------
DEFAULT_CIRCLE_RADIUS_PX = 10
DEFAULT_AUTO_HIDE_DELAY_MS = 1000

ENV_PREFIX = "CLICK_ANNOTATOR_"
_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class AnnotatorConfig:
    circle_radius_px: int = DEFAULT_CIRCLE_RADIUS_PX
    show_heatmap: bool = True
    limited_view: bool = False
    auto_hide_delay_ms: int = DEFAULT_AUTO_HIDE_DELAY_MS

    def __post_init__(self):
        if self.circle_radius_px <= 0:
            raise ConfigError(f"circle_radius_px must be positive, got {self.circle_radius_px}")
        if self.auto_hide_delay_ms < 0:
            raise ConfigError(f"auto_hide_delay_ms must not be negative, got {self.auto_hide_delay_ms}")

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "AnnotatorConfig":
        """Build a config from ``CLICK_ANNOTATOR_*`` variables, defaults elsewhere."""
        env = os.environ if environ is None else environ
        kwargs = {}
        if ENV_PREFIX + "CIRCLE_RADIUS" in env:
            kwargs["circle_radius_px"] = _parse_int(env, "CIRCLE_RADIUS")
        if ENV_PREFIX + "SHOW_HEATMAP" in env:
            kwargs["show_heatmap"] = _parse_bool(env, "SHOW_HEATMAP")
        if ENV_PREFIX + "LIMITED_VIEW" in env:
            kwargs["limited_view"] = _parse_bool(env, "LIMITED_VIEW")
        if ENV_PREFIX + "DELAY_MS" in env:
            kwargs["auto_hide_delay_ms"] = _parse_int(env, "DELAY_MS")
        return cls(**kwargs)


def _parse_int(env: Mapping[str, str], key: str) -> int:
    raw = env[ENV_PREFIX + key]
    try:
        return int(raw.strip())
    except ValueError:
        raise ConfigError(f"{ENV_PREFIX}{key} must be an integer, got {raw!r}") from None


def _parse_bool(env: Mapping[str, str], key: str) -> bool:
    raw = env[ENV_PREFIX + key].strip().lower()
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    raise ConfigError(f"{ENV_PREFIX}{key} must be a boolean, got {raw!r}")
