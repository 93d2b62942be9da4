"""Environment-driven settings.

Values are read on each call so tests and long-running servers pick up
changes to the environment.
"""

from __future__ import annotations

import logging
import os

DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_FUSION_THRESHOLD = 0.3
DEFAULT_SUGGESTION_MIN_COHERENCE = 0.5
DEFAULT_SUGGESTION_LIMIT = 5


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name, "")
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def get_log_level() -> int:
    name = os.environ.get("LIT_LOG_LEVEL", DEFAULT_LOG_LEVEL).upper()
    level = logging.getLevelName(name)
    if not isinstance(level, int):
        raise ValueError(f"LIT_LOG_LEVEL must be a logging level name, got {name!r}")
    return level


def get_fusion_threshold() -> float:
    """Minimum mean coherence a fusion pattern accepts."""
    return _float_env("LIT_FUSION_THRESHOLD", DEFAULT_FUSION_THRESHOLD)


def get_suggestion_min_coherence() -> float:
    return _float_env("LIT_SUGGESTION_MIN_COHERENCE", DEFAULT_SUGGESTION_MIN_COHERENCE)


def get_suggestion_limit() -> int:
    return int(_float_env("LIT_SUGGESTION_LIMIT", DEFAULT_SUGGESTION_LIMIT))


def seed_demo_enabled() -> bool:
    return os.environ.get("LIT_SEED_DEMO", "1").strip().lower() not in ("0", "false", "no", "")
