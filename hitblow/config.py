"""
Configuration - Environment-driven defaults.

Environment variables:
    HITBLOW_DIGIT_COUNT   Default digit count for new matches (3 or 4)
    HITBLOW_CARD_MODE     "1"/"true" to enable card battle mode by default
    HITBLOW_SEED          Fixed RNG seed (unset = random)
    HITBLOW_LOG_LEVEL     Logging level name (default WARNING)
    HITBLOW_SESSION_TTL   Seconds before a finished match may be cleaned up
"""

from __future__ import annotations
from dataclasses import dataclass
import os

_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class EngineConfig:
    """Defaults used by the CLI and the session layer."""
    digit_count: int = 3
    card_mode: bool = False
    seed: int | None = None
    log_level: str = "WARNING"
    session_ttl_seconds: int = 3600


def load_config(environ: dict[str, str] | None = None) -> EngineConfig:
    """Build an EngineConfig from the environment (or a given mapping)."""
    env = os.environ if environ is None else environ

    seed = env.get("HITBLOW_SEED")
    return EngineConfig(
        digit_count=int(env.get("HITBLOW_DIGIT_COUNT", "3")),
        card_mode=env.get("HITBLOW_CARD_MODE", "").strip().lower() in _TRUE_VALUES,
        seed=int(seed) if seed else None,
        log_level=env.get("HITBLOW_LOG_LEVEL", "WARNING").upper(),
        session_ttl_seconds=int(env.get("HITBLOW_SESSION_TTL", "3600")),
    )
