# treegrid/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from .exceptions import InvalidConfigError
from .generator import GeneratorConfig


@dataclass(frozen=True)
class GridOptions:
    """Row model tuning knobs. treegrid carries them to the grid untouched."""

    cache_block_size: int = 20
    max_blocks_in_cache: int = 3
    max_concurrent_datasource_requests: int = 2
    block_load_debounce_millis: int = 60


@dataclass(frozen=True)
class Settings:
    max_depth: int = 3
    child_probability: float = 0.3
    total_node_count: int = 1000
    seed: int | None = None
    host: str = "0.0.0.0"
    port: int = 5001
    response_delay_ms: int = 0  # Simulated server latency

    def generator_config(self) -> GeneratorConfig:
        return GeneratorConfig(
            max_depth=self.max_depth,
            child_probability=self.child_probability,
            total_node_count=self.total_node_count,
            seed=self.seed,
        )


def _env_int(name: str, default: int | None) -> int | None:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise InvalidConfigError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise InvalidConfigError(f"{name} must be a number, got {raw!r}") from e


def load_settings() -> Settings:
    settings = Settings(
        max_depth=_env_int("TREE_MAX_DEPTH", 3),
        child_probability=_env_float("TREE_CHILD_PROBABILITY", 0.3),
        total_node_count=_env_int("TREE_TOTAL_NODES", 1000),
        seed=_env_int("TREE_SEED", None),
        host=(os.getenv("TREEGRID_HOST") or "0.0.0.0").strip(),
        port=_env_int("TREEGRID_PORT", 5001),
        response_delay_ms=_env_int("RESPONSE_DELAY_MS", 0),
    )
    if settings.response_delay_ms < 0:
        raise InvalidConfigError("RESPONSE_DELAY_MS must be >= 0")
    # Fail at startup rather than on the first request
    settings.generator_config().validate()
    return settings
