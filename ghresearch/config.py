"""
Configuration for the research pipeline.

Runtime settings (script locations, limits, models) come from config.yaml.
Ranking constants are centralized in RankingConfig for easy tuning.
"""
import copy
import os
from dataclasses import dataclass
from typing import Any

import yaml
from rich.console import Console

console = Console()

DEFAULT_CONFIG: dict[str, Any] = {
    "search": {"script_dir": "bin", "collection": "github-conversations", "limit": 5},
    "fetch": {"cache_path": None},
    "summarizer": {"model": "gpt-4o-mini", "max_body_length": 10_000},
    "ranking": {"top_k": 40},
    "retry": {"max_attempts": 3, "base_delay": 1.0, "max_delay": 10.0},
    "logging": {"level": "info"},
}


@dataclass(frozen=True)
class RankingConfig:
    """Weights and constants for the relevance heuristic."""

    # Composite score weights (sum to 1.0)
    SEMANTIC_WEIGHT: float = 0.5
    FRESHNESS_WEIGHT: float = 0.2
    CONFIDENCE_WEIGHT: float = 0.3

    # Freshness decay: exp(-days / FRESHNESS_DECAY_DAYS)
    FRESHNESS_DECAY_DAYS: float = 30.0
    NEUTRAL_FRESHNESS: float = 0.5

    # Tokens shorter than this are ignored by keyword overlap
    MIN_TOKEN_LENGTH: int = 3

    DEFAULT_TOP_K: int = 40


# Default configuration instance
DEFAULT_RANKING_CONFIG = RankingConfig()


def load_config(config_path: str = "config.yaml") -> dict[str, Any]:
    """
    From config.yaml

    Sections missing from the file are filled from DEFAULT_CONFIG.

    Args:
        config_path: Path to config file (default: config.yaml)

    Returns:
        Configuration dictionary
    """
    try:
        with open(config_path, "r") as f:
            loaded = yaml.safe_load(f) or {}
    except FileNotFoundError:
        console.print(f"[yellow]Warning: {config_path} not found. Using default config.[/yellow]")
        return copy.deepcopy(DEFAULT_CONFIG)

    config = copy.deepcopy(DEFAULT_CONFIG)
    for section, values in loaded.items():
        if isinstance(values, dict) and isinstance(config.get(section), dict):
            config[section].update(values)
        else:
            config[section] = values
    return config


def get_api_keys() -> dict[str, str]:
    return {
        "openai": os.getenv("OPENAI_API_KEY", ""),
    }
