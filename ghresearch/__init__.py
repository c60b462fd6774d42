# GitHub Research Core Library
# Main entry point: from ghresearch.research import ResearchSubAgent, RelevanceRanker

from .config import load_config, get_api_keys, RankingConfig, DEFAULT_RANKING_CONFIG

from .models import Fact, Summary, Evaluation

from .retry import with_retry

from .validation import (
    valid_json,
    has_required_keys,
    no_duplicates,
    extract_errors,
)

from .utils import create_logger, parse_level, estimate_tokens

__all__ = [
    # Config
    "load_config",
    "get_api_keys",
    "RankingConfig",
    "DEFAULT_RANKING_CONFIG",
    # Models
    "Fact",
    "Summary",
    "Evaluation",
    # Retry
    "with_retry",
    # Validation
    "valid_json",
    "has_required_keys",
    "no_duplicates",
    "extract_errors",
    # Utils
    "create_logger",
    "parse_level",
    "estimate_tokens",
]
