"""
Relevance Ranker.

Orders facts by estimated relevance to the research question and keeps the
top K for the report writer.

Scoring (weights in RankingConfig):
    score = 0.5 * keyword overlap + 0.2 * freshness + 0.3 * confidence

- Keyword overlap is a stand-in for embedding similarity: the share of
  question tokens (lower-cased, split on non-word runs, >= 3 chars) that
  also appear in the fact. No stemming, so "fail" does not match "fails".
- Freshness decays as exp(-days_old / 30); missing or unparseable
  timestamps score a neutral 0.5. Timestamps in the future are clamped to
  1.0 so the composite stays within [0, 1] for well-formed confidences.
- Confidence is the fact's own value, used as-is.

Ties keep their input order (sorted() is stable), so the ranking is
reproducible for a fixed input.
"""
import logging
import math
import re
from datetime import datetime, timezone
from typing import Any, List, Optional, Sequence

from ghresearch.config import DEFAULT_RANKING_CONFIG, RankingConfig
from ghresearch.models import Fact

# ASCII word characters only, so accented letters split tokens
TOKEN_SPLIT = re.compile(r"\W+", re.ASCII)


class RelevanceRanker:
    """
    Score and rank facts against a question.

    Usage:
        ranker = RelevanceRanker()
        top_facts = ranker.rank(facts, "why does the workflow fail", top_k=20)
    """

    def __init__(
        self,
        config: RankingConfig = DEFAULT_RANKING_CONFIG,
        logger: Optional[logging.Logger] = None
    ):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)

    def rank(
        self,
        facts: Sequence[Fact],
        question: str,
        top_k: Optional[int] = None
    ) -> Sequence[Fact]:
        """
        Rank facts by composite score, highest first.

        Args:
            facts: Facts to rank
            question: Research question
            top_k: Number of facts to keep (default: RankingConfig.DEFAULT_TOP_K)

        Returns:
            Up to top_k of the original Fact objects; scores are not attached.
            An empty input is returned unchanged.
        """
        if not facts:
            return facts

        if top_k is None:
            top_k = self.config.DEFAULT_TOP_K

        scored = [(self.score(fact, question), fact) for fact in facts]
        scored = sorted(scored, key=lambda pair: -pair[0])
        ranked = [fact for _, fact in scored[:max(top_k, 0)]]

        self.logger.debug(f"Ranked {len(facts)} facts, keeping top {len(ranked)}")
        return ranked

    def score(self, fact: Fact, question: str) -> float:
        """Composite relevance score for one fact."""
        semantic = self.semantic_similarity(fact.text, question)
        freshness = self.freshness_decay(fact.extracted_at)
        return (
            semantic * self.config.SEMANTIC_WEIGHT
            + freshness * self.config.FRESHNESS_WEIGHT
            + fact.confidence * self.config.CONFIDENCE_WEIGHT
        )

    def tokenize(self, text: Optional[str]) -> List[str]:
        """Lower-cased tokens of at least MIN_TOKEN_LENGTH characters, in order."""
        if not text:
            return []
        return [
            token for token in TOKEN_SPLIT.split(text.lower())
            if len(token) >= self.config.MIN_TOKEN_LENGTH
        ]

    def semantic_similarity(self, text: Optional[str], question: Optional[str]) -> float:
        """
        Share of question tokens that also occur in text.

        Distinct shared tokens over all question tokens (duplicates in the
        question count toward the denominator). Not normalized by text length.
        """
        if text is None or question is None:
            return 0.0

        question_tokens = self.tokenize(question)
        if not question_tokens:
            return 0.0

        shared = set(self.tokenize(text)) & set(question_tokens)
        return len(shared) / len(question_tokens)

    def freshness_decay(self, extracted_at: Any, now: Optional[datetime] = None) -> float:
        """
        Exponential freshness score for an extraction timestamp.

        Args:
            extracted_at: ISO-8601 string or datetime; naive values are taken as UTC
            now: Reference time (default: current UTC time)

        Returns:
            exp(-days_old / FRESHNESS_DECAY_DAYS), at most 1.0; NEUTRAL_FRESHNESS
            when the timestamp is missing or unparseable
        """
        extracted_time = parse_timestamp(extracted_at)
        if extracted_time is None:
            return self.config.NEUTRAL_FRESHNESS

        now = now or datetime.now(timezone.utc)
        days_old = (now - extracted_time).total_seconds() / (24 * 60 * 60)
        if days_old <= 0:
            return 1.0
        return math.exp(-days_old / self.config.FRESHNESS_DECAY_DAYS)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp to an aware datetime, or None."""
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
    else:
        return None

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed
