"""
Research Infrastructure.

Runs search-and-summarize cycles per research aspect and ranks the
resulting facts against the research question.

Components:
- ResearchSubAgent: search -> fetch -> summarize -> facts, never raises
- RelevanceRanker: keyword overlap + freshness + confidence ranking
- QueryPlan/SearchTool: one search request and its closed tool set
- Search adapters, fetcher and summarizer: default script/OpenAI collaborators
"""
from ghresearch.research.capabilities import (
    ConversationFetcher,
    SearchCapability,
    SummarizerCapability
)
from ghresearch.research.plan import QueryPlan, SearchTool
from ghresearch.research.ranker import RelevanceRanker
from ghresearch.research.sub_agent import ResearchResult, ResearchStatus, ResearchSubAgent

__all__ = [
    "ConversationFetcher",
    "SearchCapability",
    "SummarizerCapability",
    "QueryPlan",
    "SearchTool",
    "RelevanceRanker",
    "ResearchResult",
    "ResearchStatus",
    "ResearchSubAgent",
]
