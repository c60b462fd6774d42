"""
Research Sub-Agent.

Runs one search-and-summarize cycle for a single query plan:

    plan -> search (semantic | keyword) -> fetch each result
         -> summarize -> extract facts -> ResearchResult

Failure handling:
- Unknown search tool: warning, empty result, status SUCCESS (not an error)
- Result without a url: skipped silently
- Fetch or summarize failure for one result: logged, that result skipped
- Anything else going wrong in the cycle: logged, empty result with
  status DEGRADED and the error message attached

research() therefore never raises. The sub-agent holds only its
collaborators, no mutable state, so one instance can serve several aspects
in sequence; running aspects concurrently is the orchestrator's concern.

Usage:
    agent = ResearchSubAgent.from_config(load_config(), api_key="...")
    result = agent.research({"tool": "keyword", "query": "repo:o/r is:issue flaky"},
                            limit=5, aspect_id="A1")
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ghresearch.exceptions import FetchError
from ghresearch.models import Fact, Summary
from ghresearch.research.capabilities import (
    ConversationFetcher,
    SearchCapability,
    SummarizerCapability
)
from ghresearch.research.fetcher import ScriptConversationFetcher
from ghresearch.research.plan import QueryPlan, SearchTool
from ghresearch.research.search import KeywordSearchAdapter, SemanticSearchAdapter
from ghresearch.research.summarizer import SummarizerAgent
from ghresearch.validation import get_field


class ResearchStatus(str, Enum):
    """
    Outcome of one research cycle.

    SUCCESS: The cycle ran to completion (possibly with skipped items)
    DEGRADED: The cycle failed and was converted to an empty result
    """
    SUCCESS = "success"
    DEGRADED = "degraded"


@dataclass
class ResearchResult:
    """
    Output of one research cycle.

    Attributes:
        raw_results: Search results in search order
        summaries: One summary per successfully processed result, same order
        facts: Facts from all summaries, same order
        status: SUCCESS, or DEGRADED when the cycle failed
        error: Message of the failure behind a DEGRADED result
    """
    raw_results: List[Dict[str, Any]] = field(default_factory=list)
    summaries: List[Summary] = field(default_factory=list)
    facts: List[Fact] = field(default_factory=list)
    status: ResearchStatus = ResearchStatus.SUCCESS
    error: Optional[str] = None

    @classmethod
    def degraded(cls, error: str) -> "ResearchResult":
        return cls(status=ResearchStatus.DEGRADED, error=error)

    @property
    def ok(self) -> bool:
        return self.status == ResearchStatus.SUCCESS

    def to_dict(self) -> dict:
        return {
            'raw_results': self.raw_results,
            'summaries': [s.to_dict() for s in self.summaries],
            'facts': [f.to_dict() for f in self.facts],
            'status': self.status.value,
            'error': self.error
        }


class ResearchSubAgent:
    """
    Execute search and summarization for one research aspect.

    Collaborators (all injected):
    - semantic_search / keyword_search: SearchCapability per tool
    - fetcher: ConversationFetcher for full conversation bodies
    - summarizer: SummarizerCapability for summaries and facts
    """

    def __init__(
        self,
        semantic_search: SearchCapability,
        keyword_search: SearchCapability,
        fetcher: ConversationFetcher,
        summarizer: SummarizerCapability,
        logger: Optional[logging.Logger] = None
    ):
        self.semantic_search = semantic_search
        self.keyword_search = keyword_search
        self.fetcher = fetcher
        self.summarizer = summarizer
        self.logger = logger or logging.getLogger(__name__)

    @classmethod
    def from_config(
        cls,
        config: Dict[str, Any],
        api_key: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ) -> "ResearchSubAgent":
        """
        Wire the script-backed search/fetch adapters and the OpenAI summarizer.

        Args:
            config: Configuration from load_config()
            api_key: OpenAI API key for the summarizer
            logger: Shared logger for all collaborators
        """
        search_cfg = config.get("search", {})
        summarizer_cfg = config.get("summarizer", {})
        script_dir = search_cfg.get("script_dir", "bin")

        return cls(
            semantic_search=SemanticSearchAdapter(
                collection=search_cfg.get("collection", ""),
                script_dir=script_dir,
                logger=logger
            ),
            keyword_search=KeywordSearchAdapter(script_dir=script_dir, logger=logger),
            fetcher=ScriptConversationFetcher(
                script_dir=script_dir,
                cache_path=config.get("fetch", {}).get("cache_path"),
                logger=logger
            ),
            summarizer=SummarizerAgent(
                model=summarizer_cfg.get("model", "gpt-4o-mini"),
                api_key=api_key,
                max_body_length=summarizer_cfg.get("max_body_length", 10_000),
                retry_config=config.get("retry"),
                logger=logger
            ),
            logger=logger
        )

    def research(
        self,
        plan: Union[QueryPlan, Mapping[str, Any]],
        limit: int = 5,
        aspect_id: Optional[str] = None,
        model: Optional[str] = None
    ) -> ResearchResult:
        """
        Run one search-and-summarize cycle.

        Args:
            plan: QueryPlan, or a mapping with tool/query/created_after
            limit: Maximum search results to request
            aspect_id: Tag applied to every extracted fact
            model: Summarizer model (None = summarizer default)

        Returns:
            ResearchResult; DEGRADED and empty if the cycle failed
        """
        try:
            return self._run_cycle(plan, limit, aspect_id, model)
        except Exception as e:
            self.logger.error(f"Research error: {e}")
            self.logger.debug("Research failure traceback", exc_info=True)
            return ResearchResult.degraded(str(e))

    def _run_cycle(
        self,
        plan: Union[QueryPlan, Mapping[str, Any]],
        limit: int,
        aspect_id: Optional[str],
        model: Optional[str]
    ) -> ResearchResult:
        if not isinstance(plan, QueryPlan):
            plan = QueryPlan.from_dict(plan)

        self.logger.info(f"Researching with {plan.raw_tool or plan.tool.value}: {plan.query}")

        raw_results = self._search(plan, limit)
        self.logger.info(f"Found {len(raw_results)} results")

        summaries: List[Summary] = []
        all_facts: List[Fact] = []

        for result in raw_results:
            conversation = self._fetch_conversation(result)
            if conversation is None:
                continue

            processed = self._summarize(conversation, result, aspect_id, model)
            if processed is None:
                continue

            summary, facts = processed
            summaries.append(summary)
            all_facts.extend(facts)

        self.logger.info(
            f"Extracted {len(all_facts)} facts from {len(summaries)} conversations"
        )

        return ResearchResult(
            raw_results=raw_results,
            summaries=summaries,
            facts=all_facts
        )

    def _search(self, plan: QueryPlan, limit: int) -> List[Dict[str, Any]]:
        """Dispatch to the search capability selected by plan.tool."""
        match plan.tool:
            case SearchTool.SEMANTIC:
                results = self.semantic_search.search(
                    plan.query, limit=limit, created_after=plan.created_after
                )
            case SearchTool.KEYWORD:
                results = self.keyword_search.search(plan.query, limit=limit)
            case _:
                self.logger.warning(f"Unknown search tool: {plan.raw_tool or plan.tool.value}")
                results = []
        return list(results or [])

    def _fetch_conversation(self, result: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """Fetch the conversation behind a result; None if it should be skipped."""
        url = resolve_url(result)
        if not url:
            return None

        self.logger.debug(f"Fetching: {url}")
        try:
            return self.fetcher.fetch(result)
        except FetchError as e:
            self.logger.warning(f"Failed to fetch {url}: {e}")
        except Exception as e:
            self.logger.error(f"Fetch error for {url}: {e}")
        return None

    def _summarize(
        self,
        conversation: Dict[str, Any],
        result: Dict[str, Any],
        aspect_id: Optional[str],
        model: Optional[str]
    ) -> Optional[tuple[Summary, List[Fact]]]:
        """Summarize one conversation and extract its facts; None on failure."""
        if isinstance(conversation, Mapping) and not get_field(conversation, "url"):
            conversation = {**conversation, "url": resolve_url(result)}

        try:
            summary = self.summarizer.summarize(conversation, model=model)
            facts = self.summarizer.summary_to_facts(summary, aspect_id=aspect_id)
        except Exception as e:
            self.logger.error(f"Summarization failed for {resolve_url(result)}: {e}")
            return None
        return summary, list(facts)


def resolve_url(result: Any) -> Optional[str]:
    """Location of a search result, or None when missing or blank."""
    url = get_field(result, "url")
    if not isinstance(url, str) or not url.strip():
        return None
    return url.strip()
