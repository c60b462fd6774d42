"""
Collaborator contracts for the research sub-agent.

The sub-agent never probes its collaborators for methods; each dependency
is one of these abstract interfaces, injected at construction. Concrete
implementations live in search.py, fetcher.py and summarizer.py, and tests
substitute mocks.
"""
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

from ghresearch.models import Fact, Summary


class SearchCapability(ABC):
    """Search backend returning result records in relevance order."""

    @abstractmethod
    def search(
        self,
        query: str,
        limit: int = 5,
        created_after: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        """
        Return up to limit result records, each carrying at least a url.

        "No results" is an empty list, never an exception.
        """
        pass


class ConversationFetcher(ABC):
    """Loads the full conversation behind a search result."""

    @abstractmethod
    def fetch(self, result: Dict[str, Any]) -> Dict[str, Any]:
        """
        Return the conversation payload for a search result.

        Raises:
            FetchError: non-success status or a body that is not a JSON object
        """
        pass


class SummarizerCapability(ABC):
    """Distills conversations into summaries and facts."""

    @abstractmethod
    def summarize(self, conversation: Dict[str, Any], model: Optional[str] = None) -> Summary:
        """Summarize one conversation; model=None means the summarizer's default."""
        pass

    @abstractmethod
    def summary_to_facts(self, summary: Summary, aspect_id: Optional[str] = None) -> List[Fact]:
        """Convert a summary's raw facts into Fact records tagged with aspect_id."""
        pass
