"""
Pytest fixtures and configuration.

Following TDD principles:
- Fixtures provide real-world-like test data (GitHub conversations, LLM replies)
- Mocks used only when unavoidable (LLM client, search/fetch scripts)
- Each test should be independent and fast
"""
import json
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import MagicMock, Mock

import pytest

from ghresearch.models import Fact, Summary
from ghresearch.research.capabilities import (
    ConversationFetcher,
    SearchCapability,
    SummarizerCapability
)
from ghresearch.research.sub_agent import ResearchSubAgent


# =============================================================================
# CONVERSATION FIXTURES
# =============================================================================

@pytest.fixture
def sample_conversation() -> dict[str, Any]:
    """Fetched issue conversation as returned by fetch-github-conversation."""
    return {
        "title": "Deploy workflow fails on push to main",
        "url": "https://github.com/acme/api/issues/42",
        "body": (
            "The deploy workflow fails on every push since the runner image update. "
            "Pinning actions/setup-node to v3 fixes it. Maintainers confirmed the "
            "regression is tracked upstream."
        ),
    }


@pytest.fixture
def search_results() -> list[dict[str, Any]]:
    """Two keyword search results in relevance order."""
    return [
        {"url": "https://github.com/acme/api/issues/42", "title": "Deploy workflow fails"},
        {"url": "https://github.com/acme/api/pull/57", "title": "Pin setup-node"},
    ]


# =============================================================================
# LLM RESPONSE FIXTURES
# =============================================================================

@pytest.fixture
def summary_response() -> dict[str, Any]:
    """Well-formed summarizer reply."""
    return {
        "facts": [
            "The deploy workflow fails on push after the runner image update",
            "Pinning actions/setup-node to v3 fixes the deploy workflow",
            "The regression is tracked upstream",
        ],
        "topics": ["ci", "github actions"],
        "confidence": 0.8,
    }


@pytest.fixture
def mock_openai_client(summary_response):
    """Mock OpenAI client whose chat completion returns summary_response."""
    client = MagicMock()
    mock_response = MagicMock()
    mock_response.choices = [MagicMock()]
    mock_response.choices[0].message.content = json.dumps(summary_response)
    client.chat.completions.create.return_value = mock_response
    return client


# =============================================================================
# FACT FIXTURES
# =============================================================================

@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc)


@pytest.fixture
def sample_facts(now) -> list[Fact]:
    """Facts with varied overlap, age and confidence."""
    return [
        Fact(text="Unrelated note about documentation style", confidence=0.9,
             extracted_at=now.isoformat()),
        Fact(text="The workflow started to fail after the runner update", confidence=0.6,
             extracted_at=(now - timedelta(days=3)).isoformat()),
        Fact(text="Why does the workflow fail? Cache misses on the runner", confidence=0.7,
             extracted_at=(now - timedelta(days=60)).isoformat()),
        Fact(text="Workflow logs are retained for ninety days", confidence=0.4),
    ]


# =============================================================================
# SUB-AGENT FIXTURES
# =============================================================================

@pytest.fixture
def collaborators() -> dict[str, Mock]:
    """Mocked collaborators matching the capability contracts."""
    semantic = Mock(spec=SearchCapability)
    keyword = Mock(spec=SearchCapability)
    fetcher = Mock(spec=ConversationFetcher)
    summarizer = Mock(spec=SummarizerCapability)

    semantic.search.return_value = []
    keyword.search.return_value = []

    def summarize(conversation, model=None):
        return Summary(
            source_url=conversation["url"],
            facts=[f"Fact from {conversation['url']}"],
            topics=["ci"],
            confidence=0.7,
        )

    def summary_to_facts(summary, aspect_id=None):
        return [
            Fact(text=text, confidence=summary.confidence,
                 aspect_id=aspect_id, source_url=summary.source_url)
            for text in summary.facts
        ]

    summarizer.summarize.side_effect = summarize
    summarizer.summary_to_facts.side_effect = summary_to_facts

    return {
        "semantic_search": semantic,
        "keyword_search": keyword,
        "fetcher": fetcher,
        "summarizer": summarizer,
    }


@pytest.fixture
def sub_agent(collaborators) -> ResearchSubAgent:
    return ResearchSubAgent(**collaborators)


# =============================================================================
# CONFIGURATION FIXTURES
# =============================================================================

@pytest.fixture
def sample_config() -> dict[str, Any]:
    """Sample configuration dictionary."""
    return {
        "search": {"script_dir": "/opt/scripts", "collection": "acme-conversations", "limit": 5},
        "fetch": {"cache_path": "/tmp/gh-cache"},
        "summarizer": {"model": "gpt-4o-mini", "max_body_length": 2000},
        "ranking": {"top_k": 10},
        "retry": {"max_attempts": 2, "base_delay": 0.5, "max_delay": 4.0},
        "logging": {"level": "debug"},
    }
