"""
Tests for the run_research CLI.
"""
import json
from unittest.mock import MagicMock, patch

import run_research
from ghresearch.models import Fact
from ghresearch.research.sub_agent import ResearchResult


def test_missing_api_key_exits_with_error(monkeypatch, tmp_path):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    code = run_research.main([
        "--question", "q", "--query", "q", "--config", str(tmp_path / "none.yaml")
    ])
    assert code == 1


def test_runs_cycle_ranks_and_writes_output(monkeypatch, tmp_path):
    monkeypatch.setenv("OPENAI_API_KEY", "sk-test")
    facts = [
        Fact(text="Unrelated remark", confidence=0.5, source_url="https://x/1"),
        Fact(text="The deploy workflow times out", confidence=0.5, source_url="https://x/2"),
    ]
    agent = MagicMock()
    agent.research.return_value = ResearchResult(raw_results=[{"url": "https://x/1"}], facts=facts)
    output = tmp_path / "out.json"

    with patch.object(run_research.ResearchSubAgent, "from_config", return_value=agent), \
         patch.object(run_research, "create_logger"):
        code = run_research.main([
            "--question", "why does the deploy workflow time out",
            "--query", "deploy timeout",
            "--tool", "keyword",
            "--aspect-id", "A1",
            "--top-k", "1",
            "--config", str(tmp_path / "none.yaml"),
            "--output", str(output),
        ])

    assert code == 0
    plan = agent.research.call_args.args[0]
    assert plan["tool"] == "keyword"
    assert agent.research.call_args.kwargs["aspect_id"] == "A1"

    data = json.loads(output.read_text())
    assert [f["text"] for f in data["ranked_facts"]] == ["The deploy workflow times out"]
    assert data["result"]["status"] == "success"
