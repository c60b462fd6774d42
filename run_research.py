#!/usr/bin/env python3
# run_research.py
"""
CLI for a single research cycle.

Usage:
    python run_research.py --question "why does the deploy workflow fail" \
        --query "repo:owner/repo is:issue deploy workflow" --tool keyword

Output:
    - Console table of the top-ranked facts
    - Optional JSON file with the full research result and ranked facts

Design:
    - Step 1: Research sub-agent searches, fetches and summarizes conversations
    - Step 2: Relevance ranker orders the extracted facts against the question
"""
import argparse
import json
import sys

from dotenv import load_dotenv
from rich.console import Console
from rich.table import Table

from ghresearch.config import get_api_keys, load_config
from ghresearch.research import RelevanceRanker, ResearchSubAgent
from ghresearch.utils import create_logger, parse_level

load_dotenv()
console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run one research cycle and rank the extracted facts",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python run_research.py --question "why does CI time out" --query "CI timeout" --tool semantic
    python run_research.py --question "flaky tests" --query "repo:o/r is:issue flaky" --tool keyword --output facts.json
        """
    )
    parser.add_argument("--question", required=True, help="Overall research question")
    parser.add_argument("--query", required=True, help="Search query for this aspect")
    parser.add_argument("--tool", default="semantic", help="Search tool: semantic or keyword")
    parser.add_argument("--aspect-id", default=None, help="Aspect identifier to tag facts with")
    parser.add_argument("--created-after", default=None,
                        help="ISO-8601 lower bound on conversation creation (semantic only)")
    parser.add_argument("--limit", type=int, default=None, help="Maximum search results")
    parser.add_argument("--top-k", type=int, default=None, help="Number of ranked facts to keep")
    parser.add_argument("--model", default=None, help="Summarizer model override")
    parser.add_argument("--config", default="config.yaml", help="Config file (default: config.yaml)")
    parser.add_argument("--output", default=None, help="Write result JSON to this file")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point for a research cycle."""
    args = build_parser().parse_args(argv)
    config = load_config(args.config)

    api_key = get_api_keys()["openai"]
    if not api_key:
        console.print("[red]Error: OPENAI_API_KEY not set in environment[/red]")
        return 1

    logger = create_logger(level=parse_level(config.get("logging", {}).get("level")))
    limit = args.limit or config["search"].get("limit", 5)
    top_k = args.top_k if args.top_k is not None else config["ranking"].get("top_k", 40)

    console.print(f"\n[cyan]Step 1: Researching ({args.tool}) '{args.query}'...[/cyan]")
    agent = ResearchSubAgent.from_config(config, api_key=api_key, logger=logger)
    plan = {"tool": args.tool, "query": args.query, "created_after": args.created_after}
    result = agent.research(plan, limit=limit, aspect_id=args.aspect_id, model=args.model)

    if not result.ok:
        console.print(f"[yellow]Research degraded: {result.error}[/yellow]")
    console.print(
        f"Results: {len(result.raw_results)}  Summaries: {len(result.summaries)}  "
        f"Facts: {len(result.facts)}"
    )

    console.print("\n[cyan]Step 2: Ranking facts...[/cyan]")
    ranker = RelevanceRanker(logger=logger)
    ranked = ranker.rank(result.facts, args.question, top_k=top_k)

    table = Table(title=f"Top {len(ranked)} facts")
    table.add_column("#", justify="right")
    table.add_column("Score", justify="right")
    table.add_column("Fact")
    table.add_column("Source")
    for i, fact in enumerate(ranked, start=1):
        table.add_row(
            str(i),
            f"{ranker.score(fact, args.question):.3f}",
            fact.text,
            fact.source_url or ""
        )
    console.print(table)

    if args.output:
        output = {
            "question": args.question,
            "result": result.to_dict(),
            "ranked_facts": [fact.to_dict() for fact in ranked],
        }
        with open(args.output, "w", encoding="utf-8") as f:
            json.dump(output, f, indent=2)
        console.print(f"[green]Saved results to {args.output}[/green]")

    return 0


if __name__ == "__main__":
    sys.exit(main())
