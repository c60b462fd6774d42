"""
Script-backed search adapters.

Both adapters shell out to the conversation search scripts and read JSON
Lines from stdout, one result object per line. Failures (missing script,
non-zero exit) are logged and reported as "no results": a search backend
being down should cost one aspect its results, not the whole run.
"""
import json
import logging
import os
import subprocess
from typing import Any, Dict, List, Optional

from ghresearch.research.capabilities import SearchCapability


class ScriptSearchAdapter(SearchCapability):
    """Shared subprocess and JSON Lines handling for search scripts."""

    script_name = ""

    def __init__(self, script_dir: str, logger: Optional[logging.Logger] = None):
        self.script_dir = script_dir
        self.logger = logger or logging.getLogger(__name__)

    @property
    def script_path(self) -> str:
        return os.path.join(self.script_dir, self.script_name)

    def _run_script(self, args: List[str]) -> List[Dict[str, Any]]:
        cmd = [self.script_path, *args]
        try:
            completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            self.logger.error(f"{self.script_name} could not be started: {e}")
            return []

        if completed.returncode != 0:
            self.logger.error(f"{self.script_name} failed: {completed.stderr.strip()}")
            return []

        return self.parse_results(completed.stdout)

    def parse_results(self, output: str) -> List[Dict[str, Any]]:
        """Parse JSON Lines output; blank and non-object lines are skipped."""
        results = []
        for line in (output or "").splitlines():
            line = line.strip()
            if not line:
                continue
            try:
                result = json.loads(line)
            except json.JSONDecodeError:
                self.logger.debug(f"Skipping non-JSON line: {line[:50]}")
                continue
            if isinstance(result, dict):
                results.append(result)
            else:
                self.logger.debug(f"Skipping non-object result: {line[:50]}")
        return results


class SemanticSearchAdapter(ScriptSearchAdapter):
    """Semantic search over an indexed conversation collection."""

    script_name = "semantic-search-github-conversations"

    def __init__(self, collection: str, script_dir: str, logger: Optional[logging.Logger] = None):
        super().__init__(script_dir=script_dir, logger=logger)
        self.collection = collection

    def search(
        self,
        query: str,
        limit: int = 5,
        created_after: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        self.logger.debug(f"Semantic search: {query}")

        # The search script has no date filter option yet
        if created_after:
            self.logger.debug(f"Date filter requested: {created_after}")

        return self._run_script([query, "--collection", self.collection, "--limit", str(limit)])


class KeywordSearchAdapter(ScriptSearchAdapter):
    """GitHub search-syntax queries (e.g. "repo:owner/repo is:issue")."""

    script_name = "search-github-conversations"

    def search(
        self,
        query: str,
        limit: int = 5,
        created_after: Optional[str] = None
    ) -> List[Dict[str, Any]]:
        self.logger.debug(f"Keyword search: {query}")
        return self._run_script([query, "--limit", str(limit)])
