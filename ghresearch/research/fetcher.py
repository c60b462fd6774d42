"""
Script-backed conversation fetcher.

Runs fetch-github-conversation for a result's url and parses the JSON
body. Every failure mode raises FetchError so the sub-agent can skip the
item with one except clause.
"""
import json
import logging
import os
import subprocess
from typing import Any, Dict, Optional

from ghresearch.exceptions import FetchError
from ghresearch.research.capabilities import ConversationFetcher
from ghresearch.validation import get_field, valid_json


class ScriptConversationFetcher(ConversationFetcher):
    """
    Fetch full conversations (issue, PR or discussion) by url.

    Args:
        script_dir: Directory holding fetch-github-conversation
        cache_path: Optional cache directory passed through to the script
    """

    script_name = "fetch-github-conversation"

    def __init__(
        self,
        script_dir: str,
        cache_path: Optional[str] = None,
        logger: Optional[logging.Logger] = None
    ):
        self.script_dir = script_dir
        self.cache_path = cache_path
        self.logger = logger or logging.getLogger(__name__)

    def fetch(self, result: Dict[str, Any]) -> Dict[str, Any]:
        url = get_field(result, "url")
        url = url.strip() if isinstance(url, str) else None
        if not url:
            raise FetchError("Search result has no url")

        cmd = [os.path.join(self.script_dir, self.script_name), url]
        if self.cache_path:
            cmd += ["--cache-path", self.cache_path]

        try:
            completed = subprocess.run(cmd, capture_output=True, text=True, check=False)
        except OSError as e:
            raise FetchError(f"Could not start {self.script_name} for {url}: {e}") from e

        if completed.returncode != 0:
            raise FetchError(
                f"{self.script_name} exited with status {completed.returncode} "
                f"for {url}: {completed.stderr.strip()}"
            )

        if not valid_json(completed.stdout):
            raise FetchError(f"Conversation body for {url} is not valid JSON")

        conversation = json.loads(completed.stdout)
        if not isinstance(conversation, dict):
            raise FetchError(
                f"Conversation body for {url} is a {type(conversation).__name__}, expected an object"
            )
        return conversation
