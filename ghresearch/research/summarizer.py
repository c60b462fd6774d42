"""
Summarizer Agent.

Distills one fetched conversation into a Summary (facts, topics,
confidence) with an OpenAI model, then turns the summary's raw facts into
Fact records for ranking.

Design rationale:
- JSON response mode plus a jsonschema check: the reply is untrusted and
  must have the right shape before it becomes a Summary
- Malformed replies produce an empty summary (confidence 0.0) rather than
  an exception; the conversation simply contributes no facts
- API errors are retried with backoff; once retries are exhausted the
  error propagates and the sub-agent skips the conversation
- Long bodies are truncated to keep the prompt within context limits
"""
import json
import logging
from collections.abc import Mapping
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

import jsonschema

from ghresearch.base import BaseLLMAgent
from ghresearch.exceptions import LLMResponseError
from ghresearch.models import Fact, Summary
from ghresearch.research.capabilities import SummarizerCapability
from ghresearch.retry import with_retry
from ghresearch.validation import get_field, valid_json

MIN_FACTS = 3
MAX_FACTS = 8
DEFAULT_MAX_BODY_LENGTH = 10_000
RETRY_OPTIONS = ("max_attempts", "base_delay", "max_delay")

SUMMARY_RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "facts": {
            "type": "array",
            "items": {
                "anyOf": [
                    {"type": "string"},
                    {
                        "type": "object",
                        "properties": {
                            "text": {"type": "string"},
                            "confidence": {"type": "number"}
                        },
                        "required": ["text"]
                    }
                ]
            }
        },
        "topics": {"type": "array", "items": {"type": "string"}},
        "confidence": {"type": "number"}
    }
}

SUMMARIZER_PROMPT = """You are extracting facts from a GitHub conversation for a research report.

TITLE: {title}
URL: {url}

CONVERSATION:
{body}

INSTRUCTIONS:
- Extract {min_facts} to {max_facts} atomic, self-contained facts stated in the conversation
- Each fact must be understandable without the conversation (name the component, error, or version)
- Do not speculate beyond what participants actually said
- List the main topics as short lowercase phrases
- Give an overall confidence 0-1 for how reliable these facts are

OUTPUT (JSON):
{{
  "facts": ["Fact one", "Fact two"],
  "topics": ["topic"],
  "confidence": 0.0-1.0
}}"""


class SummarizerAgent(BaseLLMAgent, SummarizerCapability):
    """
    Summarize conversations into facts with an OpenAI model.

    Usage:
        summarizer = SummarizerAgent(model="gpt-4o-mini", api_key="...")
        summary = summarizer.summarize(conversation)
        facts = summarizer.summary_to_facts(summary, aspect_id="A1")
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        api_key: str | None = None,
        max_body_length: int = DEFAULT_MAX_BODY_LENGTH,
        retry_config: Optional[Dict[str, Any]] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Args:
            model: Default OpenAI model (used when summarize() gets model=None)
            api_key: OpenAI API key
            max_body_length: Characters of conversation body sent to the model
            retry_config: max_attempts / base_delay / max_delay for API calls
            logger: Logger (default: module logger)
        """
        super().__init__(model=model, api_key=api_key)
        self.max_body_length = max_body_length
        self.retry_config = {
            key: value for key, value in (retry_config or {}).items()
            if key in RETRY_OPTIONS
        }
        self.logger = logger or logging.getLogger(__name__)

    def summarize(self, conversation: Dict[str, Any], model: Optional[str] = None) -> Summary:
        title = get_field(conversation, "title") or ""
        url = get_field(conversation, "url") or ""
        body = get_field(conversation, "body") or ""

        self.logger.debug(f"Summarizing: {title}")

        prompt = self._build_prompt(title, url, body)
        client_model = model or self.model
        self._ensure_client()

        raw_response = with_retry(
            lambda: self._call_llm(prompt, client_model),
            logger=self.logger,
            **self.retry_config
        )

        try:
            data = self._parse_response(raw_response)
        except LLMResponseError as e:
            self.logger.error(f"Failed to parse summary for {url}: {e}")
            return Summary(source_url=url, facts=[], topics=[], confidence=0.0)

        confidence = data.get("confidence")
        summary = Summary(
            source_url=url,
            facts=data.get("facts") or [],
            topics=data.get("topics") or [],
            confidence=0.5 if confidence is None else confidence
        )

        if not summary.is_valid():
            self.logger.warning(
                f"Invalid summary generated for {url}: {'; '.join(summary.validation_errors())}"
            )

        return summary

    def summary_to_facts(self, summary: Summary, aspect_id: Optional[str] = None) -> List[Fact]:
        """
        Convert raw summary facts to Fact records.

        Strings take the summary's confidence; {"text", "confidence"} mappings
        may carry their own. Facts failing validation are dropped.
        """
        if not isinstance(summary.facts, (list, tuple)):
            return []

        extracted_at = datetime.now(timezone.utc).isoformat(timespec="seconds")
        facts = []

        for raw_fact in summary.facts:
            if isinstance(raw_fact, str):
                text, confidence = raw_fact, summary.confidence
            elif isinstance(raw_fact, Mapping):
                text = get_field(raw_fact, "text") or ""
                confidence = get_field(raw_fact, "confidence")
                if confidence is None:
                    confidence = summary.confidence
            else:
                self.logger.debug(f"Skipping fact of type {type(raw_fact).__name__}")
                continue

            fact = Fact(
                text=text,
                confidence=confidence,
                extracted_at=extracted_at,
                aspect_id=aspect_id,
                source_url=summary.source_url
            )
            if fact.is_valid():
                facts.append(fact)
            else:
                self.logger.debug(f"Dropping invalid fact: {'; '.join(fact.validation_errors())}")

        return facts

    def _build_prompt(self, title: str, url: str, body: str) -> str:
        """Fill the prompt template, truncating long bodies."""
        if len(body) > self.max_body_length:
            body = body[:self.max_body_length] + "\n\n[TRUNCATED]"

        return SUMMARIZER_PROMPT.format(
            title=title,
            url=url,
            body=body,
            min_facts=MIN_FACTS,
            max_facts=MAX_FACTS
        )

    def _call_llm(self, prompt: str, model: str) -> Optional[str]:
        """
        Call OpenAI chat completions in JSON mode.

        Low temperature (0.2) for consistent extraction.
        """
        client = self._ensure_client()
        response = client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=0.2
        )
        return response.choices[0].message.content

    def _parse_response(self, raw_response: Optional[str]) -> Dict[str, Any]:
        """
        Parse and schema-check the model reply.

        Raises:
            LLMResponseError: reply is not JSON or does not match SUMMARY_RESPONSE_SCHEMA
        """
        if not valid_json(raw_response):
            raise LLMResponseError("LLM returned invalid JSON for summary")

        data = json.loads(raw_response)
        try:
            jsonschema.validate(instance=data, schema=SUMMARY_RESPONSE_SCHEMA)
        except jsonschema.ValidationError as e:
            raise LLMResponseError(f"Summary JSON failed schema validation: {e.message}") from e
        return data
