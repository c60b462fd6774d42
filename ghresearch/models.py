"""
Research data records: Fact, Summary, Evaluation.

Design Decisions:
- Plain dataclasses, not pydantic models: LLM output must be inspectable
  even when out of range, so construction never rejects input. Problems are
  reported by validation_errors() / is_valid() instead.
- to_dict()/from_dict() use a flat mapping (one level of lists at most).
  This is the wire format exchanged with the summarizer and evaluator, so
  field names must not change.
- from_dict() accepts string keys or Enum keys (see validation.key_name).
- Fact is frozen: once extracted it is passed around, never edited.
"""
import hashlib
from dataclasses import dataclass, field
from typing import Any, List, Mapping, Optional

from ghresearch.utils import estimate_tokens
from ghresearch.validation import normalize_keys


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _score_error(name: str, value: Any) -> Optional[str]:
    """Describe why value is not a score in [0, 1], or None if it is."""
    if value is None:
        return f"{name} is missing"
    if not _is_number(value):
        return f"{name} must be a number, got {type(value).__name__}"
    if not 0.0 <= value <= 1.0:
        return f"{name} must be within [0, 1], got {value}"
    return None


def _value(data: Mapping[str, Any], name: str, default: Any = None) -> Any:
    """Field value, with None treated the same as an absent key."""
    value = data.get(name)
    return default if value is None else value


@dataclass(frozen=True)
class Fact:
    """
    Atomic claim extracted from one conversation.

    Attributes:
        text: The claim itself
        confidence: Extraction confidence (intended 0-1, not enforced here)
        extracted_at: ISO-8601 extraction timestamp (optional)
        aspect_id: Research aspect that produced the fact (optional)
        source_url: Conversation the fact came from (optional)
        id: Stable identifier derived from text when not supplied
    """
    text: str = ""
    confidence: float = 0.5
    extracted_at: Optional[str] = None
    aspect_id: Optional[str] = None
    source_url: Optional[str] = None
    id: str = ""

    def __post_init__(self):
        if not self.id:
            object.__setattr__(self, "id", self.generate_id(self.text))

    @staticmethod
    def generate_id(text: Optional[str]) -> str:
        """Deterministic ID: same text, same ID, regardless of source."""
        digest = hashlib.sha256((text or "").encode("utf-8")).hexdigest()
        return f"fact_{digest[:16]}"

    def token_count(self) -> int:
        """Rough token estimate (~4 characters per token)."""
        return estimate_tokens(self.text or "")

    def validation_errors(self) -> List[str]:
        errors = []
        if not isinstance(self.text, str) or not self.text.strip():
            errors.append("text must be a non-blank string")
        score_error = _score_error("confidence", self.confidence)
        if score_error:
            errors.append(score_error)
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'text': self.text,
            'confidence': self.confidence,
            'extracted_at': self.extracted_at,
            'aspect_id': self.aspect_id,
            'source_url': self.source_url
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Fact":
        data = normalize_keys(data)
        return cls(
            text=_value(data, 'text', ""),
            confidence=_value(data, 'confidence', 0.5),
            extracted_at=data.get('extracted_at'),
            aspect_id=data.get('aspect_id'),
            source_url=data.get('source_url'),
            id=_value(data, 'id', "")
        )


@dataclass
class Summary:
    """
    Distilled view of one fetched conversation.

    facts holds the raw fact records as returned by the summarizer (strings
    or {"text", "confidence"} mappings); summary_to_facts() turns them into
    Fact instances.
    """
    source_url: str = ""
    facts: List[Any] = field(default_factory=list)
    topics: List[str] = field(default_factory=list)
    confidence: float = 0.5

    def validation_errors(self) -> List[str]:
        errors = []
        if not isinstance(self.source_url, str) or not self.source_url.strip():
            errors.append("source_url must be a non-blank string")
        if not isinstance(self.facts, (list, tuple)):
            errors.append("facts must be a list")
        if not isinstance(self.topics, (list, tuple)):
            errors.append("topics must be a list")
        score_error = _score_error("confidence", self.confidence)
        if score_error:
            errors.append(score_error)
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict:
        return {
            'source_url': self.source_url,
            'facts': self.facts,
            'topics': self.topics,
            'confidence': self.confidence
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Summary":
        data = normalize_keys(data)
        return cls(
            source_url=_value(data, 'source_url', ""),
            facts=_value(data, 'facts', []),
            topics=_value(data, 'topics', []),
            confidence=_value(data, 'confidence', 0.5)
        )


SCORE_FIELDS = ("coverage_score", "confidence_score", "source_diversity", "aspect_completion")


@dataclass
class Evaluation:
    """
    Snapshot of overall research progress across aspects.

    All four scores are required and must lie in [0, 1]. A missing score is
    kept as None (never defaulted) so that the record fails validation.
    """
    coverage_score: Optional[float] = None
    confidence_score: Optional[float] = None
    source_diversity: Optional[float] = None
    aspect_completion: Optional[float] = None
    missing_aspects: List[str] = field(default_factory=list)
    notes: List[str] = field(default_factory=list)

    def validation_errors(self) -> List[str]:
        errors = []
        for name in SCORE_FIELDS:
            score_error = _score_error(name, getattr(self, name))
            if score_error:
                errors.append(score_error)
        return errors

    def is_valid(self) -> bool:
        return not self.validation_errors()

    def to_dict(self) -> dict:
        return {
            'coverage_score': self.coverage_score,
            'confidence_score': self.confidence_score,
            'source_diversity': self.source_diversity,
            'aspect_completion': self.aspect_completion,
            'missing_aspects': self.missing_aspects,
            'notes': self.notes
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Evaluation":
        data = normalize_keys(data)
        return cls(
            coverage_score=data.get('coverage_score'),
            confidence_score=data.get('confidence_score'),
            source_diversity=data.get('source_diversity'),
            aspect_completion=data.get('aspect_completion'),
            missing_aspects=_value(data, 'missing_aspects', []),
            notes=_value(data, 'notes', [])
        )
