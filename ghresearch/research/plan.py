"""
Query plan: one search request for one research aspect.

The search tool is a closed set. Tags other than "semantic" and "keyword"
resolve to SearchTool.UNKNOWN rather than failing validation, because an
unknown tool is a degrade-to-empty case for the sub-agent, not an error.
"""
from enum import Enum
from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ghresearch.validation import key_name, normalize_keys


class SearchTool(str, Enum):
    """
    Search backend selection.

    SEMANTIC: Embedding search over a collection, supports created_after
    KEYWORD: GitHub search syntax, no date filter
    UNKNOWN: Anything else; yields no results
    """
    SEMANTIC = "semantic"
    KEYWORD = "keyword"
    UNKNOWN = "unknown"

    @classmethod
    def parse(cls, value: Any) -> "SearchTool":
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNKNOWN
        name = key_name(value).strip().lower()
        if name in (cls.SEMANTIC.value, cls.KEYWORD.value):
            return cls(name)
        return cls.UNKNOWN


class QueryPlan(BaseModel):
    """
    Structured description of one search request.

    raw_tool keeps the tag exactly as the planner wrote it, so a warning for
    an unknown tool can name what was actually asked for.
    """
    tool: SearchTool = Field(default=SearchTool.UNKNOWN, description="Resolved search tool")
    raw_tool: str = Field(default="", description="Tool tag as given")
    query: str = Field(default="", description="Search query text")
    created_after: Optional[str] = Field(default=None, description="ISO-8601 lower bound (semantic only)")

    @model_validator(mode="before")
    @classmethod
    def capture_raw_tool(cls, data: Any) -> Any:
        if isinstance(data, Mapping) and not data.get("raw_tool"):
            tool = data.get("tool")
            data = {**data, "raw_tool": "" if tool is None else key_name(tool)}
        return data

    @field_validator("tool", mode="before")
    @classmethod
    def resolve_tool(cls, v: Any) -> SearchTool:
        """Map any tag to the closed SearchTool set instead of rejecting it."""
        return SearchTool.parse(v)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "QueryPlan":
        """Build a plan from a planner mapping with string or Enum keys."""
        return cls.model_validate(normalize_keys(data))
