"""Domain models for mdutils."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class LinkKind(str, Enum):
    """Markdown constructs that carry a link destination."""

    INLINE_LINK = "inline_link"
    AUTOLINK = "autolink"
    REFERENCE_DEFINITION = "reference_definition"
    IMAGE = "image"


class Span(BaseModel):
    """Half-open UTF-8 byte range of one link destination in a source text."""

    model_config = ConfigDict(frozen=True)

    start: int = Field(ge=0, description="Offset of the first destination byte")
    end: int = Field(ge=0, description="Offset one past the last destination byte")
    kind: LinkKind = Field(description="Construct the destination belongs to")

    @model_validator(mode="after")
    def check_order(self) -> Span:
        """Reject ranges that end before they start."""
        if self.end < self.start:
            raise ValueError(f"Span ends before it starts: {self.start}..{self.end}")
        return self

    def __len__(self) -> int:
        return self.end - self.start

    def overlaps(self, other: Span) -> bool:
        """Whether the two ranges share at least one byte."""
        return self.start < other.end and other.start < self.end


class ReplacementRule(BaseModel):
    """One row of a regex replacement table."""

    regex: str = Field(description="Pattern that must match the whole destination")
    replacement: str = Field(description="Template; may reference groups as \\1 or \\g<name>")

    @field_validator("regex")
    @classmethod
    def validate_regex(cls, v: str) -> str:
        """Ensure the pattern compiles."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"Invalid regex {v!r}: {e}") from e
        return v

    def compile(self) -> re.Pattern[str]:
        return re.compile(self.regex)


class SummaryNode(BaseModel):
    """A titled entry of the summary tree."""

    title: str = Field(description="Heading of the index/file, or a name fallback")
    path: Path | None = Field(default=None, description="File the entry links to")
    children: list[SummaryNode] = Field(default_factory=list)

    def sort(self) -> None:
        """Sort children by title, recursively."""
        self.children.sort(key=lambda node: node.title)
        for child in self.children:
            child.sort()
