"""
Data model for context composition.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any

from chat_context.constants import DEFAULT_MIN_TOKENS


class ContextPriority(IntEnum):
    """
    Standard priority levels (higher = included first).

    RAG_KNOWLEDGE shares its value with SECONDARY_ENTITY, so enum semantics
    make it an alias: ``ContextPriority.RAG_KNOWLEDGE.name`` is
    ``"SECONDARY_ENTITY"`` and iteration yields the level once. Log section
    ids rather than priority names.
    """

    SYSTEM_PROMPT = 100  # Base system prompt
    MODE_INSTRUCTION = 90  # Mode-specific instructions
    LINKED_ENTITY = 80  # Primary linked character/world/project
    SESSION_SETUP = 75  # Session configuration and user preferences
    SECONDARY_ENTITY = 70  # Secondary linked entities
    RAG_KNOWLEDGE = 70  # Retrieved knowledge content (alias of SECONDARY_ENTITY)
    SESSION_SUMMARY = 30  # Generated session summary
    CONVERSATION_HISTORY = 20  # Older conversation context


@dataclass(frozen=True)
class ContextSection:
    """A block of prompt content supplied by a collaborator."""

    id: str
    content: str
    priority: float
    label: str = ""
    truncatable: bool = False
    min_tokens: int = DEFAULT_MIN_TOKENS  # Floor when truncating


@dataclass
class CompositionResult:
    """
    Composed prompt plus diagnostics.

    Section ids are partitioned across included, truncated and dropped.
    Token totals are estimates.
    """

    content: str = ""
    total_tokens: int = 0
    included_sections: list[str] = field(default_factory=list)
    truncated_sections: list[str] = field(default_factory=list)
    dropped_sections: list[str] = field(default_factory=list)

    @property
    def section_count(self) -> int:
        """Number of sections considered."""
        return (
            len(self.included_sections)
            + len(self.truncated_sections)
            + len(self.dropped_sections)
        )

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for observability tooling."""
        return {
            "total_tokens": self.total_tokens,
            "included": list(self.included_sections),
            "truncated": list(self.truncated_sections),
            "dropped": list(self.dropped_sections),
        }


def create_section(
    id: str,
    content: str,
    priority: float,
    label: str = "",
    truncatable: bool = False,
    min_tokens: int = DEFAULT_MIN_TOKENS,
) -> ContextSection:
    """Create a context section."""
    return ContextSection(
        id=id,
        content=content,
        priority=priority,
        label=label,
        truncatable=truncatable,
        min_tokens=min_tokens,
    )
