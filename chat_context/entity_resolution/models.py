"""
Data model for entity resolution.

Entities are read from an immutable registry snapshot supplied by the caller.
Every other type here is created and discarded within a single call.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from chat_context.constants import KIND_PREFIXES

logger = logging.getLogger(__name__)


class EntityKind(Enum):
    """Kinds of registry entity."""

    CHARACTER = "character"
    WORLD = "world"
    PROJECT = "project"

    @classmethod
    def from_id(cls, entity_id: str) -> EntityKind:
        """
        Infer the kind from a kind-prefixed entity id.

        Ids without a known prefix fall back to PROJECT.
        """
        if entity_id:
            kind = KIND_PREFIXES.get(entity_id[0])
            if kind:
                return cls(kind)
        return cls.PROJECT


class MatchedField(Enum):
    """Which entity field produced a match."""

    NAME = "name"
    ALIAS = "alias"

    @property
    def rank(self) -> int:
        """Tie-break rank: name before alias."""
        return 0 if self is MatchedField.NAME else 1


@dataclass(frozen=True)
class Entity:
    """A character, world or project record from the registry snapshot."""

    id: str  # Globally unique, kind-prefixed ("#KIRA", "@ERA", "$SAGA")
    name: str
    aliases: tuple[str, ...] = ()
    kind: EntityKind = EntityKind.CHARACTER

    @classmethod
    def from_dict(cls, record: dict[str, Any]) -> Entity:
        """
        Build an entity from a registry record.

        ``kind`` may be an EntityKind, its string value, or absent (inferred
        from the id prefix). A lone string alias is wrapped; non-string
        aliases are dropped.
        """
        entity_id = str(record.get("id") or "")
        kind = record.get("kind") or record.get("type")
        if isinstance(kind, EntityKind):
            resolved_kind = kind
        else:
            try:
                resolved_kind = EntityKind(str(kind).lower())
            except ValueError:
                if kind:
                    logger.debug(f"Unknown kind {kind!r} for entity {entity_id!r}")
                resolved_kind = EntityKind.from_id(entity_id)

        raw_aliases = record.get("aliases") or ()
        if isinstance(raw_aliases, str):
            # A single alias stored without a list
            raw_aliases = (raw_aliases,)
        elif not isinstance(raw_aliases, (list, tuple)):
            logger.debug(f"Ignoring aliases of type {type(raw_aliases).__name__} on {entity_id!r}")
            raw_aliases = ()
        aliases = tuple(a for a in raw_aliases if isinstance(a, str))
        if len(aliases) != len(raw_aliases):
            logger.debug(f"Dropped non-string aliases from entity {entity_id!r}")

        name = record.get("name")
        return cls(
            id=entity_id,
            name=name if isinstance(name, str) else "",
            aliases=aliases,
            kind=resolved_kind,
        )

    @property
    def is_valid(self) -> bool:
        """False for partially-initialised records (blank name)."""
        return isinstance(self.name, str) and bool(self.name.strip())

    def labels(self) -> list[tuple[MatchedField, str]]:
        """Name followed by each non-blank alias, in registry order."""
        labels = [(MatchedField.NAME, self.name)]
        for alias in self.aliases or ():
            if isinstance(alias, str) and alias.strip():
                labels.append((MatchedField.ALIAS, alias))
        return labels


@dataclass(frozen=True)
class MentionSpan:
    """An explicit mention found in raw text."""

    start: int  # Offset of the sigil
    end: int  # Exclusive; just past the last captured word character
    raw_name: str  # Captured text after the sigil
    sigil: str = "@"

    @property
    def text(self) -> str:
        """The span as it appears in the source text."""
        return f"{self.sigil}{self.raw_name}"

    def word_prefixes(self, max_chars: int | None = None) -> list[MentionSpan]:
        """
        Spans for each word prefix of the capture, longest first.

        "@The Northern War" yields spans for "The Northern War",
        "The Northern" and "The".

        Args:
            max_chars: Skip prefixes longer than this. Callers pass the
                longest name they could match so long captures stay cheap.
        """
        prefixes = []
        end = len(self.raw_name)
        if max_chars is not None and end > max_chars:
            # Longest whole-word prefix that fits
            head = self.raw_name[: max_chars + 1]
            end = max(head.rfind(" "), head.rfind("\t"), 0)
        while end > 0:
            name = self.raw_name[:end].rstrip()
            prefixes.append(
                MentionSpan(
                    start=self.start,
                    end=self.start + len(self.sigil) + len(name),
                    raw_name=name,
                    sigil=self.sigil,
                )
            )
            # Step back to the whitespace before the last word
            cut = max(name.rfind(" "), name.rfind("\t"))
            end = cut if cut > 0 else 0
        return prefixes

    def first_word(self) -> MentionSpan:
        """Span narrowed to the first captured word."""
        match = re.match(r"\S+", self.raw_name)
        name = match.group(0) if match else self.raw_name
        return MentionSpan(
            start=self.start,
            end=self.start + len(self.sigil) + len(name),
            raw_name=name,
            sigil=self.sigil,
        )

    def starts_with_words(self, name: str) -> bool:
        """
        True if ``name`` is a whole-word prefix of the capture (case-insensitive).

        Equivalent to ``name`` being one of ``word_prefixes()`` without
        building them.
        """
        if not name or name != name.rstrip():
            return False
        size = len(name)
        if self.raw_name[:size].lower() != name.lower():
            return False
        return size == len(self.raw_name) or self.raw_name[size] in " \t"


@dataclass(frozen=True)
class ScoredCandidate:
    """A fuzzy match of a query against one entity."""

    entity: Entity
    score: float  # Lower = better
    matched_field: MatchedField
    matched_value: str

    @property
    def sort_key(self) -> tuple[float, int, str]:
        """Total order: score, then name before alias, then entity id."""
        return (self.score, self.matched_field.rank, self.entity.id)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "entity_id": self.entity.id,
            "entity_name": self.entity.name,
            "score": self.score,
            "matched_field": self.matched_field.value,
            "matched_value": self.matched_value,
        }


@dataclass(frozen=True)
class ResolvedMention:
    """
    Outcome of resolving one mention.

    ``exists`` is true iff an exact case-insensitive match was found on a
    name or alias; ``suggestions`` is only populated when it is false.
    """

    raw_name: str
    span: MentionSpan | None
    exists: bool
    entity: Entity | None = None
    suggestions: tuple[ScoredCandidate, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "name": self.raw_name,
            "start": self.span.start if self.span else None,
            "end": self.span.end if self.span else None,
            "exists": self.exists,
            "entity_id": self.entity.id if self.entity else None,
            "suggestions": [s.to_dict() for s in self.suggestions],
        }


@dataclass(frozen=True)
class DetectedEntity:
    """An entity referenced in text, with or without tag syntax."""

    id: str
    name: str
    kind: EntityKind
    matched_text: str  # The name or alias that matched
    occurrences: int
    is_mention: bool  # Backed by an explicit tag

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "id": self.id,
            "name": self.name,
            "kind": self.kind.value,
            "matched_text": self.matched_text,
            "occurrences": self.occurrences,
            "is_mention": self.is_mention,
        }
