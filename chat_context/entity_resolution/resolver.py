"""
Entity Resolver Module.

Orchestrates mention resolution:
1. Scan text for explicit mentions
2. Exact lookup of each mention against names and aliases
3. Fuzzy suggestions when no exact match exists

Each step is testable independently. All calls are pure: the entity snapshot
is passed in, never stored or modified.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from chat_context.config import Settings, get_settings
from chat_context.constants import DEFAULT_MAX_SUGGESTIONS, MENTION_SIGIL
from chat_context.entity_resolution.fuzzy import FuzzyMatcher
from chat_context.entity_resolution.mentions import MentionScanner
from chat_context.entity_resolution.models import (
    Entity,
    MentionSpan,
    ResolvedMention,
)

logger = logging.getLogger(__name__)


def find_entity_by_name(name: str, entities: Iterable[Entity]) -> Entity | None:
    """
    Exact case-insensitive lookup on names and aliases.

    The first entity in registry order wins, so duplicate names never
    produce more than one result. Surrounding whitespace in ``name`` is
    ignored, as it is by the fuzzy matcher.
    """
    if not name or not name.strip():
        return None
    name_lower = name.strip().lower()

    for entity in entities:
        if not entity.is_valid:
            continue
        for _, value in entity.labels():
            if value.lower() == name_lower:
                return entity

    return None


def longest_label(entities: Iterable[Entity]) -> int:
    """Length of the longest name or alias in the snapshot."""
    return max(
        (len(value) for entity in entities if entity.is_valid for _, value in entity.labels()),
        default=0,
    )


@dataclass
class MentionResolution:
    """All mentions resolved from one piece of text."""

    mentions: list[ResolvedMention] = field(default_factory=list)

    @property
    def resolved(self) -> list[ResolvedMention]:
        """Mentions backed by an existing entity."""
        return [m for m in self.mentions if m.exists]

    @property
    def unresolved(self) -> list[ResolvedMention]:
        """Mentions with no exact match."""
        return [m for m in self.mentions if not m.exists]

    @property
    def has_mentions(self) -> bool:
        return bool(self.mentions)

    @property
    def has_unresolved(self) -> bool:
        return any(not m.exists for m in self.mentions)

    def mention_at(self, position: int) -> ResolvedMention | None:
        """Mention whose span contains ``position`` (both ends inclusive)."""
        for mention in self.mentions:
            if mention.span and mention.span.start <= position <= mention.span.end:
                return mention
        return None

    def extract_at_cursor(self, text: str, cursor: int) -> tuple[ResolvedMention, str] | None:
        """
        Mention under the cursor plus the part of it typed so far.

        Returns:
            (mention, text from the sigil up to the cursor), or None
        """
        mention = self.mention_at(cursor)
        if mention is None or mention.span is None:
            return None
        return mention, text[mention.span.start : cursor]

    def to_dict(self) -> list[dict[str, Any]]:
        """Convert to list of dicts for serialization."""
        return [m.to_dict() for m in self.mentions]


class MentionResolver:
    """
    Main mention resolution orchestrator.

    Configurable with a scanner, a fuzzy matcher and a suggestion limit.
    """

    def __init__(
        self,
        scanner: MentionScanner | None = None,
        matcher: FuzzyMatcher | None = None,
        max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    ):
        """
        Initialize resolver with configurable components.

        Args:
            scanner: Mention scanner (default: "@" sigil)
            matcher: Fuzzy matcher (default: standard tiers)
            max_suggestions: Maximum fuzzy suggestions per mention (default: 5)
        """
        self.scanner = scanner or MentionScanner(MENTION_SIGIL)
        self.matcher = matcher or FuzzyMatcher()
        self.max_suggestions = max_suggestions

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> MentionResolver:
        """Build a resolver from application settings."""
        settings = settings or get_settings()
        return cls(
            scanner=MentionScanner(settings.mention_sigil),
            max_suggestions=settings.max_suggestions,
        )

    def resolve_name(
        self,
        raw_name: str,
        entities: Sequence[Entity],
        span: MentionSpan | None = None,
    ) -> ResolvedMention:
        """
        Resolve one candidate name.

        An exact match short-circuits; fuzzy search only runs without one.
        """
        exact = find_entity_by_name(raw_name, entities)
        if exact is not None:
            return ResolvedMention(raw_name=raw_name, span=span, exists=True, entity=exact)

        suggestions = self.matcher.search(raw_name, entities, self.max_suggestions)
        return ResolvedMention(
            raw_name=raw_name,
            span=span,
            exists=False,
            suggestions=tuple(suggestions),
        )

    def resolve_span(self, span: MentionSpan, entities: Sequence[Entity]) -> ResolvedMention:
        """
        Resolve a scanned span, narrowing it to the best word prefix.

        Prefixes are tried longest first: the first exact match wins; failing
        that, the first prefix with fuzzy suggestions; failing that, the first
        word alone.

        Prefixes longer than the longest label plus the matcher's length allowance
        cannot match any tier, so they are never built.
        """
        max_chars = longest_label(entities) + self.matcher.max_length_excess
        prefixes = span.word_prefixes(max_chars)

        for prefix in prefixes:
            exact = find_entity_by_name(prefix.raw_name, entities)
            if exact is not None:
                return ResolvedMention(
                    raw_name=prefix.raw_name, span=prefix, exists=True, entity=exact
                )

        for prefix in prefixes:
            resolved = self.resolve_name(prefix.raw_name, entities, prefix)
            if resolved.suggestions:
                return resolved

        first_word = span.first_word()
        return ResolvedMention(raw_name=first_word.raw_name, span=first_word, exists=False)

    def resolve(self, text: str, entities: Sequence[Entity]) -> MentionResolution:
        """
        Resolve all mentions in text.

        Args:
            text: Source text
            entities: Entity snapshot, in registry order

        Returns:
            MentionResolution with one ResolvedMention per scanned span
        """
        if not text or not text.strip():
            return MentionResolution()

        entities = list(entities)
        mentions = [self.resolve_span(span, entities) for span in self.scanner.scan(text)]
        return MentionResolution(mentions=mentions)

    def resolve_with_stats(
        self, text: str, entities: Sequence[Entity]
    ) -> tuple[MentionResolution, dict[str, int]]:
        """
        Resolve mentions and return statistics for debugging.

        Returns:
            Tuple of (resolution, stats_dict)
        """
        resolution = self.resolve(text, entities)
        stats = {
            "mentions_scanned": len(resolution.mentions),
            "exact_matches": 0,
            "fuzzy_matches": 0,
            "unmatched": 0,
        }
        for mention in resolution.mentions:
            if mention.exists:
                stats["exact_matches"] += 1
            elif mention.suggestions:
                stats["fuzzy_matches"] += 1
            else:
                stats["unmatched"] += 1

        logger.debug(f"Mention resolution stats: {stats}")
        return resolution, stats


# =============================================================================
# Convenience Functions
# =============================================================================


def resolve_name(
    raw_name: str,
    entities: Sequence[Entity],
    span: MentionSpan | None = None,
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
) -> ResolvedMention:
    """Resolve a single raw name against an entity snapshot."""
    return MentionResolver(max_suggestions=max_suggestions).resolve_name(raw_name, entities, span)


def resolve_mentions(
    text: str,
    entities: Sequence[Entity],
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    sigil: str = MENTION_SIGIL,
) -> MentionResolution:
    """
    Simple interface for mention resolution.

    Args:
        text: Text to scan
        entities: Entity snapshot
        max_suggestions: Maximum fuzzy suggestions per unresolved mention
        sigil: Mention sigil

    Returns:
        MentionResolution
    """
    resolver = MentionResolver(scanner=MentionScanner(sigil), max_suggestions=max_suggestions)
    return resolver.resolve(text, entities)


def resolve_mentions_with_stats(
    text: str,
    entities: Sequence[Entity],
    max_suggestions: int = DEFAULT_MAX_SUGGESTIONS,
    sigil: str = MENTION_SIGIL,
) -> tuple[MentionResolution, dict[str, int]]:
    """Resolve mentions and return (resolution, stats)."""
    resolver = MentionResolver(scanner=MentionScanner(sigil), max_suggestions=max_suggestions)
    return resolver.resolve_with_stats(text, entities)
