"""
Fuzzy Matching Module.

Scores a query against an entity's name and aliases using tiered rules:

1. Exact (case-insensitive) equality  -> 0
2. Candidate starts with the query    -> 0.5
3. Candidate contains the query       -> 1
4. Edit distance <= 2                 -> 2 + distance
5. Otherwise                          -> no match

Tiers are evaluated in order and the first one that applies wins, so a
prefix or substring hit always outranks a typo of the same length.
Each tier is isolated and testable.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable

from chat_context.constants import (
    DEFAULT_MAX_SUGGESTIONS,
    MAX_FUZZY_DISTANCE,
    SCORE_EDIT_BASE,
    SCORE_EXACT,
    SCORE_PREFIX,
    SCORE_SUBSTRING,
)
from chat_context.entity_resolution.distance import levenshtein_distance
from chat_context.entity_resolution.models import Entity, ScoredCandidate

logger = logging.getLogger(__name__)


class MatchTier(ABC):
    """Abstract base class for one scoring tier."""

    @abstractmethod
    def score(self, query: str, candidate: str) -> float | None:
        """
        Score a lowercased query against a lowercased candidate string.

        Returns:
            Score (lower = better), or None if this tier does not apply
        """
        ...

    @property
    @abstractmethod
    def name(self) -> str:
        """Name of this tier for debugging."""
        ...

    @property
    def max_length_excess(self) -> int:
        """How many characters longer than a candidate a matching query can be."""
        return 0


class ExactTier(MatchTier):
    """Case-insensitive equality."""

    @property
    def name(self) -> str:
        return "exact"

    def score(self, query: str, candidate: str) -> float | None:
        return SCORE_EXACT if query == candidate else None


class PrefixTier(MatchTier):
    """Candidate starts with the query."""

    @property
    def name(self) -> str:
        return "prefix"

    def score(self, query: str, candidate: str) -> float | None:
        return SCORE_PREFIX if candidate.startswith(query) else None


class SubstringTier(MatchTier):
    """Candidate contains the query anywhere."""

    @property
    def name(self) -> str:
        return "substring"

    def score(self, query: str, candidate: str) -> float | None:
        return SCORE_SUBSTRING if query in candidate else None


class EditDistanceTier(MatchTier):
    """
    Small typos, scored 2 + distance.

    Anything further than ``max_distance`` edits is not a match.
    """

    def __init__(self, max_distance: int = MAX_FUZZY_DISTANCE):
        self.max_distance = max_distance

    @property
    def name(self) -> str:
        return "edit_distance"

    @property
    def max_length_excess(self) -> int:
        return self.max_distance

    def score(self, query: str, candidate: str) -> float | None:
        # Length gap is a lower bound on the distance
        if abs(len(query) - len(candidate)) > self.max_distance:
            return None
        distance = levenshtein_distance(query, candidate)
        if distance <= self.max_distance:
            return SCORE_EDIT_BASE + distance
        return None


def default_tiers() -> list[MatchTier]:
    """Standard tiers, strongest signal first."""
    return [ExactTier(), PrefixTier(), SubstringTier(), EditDistanceTier()]


class FuzzyMatcher:
    """
    Tiered fuzzy matcher.

    Scores the entity name and each alias independently and keeps the best.
    On equal scores the earlier string wins, so the name beats an alias.
    """

    def __init__(self, tiers: list[MatchTier] | None = None):
        """
        Initialize matcher.

        Args:
            tiers: Scoring tiers in evaluation order (default: standard tiers)
        """
        self.tiers = tiers or default_tiers()

    @property
    def max_length_excess(self) -> int:
        """Longest query overhang, past the longest candidate, any tier accepts."""
        return max((tier.max_length_excess for tier in self.tiers), default=0)

    def score_string(self, query: str, candidate: str) -> float | None:
        """Score one candidate string; first applicable tier wins."""
        query_lower = query.strip().lower()
        candidate_lower = candidate.lower()
        if not query_lower or not candidate_lower.strip():
            return None
        for tier in self.tiers:
            score = tier.score(query_lower, candidate_lower)
            if score is not None:
                return score
        return None

    def score_entity(self, query: str, entity: Entity) -> ScoredCandidate | None:
        """
        Best match of the query against one entity's name and aliases.

        Returns:
            ScoredCandidate for the best-scoring string, or None
        """
        if not query or not query.strip():
            return None
        if not entity.is_valid:
            logger.debug(f"Skipping malformed entity {entity.id!r} (blank name)")
            return None

        best: ScoredCandidate | None = None
        for matched_field, value in entity.labels():
            score = self.score_string(query, value)
            if score is None:
                continue
            if best is None or score < best.score:
                best = ScoredCandidate(
                    entity=entity,
                    score=score,
                    matched_field=matched_field,
                    matched_value=value,
                )
                if score == SCORE_EXACT:
                    break

        return best

    def search(
        self,
        query: str,
        entities: Iterable[Entity],
        max_results: int = DEFAULT_MAX_SUGGESTIONS,
    ) -> list[ScoredCandidate]:
        """
        Score every entity and return the best matches first.

        Args:
            query: Search query (partial or misspelled entity name)
            entities: Entity snapshot
            max_results: Maximum number of results to return

        Returns:
            Candidates sorted by (score, name before alias, entity id)
        """
        if not query or not query.strip() or max_results <= 0:
            return []

        matches = []
        for entity in entities:
            match = self.score_entity(query, entity)
            if match is not None:
                matches.append(match)

        matches.sort(key=lambda m: m.sort_key)
        return matches[:max_results]


# =============================================================================
# Convenience Functions
# =============================================================================

_DEFAULT_MATCHER = FuzzyMatcher()


def score_entity(query: str, entity: Entity) -> ScoredCandidate | None:
    """Score one entity with the standard tiers."""
    return _DEFAULT_MATCHER.score_entity(query, entity)


def fuzzy_search_entities(
    query: str,
    entities: Iterable[Entity],
    max_results: int = DEFAULT_MAX_SUGGESTIONS,
) -> list[ScoredCandidate]:
    """Find entities matching ``query`` with the standard tiers."""
    return _DEFAULT_MATCHER.search(query, entities, max_results)


def highlight_match(text: str, query: str) -> tuple[str, str, str] | None:
    """
    Split ``text`` around the first case-insensitive occurrence of ``query``.

    Returns:
        (before, match, after), or None if the query does not occur
    """
    if not query:
        return None
    index = text.lower().find(query.lower())
    if index == -1:
        return None
    end = index + len(query)
    return text[:index], text[index:end], text[end:]
