"""
Entity Resolution Module.

Resolves entity mentions in chat text against a registry snapshot.

This module separates concerns into distinct, testable components:
- Edit distance (Levenshtein)
- Fuzzy matching (tiered exact/prefix/substring/typo scoring)
- Mention scanning (explicit "@name" spans)
- Mention resolution (exact lookup, fuzzy suggestions)
- Passive detection (names used without tag syntax)
"""

from chat_context.entity_resolution.detection import (
    EntityDetector,
    count_occurrences,
    detect_entities,
    extract_potential_entity_names,
)
from chat_context.entity_resolution.distance import levenshtein_distance
from chat_context.entity_resolution.fuzzy import (
    FuzzyMatcher,
    MatchTier,
    fuzzy_search_entities,
    highlight_match,
    score_entity,
)
from chat_context.entity_resolution.mentions import (
    MentionScanner,
    mention_literals,
    scan_mentions,
)
from chat_context.entity_resolution.models import (
    DetectedEntity,
    Entity,
    EntityKind,
    MatchedField,
    MentionSpan,
    ResolvedMention,
    ScoredCandidate,
)
from chat_context.entity_resolution.resolver import (
    MentionResolution,
    MentionResolver,
    find_entity_by_name,
    resolve_mentions,
    resolve_mentions_with_stats,
    resolve_name,
)

__all__ = [
    # Models
    "DetectedEntity",
    "Entity",
    "EntityKind",
    "MatchedField",
    "MentionSpan",
    "ResolvedMention",
    "ScoredCandidate",
    # Distance / fuzzy
    "levenshtein_distance",
    "FuzzyMatcher",
    "MatchTier",
    "fuzzy_search_entities",
    "highlight_match",
    "score_entity",
    # Mentions
    "MentionScanner",
    "mention_literals",
    "scan_mentions",
    # Resolver
    "MentionResolution",
    "MentionResolver",
    "find_entity_by_name",
    "resolve_mentions",
    "resolve_mentions_with_stats",
    "resolve_name",
    # Detection
    "EntityDetector",
    "count_occurrences",
    "detect_entities",
    "extract_potential_entity_names",
]
