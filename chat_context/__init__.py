"""
Chat Context - decides what an LLM chat turn knows.

This package provides utilities for:
- Resolving @mentions and plain-name references to registry entities
- Fuzzy suggestions for unknown or misspelled names
- Composing prompt sections into a token budget by priority
"""

import logging

# Set up NullHandler to prevent "No handler found" warnings
# when used as a library. Applications should configure their own handlers.
logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

# Re-export commonly used items
from chat_context.composition import (
    CompositionResult,
    ContextPriority,
    ContextSection,
    compose_context,
    get_recommended_budget,
)
from chat_context.config import Settings, get_settings
from chat_context.entity_resolution import (
    DetectedEntity,
    Entity,
    EntityKind,
    ResolvedMention,
    ScoredCandidate,
    detect_entities,
    fuzzy_search_entities,
    levenshtein_distance,
    resolve_mentions,
    resolve_name,
    scan_mentions,
)
from chat_context.exceptions import ChatContextError, InvalidSigilError

__all__ = [
    "__version__",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ChatContextError",
    "InvalidSigilError",
    # Entity resolution
    "DetectedEntity",
    "Entity",
    "EntityKind",
    "ResolvedMention",
    "ScoredCandidate",
    "detect_entities",
    "fuzzy_search_entities",
    "levenshtein_distance",
    "resolve_mentions",
    "resolve_name",
    "scan_mentions",
    # Composition
    "CompositionResult",
    "ContextPriority",
    "ContextSection",
    "compose_context",
    "get_recommended_budget",
]
