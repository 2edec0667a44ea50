"""
Shared constants for chat_context.

Defaults here mirror the fields in ``chat_context.config.Settings``; the
settings object is the place to override them at runtime.
"""

# Mention syntax
MENTION_SIGIL = "@"

# Entity id prefixes used by the registry to encode the entity kind
KIND_PREFIXES = {
    "#": "character",
    "@": "world",
    "$": "project",
}

# Resolution
DEFAULT_MAX_SUGGESTIONS = 5
MAX_FUZZY_DISTANCE = 2

# Tiered fuzzy scores (lower = better)
SCORE_EXACT = 0.0
SCORE_PREFIX = 0.5
SCORE_SUBSTRING = 1.0
SCORE_EDIT_BASE = 2.0

# Passive detection
DEFAULT_MIN_WORD_LENGTH = 2
DEFAULT_MAX_AUTO_DETECTED = 5

# Composition
DEFAULT_CHARS_PER_TOKEN = 4.0
DEFAULT_RESPONSE_BUFFER = 1000
DEFAULT_SECTION_SEPARATOR = "\n\n---\n\n"
DEFAULT_MIN_TOKENS = 100

# Model budgets
RECOMMENDED_BUDGET_RATIO = 0.7
FALLBACK_CONTEXT_BUDGET = 10000
