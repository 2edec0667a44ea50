"""
Context Composition Module.

Fits competing prompt sections into a token budget:
- Token cost estimation (pluggable cost model)
- Priority packing with partial admission (truncate or drop)
- Model budget lookup
"""

from chat_context.composition.budget import (
    MODEL_CONTEXT_LIMITS,
    ContextComposer,
    compose_context,
    get_recommended_budget,
)
from chat_context.composition.models import (
    CompositionResult,
    ContextPriority,
    ContextSection,
    create_section,
)
from chat_context.composition.tokens import CharRatioEstimator, TokenEstimator

__all__ = [
    # Models
    "CompositionResult",
    "ContextPriority",
    "ContextSection",
    "create_section",
    # Token estimation
    "CharRatioEstimator",
    "TokenEstimator",
    # Composer
    "ContextComposer",
    "compose_context",
    "get_recommended_budget",
    "MODEL_CONTEXT_LIMITS",
]
