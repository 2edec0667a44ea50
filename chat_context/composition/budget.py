"""
Context Budget Composer.

Packs prioritized context sections into one prompt string under a token
budget:

1. Stable-sort sections by priority, highest first
2. Include each section whole while it fits
3. Otherwise truncate it to the remaining budget if it is truncatable and
   the remainder meets its ``min_tokens`` floor, then keep scanning
4. Otherwise drop it

DETERMINISTIC: the same sections and budget always give the same result.
The composer never raises for an over-full budget; it degrades to dropping
sections and reports every decision in the result.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from chat_context.config import Settings, get_settings
from chat_context.constants import (
    DEFAULT_RESPONSE_BUFFER,
    DEFAULT_SECTION_SEPARATOR,
    FALLBACK_CONTEXT_BUDGET,
    RECOMMENDED_BUDGET_RATIO,
)
from chat_context.composition.models import CompositionResult, ContextSection
from chat_context.composition.tokens import CharRatioEstimator, TokenEstimator

logger = logging.getLogger(__name__)

# Context window sizes (tokens) for known models
MODEL_CONTEXT_LIMITS: dict[str, int] = {
    "claude-3-haiku-20240307": 200000,
    "claude-3-5-sonnet-20241022": 200000,
    "claude-3-opus-20240229": 200000,
    "gpt-4o": 128000,
    "gpt-4-turbo": 128000,
    "gpt-3.5-turbo": 16000,
}


def get_recommended_budget(model: str, limits: Mapping[str, int] | None = None) -> int:
    """
    Recommended context budget for a model.

    Uses 70% of the model's window to leave room for the reply and a safety
    margin. Unknown models get a conservative fixed budget.

    Args:
        model: Model identifier
        limits: Model -> context window mapping (default: MODEL_CONTEXT_LIMITS)
    """
    limits = MODEL_CONTEXT_LIMITS if limits is None else limits
    limit = limits.get(model)
    if limit:
        return int(limit * RECOMMENDED_BUDGET_RATIO)
    logger.debug(f"No context limit known for model {model!r}, using fallback budget")
    return FALLBACK_CONTEXT_BUDGET


class ContextComposer:
    """
    Priority packing of context sections.

    Configurable with a token estimator, a response buffer and a separator.
    """

    def __init__(
        self,
        estimator: TokenEstimator | None = None,
        response_buffer: int = DEFAULT_RESPONSE_BUFFER,
        separator: str = DEFAULT_SECTION_SEPARATOR,
    ):
        """
        Initialize composer.

        Args:
            estimator: Token cost model (default: 4 characters per token)
            response_buffer: Tokens reserved for the model's reply
            separator: Text placed between sections (not charged to the budget)
        """
        self.estimator = estimator or CharRatioEstimator()
        self.response_buffer = response_buffer
        self.separator = separator

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> ContextComposer:
        """Build a composer from application settings."""
        settings = settings or get_settings()
        return cls(
            estimator=CharRatioEstimator(settings.chars_per_token),
            response_buffer=settings.response_buffer,
            separator=settings.section_separator,
        )

    def compose(self, sections: Iterable[ContextSection], max_tokens: int) -> CompositionResult:
        """
        Compose sections into a single string within the token budget.

        Args:
            sections: Sections in any order
            max_tokens: Model input budget before the response buffer

        Returns:
            CompositionResult with content and inclusion diagnostics
        """
        budget = max(0, max_tokens - self.response_buffer)
        # sorted() is stable, so equal priorities keep input order
        ordered = sorted(sections, key=lambda s: -s.priority)

        result = CompositionResult()
        parts: list[str] = []
        used = 0

        for section in ordered:
            cost = self.estimator.estimate(section.content)
            remaining = budget - used

            if cost <= remaining:
                parts.append(section.content)
                used += cost
                result.included_sections.append(section.id)
                continue

            if section.truncatable and remaining > 0 and remaining >= section.min_tokens:
                truncated = self.estimator.truncate(section.content, remaining)
                truncated_cost = self.estimator.estimate(truncated) if truncated else 0
                if truncated_cost > remaining:
                    logger.warning(
                        f"{type(self.estimator).__name__} truncated section {section.id!r} "
                        f"to {truncated_cost} tokens, over the {remaining} remaining"
                    )
                elif truncated:
                    parts.append(truncated)
                    used += truncated_cost
                    result.truncated_sections.append(section.id)
                    logger.debug(
                        f"Truncated section {section.id!r} from {cost} to {remaining} tokens"
                    )
                    continue

            result.dropped_sections.append(section.id)
            logger.info(
                f"Dropped context section {section.id!r} "
                f"({cost} tokens, {remaining} of {budget} remaining)"
            )

        result.content = self.separator.join(parts)
        result.total_tokens = used

        logger.debug(f"Composed context: {result.to_dict()}")
        return result


def compose_context(
    sections: Iterable[ContextSection],
    max_tokens: int,
    response_buffer: int = DEFAULT_RESPONSE_BUFFER,
    separator: str = DEFAULT_SECTION_SEPARATOR,
    estimator: TokenEstimator | None = None,
) -> CompositionResult:
    """
    Compose context sections into a single string within a token budget.

    Args:
        sections: Sections in any order
        max_tokens: Model input budget
        response_buffer: Tokens reserved for the reply (default: 1000)
        separator: Join string between sections
        estimator: Token cost model (default: 4 characters per token)

    Returns:
        CompositionResult
    """
    composer = ContextComposer(
        estimator=estimator,
        response_buffer=response_buffer,
        separator=separator,
    )
    return composer.compose(sections, max_tokens)
