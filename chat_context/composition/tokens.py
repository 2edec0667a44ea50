"""
Token cost estimation.

The composer never tokenizes for real. It asks a TokenEstimator for an
approximate cost, so a different cost model can be swapped in without
touching the packing algorithm.
"""

from __future__ import annotations

import math
from abc import ABC, abstractmethod

from chat_context.constants import DEFAULT_CHARS_PER_TOKEN


class TokenEstimator(ABC):
    """Abstract base class for token cost models."""

    @abstractmethod
    def estimate(self, text: str) -> int:
        """Approximate token count of ``text``."""
        ...

    @abstractmethod
    def truncate(self, text: str, max_tokens: int) -> str:
        """Cut ``text`` so that ``estimate()`` of the result is <= max_tokens."""
        ...


class CharRatioEstimator(TokenEstimator):
    """
    Fixed character-per-token ratio.

    estimate = ceil(len(text) / chars_per_token). Truncation is a raw
    character cut and may split a word.
    """

    def __init__(self, chars_per_token: float = DEFAULT_CHARS_PER_TOKEN):
        if chars_per_token <= 0:
            raise ValueError(f"chars_per_token must be positive, got {chars_per_token}")
        self.chars_per_token = chars_per_token

    def estimate(self, text: str) -> int:
        if not text:
            return 0
        return math.ceil(len(text) / self.chars_per_token)

    def truncate(self, text: str, max_tokens: int) -> str:
        if max_tokens <= 0 or not text:
            return ""
        max_chars = math.floor(max_tokens * self.chars_per_token)
        if len(text) <= max_chars and self.estimate(text) <= max_tokens:
            return text
        max_chars = min(max_chars, len(text))
        # Float division can round the estimate up past max_tokens
        while max_chars > 0 and self.estimate(text[:max_chars]) > max_tokens:
            max_chars -= 1
        return text[:max_chars]
