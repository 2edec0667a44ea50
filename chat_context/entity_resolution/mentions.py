"""
Mention Scanning Module.

Extracts explicit ``@name`` mentions from raw text.

A mention starts at the sigil and greedily takes word characters plus any
spaces or tabs between words, so "@Kira Shadowbane" is one capture. It stops
at end of text, a line break, another sigil, terminal punctuation
(``. , ! ? ; :``) or any other non-word character. Trailing whitespace is not
part of the mention.
"""

from __future__ import annotations

import re

from chat_context.constants import MENTION_SIGIL
from chat_context.entity_resolution.models import MentionSpan
from chat_context.exceptions import InvalidSigilError


class MentionScanner:
    """
    Single-pass scanner for sigil-prefixed mentions.

    Examples:
    - "@Kira" -> "Kira"
    - "@The Northern War began." -> "The Northern War began"
    - "@Kira@Elara" -> "Kira", "Elara"
    """

    def __init__(self, sigil: str = MENTION_SIGIL):
        """
        Initialize scanner.

        Args:
            sigil: Single non-word character that opens a mention
        """
        if not isinstance(sigil, str) or len(sigil) != 1 or re.match(r"[\w\s]", sigil):
            raise InvalidSigilError(f"Invalid mention sigil: {sigil!r}")
        self.sigil = sigil
        # Word and blank classes are disjoint, so matching stays linear
        self.pattern = re.compile(re.escape(sigil) + r"(\w+(?:[ \t]+\w+)*)")

    def scan(self, text: str) -> list[MentionSpan]:
        """
        Find all mentions in text.

        Returns:
            Ordered, non-overlapping spans
        """
        if not text:
            return []

        return [
            MentionSpan(
                start=match.start(),
                end=match.end(),
                raw_name=match.group(1),
                sigil=self.sigil,
            )
            for match in self.pattern.finditer(text)
        ]


def scan_mentions(text: str, sigil: str = MENTION_SIGIL) -> list[MentionSpan]:
    """
    Extract mention spans from text.

    Args:
        text: Source text
        sigil: Character that opens a mention (default: "@")

    Returns:
        Ordered, non-overlapping MentionSpan list
    """
    return MentionScanner(sigil).scan(text)


def mention_literals(spans: list[MentionSpan], max_chars: int | None = None) -> set[str]:
    """
    Lowercased literals an explicit tag may refer to.

    Every word prefix of every capture is included, since a greedy capture
    such as "Kira is here" still tags "Kira". Pass ``max_chars`` (the
    longest name of interest) to bound the work on long captures.
    """
    literals: set[str] = set()
    for span in spans:
        for prefix in span.word_prefixes(max_chars):
            literals.add(prefix.raw_name.lower())
    return literals
