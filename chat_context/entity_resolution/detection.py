"""
Passive Detection Module.

Finds entities referenced in text without explicit tag syntax, so the chat
can notice what is being talked about. Explicitly tagged names always rank
above incidental ones.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Collection, Iterable

from chat_context.config import Settings, get_settings
from chat_context.constants import (
    DEFAULT_MAX_AUTO_DETECTED,
    DEFAULT_MIN_WORD_LENGTH,
    MENTION_SIGIL,
)
from chat_context.entity_resolution.mentions import MentionScanner
from chat_context.entity_resolution.models import DetectedEntity, Entity

logger = logging.getLogger(__name__)

CAPITALIZED_WORD = re.compile(r"\b[A-Z][a-z]+\b")
CAPITALIZED_PHRASE = re.compile(r"\b[A-Z][a-z]+(?:\s+[A-Z][a-z]+)+\b")


def count_occurrences(name: str, text: str) -> int:
    """
    Whole-word, case-insensitive occurrences of ``name`` in ``text``.

    Word boundaries are checked with lookarounds so names that begin or end
    with punctuation ("Dr. Vane") still match.
    """
    if not name:
        return 0
    pattern = re.compile(rf"(?<!\w){re.escape(name)}(?!\w)", re.IGNORECASE)
    return sum(1 for _ in pattern.finditer(text))


def _rank(is_mention: bool, occurrences: int) -> tuple[int, int]:
    """Tagged names outrank any number of untagged occurrences."""
    return (1 if is_mention else 0, occurrences)


class EntityDetector:
    """
    Passive entity detector.

    Configurable with a minimum name length, a result limit and the mention
    sigil used to recognise tagged names.
    """

    def __init__(
        self,
        min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
        max_results: int = DEFAULT_MAX_AUTO_DETECTED,
        scanner: MentionScanner | None = None,
    ):
        """
        Initialize detector.

        Args:
            min_word_length: Names/aliases shorter than this are ignored
            max_results: Maximum detections to return
            scanner: Mention scanner for tagged names (default: "@" sigil)
        """
        self.min_word_length = min_word_length
        self.max_results = max_results
        self.scanner = scanner or MentionScanner(MENTION_SIGIL)

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> EntityDetector:
        """Build a detector from application settings."""
        settings = settings or get_settings()
        return cls(
            min_word_length=settings.min_word_length,
            max_results=settings.max_auto_detected,
            scanner=MentionScanner(settings.mention_sigil),
        )

    def detect(
        self,
        text: str,
        entities: Iterable[Entity],
        excluded_ids: Collection[str] = (),
        mention_literals: Collection[str] | None = None,
    ) -> list[DetectedEntity]:
        """
        Detect entities named in text.

        Args:
            text: Text to scan
            entities: Entity snapshot, in registry order
            excluded_ids: Entity ids already pinned by the caller
            mention_literals: Names backed by explicit tags (case-insensitive).
                When None, tags are scanned from ``text``.

        Returns:
            Detections, tagged first, then by occurrence count descending
        """
        if not text or not text.strip() or self.max_results <= 0:
            return []

        if mention_literals is None:
            spans = self.scanner.scan(text)

            def is_tagged(value: str) -> bool:
                return any(span.starts_with_words(value) for span in spans)

        else:
            literals = {literal.lower() for literal in mention_literals}

            def is_tagged(value: str) -> bool:
                return value.lower() in literals

        excluded = set(excluded_ids)
        detected: dict[str, DetectedEntity] = {}

        for entity in entities:
            if entity.id in excluded:
                continue
            if not entity.is_valid:
                logger.debug(f"Skipping malformed entity {entity.id!r} (blank name)")
                continue

            for _, value in entity.labels():
                if len(value) < self.min_word_length:
                    continue

                occurrences = count_occurrences(value, text)
                if occurrences == 0:
                    continue

                is_mention = is_tagged(value)
                existing = detected.get(entity.id)
                if existing is None or _rank(is_mention, occurrences) > _rank(
                    existing.is_mention, existing.occurrences
                ):
                    detected[entity.id] = DetectedEntity(
                        id=entity.id,
                        name=entity.name,
                        kind=entity.kind,
                        matched_text=value,
                        occurrences=occurrences,
                        is_mention=is_mention,
                    )

        # Stable sort keeps registry order among equals
        ranked = sorted(
            detected.values(),
            key=lambda d: (not d.is_mention, -d.occurrences),
        )
        return ranked[: self.max_results]


def detect_entities(
    text: str,
    entities: Iterable[Entity],
    min_word_length: int = DEFAULT_MIN_WORD_LENGTH,
    excluded_ids: Collection[str] = (),
    max_results: int = DEFAULT_MAX_AUTO_DETECTED,
    mention_literals: Collection[str] | None = None,
    sigil: str = MENTION_SIGIL,
) -> list[DetectedEntity]:
    """
    Detect entities named in text.

    Args:
        text: Text to scan
        entities: Entity snapshot, in registry order
        min_word_length: Names/aliases shorter than this are ignored
        excluded_ids: Entity ids already pinned by the caller
        max_results: Maximum detections to return
        mention_literals: Names backed by explicit tags (case-insensitive).
            When None they are scanned from ``text`` with ``sigil``.
        sigil: Mention sigil used when scanning for tags

    Returns:
        Detections, tagged first, then by occurrence count descending
    """
    detector = EntityDetector(
        min_word_length=min_word_length,
        max_results=max_results,
        scanner=MentionScanner(sigil),
    )
    return detector.detect(text, entities, excluded_ids, mention_literals)


def extract_potential_entity_names(text: str) -> list[str]:
    """
    Capitalised words and multi-word capitalised phrases in text.

    Useful for suggesting new entities that are not yet in the registry.

    Returns:
        Unique names in first-seen order (words first, then phrases)
    """
    if not text:
        return []

    found: dict[str, None] = {}
    for pattern in (CAPITALIZED_WORD, CAPITALIZED_PHRASE):
        for match in pattern.finditer(text):
            found.setdefault(match.group(0), None)
    return list(found)
