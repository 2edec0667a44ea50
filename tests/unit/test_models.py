"""
Tests for entity records built from registry data.

Registry snapshots arrive as loosely-typed dicts. Partially initialised
records must not break resolution or detection.
"""

import pytest

from chat_context.entity_resolution.models import Entity, EntityKind, MatchedField
from chat_context.entity_resolution.resolver import resolve_name


class TestEntityKind:
    """Tests for kind inference from id prefixes."""

    @pytest.mark.parametrize(
        "entity_id,expected",
        [
            ("#KIRA", EntityKind.CHARACTER),
            ("@NORTHWAR", EntityKind.WORLD),
            ("$CHRON", EntityKind.PROJECT),
            ("KIRA", EntityKind.PROJECT),
            ("", EntityKind.PROJECT),
        ],
    )
    def test_from_id(self, entity_id, expected):
        """Known prefixes map to their kind; anything else is a project."""
        assert EntityKind.from_id(entity_id) == expected


class TestEntityFromDict:
    """Tests for Entity.from_dict."""

    def test_kind_inferred_from_prefix(self):
        """Missing kind falls back to the id prefix."""
        entity = Entity.from_dict({"id": "@NORTHWAR", "name": "The Northern War"})
        assert entity.kind == EntityKind.WORLD

    def test_explicit_kind_case_insensitive(self):
        """String kinds are accepted regardless of case."""
        entity = Entity.from_dict({"id": "#X", "name": "X", "kind": "World"})
        assert entity.kind == EntityKind.WORLD

    def test_type_key_accepted(self):
        """Registries that use 'type' instead of 'kind' still work."""
        entity = Entity.from_dict({"id": "#X", "name": "X", "type": "project"})
        assert entity.kind == EntityKind.PROJECT

    def test_unknown_kind_falls_back(self):
        """An unrecognised kind is replaced by the inferred one."""
        entity = Entity.from_dict({"id": "#X", "name": "X", "kind": "spaceship"})
        assert entity.kind == EntityKind.CHARACTER

    def test_non_string_aliases_dropped(self):
        """Aliases that are not strings are discarded."""
        entity = Entity.from_dict({"id": "#KIRA", "name": "Kira", "aliases": ["The Shadow", None, 7]})
        assert entity.aliases == ("The Shadow",)

    def test_string_alias_wrapped(self):
        """A bare string alias stays whole instead of splitting into characters."""
        entity = Entity.from_dict({"id": "#KIRA", "name": "Kira", "aliases": "The Shadow"})
        assert entity.aliases == ("The Shadow",)

        mention = resolve_name("T", [entity])
        assert mention.exists is False

    def test_non_sequence_aliases_ignored(self):
        """Aliases that are not a list are discarded."""
        entity = Entity.from_dict({"id": "#KIRA", "name": "Kira", "aliases": 7})
        assert entity.aliases == ()

    def test_missing_name_is_invalid(self):
        """Records without a usable name are kept but marked invalid."""
        entity = Entity.from_dict({"id": "#KIRA", "name": None})
        assert entity.name == ""
        assert entity.is_valid is False


class TestEntityLabels:
    """Tests for Entity.labels."""

    def test_name_then_aliases(self):
        """Labels list the name first, then aliases in order."""
        entity = Entity(id="#ELARA", name="Elara", aliases=("Lady Elara", "The Moon Singer"))
        assert entity.labels() == [
            (MatchedField.NAME, "Elara"),
            (MatchedField.ALIAS, "Lady Elara"),
            (MatchedField.ALIAS, "The Moon Singer"),
        ]

    def test_blank_aliases_skipped(self):
        """Blank aliases never become match targets."""
        entity = Entity(id="#KIRA", name="Kira", aliases=("", "  ", "The Shadow"))
        assert entity.labels() == [
            (MatchedField.NAME, "Kira"),
            (MatchedField.ALIAS, "The Shadow"),
        ]
