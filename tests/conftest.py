"""
Pytest configuration and shared fixtures for chat_context tests.
"""

import pytest

from chat_context.config import get_settings
from chat_context.entity_resolution.models import Entity, EntityKind

KIRA = Entity(id="#KIRA", name="Kira", aliases=("The Shadow",), kind=EntityKind.CHARACTER)
ELARA = Entity(
    id="#ELARA",
    name="Elara Moonwhisper",
    aliases=("Lady Elara", "The Moon Singer"),
    kind=EntityKind.CHARACTER,
)
MARCUS = Entity(id="#MARCUS", name="Marcus Steel", kind=EntityKind.CHARACTER)
NORTHERN_WAR = Entity(
    id="@NORTHWAR",
    name="The Northern War",
    aliases=("Northern War",),
    kind=EntityKind.WORLD,
)
CHRONICLES = Entity(
    id="$CHRON",
    name="The Shadow Chronicles",
    aliases=("Chronicles",),
    kind=EntityKind.PROJECT,
)


@pytest.fixture
def registry() -> list[Entity]:
    """Entity snapshot in registry order."""
    return [KIRA, ELARA, MARCUS, NORTHERN_WAR, CHRONICLES]


@pytest.fixture
def kira_only() -> list[Entity]:
    """Single-entity snapshot."""
    return [KIRA]


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Settings are lru_cached; reset between tests so env changes apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
