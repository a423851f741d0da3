"""Pytest configuration and fixtures."""

import pytest

from pokedex.database.pokemon_repo import save_pokemon_bundle
from pokedex.database.service import DatabaseService
from pokedex.database.sqlite_client import MEMORY_PATH, get_session

STAT_NAMES = ("hp", "attack", "defense", "special-attack", "special-defense", "speed")

GRASS = {"id": 12, "name": "grass"}
POISON = {"id": 4, "name": "poison"}
FIRE = {"id": 10, "name": "fire"}
ELECTRIC = {"id": 13, "name": "electric"}


def _stats(values, efforts=None):
    efforts = efforts or {}
    return [
        {"stat_name": name, "base_stat": value, "effort": efforts.get(name, 0)}
        for name, value in zip(STAT_NAMES, values)
    ]


def _types(*types):
    return [{**t, "slot": slot} for slot, t in enumerate(types, start=1)]


SEED = [
    {
        "pokemon": {"id": 1, "name": "bulbasaur", "height": 7, "weight": 69, "base_experience": 64, "generation": 1},
        "stats": _stats((45, 49, 49, 65, 65, 45), {"special-attack": 1}),
        "types": _types(GRASS, POISON),
        "abilities": [
            {"id": 65, "name": "overgrow", "slot": 1, "is_hidden": False},
            {"id": 34, "name": "chlorophyll", "slot": 2, "is_hidden": True},
        ],
    },
    {
        "pokemon": {"id": 2, "name": "ivysaur", "height": 10, "weight": 130, "base_experience": 142, "generation": 1},
        "stats": _stats((60, 62, 63, 80, 80, 60), {"special-attack": 1, "special-defense": 1}),
        "types": _types(GRASS, POISON),
        "abilities": [
            {"id": 65, "name": "overgrow", "slot": 1, "is_hidden": False},
            {"id": 34, "name": "chlorophyll", "slot": 2, "is_hidden": True},
        ],
    },
    {
        "pokemon": {"id": 4, "name": "charmander", "height": 6, "weight": 85, "base_experience": 62, "generation": 1},
        "stats": _stats((39, 52, 43, 60, 50, 65), {"speed": 1}),
        "types": _types(FIRE),
        "abilities": [
            {"id": 66, "name": "blaze", "slot": 1, "is_hidden": False},
            {"id": 94, "name": "solar-power", "slot": 3, "is_hidden": True},
        ],
    },
    {
        "pokemon": {"id": 25, "name": "pikachu", "height": 4, "weight": 60, "base_experience": 112, "generation": 1},
        "stats": _stats((35, 55, 40, 50, 50, 90), {"speed": 2}),
        "types": _types(ELECTRIC),
        "abilities": [
            {"id": 9, "name": "static", "slot": 1, "is_hidden": False},
            {"id": 31, "name": "lightning-rod", "slot": 3, "is_hidden": True},
        ],
    },
    {
        # No stats, types or abilities loaded yet.
        "pokemon": {"id": 151, "name": "mew", "height": 4, "weight": 40, "base_experience": 300, "generation": 1},
    },
    {
        "pokemon": {"id": 152, "name": "chikorita", "height": 9, "weight": 64, "base_experience": 64, "generation": 2},
        "stats": _stats((45, 49, 65, 49, 65, 45), {"special-defense": 1}),
        "types": _types(GRASS),
        "abilities": [
            {"id": 65, "name": "overgrow", "slot": 1, "is_hidden": False},
            {"id": 102, "name": "leaf-guard", "slot": 3, "is_hidden": True},
        ],
    },
]


def seed_pokemon(session) -> None:
    for entry in SEED:
        save_pokemon_bundle(
            session,
            entry["pokemon"],
            stats=entry.get("stats"),
            types=entry.get("types"),
            abilities=entry.get("abilities"),
        )
    session.commit()


@pytest.fixture
def session():
    """Create a temporary in-memory database session for testing."""
    session = get_session(MEMORY_PATH)

    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def seeded_session(session):
    """In-memory session holding the SEED Pokemon."""
    seed_pokemon(session)
    return session


@pytest.fixture
def service(seeded_session):
    """DatabaseService over the seeded session."""
    return DatabaseService(seeded_session)
