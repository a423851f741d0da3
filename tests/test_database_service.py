"""Tests for DatabaseService and the upsert repository."""

import pytest
from sqlalchemy.orm import sessionmaker

from pokedex.database.pokemon_repo import save_pokemon_bundle, upsert_pokemon, upsert_stat
from pokedex.database.schema import Stat
from pokedex.database.service import DatabaseService
from pokedex.database.sqlite_client import MEMORY_PATH, get_engine


def test_service_modules_share_session(seeded_session):
    service = DatabaseService(seeded_session)
    for module in (service.pokemon, service.stats, service.types, service.abilities, service.search):
        assert module.session is seeded_session


def test_is_healthy(seeded_session):
    assert DatabaseService(seeded_session).is_healthy() is True


def test_get_stats_counts(seeded_session):
    stats = DatabaseService(seeded_session).get_stats()
    assert stats.healthy is True
    assert (stats.pokemon, stats.types, stats.abilities) == (6, 4, 7)
    assert stats.error is None


def test_get_stats_reports_missing_tables():
    engine = get_engine(MEMORY_PATH, create_schema=False)
    session = sessionmaker(bind=engine)()
    try:
        stats = DatabaseService(session).get_stats()
        assert stats.healthy is False
        assert "no such table" in stats.error
    finally:
        session.close()


def test_upsert_pokemon_replaces_by_id(session):
    upsert_pokemon(session, {"id": 7, "name": "squirtle", "generation": 1})
    session.commit()
    upsert_pokemon(session, {"id": 7, "name": "Squirtle", "generation": 1, "height": 5})
    session.commit()

    service = DatabaseService(session)
    pokemon = service.pokemon.get_pokemon("7")
    assert pokemon.name == "Squirtle"
    assert pokemon.height == 5
    assert service.get_stats().pokemon == 1


def test_upsert_stat_replaces_by_name(session):
    upsert_pokemon(session, {"id": 7, "name": "squirtle"})
    upsert_stat(session, 7, "hp", 44)
    session.commit()
    upsert_stat(session, 7, "hp", 50, effort=1)
    session.commit()

    rows = session.query(Stat).filter(Stat.pokemon_id == 7).all()
    assert [(r.stat_name, r.base_stat, r.effort) for r in rows] == [("hp", 50, 1)]


def test_save_bundle_twice_does_not_duplicate(session):
    bundle = {
        "pokemon": {"id": 7, "name": "squirtle", "generation": 1},
        "stats": [{"stat_name": "hp", "base_stat": 44}],
        "types": [{"id": 11, "name": "water", "slot": 1}],
        "abilities": [{"id": 67, "name": "torrent", "slot": 1}],
    }
    for _ in range(2):
        save_pokemon_bundle(session, bundle["pokemon"], bundle["stats"], bundle["types"], bundle["abilities"])
        session.commit()

    rows = DatabaseService(session).pokemon.get_pokemon_complete("squirtle")
    assert len(rows) == 1


def test_upsert_pokemon_requires_id_and_name(session):
    with pytest.raises(ValueError):
        upsert_pokemon(session, {"name": "nobody"})
    with pytest.raises(ValueError):
        upsert_pokemon(session, {"id": 1})
