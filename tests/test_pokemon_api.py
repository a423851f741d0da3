"""Tests for the API read surface."""

import pytest

from pokedex.api.pokemon_api import (
    compare_pokemon,
    get_ability_info,
    get_pokemon_detail,
    get_pokemon_stats,
    get_type_info,
    rank,
    search,
)
from pokedex.database.base import PokemonSearchFilter, StatsCriteria
from pokedex.errors import InvalidCriteriaError


def test_get_pokemon_detail_bulbasaur(service):
    detail = get_pokemon_detail(service, "1")

    assert detail.pokemon.name == "bulbasaur"
    assert detail.total_stats == 318
    assert [t.name for t in detail.types] == ["grass", "poison"]
    assert [(a.name, a.is_hidden) for a in detail.abilities] == [
        ("overgrow", False),
        ("chlorophyll", True),
    ]


def test_get_pokemon_detail_strips_identifier(service):
    assert get_pokemon_detail(service, "  pikachu ").pokemon.id == 25


def test_get_pokemon_detail_not_found(service):
    assert get_pokemon_detail(service, "agumon") is None


def test_get_pokemon_stats_distribution(service):
    stats = get_pokemon_stats(service, "pikachu")

    assert stats.total_stats == 320
    assert [s.stat_name for s in stats.distribution][0] == "hp"
    speed = next(s for s in stats.distribution if s.stat_name == "speed")
    assert speed.percentage == pytest.approx(28.1)


def test_get_pokemon_stats_without_stats(service):
    stats = get_pokemon_stats(service, "mew")
    assert stats.total_stats == 0
    assert stats.distribution == []


def test_get_pokemon_stats_not_found(service):
    assert get_pokemon_stats(service, "404") is None


def test_search_splits_types_and_counts(service):
    response = search(service, PokemonSearchFilter(type="grass", limit=2))

    assert [r.id for r in response.results] == [1, 2]
    assert sorted(response.results[0].types) == ["grass", "poison"]
    assert response.total == 3


def test_search_no_matches(service):
    response = search(service, PokemonSearchFilter(type="dragon"))
    assert response.results == []
    assert response.total == 0


def test_rank(service):
    response = rank(service, StatsCriteria(criteria="total_stats", limit=2))
    assert response.criteria == "total_stats"
    assert [r.id for r in response.results] == [2, 25]


def test_rank_invalid(service):
    with pytest.raises(InvalidCriteriaError):
        rank(service, StatsCriteria(criteria="luck"))


def test_compare_pokemon(service):
    comparison = compare_pokemon(service, "bulbasaur", "charmander")

    assert comparison.first.pokemon.id == 1
    assert comparison.second.pokemon.id == 4
    by_stat = {s.stat_name: s for s in comparison.stats}
    assert by_stat["speed"].winner == "charmander"
    assert by_stat["special-defense"].winner == "bulbasaur"
    assert by_stat["special-attack"].winner == "bulbasaur"
    assert comparison.total_winner == "bulbasaur"


def test_compare_tie_has_no_winner(service):
    comparison = compare_pokemon(service, "bulbasaur", "chikorita")
    assert comparison.total_winner is None
    assert {s.stat_name: s.winner for s in comparison.stats}["hp"] is None


def test_compare_missing(service):
    assert compare_pokemon(service, "bulbasaur", "agumon") is None


def test_get_pokemon_detail_oversized_id_not_found(service):
    assert get_pokemon_detail(service, "99999999999999999999999") is None
    assert get_pokemon_stats(service, "99999999999999999999999") is None


def test_get_type_info_without_pokemon(service):
    info = get_type_info(service, "GRASS")

    assert info.kind == "type"
    assert info.name == "grass"
    assert info.display_name == "Grass"
    assert info.include_pokemon is False
    assert info.pokemon == []


def test_get_type_info_lists_pokemon_by_id(service):
    info = get_type_info(service, "grass", include_pokemon=True)
    assert [(p.id, p.generation) for p in info.pokemon] == [(1, 1), (2, 1), (152, 2)]

    limited = get_type_info(service, "grass", include_pokemon=True, limit=2)
    assert [p.name for p in limited.pokemon] == ["bulbasaur", "ivysaur"]
    assert limited.limit == 2


@pytest.mark.parametrize("name", ["dragon", "fire2", "", "gr ass"])
def test_get_type_info_unknown_or_malformed(service, name):
    assert get_type_info(service, name) is None


def test_get_ability_info(service):
    info = get_ability_info(service, " Solar-Power ", include_pokemon=True)

    assert info.kind == "ability"
    assert info.name == "solar-power"
    assert info.display_name == "Solar Power"
    assert [p.id for p in info.pokemon] == [4]


@pytest.mark.parametrize("name", ["levitate", "bad;name"])
def test_get_ability_info_unknown_or_malformed(service, name):
    assert get_ability_info(service, name) is None
