"""Pokemon API: lookup, stats, search, ranking, comparison and type/ability info."""

from typing import List, Optional

from ..database.abilities_queries import AbilitiesQueries
from ..database.base import STAT_ORDER, PokemonSearchFilter, StatsCriteria
from ..database.pokemon_queries import PokemonDetail
from ..database.search_queries import parse_types_string
from ..database.service import DatabaseService
from ..database.types_queries import TypesQueries
from .models import (
    ComparisonDTO,
    PokemonStatsDTO,
    RankingResponse,
    RelationInfoDTO,
    RelationMember,
    SearchResponse,
    SearchResult,
    StatComparison,
    StatShare,
)


def get_pokemon_detail(service: DatabaseService, identifier: str) -> Optional[PokemonDetail]:
    """
    Get a Pokemon with stats, types and abilities.

    Args:
        service: DatabaseService bound to an open session
        identifier: Pokemon id ("1") or name (any case)

    Returns:
        PokemonDetail or None if not found
    """
    return service.pokemon.get_pokemon_detail(identifier.strip())


def get_pokemon_stats(service: DatabaseService, identifier: str) -> Optional[PokemonStatsDTO]:
    """Stats for a Pokemon plus each stat's share of the total."""
    pokemon = service.pokemon.get_pokemon(identifier.strip())
    if pokemon is None:
        return None

    stats = service.stats.get_stats_by_pokemon_id(pokemon.id)
    total = service.stats.calculate_total_stats(stats)
    distribution = [
        StatShare(
            stat_name=stat.stat_name,
            base_stat=stat.base_stat,
            effort=stat.effort,
            percentage=round(stat.base_stat / total * 100, 1) if total else 0.0,
        )
        for stat in stats
    ]
    return PokemonStatsDTO(
        id=pokemon.id,
        name=pokemon.name,
        stats=stats,
        total_stats=total,
        distribution=distribution,
    )


def search(service: DatabaseService, search_filter: PokemonSearchFilter) -> SearchResponse:
    """
    Search Pokemon. An empty filter lists every Pokemon up to the limit.

    Returns:
        SearchResponse; results is empty when nothing matches
    """
    rows = service.search.search_pokemon(search_filter)
    results = [
        SearchResult(
            id=row.id,
            name=row.name,
            generation=row.generation,
            types=parse_types_string(row.types),
        )
        for row in rows
    ]
    total = service.search.count_search_results(search_filter)
    return SearchResponse(results=results, total=total)


def rank(service: DatabaseService, criteria: StatsCriteria) -> RankingResponse:
    """
    Strongest Pokemon by criteria.

    Raises:
        InvalidCriteriaError: If criteria.criteria is unknown
    """
    results = service.stats.get_strongest_pokemon(criteria)
    return RankingResponse(criteria=criteria.criteria, results=results)


def _winner(first: PokemonDetail, second: PokemonDetail, a: Optional[int], b: Optional[int]) -> Optional[str]:
    if a is None or b is None or a == b:
        return None
    return first.pokemon.name if a > b else second.pokemon.name


def compare_pokemon(
    service: DatabaseService,
    first_identifier: str,
    second_identifier: str,
) -> Optional[ComparisonDTO]:
    """
    Compare two Pokemon stat by stat.

    Returns:
        ComparisonDTO, or None if either Pokemon is missing
    """
    first = get_pokemon_detail(service, first_identifier)
    second = get_pokemon_detail(service, second_identifier)
    if first is None or second is None:
        return None

    first_stats = {s.stat_name: s.base_stat for s in first.stats}
    second_stats = {s.stat_name: s.base_stat for s in second.stats}
    comparisons: List[StatComparison] = []
    for stat_name in STAT_ORDER:
        a = first_stats.get(stat_name)
        b = second_stats.get(stat_name)
        if a is None and b is None:
            continue
        comparisons.append(
            StatComparison(
                stat_name=stat_name,
                first=a,
                second=b,
                winner=_winner(first, second, a, b),
            )
        )

    return ComparisonDTO(
        first=first,
        second=second,
        stats=comparisons,
        total_winner=_winner(first, second, first.total_stats, second.total_stats),
    )


def get_type_info(
    service: DatabaseService,
    type_name: str,
    include_pokemon: bool = False,
    limit: int = 20,
) -> Optional[RelationInfoDTO]:
    """
    Look up a type, optionally listing the Pokemon that have it.

    Args:
        service: DatabaseService bound to an open session
        type_name: Type name (any case)
        include_pokemon: Also list Pokemon of this type, ordered by id
        limit: Maximum Pokemon listed

    Returns:
        RelationInfoDTO, or None if the name is malformed or unknown
    """
    name = type_name.strip()
    if not TypesQueries.is_valid_type_name(name) or not service.types.type_exists(name):
        return None

    members: List[RelationMember] = []
    if include_pokemon:
        members = [
            RelationMember(id=row.id, name=row.name, generation=row.generation)
            for row in service.types.get_pokemon_by_type(name, limit)
        ]
    return RelationInfoDTO(
        kind="type",
        name=name.lower(),
        display_name=TypesQueries.format_type_name(name),
        include_pokemon=include_pokemon,
        limit=limit,
        pokemon=members,
    )


def get_ability_info(
    service: DatabaseService,
    ability_name: str,
    include_pokemon: bool = False,
    limit: int = 20,
) -> Optional[RelationInfoDTO]:
    """Same as get_type_info, for abilities."""
    name = ability_name.strip()
    if not AbilitiesQueries.is_valid_ability_name(name) or not service.abilities.ability_exists(name):
        return None

    members: List[RelationMember] = []
    if include_pokemon:
        members = [
            RelationMember(id=row.id, name=row.name, generation=row.generation)
            for row in service.abilities.get_pokemon_by_ability(name, limit)
        ]
    return RelationInfoDTO(
        kind="ability",
        name=name.lower(),
        display_name=AbilitiesQueries.format_ability_name(name),
        include_pokemon=include_pokemon,
        limit=limit,
        pokemon=members,
    )
