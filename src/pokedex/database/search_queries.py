"""Multi-criteria Pokemon search with dynamic filtering."""

from typing import Any, List, Mapping, Optional, Union

from pydantic import BaseModel

from ..utils.logging import get_logger
from .abilities_queries import build_ability_condition
from .base import BaseQueryModule, PokemonSearchFilter
from .query_builder import QueryBuilder
from .types_queries import build_type_condition

logger = get_logger(__name__)

DEFAULT_SEARCH_LIMIT = 20

# Display join: LEFT so Pokemon without types still show up unfiltered.
_DISPLAY_TYPES_JOIN = """
    LEFT JOIN pokemon_types pt ON p.id = pt.pokemon_id
    LEFT JOIN types t ON pt.type_id = t.id
"""

_STAT_TOTALS_JOIN = """
    JOIN (
      SELECT pokemon_id, SUM(base_stat) AS total_stats
      FROM stats
      GROUP BY pokemon_id
      HAVING total_stats >= ?
    ) stat_totals ON p.id = stat_totals.pokemon_id
"""


class SearchResultRow(BaseModel):
    id: int
    name: str
    generation: Optional[int] = None
    types: Optional[str] = None  # comma-joined by GROUP_CONCAT


class ValidationResult(BaseModel):
    valid: bool
    errors: List[str] = []


def parse_types_string(types_str: Optional[str]) -> List[str]:
    """Split a GROUP_CONCAT type list."""
    if not types_str:
        return []
    return [name.strip() for name in types_str.split(",") if name.strip()]


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_search_filter(
    search_filter: Union[PokemonSearchFilter, Mapping[str, Any]],
) -> ValidationResult:
    """
    Check filter ranges without raising.

    The query builders never call this; out-of-range values still build a
    valid query (which usually matches nothing).
    """
    if isinstance(search_filter, PokemonSearchFilter):
        values = search_filter.model_dump()
    else:
        values = dict(search_filter)

    errors: List[str] = []

    type_name = values.get("type")
    if type_name and not isinstance(type_name, str):
        errors.append("Type must be a string")

    ability = values.get("ability")
    if ability and not isinstance(ability, str):
        errors.append("Ability must be a string")

    generation = values.get("generation")
    if generation and (not _is_int(generation) or not 1 <= generation <= 9):
        errors.append("Generation must be an integer between 1 and 9")

    min_stat = values.get("min_stat")
    if min_stat and (not _is_int(min_stat) or not 0 <= min_stat <= 1000):
        errors.append("Minimum stat must be an integer between 0 and 1000")

    limit = values.get("limit")
    if limit and (not _is_int(limit) or not 1 <= limit <= 100):
        errors.append("Limit must be an integer between 1 and 100")

    return ValidationResult(valid=not errors, errors=errors)


class SearchQueries(BaseQueryModule):
    def prepare_statements(self) -> None:
        self.prepare(
            "allPokemon",
            """
            SELECT p.id, p.name, p.generation, GROUP_CONCAT(t.name) AS types
            FROM pokemon p
            LEFT JOIN pokemon_types pt ON p.id = pt.pokemon_id
            LEFT JOIN types t ON pt.type_id = t.id
            GROUP BY p.id, p.name, p.generation
            ORDER BY p.id
            LIMIT :limit
            """,
        )

    @staticmethod
    def _apply_filters(qb: QueryBuilder, search_filter: PokemonSearchFilter) -> QueryBuilder:
        # Falsy filter values (None, 0, "") mean "not filtered".
        if search_filter.min_stat:
            qb.join(_STAT_TOTALS_JOIN, search_filter.min_stat)
        if search_filter.type:
            qb.where(build_type_condition(), search_filter.type)
        if search_filter.ability:
            qb.where(build_ability_condition(), search_filter.ability)
        if search_filter.generation:
            qb.where("p.generation = ?", search_filter.generation)
        return qb

    @staticmethod
    def _is_unfiltered(search_filter: PokemonSearchFilter) -> bool:
        return not (
            search_filter.type
            or search_filter.ability
            or search_filter.generation
            or search_filter.min_stat
        )

    def build_search_query(self, search_filter: PokemonSearchFilter) -> QueryBuilder:
        qb = QueryBuilder(
            f"""
            SELECT p.id, p.name, p.generation, GROUP_CONCAT(t.name) AS types
            FROM pokemon p
            {_DISPLAY_TYPES_JOIN}
            """
        )
        self._apply_filters(qb, search_filter)
        qb.group_by("p.id, p.name, p.generation")
        qb.order_by("p.id")
        qb.limit(search_filter.limit or DEFAULT_SEARCH_LIMIT)
        return qb

    def build_count_query(self, search_filter: PokemonSearchFilter) -> QueryBuilder:
        qb = QueryBuilder(
            f"""
            SELECT COUNT(DISTINCT p.id) AS count
            FROM pokemon p
            {_DISPLAY_TYPES_JOIN}
            """
        )
        return self._apply_filters(qb, search_filter)

    def search_pokemon(self, search_filter: PokemonSearchFilter) -> List[SearchResultRow]:
        """
        Search Pokemon, ordered by id.

        Returns:
            Matching rows (empty list if nothing matches)
        """
        if self._is_unfiltered(search_filter):
            rows = self._all(
                self.get_statement("allPokemon"),
                {"limit": search_filter.limit or DEFAULT_SEARCH_LIMIT},
            )
        else:
            sql, params = self.build_search_query(search_filter).build()
            rows = self._all(self.prepare_dynamic(sql), params)
            logger.debug("Filtered search with %d params returned %d rows", len(params), len(rows))
        return [SearchResultRow(**row) for row in rows]

    def count_search_results(self, search_filter: PokemonSearchFilter) -> int:
        """Total matches for the filter, ignoring its limit."""
        sql, params = self.build_count_query(search_filter).build()
        row = self._first(self.prepare_dynamic(sql), params)
        return int(row["count"]) if row else 0

    validate_search_filter = staticmethod(validate_search_filter)
    parse_types_string = staticmethod(parse_types_string)
