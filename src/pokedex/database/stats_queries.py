"""Stat lookups and "strongest Pokemon" rankings."""

from typing import Dict, List

from pydantic import BaseModel

from ..errors import InvalidCriteriaError
from ..utils.logging import get_logger
from .base import BaseQueryModule, StatRow, StatsCriteria
from .query_builder import QueryBuilder, ci_equals
from .types_queries import build_type_join

logger = get_logger(__name__)

DEFAULT_RANK_LIMIT = 10

TOTAL_STATS = "total_stats"

# Ranking token -> stored stat name.
CRITERIA_STAT_NAMES: Dict[str, str] = {
    "hp": "hp",
    "attack": "attack",
    "defense": "defense",
    "speed": "speed",
    "sp_attack": "special-attack",
    "sp_defense": "special-defense",
}

ALLOWED_CRITERIA = (TOTAL_STATS, *CRITERIA_STAT_NAMES)


class StrongestPokemonRow(BaseModel):
    name: str
    id: int
    generation: int | None = None
    stat_value: int


def stat_name_for_criteria(criteria: str, legacy_tokens: bool = False) -> str:
    """
    Map a per-stat ranking token to the stat name stored in the stats table.

    With legacy_tokens the old single-separator substitution is used instead
    ("sp_attack" -> "sp-attack"), which matches no stored stat, so the two
    special-stat rankings come back empty. Kept only to reproduce that
    behaviour on request.

    Raises:
        InvalidCriteriaError: If the token isn't a per-stat criteria
    """
    if criteria not in CRITERIA_STAT_NAMES:
        raise InvalidCriteriaError(criteria, tuple(CRITERIA_STAT_NAMES))
    if legacy_tokens:
        return criteria.replace("_", "-", 1)
    return CRITERIA_STAT_NAMES[criteria]


class StatsQueries(BaseQueryModule):
    def __init__(self, session, legacy_stat_tokens: bool = False):
        self.legacy_stat_tokens = legacy_stat_tokens
        super().__init__(session)

    def prepare_statements(self) -> None:
        self.prepare(
            "statsByPokemonId",
            """
            SELECT stat_name, base_stat, effort
            FROM stats
            WHERE pokemon_id = :pokemon_id
            ORDER BY
              CASE stat_name
                WHEN 'hp' THEN 1
                WHEN 'attack' THEN 2
                WHEN 'defense' THEN 3
                WHEN 'special-attack' THEN 4
                WHEN 'special-defense' THEN 5
                WHEN 'speed' THEN 6
              END
            """,
        )

    def get_stats_by_pokemon_id(self, pokemon_id: int) -> List[StatRow]:
        rows = self._all(self.get_statement("statsByPokemonId"), {"pokemon_id": pokemon_id})
        return [StatRow(**row) for row in rows]

    def build_strongest_query(self, criteria: StatsCriteria) -> QueryBuilder:
        """
        Compose the ranking query for the given criteria.

        Rows are ordered by stat_value only, so ties come back in whatever
        order SQLite produces.

        Raises:
            InvalidCriteriaError: If criteria.criteria isn't in ALLOWED_CRITERIA
        """
        if criteria.criteria not in ALLOWED_CRITERIA:
            raise InvalidCriteriaError(criteria.criteria, ALLOWED_CRITERIA)

        is_total = criteria.criteria == TOTAL_STATS
        stat_column = "SUM(s.base_stat)" if is_total else "s.base_stat"

        qb = QueryBuilder(
            f"""
            SELECT p.name, p.id, p.generation, {stat_column} AS stat_value
            FROM pokemon p
            JOIN stats s ON p.id = s.pokemon_id
            """
        )

        if not is_total:
            qb.where(
                "s.stat_name = ?",
                stat_name_for_criteria(criteria.criteria, self.legacy_stat_tokens),
            )

        if criteria.type:
            qb.join(build_type_join())
            qb.where(ci_equals("t.name"), criteria.type)

        if criteria.generation:
            qb.where("p.generation = ?", criteria.generation)

        if is_total:
            qb.group_by("p.id, p.name, p.generation")

        qb.order_by("stat_value DESC")
        qb.limit(criteria.limit or DEFAULT_RANK_LIMIT)
        return qb

    def get_strongest_pokemon(self, criteria: StatsCriteria) -> List[StrongestPokemonRow]:
        """
        Rank Pokemon by total stats or by a single stat.

        Raises:
            InvalidCriteriaError: If criteria.criteria isn't a known token
        """
        sql, params = self.build_strongest_query(criteria).build()
        rows = self._all(self.prepare_dynamic(sql), params)
        logger.debug("Ranking by %s returned %d rows", criteria.criteria, len(rows))
        return [StrongestPokemonRow(**row) for row in rows]

    @staticmethod
    def calculate_total_stats(stats: List[StatRow]) -> int:
        return sum(stat.base_stat for stat in stats)

    @staticmethod
    def format_stat_name(stat_name: str) -> str:
        """special-attack -> SPECIAL ATTACK"""
        return stat_name.replace("-", " ").upper()
