"""Pokemon lookups by id or name, and the single-query complete fetch.

The complete fetch LEFT JOINs stats, types and abilities at once, so a
Pokemon with 6 stats, 2 types and 2 abilities comes back as 24 rows. The
extract_* functions fold those rows back into one list per relation, keyed
by each relation's natural key (stat name, type slot, ability slot).
"""

from typing import Any, Dict, List, Mapping, Optional, Sequence

from pydantic import BaseModel, computed_field

from ..utils.logging import get_logger
from .base import (
    MAX_SQLITE_INTEGER,
    POKEMON_COLUMNS,
    STAT_ORDER,
    AbilityRow,
    BaseQueryModule,
    PokemonRow,
    StatRow,
    TypeRow,
)
from .query_builder import ci_equals

logger = get_logger(__name__)

_COMPLETE_SELECT = f"""
    SELECT
      {POKEMON_COLUMNS},
      s.stat_name, s.base_stat, s.effort,
      t.name AS type_name, pt.slot AS type_slot,
      a.name AS ability_name, pa.is_hidden, pa.slot AS ability_slot
    FROM pokemon p
    LEFT JOIN stats s ON p.id = s.pokemon_id
    LEFT JOIN pokemon_types pt ON p.id = pt.pokemon_id
    LEFT JOIN types t ON pt.type_id = t.id
    LEFT JOIN pokemon_abilities pa ON p.id = pa.pokemon_id
    LEFT JOIN abilities a ON pa.ability_id = a.id
"""

_COMPLETE_ORDER = "ORDER BY s.stat_name, pt.slot, pa.slot"


class PokemonDetail(BaseModel):
    """A Pokemon with its stats, types and abilities."""
    pokemon: PokemonRow
    stats: List[StatRow] = []
    types: List[TypeRow] = []
    abilities: List[AbilityRow] = []

    @computed_field
    @property
    def total_stats(self) -> int:
        return sum(stat.base_stat for stat in self.stats)


class PokemonQueries(BaseQueryModule):
    def prepare_statements(self) -> None:
        self.prepare("pokemonById", f"SELECT {POKEMON_COLUMNS} FROM pokemon p WHERE p.id = :id")
        self.prepare(
            "pokemonByName",
            f"SELECT {POKEMON_COLUMNS} FROM pokemon p WHERE {ci_equals('p.name', 'name')}",
        )
        self.prepare(
            "pokemonCompleteById",
            f"{_COMPLETE_SELECT} WHERE p.id = :id {_COMPLETE_ORDER}",
        )
        self.prepare(
            "pokemonCompleteByName",
            f"{_COMPLETE_SELECT} WHERE {ci_equals('p.name', 'name')} {_COMPLETE_ORDER}",
        )

    def get_pokemon_by_id(self, pokemon_id: int) -> Optional[PokemonRow]:
        if pokemon_id > MAX_SQLITE_INTEGER:
            return None
        row = self._first(self.get_statement("pokemonById"), {"id": pokemon_id})
        return PokemonRow(**row) if row else None

    def get_pokemon_by_name(self, name: str) -> Optional[PokemonRow]:
        """Case-insensitive exact name match."""
        row = self._first(self.get_statement("pokemonByName"), {"name": name})
        return PokemonRow(**row) if row else None

    def get_pokemon(self, identifier: str) -> Optional[PokemonRow]:
        """
        Get a Pokemon by id ("25") or name ("Pikachu").

        Returns:
            PokemonRow, or None if nothing matches
        """
        if self.is_numeric_id(identifier):
            return self.get_pokemon_by_id(int(identifier))
        return self.get_pokemon_by_name(identifier)

    def get_pokemon_complete(self, identifier: str) -> List[Mapping[str, Any]]:
        """
        Fetch a Pokemon with all its relations in one round trip.

        Returns:
            Flat joined rows (empty if not found). Pass them to
            assemble_pokemon() rather than reading them directly.
        """
        if self.is_numeric_id(identifier):
            pokemon_id = int(identifier)
            if pokemon_id > MAX_SQLITE_INTEGER:
                return []
            rows = self._all(self.get_statement("pokemonCompleteById"), {"id": pokemon_id})
        else:
            rows = self._all(self.get_statement("pokemonCompleteByName"), {"name": identifier})
        logger.debug("Complete fetch for %r returned %d joined rows", identifier, len(rows))
        return rows

    def get_pokemon_detail(self, identifier: str) -> Optional[PokemonDetail]:
        return assemble_pokemon(self.get_pokemon_complete(identifier))


def extract_pokemon(rows: Sequence[Mapping[str, Any]]) -> PokemonRow:
    """Scalar Pokemon fields; every joined row carries the same values."""
    if not rows:
        raise ValueError("No rows provided")
    first = rows[0]
    return PokemonRow(
        id=first["id"],
        name=first["name"],
        height=first["height"],
        weight=first["weight"],
        base_experience=first["base_experience"],
        generation=first["generation"],
        species_url=first["species_url"],
        sprite_url=first["sprite_url"],
    )


def extract_stats(rows: Sequence[Mapping[str, Any]]) -> List[StatRow]:
    """
    One stat per canonical name, in STAT_ORDER.

    The first row seen for a name wins; later ones are join duplicates.
    Names outside STAT_ORDER are dropped and missing names are omitted.
    """
    stats: Dict[str, StatRow] = {}
    for row in rows:
        stat_name = row.get("stat_name")
        if stat_name is None or row.get("base_stat") is None or stat_name in stats:
            continue
        stats[stat_name] = StatRow(
            stat_name=stat_name,
            base_stat=row["base_stat"],
            effort=row.get("effort") or 0,
        )
    return [stats[name] for name in STAT_ORDER if name in stats]


def extract_types(rows: Sequence[Mapping[str, Any]]) -> List[TypeRow]:
    """One type per slot, ascending by slot."""
    types: Dict[int, TypeRow] = {}
    for row in rows:
        type_name = row.get("type_name")
        slot = row.get("type_slot")
        if type_name is None or slot is None or slot in types:
            continue
        types[slot] = TypeRow(name=type_name, slot=slot)
    return [types[slot] for slot in sorted(types)]


def extract_abilities(rows: Sequence[Mapping[str, Any]]) -> List[AbilityRow]:
    """One ability per slot, ascending by slot; hidden flag from the first row seen."""
    abilities: Dict[int, AbilityRow] = {}
    for row in rows:
        ability_name = row.get("ability_name")
        slot = row.get("ability_slot")
        if ability_name is None or slot is None or slot in abilities:
            continue
        abilities[slot] = AbilityRow(
            name=ability_name,
            is_hidden=bool(row.get("is_hidden")),
            slot=slot,
        )
    return [abilities[slot] for slot in sorted(abilities)]


def assemble_pokemon(rows: Sequence[Mapping[str, Any]]) -> Optional[PokemonDetail]:
    """Rebuild a PokemonDetail from complete-fetch rows; None when there are no rows."""
    if not rows:
        return None
    return PokemonDetail(
        pokemon=extract_pokemon(rows),
        stats=extract_stats(rows),
        types=extract_types(rows),
        abilities=extract_abilities(rows),
    )
