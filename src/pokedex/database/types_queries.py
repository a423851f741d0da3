"""Type lookups and the SQL fragments other builders reuse for type filters."""

import re
from typing import List

from pydantic import BaseModel

from .base import BaseQueryModule
from .query_builder import ci_equals

_TYPE_NAME = re.compile(r"[a-zA-Z-]+")


def build_type_condition() -> str:
    """EXISTS predicate: the pokemon aliased ``p`` has the bound type name."""
    return f"""EXISTS (
      SELECT 1 FROM pokemon_types pt2
      JOIN types t2 ON pt2.type_id = t2.id
      WHERE pt2.pokemon_id = p.id AND {ci_equals("t2.name")}
    )"""


def build_type_join() -> str:
    """Join exposing the types of ``p`` as ``pt`` (slot) and ``t`` (name)."""
    return """
      JOIN pokemon_types pt ON p.id = pt.pokemon_id
      JOIN types t ON pt.type_id = t.id
    """


class PokemonByTypeRow(BaseModel):
    name: str
    id: int
    generation: int | None = None


class TypesQueries(BaseQueryModule):
    def prepare_statements(self) -> None:
        self.prepare(
            "typeExists",
            f"SELECT id FROM types WHERE {ci_equals('name', 'name')}",
        )
        self.prepare(
            "typesByPokemonId",
            """
            SELECT t.name
            FROM pokemon_types pt
            JOIN types t ON pt.type_id = t.id
            WHERE pt.pokemon_id = :pokemon_id
            ORDER BY pt.slot
            """,
        )
        self.prepare(
            "pokemonByType",
            f"""
            SELECT p.name, p.id, p.generation
            FROM pokemon p
            {build_type_join()}
            WHERE {ci_equals('t.name', 'type_name')}
            ORDER BY p.id
            LIMIT :limit
            """,
        )

    def type_exists(self, type_name: str) -> bool:
        return self._first(self.get_statement("typeExists"), {"name": type_name}) is not None

    def get_types_by_pokemon_id(self, pokemon_id: int) -> List[str]:
        """Type names for a Pokemon, primary slot first."""
        rows = self._all(self.get_statement("typesByPokemonId"), {"pokemon_id": pokemon_id})
        return [row["name"] for row in rows]

    def get_pokemon_by_type(self, type_name: str, limit: int = 20) -> List[PokemonByTypeRow]:
        rows = self._all(
            self.get_statement("pokemonByType"),
            {"type_name": type_name, "limit": limit},
        )
        return [PokemonByTypeRow(**row) for row in rows]

    build_type_condition = staticmethod(build_type_condition)
    build_type_join = staticmethod(build_type_join)

    @staticmethod
    def is_valid_type_name(type_name: str) -> bool:
        return (
            isinstance(type_name, str)
            and 0 < len(type_name) <= 50
            and _TYPE_NAME.fullmatch(type_name) is not None
        )

    @staticmethod
    def format_type_name(type_name: str) -> str:
        return type_name[:1].upper() + type_name[1:].lower()
