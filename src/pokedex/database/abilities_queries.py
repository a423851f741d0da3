"""Ability lookups and the SQL fragments for ability filters."""

import re
from typing import Dict, List, Sequence, TypeVar

from pydantic import BaseModel

from .base import AbilityRow, BaseQueryModule
from .query_builder import ci_equals

_ABILITY_NAME = re.compile(r"[a-zA-Z0-9\s-]+")


def build_ability_condition() -> str:
    """EXISTS predicate: the pokemon aliased ``p`` has the bound ability name."""
    return f"""EXISTS (
      SELECT 1 FROM pokemon_abilities pa2
      JOIN abilities a2 ON pa2.ability_id = a2.id
      WHERE pa2.pokemon_id = p.id AND {ci_equals("a2.name")}
    )"""


def build_ability_join() -> str:
    """Join exposing the abilities of ``p`` as ``pa`` (slot, is_hidden) and ``a`` (name)."""
    return """
      JOIN pokemon_abilities pa ON p.id = pa.pokemon_id
      JOIN abilities a ON pa.ability_id = a.id
    """


class AbilityData(BaseModel):
    name: str
    is_hidden: bool


class PokemonByAbilityRow(BaseModel):
    name: str
    id: int
    generation: int | None = None


A = TypeVar("A", AbilityData, AbilityRow)


class AbilitiesQueries(BaseQueryModule):
    def prepare_statements(self) -> None:
        self.prepare(
            "abilitiesByPokemonId",
            """
            SELECT a.name, pa.is_hidden
            FROM pokemon_abilities pa
            JOIN abilities a ON pa.ability_id = a.id
            WHERE pa.pokemon_id = :pokemon_id
            ORDER BY pa.slot
            """,
        )
        self.prepare(
            "pokemonByAbility",
            f"""
            SELECT p.name, p.id, p.generation
            FROM pokemon p
            {build_ability_join()}
            WHERE {ci_equals('a.name', 'ability_name')}
            ORDER BY p.id
            LIMIT :limit
            """,
        )
        self.prepare(
            "abilityExists",
            f"SELECT id FROM abilities WHERE {ci_equals('name', 'name')}",
        )

    def get_abilities_by_pokemon_id(self, pokemon_id: int) -> List[AbilityData]:
        """Abilities for a Pokemon in slot order; SQLite's 0/1 becomes a bool."""
        rows = self._all(self.get_statement("abilitiesByPokemonId"), {"pokemon_id": pokemon_id})
        return [AbilityData(name=row["name"], is_hidden=bool(row["is_hidden"])) for row in rows]

    def get_pokemon_by_ability(self, ability_name: str, limit: int = 20) -> List[PokemonByAbilityRow]:
        rows = self._all(
            self.get_statement("pokemonByAbility"),
            {"ability_name": ability_name, "limit": limit},
        )
        return [PokemonByAbilityRow(**row) for row in rows]

    def ability_exists(self, ability_name: str) -> bool:
        return self._first(self.get_statement("abilityExists"), {"name": ability_name}) is not None

    build_ability_condition = staticmethod(build_ability_condition)
    build_ability_join = staticmethod(build_ability_join)

    @staticmethod
    def is_valid_ability_name(ability_name: str) -> bool:
        return (
            isinstance(ability_name, str)
            and 0 < len(ability_name) <= 100
            and _ABILITY_NAME.fullmatch(ability_name) is not None
        )

    @staticmethod
    def format_ability_name(ability_name: str) -> str:
        """solar-power -> Solar Power"""
        return " ".join(word[:1].upper() + word[1:].lower() for word in ability_name.split("-"))

    @staticmethod
    def group_abilities_by_hidden(abilities: Sequence[A]) -> Dict[str, List[A]]:
        """Split into "normal" and "hidden", keeping the input order in each."""
        groups: Dict[str, List[A]] = {"normal": [], "hidden": []}
        for ability in abilities:
            groups["hidden" if ability.is_hidden else "normal"].append(ability)
        return groups
