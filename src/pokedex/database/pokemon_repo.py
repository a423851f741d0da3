"""Upsert helpers for seeding a store.

Every helper replaces by primary key (session.merge). Callers commit.
"""

from typing import Dict, Iterable, Optional

from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .schema import Ability, Pokemon, PokemonAbility, PokemonType, Stat, Type

logger = get_logger(__name__)


def upsert_pokemon(session: Session, pokemon: Dict) -> Pokemon:
    """
    Insert or replace a Pokemon row.

    Args:
        session: SQLAlchemy session
        pokemon: Dict with id, name and optional scalar fields

    Returns:
        Merged Pokemon row
    """
    pokemon_id = pokemon.get("id")
    if pokemon_id is None:
        raise ValueError("Pokemon must have id")
    if not pokemon.get("name"):
        raise ValueError("Pokemon must have name")

    row = session.merge(
        Pokemon(
            id=pokemon_id,
            name=pokemon["name"],
            height=pokemon.get("height"),
            weight=pokemon.get("weight"),
            base_experience=pokemon.get("base_experience"),
            generation=pokemon.get("generation"),
            species_url=pokemon.get("species_url"),
            sprite_url=pokemon.get("sprite_url"),
        )
    )
    logger.debug(f"Upserted pokemon: {pokemon_id}")
    return row


def upsert_stat(session: Session, pokemon_id: int, stat_name: str, base_stat: int, effort: int = 0) -> Stat:
    """Insert or replace the stat keyed by (pokemon_id, stat_name)."""
    existing = (
        session.query(Stat)
        .filter(Stat.pokemon_id == pokemon_id, Stat.stat_name == stat_name)
        .first()
    )
    if existing:
        existing.base_stat = base_stat
        existing.effort = effort
        return existing

    row = Stat(pokemon_id=pokemon_id, stat_name=stat_name, base_stat=base_stat, effort=effort)
    session.add(row)
    return row


def upsert_type(session: Session, type_id: int, name: str) -> Type:
    return session.merge(Type(id=type_id, name=name))


def upsert_pokemon_type(session: Session, pokemon_id: int, type_id: int, slot: int) -> PokemonType:
    return session.merge(PokemonType(pokemon_id=pokemon_id, type_id=type_id, slot=slot))


def upsert_ability(session: Session, ability_id: int, name: str) -> Ability:
    return session.merge(Ability(id=ability_id, name=name))


def upsert_pokemon_ability(
    session: Session,
    pokemon_id: int,
    ability_id: int,
    slot: int,
    is_hidden: bool = False,
) -> PokemonAbility:
    return session.merge(
        PokemonAbility(pokemon_id=pokemon_id, ability_id=ability_id, slot=slot, is_hidden=is_hidden)
    )


def save_pokemon_bundle(
    session: Session,
    pokemon: Dict,
    stats: Optional[Iterable[Dict]] = None,
    types: Optional[Iterable[Dict]] = None,
    abilities: Optional[Iterable[Dict]] = None,
) -> Pokemon:
    """
    Upsert a Pokemon together with its relations.

    Args:
        session: SQLAlchemy session
        pokemon: Scalar fields (see upsert_pokemon)
        stats: Dicts with stat_name, base_stat, effort
        types: Dicts with id, name, slot
        abilities: Dicts with id, name, slot, is_hidden

    Returns:
        Pokemon row (not committed)
    """
    row = upsert_pokemon(session, pokemon)
    for stat in stats or []:
        upsert_stat(session, row.id, stat["stat_name"], stat["base_stat"], stat.get("effort", 0))
    for type_ in types or []:
        upsert_type(session, type_["id"], type_["name"])
        upsert_pokemon_type(session, row.id, type_["id"], type_["slot"])
    for ability in abilities or []:
        upsert_ability(session, ability["id"], ability["name"])
        upsert_pokemon_ability(
            session,
            row.id,
            ability["id"],
            ability["slot"],
            bool(ability.get("is_hidden", False)),
        )
    session.flush()
    return row
