from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    func,
)
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Pokemon(Base):
    __tablename__ = "pokemon"

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)  # compared case-insensitively
    height = Column(Integer)  # decimetres
    weight = Column(Integer)  # hectograms
    base_experience = Column(Integer)
    generation = Column(Integer, index=True)
    species_url = Column(Text)
    sprite_url = Column(Text)
    created_at = Column(DateTime, server_default=func.current_timestamp())


class Stat(Base):
    __tablename__ = "stats"

    id = Column(Integer, primary_key=True, autoincrement=True)
    pokemon_id = Column(Integer, ForeignKey("pokemon.id"), nullable=False, index=True)
    stat_name = Column(String, nullable=False)  # canonical name, e.g. special-attack
    base_stat = Column(Integer, nullable=False)
    effort = Column(Integer, nullable=False, default=0)  # EV yield

    __table_args__ = (
        UniqueConstraint("pokemon_id", "stat_name", name="uq_stats_pokemon_stat"),
    )


class Type(Base):
    __tablename__ = "types"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)


class PokemonType(Base):
    __tablename__ = "pokemon_types"

    pokemon_id = Column(Integer, ForeignKey("pokemon.id"), primary_key=True)
    type_id = Column(Integer, ForeignKey("types.id"), primary_key=True)
    slot = Column(Integer)  # 1 = primary

    __table_args__ = (
        Index("idx_pokemon_types_pokemon", "pokemon_id"),
    )


class Ability(Base):
    __tablename__ = "abilities"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    is_hidden = Column(Boolean, default=False)  # unused; hidden-ness lives on the join row


class PokemonAbility(Base):
    __tablename__ = "pokemon_abilities"

    pokemon_id = Column(Integer, ForeignKey("pokemon.id"), primary_key=True)
    ability_id = Column(Integer, ForeignKey("abilities.id"), primary_key=True)
    is_hidden = Column(Boolean, default=False)
    slot = Column(Integer)


# Reserved for move data; nothing in the query layer reads these yet.
class Move(Base):
    __tablename__ = "moves"

    id = Column(Integer, primary_key=True)
    name = Column(String, unique=True, nullable=False)
    power = Column(Integer)
    accuracy = Column(Integer)
    pp = Column(Integer)
    type_id = Column(Integer, ForeignKey("types.id"))
    damage_class = Column(String)


class PokemonMove(Base):
    __tablename__ = "pokemon_moves"

    pokemon_id = Column(Integer, ForeignKey("pokemon.id"), primary_key=True)
    move_id = Column(Integer, ForeignKey("moves.id"), primary_key=True)
    learn_method = Column(String, primary_key=True)
    level_learned = Column(Integer)


def create_all(engine: Engine) -> None:
    """Create any missing tables; existing tables are left untouched."""
    Base.metadata.create_all(engine)
