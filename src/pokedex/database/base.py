"""Base class for the query modules plus the row and filter models they share."""

import re
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.orm import Session
from sqlalchemy.sql.elements import TextClause

from ..errors import StatementNotFoundError
from ..utils.logging import get_logger
from .query_builder import normalize_sql

logger = get_logger(__name__)

_NUMERIC_ID = re.compile(r"[0-9]+")

# Largest value SQLite stores in an INTEGER column.
MAX_SQLITE_INTEGER = 2**63 - 1

POKEMON_COLUMNS = (
    "p.id, p.name, p.height, p.weight, p.base_experience, "
    "p.generation, p.species_url, p.sprite_url"
)

# Display order for stats everywhere they are listed.
STAT_ORDER = (
    "hp",
    "attack",
    "defense",
    "special-attack",
    "special-defense",
    "speed",
)


def is_numeric_id(identifier: str) -> bool:
    """True iff the identifier is made only of decimal digits.

    Decides between primary-key and name lookup everywhere.
    """
    return _NUMERIC_ID.fullmatch(identifier) is not None


class BaseQueryModule(ABC):
    """
    Owns a set of named, pre-compiled statements.

    Subclasses declare their statements in prepare_statements(), which runs
    once at construction. Dynamic queries go through prepare_dynamic(), which
    memoizes by normalized SQL so one filter shape compiles once.

    The session is the only shared mutable resource; no locking happens here.
    """

    def __init__(self, session: Session):
        self.session = session
        self._statements: Dict[str, TextClause] = {}
        self._dynamic: Dict[str, TextClause] = {}
        self.prepare_statements()

    @abstractmethod
    def prepare_statements(self) -> None:
        """Prepare every static statement this module uses."""

    def prepare(self, key: str, sql: str) -> TextClause:
        statement = text(sql)
        self._statements[key] = statement
        logger.debug("Prepared statement %s.%s", type(self).__name__, key)
        return statement

    def get_statement(self, key: str) -> TextClause:
        statement = self._statements.get(key)
        if statement is None:
            raise StatementNotFoundError(key)
        return statement

    def prepare_dynamic(self, sql: str) -> TextClause:
        """Get or compile a statement for a dynamically built query shape."""
        shape = normalize_sql(sql)
        statement = self._dynamic.get(shape)
        if statement is None:
            statement = text(shape)
            self._dynamic[shape] = statement
            logger.debug("Compiled dynamic query shape (%d cached): %s", len(self._dynamic), shape)
        return statement

    def is_numeric_id(self, identifier: str) -> bool:
        return is_numeric_id(identifier)

    def _all(self, statement: TextClause, params: Optional[Dict[str, Any]] = None) -> List[Mapping[str, Any]]:
        return list(self.session.execute(statement, params or {}).mappings().all())

    def _first(self, statement: TextClause, params: Optional[Dict[str, Any]] = None) -> Optional[Mapping[str, Any]]:
        return self.session.execute(statement, params or {}).mappings().first()


class PokemonRow(BaseModel):
    id: int
    name: str
    height: Optional[int] = None
    weight: Optional[int] = None
    base_experience: Optional[int] = None
    generation: Optional[int] = None
    species_url: Optional[str] = None
    sprite_url: Optional[str] = None


class StatRow(BaseModel):
    stat_name: str
    base_stat: int
    effort: int = 0


class TypeRow(BaseModel):
    name: str
    slot: Optional[int] = None


class AbilityRow(BaseModel):
    name: str
    is_hidden: bool = False
    slot: Optional[int] = None


class PokemonSearchFilter(BaseModel):
    """Optional search filters. Falsy values mean "not filtered"."""
    type: Optional[str] = None
    ability: Optional[str] = None
    generation: Optional[int] = None
    min_stat: Optional[int] = None  # minimum total of base stats
    limit: Optional[int] = None


class StatsCriteria(BaseModel):
    """Ranking request. criteria is validated by StatsQueries, not here."""
    criteria: str
    type: Optional[str] = None
    generation: Optional[int] = None
    limit: Optional[int] = None
