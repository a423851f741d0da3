"""One entry point bundling every query module over a single session."""

from typing import Optional

from pydantic import BaseModel
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..utils.logging import get_logger
from .abilities_queries import AbilitiesQueries
from .pokemon_queries import PokemonQueries
from .search_queries import SearchQueries
from .stats_queries import StatsQueries
from .types_queries import TypesQueries

logger = get_logger(__name__)


class DatabaseStats(BaseModel):
    pokemon: int = 0
    types: int = 0
    abilities: int = 0
    healthy: bool
    error: Optional[str] = None


class DatabaseService:
    """Query modules sharing one session; each prepares its statements once here."""

    def __init__(self, session: Session, legacy_stat_tokens: bool = False):
        self.session = session
        self.pokemon = PokemonQueries(session)
        self.stats = StatsQueries(session, legacy_stat_tokens=legacy_stat_tokens)
        self.types = TypesQueries(session)
        self.abilities = AbilitiesQueries(session)
        self.search = SearchQueries(session)

    def is_healthy(self) -> bool:
        try:
            self.session.execute(text("SELECT 1")).scalar()
            return True
        except SQLAlchemyError as e:
            logger.warning("Database health check failed: %s", e)
            return False

    def get_stats(self) -> DatabaseStats:
        """Row counts for the main tables; failures are reported, not raised."""
        try:
            counts = {
                table: self.session.execute(text(f"SELECT COUNT(*) FROM {table}")).scalar() or 0
                for table in ("pokemon", "types", "abilities")
            }
            return DatabaseStats(**counts, healthy=True)
        except SQLAlchemyError as e:
            logger.warning("Failed to read database stats: %s", e)
            return DatabaseStats(healthy=False, error=str(e))
