"""Composition DTOs for the API layer.

These wrap the query-layer models; they do not duplicate PokemonDetail.
"""

from typing import List, Optional

from pydantic import BaseModel

from ..database.base import StatRow
from ..database.pokemon_queries import PokemonDetail
from ..database.stats_queries import StrongestPokemonRow


class SearchResult(BaseModel):
    id: int
    name: str
    generation: Optional[int] = None
    types: List[str] = []


class SearchResponse(BaseModel):
    results: List[SearchResult]
    total: int  # matches ignoring the limit


class StatShare(BaseModel):
    stat_name: str
    base_stat: int
    effort: int
    percentage: float  # of total stats, one decimal


class PokemonStatsDTO(BaseModel):
    id: int
    name: str
    stats: List[StatRow]
    total_stats: int
    distribution: List[StatShare]


class RankingResponse(BaseModel):
    criteria: str
    results: List[StrongestPokemonRow]


class StatComparison(BaseModel):
    stat_name: str
    first: Optional[int] = None
    second: Optional[int] = None
    winner: Optional[str] = None  # name of the higher Pokemon, None on a tie


class ComparisonDTO(BaseModel):
    first: PokemonDetail
    second: PokemonDetail
    stats: List[StatComparison]
    total_winner: Optional[str] = None


class RelationMember(BaseModel):
    id: int
    name: str
    generation: Optional[int] = None


class RelationInfoDTO(BaseModel):
    """A type or ability, optionally with the Pokemon that have it."""

    kind: str  # "type" or "ability"
    name: str
    display_name: str
    include_pokemon: bool = False
    limit: int
    pokemon: List[RelationMember] = []
