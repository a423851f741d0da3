"""CLI entrypoint for the pokedex query layer."""

import argparse
import sys
from pathlib import Path
from typing import Any, Dict

from pokedex.api.pokemon_api import (
    compare_pokemon,
    get_ability_info,
    get_pokemon_detail,
    get_pokemon_stats,
    get_type_info,
    rank,
    search,
)
from pokedex.config.loader import get_query_defaults, get_sqlite_path, load_config_or_defaults
from pokedex.database.base import PokemonSearchFilter, StatsCriteria
from pokedex.database.search_queries import validate_search_filter
from pokedex.database.service import DatabaseService
from pokedex.database.sqlite_client import session_context
from pokedex.database.stats_queries import ALLOWED_CRITERIA
from pokedex.errors import InvalidCriteriaError
from pokedex.output.render import (
    render_comparison_markdown,
    render_json,
    render_not_found,
    render_pokemon_markdown,
    render_ranking_markdown,
    render_relation_markdown,
    render_relation_not_found,
    render_search_markdown,
    render_stats_markdown,
)
from pokedex.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _load(args: argparse.Namespace) -> Dict[str, Any]:
    """Config for this invocation, read once and kept on args."""
    config = getattr(args, "loaded_config", None)
    if config is None:
        config = load_config_or_defaults(Path(args.config) if args.config else None)
        if args.db:
            config.setdefault("storage", {})["sqlite_path"] = args.db
        args.loaded_config = config
    return config


def cmd_get(args: argparse.Namespace) -> int:
    """Show one Pokemon with types, abilities and stats."""
    config = _load(args)
    with session_context(get_sqlite_path(config)) as session:
        detail = get_pokemon_detail(DatabaseService(session), args.identifier)
    if detail is None:
        print(render_not_found(args.identifier))
        return 1
    print(render_json(detail) if args.format == "json" else render_pokemon_markdown(detail))
    return 0


def cmd_stats(args: argparse.Namespace) -> int:
    """Show a Pokemon's stat breakdown."""
    config = _load(args)
    with session_context(get_sqlite_path(config)) as session:
        stats = get_pokemon_stats(DatabaseService(session), args.identifier)
    if stats is None:
        print(render_not_found(args.identifier))
        return 1
    print(render_json(stats) if args.format == "json" else render_stats_markdown(stats))
    return 0


def cmd_search(args: argparse.Namespace) -> int:
    """Search Pokemon by type, ability, generation and minimum total stats."""
    config = _load(args)
    search_filter = PokemonSearchFilter(
        type=args.type,
        ability=args.ability,
        generation=args.generation,
        min_stat=args.min_stat,
        limit=args.limit or get_query_defaults(config)["search_limit"],
    )
    validation = validate_search_filter(search_filter)
    if not validation.valid:
        for error in validation.errors:
            print(f"Error: {error}", file=sys.stderr)
        return 2

    with session_context(get_sqlite_path(config)) as session:
        response = search(DatabaseService(session), search_filter)
    print(render_json(response) if args.format == "json" else render_search_markdown(response))
    return 0


def cmd_rank(args: argparse.Namespace) -> int:
    """Rank the strongest Pokemon by a stat or by total stats."""
    config = _load(args)
    criteria = StatsCriteria(
        criteria=args.criteria,
        type=args.type,
        generation=args.generation,
        limit=args.limit or get_query_defaults(config)["rank_limit"],
    )
    try:
        with session_context(get_sqlite_path(config)) as session:
            service = DatabaseService(session, legacy_stat_tokens=args.legacy_stat_tokens)
            response = rank(service, criteria)
    except InvalidCriteriaError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2
    print(render_json(response) if args.format == "json" else render_ranking_markdown(response))
    return 0


def cmd_compare(args: argparse.Namespace) -> int:
    """Compare two Pokemon side by side."""
    config = _load(args)
    with session_context(get_sqlite_path(config)) as session:
        service = DatabaseService(session)
        comparison = compare_pokemon(service, args.first, args.second)
        if comparison is None:
            missing = args.first if service.pokemon.get_pokemon(args.first.strip()) is None else args.second
            print(render_not_found(missing))
            return 1
    print(render_json(comparison) if args.format == "json" else render_comparison_markdown(comparison))
    return 0


def cmd_type(args: argparse.Namespace) -> int:
    """Show a type, optionally with the Pokemon that have it."""
    config = _load(args)
    limit = args.limit or get_query_defaults(config)["type_lookup_limit"]
    with session_context(get_sqlite_path(config)) as session:
        info = get_type_info(DatabaseService(session), args.name, args.include_pokemon, limit)
    if info is None:
        print(render_relation_not_found("type", args.name))
        return 1
    print(render_json(info) if args.format == "json" else render_relation_markdown(info))
    return 0


def cmd_ability(args: argparse.Namespace) -> int:
    """Show an ability, optionally with the Pokemon that have it."""
    config = _load(args)
    limit = args.limit or get_query_defaults(config)["ability_lookup_limit"]
    with session_context(get_sqlite_path(config)) as session:
        info = get_ability_info(DatabaseService(session), args.name, args.include_pokemon, limit)
    if info is None:
        print(render_relation_not_found("ability", args.name))
        return 1
    print(render_json(info) if args.format == "json" else render_relation_markdown(info))
    return 0


def cmd_doctor(args: argparse.Namespace) -> int:
    """Check that the store is reachable and report row counts."""
    config = _load(args)
    sqlite_path = get_sqlite_path(config)
    with session_context(sqlite_path) as session:
        stats = DatabaseService(session).get_stats()

    print(f"Database: {sqlite_path}")
    if not stats.healthy:
        print(f"Status: UNHEALTHY ({stats.error})")
        return 1
    print("Status: OK")
    print(f"Pokemon: {stats.pokemon} | Types: {stats.types} | Abilities: {stats.abilities}")
    if stats.pokemon == 0:
        print("Warning: no Pokemon loaded. Run the ingestion job first.")
    return 0


def _add_common(parser: argparse.ArgumentParser, with_format: bool = True) -> None:
    parser.add_argument("--config", help="Path to pokedex.config.yaml")
    parser.add_argument("--db", help="SQLite path (overrides config)")
    if with_format:
        parser.add_argument(
            "--format",
            choices=["markdown", "json"],
            default="markdown",
            help="Output format (default: markdown)",
        )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="pokedex", description="Query a local Pokemon database")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    get_parser = subparsers.add_parser("get", help="Show a Pokemon by id or name")
    get_parser.add_argument("identifier", help="Pokemon id or name")
    _add_common(get_parser)
    get_parser.set_defaults(func=cmd_get)

    stats_parser = subparsers.add_parser("stats", help="Show a Pokemon's stat breakdown")
    stats_parser.add_argument("identifier", help="Pokemon id or name")
    _add_common(stats_parser)
    stats_parser.set_defaults(func=cmd_stats)

    search_parser = subparsers.add_parser("search", help="Search Pokemon")
    search_parser.add_argument("--type", help="Type name (case-insensitive)")
    search_parser.add_argument("--ability", help="Ability name (case-insensitive)")
    search_parser.add_argument("--generation", type=int, help="Generation number")
    search_parser.add_argument("--min-stat", dest="min_stat", type=int, help="Minimum total base stats")
    search_parser.add_argument("--limit", type=int, help="Maximum results")
    _add_common(search_parser)
    search_parser.set_defaults(func=cmd_search)

    rank_parser = subparsers.add_parser("rank", help="Strongest Pokemon by criteria")
    rank_parser.add_argument("criteria", help=f"One of: {', '.join(ALLOWED_CRITERIA)}")
    rank_parser.add_argument("--type", help="Type name (case-insensitive)")
    rank_parser.add_argument("--generation", type=int, help="Generation number")
    rank_parser.add_argument("--limit", type=int, help="Maximum results")
    rank_parser.add_argument(
        "--legacy-stat-tokens",
        action="store_true",
        help="Use the old sp_attack -> sp-attack token mapping",
    )
    _add_common(rank_parser)
    rank_parser.set_defaults(func=cmd_rank)

    compare_parser = subparsers.add_parser("compare", help="Compare two Pokemon")
    compare_parser.add_argument("first", help="First Pokemon id or name")
    compare_parser.add_argument("second", help="Second Pokemon id or name")
    _add_common(compare_parser)
    compare_parser.set_defaults(func=cmd_compare)

    for kind, handler in (("type", cmd_type), ("ability", cmd_ability)):
        relation_parser = subparsers.add_parser(kind, help=f"Show a Pokemon {kind}")
        relation_parser.add_argument("name", help=f"{kind.capitalize()} name (case-insensitive)")
        relation_parser.add_argument(
            "--include-pokemon",
            action="store_true",
            help=f"List Pokemon with this {kind}",
        )
        relation_parser.add_argument("--limit", type=int, help="Maximum Pokemon listed")
        _add_common(relation_parser)
        relation_parser.set_defaults(func=handler)

    doctor_parser = subparsers.add_parser("doctor", help="Run health checks on the database")
    _add_common(doctor_parser, with_format=False)
    doctor_parser.set_defaults(func=cmd_doctor)

    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = _load(args)
    level = "DEBUG" if args.verbose else (config.get("logging") or {}).get("level", "WARNING")
    configure_logging(level)

    try:
        return args.func(args)
    except Exception as e:
        logger.error(f"Command '{args.command}' failed: {e}", exc_info=True)
        raise


if __name__ == "__main__":
    sys.exit(main())
