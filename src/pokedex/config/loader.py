from copy import deepcopy
from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("pokedex.config.yaml")
DEFAULT_SQLITE_PATH = "data/pokemon.sqlite"

BASE_DEFAULTS: Dict[str, Any] = {
    "storage": {
        "sqlite_path": DEFAULT_SQLITE_PATH,
    },
    "queries": {
        "search_limit": 20,
        "rank_limit": 10,
        "type_lookup_limit": 20,
        "ability_lookup_limit": 20,
    },
    "logging": {
        "level": "WARNING",
    },
}


def _merge_defaults(config: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay user sections on top of the built-in defaults (one level deep)."""
    merged = deepcopy(BASE_DEFAULTS)
    for section, values in config.items():
        if isinstance(values, dict) and isinstance(merged.get(section), dict):
            merged[section] = {**merged[section], **values}
        else:
            merged[section] = values
    return merged


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load pokedex configuration from YAML.

    Args:
        path: Optional path to the config file. Defaults to pokedex.config.yaml

    Returns:
        Configuration dict with defaults applied

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the file isn't a YAML mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Pokedex config must be a dictionary")

    return _merge_defaults(config)


def load_config_or_defaults(path: Path | None = None) -> Dict[str, Any]:
    """Like load_config, but a missing file yields the built-in defaults."""
    try:
        return load_config(path)
    except FileNotFoundError:
        return deepcopy(BASE_DEFAULTS)


def get_sqlite_path(config: Dict[str, Any]) -> str:
    return (config.get("storage") or {}).get("sqlite_path") or DEFAULT_SQLITE_PATH


def get_query_defaults(config: Dict[str, Any]) -> Dict[str, int]:
    """
    Resolve default result limits.

    Raises:
        ValueError: If a configured limit isn't a positive integer
    """
    queries = {**BASE_DEFAULTS["queries"], **(config.get("queries") or {})}
    for key, value in queries.items():
        if isinstance(value, bool) or not isinstance(value, int) or value < 1:
            raise ValueError(f"Config 'queries.{key}' must be a positive integer")
    return queries
