"""CLI tests against a seeded SQLite file."""

import json

import pytest

from pokedex import cli
from pokedex.cli import main
from pokedex.database.sqlite_client import session_context

from conftest import seed_pokemon


@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "data" / "pokemon.sqlite"
    with session_context(str(path)) as session:
        seed_pokemon(session)
    return str(path)


def test_get_markdown(db_path, capsys):
    assert main(["get", "PIKACHU", "--db", db_path]) == 0
    out = capsys.readouterr().out
    assert "# Pikachu (#25)" in out
    assert "lightning-rod (Hidden)" in out


def test_get_json(db_path, capsys):
    assert main(["get", "1", "--db", db_path, "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["total_stats"] == 318


def test_get_not_found(db_path, capsys):
    assert main(["get", "agumon", "--db", db_path]) == 1
    assert 'Pokemon "agumon" not found.' in capsys.readouterr().out


def test_stats(db_path, capsys):
    assert main(["stats", "bulbasaur", "--db", db_path]) == 0
    assert "**Total Base Stats:** 318" in capsys.readouterr().out


def test_search_json(db_path, capsys):
    assert main(["search", "--type", "grass", "--min-stat", "319", "--db", db_path, "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [r["id"] for r in payload["results"]] == [2]
    assert payload["total"] == 1


def test_search_invalid_filter(db_path, capsys):
    assert main(["search", "--generation", "12", "--db", db_path]) == 2
    assert "Generation must be an integer between 1 and 9" in capsys.readouterr().err


def test_rank(db_path, capsys):
    assert main(["rank", "total_stats", "--limit", "2", "--db", db_path, "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert [r["name"] for r in payload["results"]] == ["ivysaur", "pikachu"]


def test_rank_invalid_criteria(db_path, capsys):
    assert main(["rank", "luck", "--db", db_path]) == 2
    assert "Invalid criteria" in capsys.readouterr().err


def test_rank_legacy_tokens(db_path, capsys):
    assert main(["rank", "sp_attack", "--legacy-stat-tokens", "--db", db_path]) == 0
    assert "No Pokemon found for criteria: sp_attack" in capsys.readouterr().out


def test_compare(db_path, capsys):
    assert main(["compare", "1", "charmander", "--db", db_path]) == 0
    assert "## Bulbasaur vs Charmander" in capsys.readouterr().out


def test_compare_missing(db_path, capsys):
    assert main(["compare", "1", "agumon", "--db", db_path]) == 1
    assert 'Pokemon "agumon" not found.' in capsys.readouterr().out


def test_doctor(db_path, capsys):
    assert main(["doctor", "--db", db_path]) == 0
    out = capsys.readouterr().out
    assert "Status: OK" in out
    assert "Pokemon: 6 | Types: 4 | Abilities: 7" in out


def test_doctor_empty_database(tmp_path, capsys):
    assert main(["doctor", "--db", str(tmp_path / "empty.sqlite")]) == 0
    assert "no Pokemon loaded" in capsys.readouterr().out


def test_get_oversized_id_is_not_found(db_path, capsys):
    assert main(["get", "99999999999999999999999", "--db", db_path]) == 1
    assert 'Pokemon "99999999999999999999999" not found.' in capsys.readouterr().out


def test_type_markdown(db_path, capsys):
    assert main(["type", "Grass", "--include-pokemon", "--db", db_path]) == 0
    out = capsys.readouterr().out
    assert "# Grass Type Analysis" in out
    assert "- **Chikorita** (#152) - Gen 2" in out


def test_type_uses_configured_lookup_limit(db_path, tmp_path, capsys):
    cfg = tmp_path / "pokedex.config.yaml"
    cfg.write_text("queries:\n  type_lookup_limit: 1\n")

    assert main(["type", "grass", "--include-pokemon", "--config", str(cfg), "--db", db_path, "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["limit"] == 1
    assert [p["id"] for p in payload["pokemon"]] == [1]


def test_type_not_found(db_path, capsys):
    assert main(["type", "dragon", "--db", db_path]) == 1
    assert 'Type "dragon" not found.' in capsys.readouterr().out


def test_ability_json(db_path, capsys):
    assert main(["ability", "overgrow", "--include-pokemon", "--limit", "2", "--db", db_path, "--format", "json"]) == 0
    payload = json.loads(capsys.readouterr().out)
    assert payload["display_name"] == "Overgrow"
    assert [p["id"] for p in payload["pokemon"]] == [1, 2]


def test_config_loaded_once_per_invocation(db_path, monkeypatch, capsys):
    calls = []
    original = cli.load_config_or_defaults

    def counting_load(path=None):
        calls.append(path)
        return original(path)

    monkeypatch.setattr(cli, "load_config_or_defaults", counting_load)

    assert main(["get", "1", "--db", db_path]) == 0
    assert len(calls) == 1
