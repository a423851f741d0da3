"""Markdown and JSON rendering for API models.

This module is renderer-only. All query/transform logic lives in api/pokemon_api.py.
"""

from typing import List

from pydantic import BaseModel

from ..api.models import ComparisonDTO, PokemonStatsDTO, RankingResponse, RelationInfoDTO, SearchResponse
from ..database.abilities_queries import AbilitiesQueries
from ..database.pokemon_queries import PokemonDetail


def capitalize_name(name: str) -> str:
    return name[:1].upper() + name[1:]


def format_height(height: int | None) -> str:
    """Decimetres -> metres."""
    return "?" if height is None else f"{height / 10}m"


def format_weight(weight: int | None) -> str:
    """Hectograms -> kilograms."""
    return "?" if weight is None else f"{weight / 10}kg"


def render_json(model: BaseModel) -> str:
    """Render any API model as JSON."""
    return model.model_dump_json(indent=2)


def render_not_found(identifier: str) -> str:
    return f'Pokemon "{identifier}" not found.'


def render_relation_not_found(kind: str, name: str) -> str:
    return f'{kind.capitalize()} "{name}" not found.'


def render_pokemon_markdown(detail: PokemonDetail) -> str:
    p = detail.pokemon
    groups = AbilitiesQueries.group_abilities_by_hidden(detail.abilities)
    abilities = ", ".join(
        [a.name for a in groups["normal"]] + [f"{a.name} (Hidden)" for a in groups["hidden"]]
    )
    lines = [
        f"# {capitalize_name(p.name)} (#{p.id})",
        "",
        "**Basic Info:**",
        f"- Generation: {p.generation}",
        f"- Height: {format_height(p.height)}",
        f"- Weight: {format_weight(p.weight)}",
        f"- Base Experience: {p.base_experience}",
        "",
        f"**Types:** {', '.join(t.name for t in detail.types)}",
        "",
        f"**Abilities:** {abilities}",
        "",
        "**Base Stats:**",
    ]
    lines.extend(f"- {s.stat_name}: {s.base_stat}" for s in detail.stats)
    lines.append(f"- **Total: {detail.total_stats}**")
    return "\n".join(lines)


def render_stats_markdown(stats: PokemonStatsDTO) -> str:
    lines = [f"# {capitalize_name(stats.name)} - Detailed Stats", "", "## Base Stats"]
    lines.extend(f"**{s.stat_name}:** {s.base_stat} (EV: {s.effort})" for s in stats.stats)
    lines += ["", f"**Total Base Stats:** {stats.total_stats}", "", "## Stat Distribution"]
    lines.extend(f"- {s.stat_name}: {s.percentage}% of total stats" for s in stats.distribution)
    return "\n".join(lines)


def render_search_markdown(response: SearchResponse) -> str:
    if not response.results:
        return "No Pokemon found matching the specified criteria."

    blocks: List[str] = []
    for result in response.results:
        blocks.append(
            f"**{capitalize_name(result.name)}** (#{result.id}) - Gen {result.generation}\n"
            f"  Types: {', '.join(result.types)}"
        )
    header = f"# Search Results ({len(response.results)} shown, {response.total} found)"
    return header + "\n\n" + "\n\n".join(blocks)


def render_ranking_markdown(response: RankingResponse) -> str:
    label = response.criteria.replace("_", " ")
    if not response.results:
        return f"No Pokemon found for criteria: {response.criteria}"

    blocks = [
        f"{index}. **{capitalize_name(row.name)}** (#{row.id}) - Gen {row.generation}\n"
        f"   {label}: {row.stat_value}"
        for index, row in enumerate(response.results, start=1)
    ]
    return f"# Strongest Pokemon by {label}\n\n" + "\n\n".join(blocks)


def render_comparison_markdown(comparison: ComparisonDTO) -> str:
    a, b = comparison.first.pokemon, comparison.second.pokemon
    name_a, name_b = capitalize_name(a.name), capitalize_name(b.name)
    lines = [
        "# Pokemon Comparison",
        "",
        f"## {name_a} vs {name_b}",
        "",
        f"| Attribute | {name_a} | {name_b} |",
        f"|-----------|{'-' * len(name_a)}|{'-' * len(name_b)}|",
        f"| ID | #{a.id} | #{b.id} |",
        f"| Generation | {a.generation} | {b.generation} |",
        f"| Height | {format_height(a.height)} | {format_height(b.height)} |",
        f"| Weight | {format_weight(a.weight)} | {format_weight(b.weight)} |",
        "",
        "## Stat Comparison",
        "",
        f"| Stat | {name_a} | {name_b} | Difference |",
        f"|------|{'-' * len(name_a)}|{'-' * len(name_b)}|------------|",
    ]
    for stat in comparison.stats:
        first, second = stat.first or 0, stat.second or 0
        diff = first - second
        diff_str = f"+{diff}" if diff > 0 else str(diff)
        lines.append(f"| {stat.stat_name} | {first} | {second} | {diff_str} |")
    lines += [
        "",
        f"**Total Stats:** {comparison.first.total_stats} vs {comparison.second.total_stats}",
    ]
    return "\n".join(lines)


def render_relation_markdown(info: RelationInfoDTO) -> str:
    """Type or ability summary; the member list only when it was requested."""
    label = info.kind.capitalize()
    text = f"# {info.display_name} {label} Analysis\n\n"
    if info.include_pokemon and info.pokemon:
        text += f"## Pokemon with {info.name} {info.kind} (showing first {info.limit}):\n\n"
        text += "\n".join(
            f"- **{capitalize_name(p.name)}** (#{p.id}) - Gen {p.generation}" for p in info.pokemon
        )
    elif info.include_pokemon:
        text += f"No Pokemon have the {info.name} {info.kind}."
    return text.rstrip("\n")
