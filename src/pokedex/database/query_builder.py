"""Dynamic SQL assembly for the search and ranking queries.

Fragments are written with positional ``?`` placeholders. Each fragment is
stored together with its own parameters, and ``build()`` renames every
placeholder to a unique named bind (``:p0``, ``:p1``, ...) in the order the
fragments were added. A fragment can therefore never end up bound to another
fragment's value, whatever clause section it lands in.
"""

import re
from typing import Any, Dict, List, NamedTuple, Optional, Tuple

_PLACEHOLDER = re.compile(r"\?")
_WHITESPACE = re.compile(r"\s+")


class SqlFragment(NamedTuple):
    sql: str
    params: Tuple[Any, ...] = ()


def ci_equals(column: str, bind: Optional[str] = None) -> str:
    """Case-insensitive equality against one bound value.

    Every name comparison (pokemon, type, ability) goes through here. Without
    ``bind`` the value is a positional placeholder for QueryBuilder; with it,
    a named bind for static statements.
    """
    placeholder = f":{bind}" if bind else "?"
    return f"LOWER({column}) = LOWER({placeholder})"


def normalize_sql(sql: str) -> str:
    """Collapse whitespace so equivalent query shapes share one cache key."""
    return _WHITESPACE.sub(" ", sql).strip()


def _check_arity(sql: str, params: Tuple[Any, ...]) -> None:
    expected = sql.count("?")
    if expected != len(params):
        raise ValueError(
            f"Fragment expects {expected} parameter(s), got {len(params)}: {normalize_sql(sql)}"
        )


class QueryBuilder:
    """Accumulates clause fragments and their bound values.

    Usage:
        qb = QueryBuilder("SELECT p.id FROM pokemon p")
        qb.where(ci_equals("p.name"), "pikachu")
        qb.order_by("p.id").limit(5)
        sql, params = qb.build()
    """

    def __init__(self, select_sql: str, *params: Any):
        _check_arity(select_sql, params)
        self._select = SqlFragment(select_sql, params)
        self._joins: List[SqlFragment] = []
        self._conditions: List[SqlFragment] = []
        self._group_by: Optional[str] = None
        self._having: List[SqlFragment] = []
        self._order_by: Optional[str] = None
        self._limit: Optional[SqlFragment] = None

    def join(self, sql: str, *params: Any) -> "QueryBuilder":
        _check_arity(sql, params)
        self._joins.append(SqlFragment(sql, params))
        return self

    def where(self, sql: str, *params: Any) -> "QueryBuilder":
        """Add a condition; conditions are AND-ed together."""
        _check_arity(sql, params)
        self._conditions.append(SqlFragment(sql, params))
        return self

    def group_by(self, sql: str) -> "QueryBuilder":
        self._group_by = sql
        return self

    def having(self, sql: str, *params: Any) -> "QueryBuilder":
        _check_arity(sql, params)
        self._having.append(SqlFragment(sql, params))
        return self

    def order_by(self, sql: str) -> "QueryBuilder":
        self._order_by = sql
        return self

    def limit(self, value: int) -> "QueryBuilder":
        self._limit = SqlFragment("LIMIT ?", (value,))
        return self

    @property
    def has_conditions(self) -> bool:
        return bool(self._conditions)

    def _fragments(self) -> List[SqlFragment]:
        """All fragments in final textual order."""
        fragments = [self._select, *self._joins]
        if self._conditions:
            joined = " AND ".join(f.sql for f in self._conditions)
            params = tuple(p for f in self._conditions for p in f.params)
            fragments.append(SqlFragment(f"WHERE {joined}", params))
        if self._group_by:
            fragments.append(SqlFragment(f"GROUP BY {self._group_by}"))
        if self._having:
            joined = " AND ".join(f.sql for f in self._having)
            params = tuple(p for f in self._having for p in f.params)
            fragments.append(SqlFragment(f"HAVING {joined}", params))
        if self._order_by:
            fragments.append(SqlFragment(f"ORDER BY {self._order_by}"))
        if self._limit:
            fragments.append(self._limit)
        return fragments

    def build(self) -> Tuple[str, Dict[str, Any]]:
        """
        Render the statement.

        Returns:
            Tuple of (normalized SQL with named binds, bind parameter dict)
        """
        params: Dict[str, Any] = {}
        parts: List[str] = []
        counter = 0

        for fragment in self._fragments():
            values = iter(fragment.params)

            def _bind(_match: "re.Match[str]") -> str:
                nonlocal counter
                name = f"p{counter}"
                counter += 1
                params[name] = next(values)
                return f":{name}"

            parts.append(_PLACEHOLDER.sub(_bind, fragment.sql))

        return normalize_sql(" ".join(parts)), params
