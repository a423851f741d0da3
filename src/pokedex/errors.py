"""Exception types raised by the query layer.

Missing Pokemon are not errors: lookups return None or an empty list.
Storage failures are SQLAlchemy exceptions and propagate unchanged.
"""


class PokedexError(Exception):
    """Base class for pokedex errors."""


class StatementNotFoundError(PokedexError):
    """A query module asked for a statement it never prepared.

    This is a construction-order bug, not a runtime condition.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(
            f"Statement '{key}' not found. Ensure it's prepared in prepare_statements()"
        )


class InvalidCriteriaError(PokedexError, ValueError):
    """A ranking criteria token outside the allowed set."""

    def __init__(self, criteria: str, allowed: tuple[str, ...]):
        self.criteria = criteria
        self.allowed = allowed
        super().__init__(
            f"Invalid criteria: {criteria!r}. Expected one of: {', '.join(allowed)}"
        )
