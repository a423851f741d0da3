"""API layer: canonical read surface for the CLI and other callers.

Key rules:

1. No SQLAlchemy imports beyond Session for type hints - call the query modules
2. Return Pydantic models only
3. A missing Pokemon is None, never an exception
"""
