"""Pokedex: read-only query layer over a local Pokemon SQLite store."""

__version__ = "0.3.0"
