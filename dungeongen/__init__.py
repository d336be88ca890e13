"""Procedural dungeon layout generation."""

__version__ = "0.1.0"
