"""Tile action eligibility and command submission for a tile-based strategy game."""

__version__ = "0.1.0"
