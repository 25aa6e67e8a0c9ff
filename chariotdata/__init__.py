"""Decoders for legacy Age of Empires game-data files."""

__version__ = "0.1.0"
