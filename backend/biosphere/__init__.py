"""Biosphere - planet-scale world simulation core (climate, ecosystem, catastrophe)."""

__version__ = "0.1.0"
