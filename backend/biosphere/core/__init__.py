"""Process settings, logging setup and the shared world RNG."""

from .config import Settings, get_settings, setup_logging
from .random import WeightedOption, WorldRNG

__all__ = ["Settings", "get_settings", "setup_logging", "WeightedOption", "WorldRNG"]
