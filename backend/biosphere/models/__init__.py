"""Data models for regions, species, world time and engine configuration."""

from .config import CatastropheConfig, ClimateConfig, EcosystemConfig, EngineConfig, load_engine_config
from .region import (
    Biome,
    ClimateState,
    InvariantViolation,
    PlantPopulation,
    Population,
    Region,
    Resource,
    WorldLayer,
    clamp01,
)
from .species import CharacterRegistry, Diet, Species, SpeciesRegistry, SpeciesTraits
from .world import (
    EventEffect,
    EventLevel,
    EventType,
    LunarPhase,
    Season,
    WorldEvent,
    WorldTime,
)

__all__ = [
    # 配置
    "ClimateConfig",
    "EcosystemConfig",
    "CatastropheConfig",
    "EngineConfig",
    "load_engine_config",
    # 区域
    "WorldLayer",
    "Biome",
    "ClimateState",
    "Resource",
    "Population",
    "PlantPopulation",
    "Region",
    "InvariantViolation",
    "clamp01",
    # 物种
    "Diet",
    "SpeciesTraits",
    "Species",
    "SpeciesRegistry",
    "CharacterRegistry",
    # 时间与事件
    "Season",
    "LunarPhase",
    "WorldTime",
    "EventType",
    "EventLevel",
    "EventEffect",
    "WorldEvent",
]
