from .snapshot import (
    CatastropheEffectSnapshot,
    CatastropheSnapshot,
    ClimateSnapshot,
    EcosystemSnapshot,
    FoodWebEdge,
    PlantSnapshot,
    PopulationSnapshot,
    RegionSnapshot,
    ResourceSnapshot,
    WorldSnapshot,
)

__all__ = [
    "ClimateSnapshot",
    "ResourceSnapshot",
    "PopulationSnapshot",
    "PlantSnapshot",
    "RegionSnapshot",
    "FoodWebEdge",
    "EcosystemSnapshot",
    "CatastropheEffectSnapshot",
    "CatastropheSnapshot",
    "WorldSnapshot",
]
