from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ClimateSnapshot(BaseModel):
    temperature: float
    humidity: float
    precipitation: float
    wind_speed: float
    pollution: float


class ResourceSnapshot(BaseModel):
    resource_type: str
    quantity: float
    renewal_rate: float
    max_quantity: float


class PopulationSnapshot(BaseModel):
    species_id: str
    count: int
    character_ids: list[str] = []


class PlantSnapshot(BaseModel):
    plant_type: str
    biomass: float
    max_biomass: float
    growth_rate: float
    spread_rate: float
    destroyed: bool = False
    ticks_below_threshold: int = 0


class RegionSnapshot(BaseModel):
    id: str
    name: str
    layer: str
    biome: str
    latitude: float
    longitude: float
    elevation: float
    connections: list[str] = []
    climate: ClimateSnapshot
    resources: list[ResourceSnapshot] = []
    populations: list[PopulationSnapshot] = []
    plants: list[PlantSnapshot] = []


class FoodWebEdge(BaseModel):
    predator_id: str
    prey_id: str
    efficiency: float


class EcosystemSnapshot(BaseModel):
    food_web: list[FoodWebEdge] = []
    carrying_capacity: dict[str, int] = {}
    species_capacity: dict[str, int] = {}  # key: "region_id:species_id"
    default_capacity: int = 10000


class CatastropheEffectSnapshot(BaseModel):
    effect_type: str
    magnitude: float
    species_filter: str | None = None


class CatastropheSnapshot(BaseModel):
    id: str
    catastrophe_type: str
    region_ids: list[str]
    severity: float
    tick_started: int
    duration: int
    ticks_remaining: int
    cause: str
    effects: list[CatastropheEffectSnapshot] = []
    mutation_bonus: float = 0.0


class WorldSnapshot(BaseModel):
    """世界可序列化状态

    锋面、干旱、火山状态不在快照内，恢复后从空状态重新演化。
    """
    model_config = ConfigDict(extra="ignore")

    version: int = 1
    tick: int = 0
    regions: list[RegionSnapshot] = []
    ecosystem: EcosystemSnapshot = Field(default_factory=EcosystemSnapshot)
    catastrophes: list[CatastropheSnapshot] = []
    extinct_species: list[str] = []
