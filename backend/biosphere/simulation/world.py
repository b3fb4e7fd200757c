"""世界容器与区域播种工具"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from ..core.random import WorldRNG
from ..models.region import Biome, ClimateState, Region, Resource, WorldLayer
from ..services.ecology.food_web import EcosystemState, biome_capacity, species_capacity_key
from ..services.ecology.plants import default_plants

logger = logging.getLogger(__name__)

# 部分群系的初始气候覆盖值：(温度, 湿度, 降水)
BIOME_INITIAL_CLIMATE: dict[Biome, tuple[float, float, float]] = {
    Biome.TROPICAL_RAINFOREST: (28.0, 0.9, 200.0),
    Biome.DESERT: (35.0, 0.1, 5.0),
    Biome.TUNDRA: (-10.0, 0.3, 20.0),
    Biome.DEEP_OCEAN: (4.0, 1.0, 0.0),
    Biome.CAVE_SYSTEM: (15.0, 0.7, 0.0),
}


def initial_climate(biome: Biome, latitude: float, rng: WorldRNG | None = None) -> ClimateState:
    """播种时的初始气候：默认随纬度降温，个别群系直接给定"""
    wind = 10.0 + (rng.uniform(-5.0, 5.0) if rng is not None else 0.0)
    if biome in BIOME_INITIAL_CLIMATE:
        temperature, humidity, precipitation = BIOME_INITIAL_CLIMATE[biome]
    else:
        temperature, humidity, precipitation = 30 - abs(latitude) * 0.5, 0.5, 50.0
    return ClimateState(
        temperature=temperature,
        humidity=humidity,
        precipitation=precipitation,
        wind_speed=wind,
        pollution=0.0,
    )


@dataclass
class World:
    """区域图 + 全局生态状态 + 当前 tick"""
    regions: dict[str, Region] = field(default_factory=dict)
    ecosystem: EcosystemState = field(default_factory=EcosystemState)
    tick: int = 0

    def add_region(
        self,
        region_id: str,
        name: str,
        layer: WorldLayer,
        biome: Biome,
        latitude: float = 0.0,
        longitude: float = 0.0,
        elevation: float = 0.0,
        capacity: int | None = None,
        rng: WorldRNG | None = None,
    ) -> Region:
        """创建区域，附带初始气候、默认植被与按群系换算的承载力"""
        region = Region(
            id=region_id,
            name=name,
            layer=layer,
            biome=biome,
            latitude=latitude,
            longitude=longitude,
            elevation=elevation,
            climate=initial_climate(biome, latitude, rng),
            plants=default_plants(biome),
        )
        self.regions[region_id] = region
        if capacity is None:
            capacity = biome_capacity(biome, self.ecosystem.default_capacity)
        self.ecosystem.carrying_capacity[region_id] = capacity
        return region

    def connect(self, a: str, b: str) -> None:
        """建立双向相邻关系"""
        if a not in self.regions or b not in self.regions:
            raise KeyError(f"未知区域: {a if a not in self.regions else b}")
        self.regions[a].connect(b)
        self.regions[b].connect(a)

    def add_resource(
        self,
        region_id: str,
        resource_type: str,
        quantity: float,
        renewal_rate: float,
        max_quantity: float | None = None,
    ) -> Resource:
        resource = Resource(
            resource_type=resource_type,
            quantity=quantity,
            renewal_rate=renewal_rate,
            max_quantity=quantity if max_quantity is None else max_quantity,
        )
        self.regions[region_id].resources.append(resource)
        return resource

    def seed_population(
        self,
        region_id: str,
        species_id: str,
        count: int,
        species_capacity: int | None = None,
    ) -> None:
        pop = self.regions[region_id].ensure_population(species_id)
        pop.count = max(0, pop.count + count)
        if species_capacity is not None:
            self.ecosystem.species_capacity[species_capacity_key(region_id, species_id)] = species_capacity
