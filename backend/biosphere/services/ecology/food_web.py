"""食物网与承载力

食物网是全局的有向图（捕食者 -> 猎物），承载力表在世界播种时由外部给出，
本引擎只查询、不拥有。
"""

from __future__ import annotations

from dataclasses import dataclass, field

from ...models.region import Biome


@dataclass(frozen=True)
class FoodWebRelation:
    """捕食关系边"""
    predator_id: str
    prey_id: str
    efficiency: float  # 0..1


# 各群系承载力相对倍率
BIOME_CAPACITY_MULTIPLIER: dict[Biome, float] = {
    Biome.TROPICAL_RAINFOREST: 3.0,
    Biome.TEMPERATE_FOREST: 2.0,
    Biome.BOREAL_FOREST: 1.5,
    Biome.SAVANNA: 2.0,
    Biome.GRASSLAND: 2.0,
    Biome.DESERT: 0.5,
    Biome.TUNDRA: 0.3,
    Biome.MOUNTAIN: 0.8,
    Biome.WETLAND: 2.5,
    Biome.COASTAL: 2.0,
    Biome.CORAL_REEF: 3.0,
    Biome.OPEN_OCEAN: 1.0,
    Biome.DEEP_OCEAN: 0.3,
    Biome.HYDROTHERMAL_VENT: 0.5,
    Biome.KELP_FOREST: 2.0,
    Biome.CAVE_SYSTEM: 0.5,
    Biome.UNDERGROUND_RIVER: 0.8,
    Biome.SUBTERRANEAN_ECOSYSTEM: 0.6,
}


def biome_capacity(biome: Biome, base_capacity: int) -> int:
    """世界播种时按群系换算区域承载力"""
    return max(1, round(base_capacity * BIOME_CAPACITY_MULTIPLIER.get(biome, 1.0)))


def species_capacity_key(region_id: str, species_id: str) -> str:
    return f"{region_id}:{species_id}"


@dataclass
class EcosystemState:
    """全局生态状态：食物网 + 区域承载力 + 物种承载力"""
    food_web: list[FoodWebRelation] = field(default_factory=list)
    carrying_capacity: dict[str, int] = field(default_factory=dict)
    # key: "region_id:species_id"
    species_capacity: dict[str, int] = field(default_factory=dict)
    default_capacity: int = 10000

    def add_relation(self, predator_id: str, prey_id: str, efficiency: float) -> FoodWebRelation:
        relation = FoodWebRelation(predator_id, prey_id, max(0.0, min(1.0, efficiency)))
        self.food_web.append(relation)
        return relation

    def prey_of(self, predator_id: str) -> list[FoodWebRelation]:
        return [r for r in self.food_web if r.predator_id == predator_id]

    def predators_of(self, prey_id: str) -> list[FoodWebRelation]:
        return [r for r in self.food_web if r.prey_id == prey_id]

    def capacity_for(self, region_id: str) -> int:
        return max(1, self.carrying_capacity.get(region_id, self.default_capacity))

    def species_capacity_for(self, region_id: str, species_id: str) -> int:
        """未单独设置时等于区域承载力"""
        cap = self.species_capacity.get(species_capacity_key(region_id, species_id))
        if cap is None:
            return self.capacity_for(region_id)
        return max(1, cap)
