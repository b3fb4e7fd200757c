"""植物种群：逻辑斯蒂生长、过度啃食与跨区域扩散"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Biome, PlantPopulation, Region

logger = logging.getLogger(__name__)

B = Biome

BIOME_PLANTS: dict[Biome, tuple[str, ...]] = {
    B.TROPICAL_RAINFOREST: ("tropical_tree", "shrub", "fungi", "moss"),
    B.TEMPERATE_FOREST: ("deciduous_tree", "shrub", "fungi", "moss", "grass"),
    B.BOREAL_FOREST: ("conifer", "moss", "fungi", "shrub"),
    B.SAVANNA: ("grass", "shrub", "deciduous_tree"),
    B.GRASSLAND: ("grass", "shrub"),
    B.DESERT: ("cactus", "shrub"),
    B.TUNDRA: ("moss", "grass"),
    B.MOUNTAIN: ("grass", "conifer", "moss"),
    B.WETLAND: ("grass", "moss", "fungi", "shrub"),
    B.COASTAL: ("grass", "shrub", "seagrass"),
    B.CORAL_REEF: ("algae", "seagrass"),
    B.OPEN_OCEAN: ("plankton", "algae"),
    B.DEEP_OCEAN: ("plankton",),
    B.HYDROTHERMAL_VENT: ("fungi",),
    B.KELP_FOREST: ("kelp", "algae", "seagrass"),
    B.CAVE_SYSTEM: ("fungi", "moss"),
    B.UNDERGROUND_RIVER: ("fungi", "moss"),
    B.SUBTERRANEAN_ECOSYSTEM: ("fungi",),
}

# plant_type -> (生长率, 最大生物量)
PLANT_PROFILES: dict[str, tuple[float, float]] = {
    "grass": (0.05, 500.0),
    "shrub": (0.03, 400.0),
    "deciduous_tree": (0.01, 800.0),
    "conifer": (0.008, 700.0),
    "tropical_tree": (0.015, 1000.0),
    "algae": (0.08, 300.0),
    "kelp": (0.06, 600.0),
    "seagrass": (0.04, 400.0),
    "plankton": (0.1, 200.0),
    "fungi": (0.04, 200.0),
    "moss": (0.02, 150.0),
    "cactus": (0.005, 100.0),
}


def default_plants(biome: Biome, initial_ratio: float = 0.7) -> list[PlantPopulation]:
    """群系默认植被，初始生物量为上限的 70%"""
    plants = []
    for plant_type in BIOME_PLANTS.get(biome, ("grass",)):
        growth_rate, max_biomass = PLANT_PROFILES[plant_type]
        plants.append(PlantPopulation(
            plant_type=plant_type,
            biomass=max_biomass * initial_ratio,
            max_biomass=max_biomass,
            growth_rate=growth_rate,
            spread_rate=growth_rate * 0.1,
        ))
    return plants


def plant_biomass_ratio(region: Region) -> float:
    """区域总生物量 / 总上限，没有植物时视为 1"""
    if not region.plants:
        return 1.0
    total = sum(p.biomass for p in region.plants)
    max_total = sum(p.max_biomass for p in region.plants)
    return total / max_total if max_total > 0 else 1.0


def update_plants(region: Region, config: EcosystemConfig) -> list[PlantPopulation]:
    """植物逻辑斯蒂生长并检查过度啃食

    Returns:
        本 tick 被永久摧毁的植物
    """
    pollution_factor = 1 - region.climate.pollution * config.plant_pollution_damping
    destroyed = []
    for plant in region.plants:
        if plant.destroyed:
            continue
        max_biomass = max(1e-9, plant.max_biomass)
        delta = plant.growth_rate * plant.biomass * (1 - plant.biomass / max_biomass) * pollution_factor
        plant.biomass = max(0.0, min(plant.max_biomass, plant.biomass + delta))

        if plant.biomass < plant.max_biomass * config.overgrazing_threshold:
            plant.ticks_below_threshold += 1
            if plant.ticks_below_threshold >= config.overgrazing_destroy_ticks:
                plant.destroyed = True
                destroyed.append(plant)
                logger.info(f"[植被] {region.id} 的 {plant.plant_type} 因过度啃食永久消失")
        else:
            plant.ticks_below_threshold = 0
    return destroyed


def graze_plants(region: Region, amount: float) -> float:
    """食草动物按各植物现存生物量比例啃食，返回实际啃食量"""
    living = [p for p in region.plants if not p.destroyed and p.biomass > 0]
    total = sum(p.biomass for p in living)
    if amount <= 0 or total <= 0:
        return 0.0

    taken = min(amount, total)
    for plant in living:
        plant.biomass = max(0.0, plant.biomass - taken * plant.biomass / total)
    return taken


def spread_plants(
    region: Region,
    regions: Mapping[str, Region],
    rng: WorldRNG,
    config: EcosystemConfig,
) -> int:
    """茂盛的植物向相容的邻区播种，或复活邻区已消失的同种植物

    每种植物每 tick 最多扩散一次。

    Returns:
        本 tick 成功扩散的次数
    """
    spread_count = 0
    for plant in list(region.plants):
        if plant.destroyed or plant.biomass < plant.max_biomass * config.plant_spread_min_ratio:
            continue
        if not rng.chance(plant.spread_rate):
            continue

        for neighbor_id in region.connections:
            target = regions.get(neighbor_id)
            if target is None:
                continue
            if plant.plant_type not in BIOME_PLANTS.get(target.biome, ()):
                continue

            existing = next((p for p in target.plants if p.plant_type == plant.plant_type), None)
            if existing is not None and not existing.destroyed:
                continue

            seed_biomass = plant.max_biomass * config.plant_seed_fraction
            if existing is not None:
                # 自然复苏
                existing.destroyed = False
                existing.ticks_below_threshold = 0
                existing.biomass = seed_biomass
            else:
                target.plants.append(PlantPopulation(
                    plant_type=plant.plant_type,
                    biomass=seed_biomass,
                    max_biomass=plant.max_biomass,
                    growth_rate=plant.growth_rate,
                    spread_rate=plant.spread_rate,
                ))
            spread_count += 1
            break
    return spread_count
