"""灾变触发判定

每种灾变都有独立的压力组合门槛，满足门槛后仍只有很小的概率触发，
因此即便持续高压，灾变依然罕见。每次检查最多提出一个灾变。
"""

from __future__ import annotations

import logging

from ...core.random import WorldRNG
from ...models.config import CatastropheConfig
from ...models.region import Biome, Region
from .models import Catastrophe, CatastropheEffect, CatastropheType, EffectType, StressVector

logger = logging.getLogger(__name__)

AQUATIC_BIOMES = frozenset({Biome.CORAL_REEF, Biome.OPEN_OCEAN, Biome.DEEP_OCEAN, Biome.KELP_FOREST})

CT = CatastropheType
ET = EffectType


def create_catastrophe(
    catastrophe_type: CatastropheType,
    region_ids: list[str],
    severity: float,
    tick: int,
    duration: int,
    cause: str,
    effects: list[CatastropheEffect],
    config: CatastropheConfig,
    rng: WorldRNG,
) -> Catastrophe:
    severity = max(0.0, min(1.0, severity))
    return Catastrophe(
        id=rng.token(),
        catastrophe_type=catastrophe_type,
        region_ids=list(region_ids),
        severity=severity,
        tick_started=tick,
        duration=duration,
        ticks_remaining=duration,
        cause=cause,
        effects=effects,
        mutation_bonus=severity * config.mutation_bonus_scale,
    )


def propose_catastrophe(
    region: Region,
    stress: StressVector,
    tick: int,
    rng: WorldRNG,
    config: CatastropheConfig,
    overpopulation_ticks: dict[str, int],
) -> Catastrophe | None:
    """按固定顺序评估各灾变门槛，返回第一个触发的灾变

    Args:
        overpopulation_ticks: 各区域的持续过载计数（饥荒用，原地更新）
    """
    climate = region.climate

    # === 疫病：污染 + 过载 ===
    if (
        stress.pollution > 0.6
        and stress.overpopulation > 0.5
        and stress.pollution + stress.overpopulation > 1.2
        and rng.chance(config.disease_chance)
    ):
        return create_catastrophe(
            CT.DISEASE_OUTBREAK, [region.id], 0.5 + stress.disease_risk * 0.3, tick, 200,
            "污染与拥挤滋生了疫病",
            [CatastropheEffect(ET.POPULATION_KILL, 0.3)],
            config,
            rng,
        )

    # === 洪水/滑坡：植被破坏 + 降水 ===
    if stress.deforestation > 0.7 and climate.precipitation > 5 and rng.chance(config.flood_chance):
        kind = CT.LANDSLIDE if region.elevation > 500 else CT.FLOOD
        return create_catastrophe(
            kind, [region.id], 0.4 + stress.deforestation * 0.3, tick, 100,
            "植被破坏使土地无法抵御暴雨",
            [
                CatastropheEffect(ET.POPULATION_KILL, 0.2),
                CatastropheEffect(ET.RESOURCE_DESTROY, 0.3),
            ],
            config,
            rng,
        )

    # === 森林火灾：中度植被破坏 + 干燥 ===
    if 0.3 < stress.deforestation < 0.8 and climate.humidity < 0.3 and rng.chance(config.fire_chance):
        return create_catastrophe(
            CT.FOREST_FIRE, [region.id], 0.5 + (1 - climate.humidity) * 0.3, tick, 150,
            "干燥的天气与稀疏的植被引燃了野火",
            [
                CatastropheEffect(ET.PLANT_DESTROY, 0.5),
                CatastropheEffect(ET.POPULATION_KILL, 0.15),
                CatastropheEffect(ET.CLIMATE_DISRUPTION, 0.3),
            ],
            config,
            rng,
        )

    # === 饥荒：持续过载 ===
    over_ticks = overpopulation_ticks.get(region.id, 0)
    if stress.overpopulation > 0.8:
        overpopulation_ticks[region.id] = over_ticks + config.famine_counter_step
        if over_ticks > config.famine_counter_threshold and rng.chance(config.famine_chance):
            return create_catastrophe(
                CT.FAMINE, [region.id], 0.6 + stress.overpopulation * 0.2, tick, 300,
                "长期过载耗尽了所有食物来源",
                [CatastropheEffect(ET.POPULATION_KILL, 0.25)],
                config,
                rng,
            )
    else:
        overpopulation_ticks[region.id] = max(0, over_ticks - config.famine_counter_decay)

    # === 有毒藻华：水域 + 重度污染 + 缺水 ===
    if (
        region.biome in AQUATIC_BIOMES
        and stress.pollution > 0.8
        and stress.water_stress > 0.3
        and rng.chance(config.toxic_bloom_chance)
    ):
        return create_catastrophe(
            CT.TOXIC_BLOOM, [region.id], 0.5 + stress.pollution * 0.3, tick, 250,
            "污染与高温催生了大规模有毒藻华",
            [
                CatastropheEffect(ET.POPULATION_KILL, 0.3),
                CatastropheEffect(ET.RESOURCE_DESTROY, 0.4),
            ],
            config,
            rng,
        )

    # === 土壤退化导致的饥荒 ===
    if stress.soil_degradation > 0.7:
        total_max = sum(p.max_biomass for p in region.plants)
        total_biomass = sum(p.biomass for p in region.plants)
        if total_max > 0 and total_biomass / total_max < 0.1 and rng.chance(config.soil_famine_chance):
            return create_catastrophe(
                CT.FAMINE, [region.id], 0.7, tick, 200,
                "过度啃食毁掉了土壤，食草动物陷入饥饿",
                [CatastropheEffect(ET.POPULATION_KILL, 0.3)],
                config,
                rng,
            )

    # === 复合灾变：三项以上压力超过 0.5 ===
    high = stress.high_stress_count(0.5)
    if high >= 3 and rng.chance(config.plague_chance):
        return create_catastrophe(
            CT.PLAGUE, [region.id], 0.7 + high * 0.05, tick, 400,
            "多重环境压力叠加，演变为毁灭性的瘟疫",
            [
                CatastropheEffect(ET.POPULATION_KILL, 0.35),
                CatastropheEffect(ET.MUTATION_SURGE, 0.5),
            ],
            config,
            rng,
        )

    return None
