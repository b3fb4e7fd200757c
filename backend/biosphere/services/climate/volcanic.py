"""火山活动：岩浆压力积累、喷发与火山灰扩散"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Biome, Region, WorldLayer, clamp01
from ...models.world import EventEffect, EventLevel, EventType, WorldEvent
from .models import ClimateContext, VolcanicState

logger = logging.getLogger(__name__)


def volcanic_potential(region: Region) -> float:
    """区域的火山潜势，0 表示该区域不可能有火山活动"""
    if region.layer == WorldLayer.UNDERGROUND:
        return 0.3
    if region.biome == Biome.MOUNTAIN:
        return 0.5
    if region.biome == Biome.HYDROTHERMAL_VENT:
        return 0.7
    if region.elevation > 800:
        return 0.3
    if region.biome == Biome.COASTAL and region.elevation > 200:
        return 0.2
    return 0.0


def eruption_chance(pressure: float, config: ClimateConfig) -> float:
    if pressure <= config.eruption_pressure_min or pressure <= config.eruption_pressure_knee:
        return 0.0
    return (pressure - config.eruption_pressure_knee) * config.eruption_chance_scale


def update_volcano(
    ctx: ClimateContext,
    region: Region,
    regions: Mapping[str, Region],
    rng: WorldRNG,
    config: ClimateConfig,
    tick: int,
) -> WorldEvent | None:
    """推进一个区域的火山状态

    只有潜势 > 0 的区域才会惰性创建 VolcanicState。

    Returns:
        本 tick 开始喷发时返回火山事件
    """
    potential = volcanic_potential(region)
    if potential <= 0:
        return None

    state = ctx.volcanoes.get(region.id)
    if state is None:
        state = VolcanicState()
        ctx.volcanoes[region.id] = state

    if state.erupting:
        _continue_eruption(region, state, regions, rng, config)
        return None

    state.pressure = min(1.0, state.pressure + potential * rng.uniform(config.pressure_build_min, config.pressure_build_max))

    if not rng.chance(eruption_chance(state.pressure, config)):
        return None

    # === 喷发开始 ===
    state.erupting = True
    state.eruption_ticks_left = rng.randint(config.eruption_min_ticks, config.eruption_max_ticks)
    state.ash_region_ids = {region.id}
    region.climate.pollution = clamp01(region.climate.pollution + config.eruption_pollution)

    logger.info(f"[火山] {region.id} 喷发！持续 {state.eruption_ticks_left} tick")
    affected = [region.id] + [rid for rid in region.connections if rid in regions]
    return WorldEvent(
        id=rng.token(),
        event_type=EventType.NATURAL_DISASTER,
        level=EventLevel.CONTINENTAL,
        region_ids=affected,
        description=f"{region.name} 的火山猛烈喷发，火山灰遮天蔽日。",
        tick=tick,
        effects=[
            EventEffect("volcanic_eruption", state.pressure, region_id=region.id),
            EventEffect("pollution_spike", config.eruption_pollution, region_id=region.id),
        ],
    )


def _continue_eruption(
    region: Region,
    state: VolcanicState,
    regions: Mapping[str, Region],
    rng: WorldRNG,
    config: ClimateConfig,
) -> None:
    state.eruption_ticks_left -= 1

    climate = region.climate
    climate.temperature -= config.eruption_cooling
    climate.humidity = clamp01(climate.humidity + config.eruption_humidity)
    climate.precipitation += config.eruption_precipitation  # 酸雨

    for neighbor_id in region.connections:
        if neighbor_id in regions and neighbor_id not in state.ash_region_ids:
            if rng.chance(config.ash_spread_chance):
                state.ash_region_ids.add(neighbor_id)

    for ash_id in sorted(state.ash_region_ids):
        ash_region = regions.get(ash_id)
        if ash_region is None:
            continue
        ash_region.climate.temperature -= config.ash_cooling
        ash_region.climate.pollution = clamp01(ash_region.climate.pollution + config.ash_pollution)

    if state.eruption_ticks_left <= 0:
        state.erupting = False
        state.pressure = 0.0
        state.ash_region_ids.clear()
        logger.info(f"[火山] {region.id} 喷发结束")
