"""天气锋面：生成、扩散、衰减与修正值聚合"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WeightedOption, WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Region
from .models import ClimateContext, FrontModifiers, FrontTemplate, WeatherFront, WeatherFrontType

logger = logging.getLogger(__name__)

FT = WeatherFrontType

FRONT_TEMPLATES: dict[WeatherFrontType, FrontTemplate] = {
    FT.WARM_FRONT: FrontTemplate(FT.WARM_FRONT, 4.0, 0.15, 5.0, 1.5, 8, 24),
    FT.COLD_FRONT: FrontTemplate(FT.COLD_FRONT, -6.0, -0.05, 10.0, 1.8, 6, 18),
    FT.OCCLUDED_FRONT: FrontTemplate(FT.OCCLUDED_FRONT, -2.0, 0.1, 8.0, 2.0, 6, 14),
    FT.HIGH_PRESSURE: FrontTemplate(FT.HIGH_PRESSURE, 2.0, -0.2, -5.0, 0.2, 12, 48),
    FT.LOW_PRESSURE: FrontTemplate(FT.LOW_PRESSURE, -1.0, 0.2, 8.0, 2.5, 8, 30),
    FT.TROPICAL_STORM: FrontTemplate(FT.TROPICAL_STORM, -3.0, 0.3, 30.0, 4.0, 4, 12),
    FT.MONSOON: FrontTemplate(FT.MONSOON, -2.0, 0.35, 15.0, 5.0, 12, 48),
    FT.BLIZZARD: FrontTemplate(FT.BLIZZARD, -12.0, 0.1, 25.0, 3.0, 4, 10),
    FT.HEATWAVE: FrontTemplate(FT.HEATWAVE, 8.0, -0.15, -3.0, 0.1, 12, 36),
}


def front_candidates(temperature: float, humidity: float) -> list[WeightedOption[FrontTemplate]]:
    """根据当前气温与湿度给出各类锋面的权重（纯函数）

    暴风雪只在 0°C 以下出现；热带风暴需要 >25°C 且湿度 >0.6 才有明显权重。
    """
    weights = {
        FT.WARM_FRONT: 2.0 if temperature > 10 else 0.5,
        FT.COLD_FRONT: 2.0 if temperature < 15 else 0.5,
        FT.OCCLUDED_FRONT: 1.0,
        FT.HIGH_PRESSURE: 2.0 if humidity < 0.4 else 0.5,
        FT.LOW_PRESSURE: 2.0 if humidity > 0.5 else 0.5,
        FT.TROPICAL_STORM: 2.0 if temperature > 25 and humidity > 0.6 else 0.1,
        FT.MONSOON: 1.5 if temperature > 20 and humidity > 0.5 else 0.1,
        FT.BLIZZARD: 2.5 if temperature < 0 else 0.0,
        FT.HEATWAVE: 2.0 if temperature > 25 and humidity < 0.4 else 0.1,
    }
    return [
        WeightedOption(FRONT_TEMPLATES[front_type], weight)
        for front_type, weight in weights.items()
        if weight > 0
    ]


def maybe_spawn_front(
    ctx: ClimateContext,
    region: Region,
    tick: int,
    rng: WorldRNG,
    config: ClimateConfig,
) -> WeatherFront | None:
    """以约 1% 的概率在区域上生成一个新锋面

    区域已被 max_fronts_per_region 个锋面覆盖时不再生成。
    """
    if len(ctx.fronts_affecting(region.id)) >= config.max_fronts_per_region:
        return None
    if not rng.chance(config.front_spawn_chance):
        return None

    candidates = front_candidates(region.climate.temperature, region.climate.humidity)
    template = rng.weighted_choice(candidates)

    front = WeatherFront(
        id=f"front_{tick}_{region.id}",
        front_type=template.front_type,
        intensity=rng.uniform(0.4, 1.0),
        remaining_ticks=rng.randint(template.min_duration, template.max_duration),
        origin_region_id=region.id,
        affected_region_ids={region.id},
        spread_probability=rng.uniform(0.05, 0.25),
        temperature_mod=template.temperature_mod * rng.uniform(0.7, 1.3),
        humidity_mod=template.humidity_mod * rng.uniform(0.7, 1.3),
        wind_mod=template.wind_mod * rng.uniform(0.7, 1.3),
        precipitation_mul=template.precipitation_mul,
    )
    ctx.fronts[front.id] = front
    logger.debug(f"[锋面] {region.id} 生成 {front.front_type.value} (强度 {front.intensity:.2f}, 持续 {front.remaining_ticks})")
    return front


def advance_fronts(
    ctx: ClimateContext,
    regions: Mapping[str, Region],
    rng: WorldRNG,
    config: ClimateConfig,
) -> list[str]:
    """推进所有锋面一个 tick：计时、衰减、过期移除、向邻区扩散

    扩散基于本 tick 开始时的覆盖集合快照，新覆盖的区域本 tick 不再继续外扩。

    Returns:
        本 tick 被移除的锋面 id
    """
    removed: list[str] = []
    for front_id in list(ctx.fronts):
        front = ctx.fronts[front_id]
        front.remaining_ticks -= 1
        front.intensity *= config.front_decay

        if front.is_expired(config.front_min_intensity):
            del ctx.fronts[front_id]
            removed.append(front_id)
            continue

        snapshot = sorted(front.affected_region_ids)
        for region_id in snapshot:
            region = regions.get(region_id)
            if region is None:
                continue
            for neighbor_id in region.connections:
                if neighbor_id in front.affected_region_ids or neighbor_id not in regions:
                    continue
                if rng.chance(front.spread_probability):
                    front.affected_region_ids.add(neighbor_id)

    if removed:
        logger.debug(f"[锋面] 消散 {len(removed)} 个，剩余 {len(ctx.fronts)} 个")
    return removed


def aggregate_front_modifiers(ctx: ClimateContext, region_id: str) -> FrontModifiers:
    """叠加覆盖该区域的全部锋面，每个锋面按自身强度缩放"""
    mods = FrontModifiers()
    for front in ctx.fronts_affecting(region_id):
        k = front.intensity
        mods.temperature += front.temperature_mod * k
        mods.humidity += front.humidity_mod * k
        mods.wind += front.wind_mod * k
        mods.precipitation_mul *= 1 + (front.precipitation_mul - 1) * k
    return mods
