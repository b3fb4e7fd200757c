"""天体：太阳高度、潮汐与日月食"""

from __future__ import annotations

import logging
import math

from ...core.random import WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Biome, Region, WorldLayer, clamp01
from ...models.world import DAYS_PER_YEAR, EventEffect, EventLevel, EventType, LunarPhase, WorldEvent, WorldTime
from .constants import AXIAL_TILT, COASTAL_BIOMES, EQUINOX_DAY
from .models import CelestialState, EclipseType

logger = logging.getLogger(__name__)


def solar_declination(day: int) -> float:
    return AXIAL_TILT * math.sin((day - EQUINOX_DAY) / DAYS_PER_YEAR * 2 * math.pi)


def celestial_state(time: WorldTime, latitude: float) -> CelestialState:
    """给定时间与纬度的天体状态（纯函数，不抽随机数）"""
    lat = math.radians(latitude)
    decl = math.radians(solar_declination(time.day))
    hour_angle = math.radians((time.hour - 12) * 15)
    sin_elev = math.sin(lat) * math.sin(decl) + math.cos(lat) * math.cos(decl) * math.cos(hour_angle)
    solar_elevation = math.degrees(math.asin(max(-1.0, min(1.0, sin_elev))))

    idx = time.lunar_phase.index
    # 新月与满月时潮汐最强
    tidal_force = 0.5 + 0.5 * math.cos(2 * (idx / 8) * 2 * math.pi)

    return CelestialState(
        solar_elevation=solar_elevation,
        tidal_force=tidal_force,
    )


def roll_eclipse(time: WorldTime, rng: WorldRNG, config: ClimateConfig) -> EclipseType | None:
    """日食只可能发生在新月，月食只可能发生在满月"""
    if time.lunar_phase == LunarPhase.NEW and rng.chance(config.solar_eclipse_chance):
        return EclipseType.SOLAR
    if time.lunar_phase == LunarPhase.FULL and rng.chance(config.lunar_eclipse_chance):
        return EclipseType.LUNAR
    return None


def build_eclipse_event(eclipse: EclipseType, region_ids: list[str], tick: int, rng: WorldRNG) -> WorldEvent:
    if eclipse == EclipseType.SOLAR:
        description = "日全食：正午的天空骤然变暗，气温随之下降。"
        disruption, mystical = 0.6, 0.9
    else:
        description = "月全食：满月被染成暗红色。"
        disruption, mystical = 0.2, 0.5
    return WorldEvent(
        id=rng.token(),
        event_type=EventType.ECLIPSE,
        level=EventLevel.GLOBAL,
        region_ids=list(region_ids),
        description=description,
        tick=tick,
        effects=[
            EventEffect("climate_disruption", disruption),
            EventEffect("mystical_trigger", mystical),
        ],
    )


def apply_eclipse_effects(region: Region, eclipse: EclipseType, celestial: CelestialState, config: ClimateConfig) -> None:
    """日月食对区域气候的瞬时扰动

    日食只影响白昼一侧（太阳在地平线以上），月食只影响夜晚一侧。
    """
    climate = region.climate
    daylight = celestial.solar_elevation > 0
    if eclipse == EclipseType.SOLAR:
        if not daylight:
            return
        climate.temperature -= config.solar_eclipse_cooling
        climate.wind_speed += config.solar_eclipse_wind
    else:
        if daylight:
            return
        climate.temperature += config.lunar_eclipse_warming


def is_tidal(region: Region) -> bool:
    return region.biome in COASTAL_BIOMES or region.layer == WorldLayer.UNDERWATER


def apply_tidal_effects(region: Region, celestial: CelestialState, config: ClimateConfig) -> None:
    """潮汐：调节资源再生倍率（±15%），并扰动海岸的风与湿度"""
    if not is_tidal(region):
        return

    swing = celestial.tidal_force - 0.5
    factor = 1 + swing * config.tidal_renewal_swing
    for resource in region.resources:
        resource.tidal_factor = factor

    if region.biome == Biome.COASTAL:
        climate = region.climate
        climate.wind_speed = max(0.0, climate.wind_speed + swing * config.tidal_wind_swing * config.wind_relax_rate)
        climate.humidity = clamp01(climate.humidity + swing * config.tidal_humidity_swing * config.humidity_relax_rate)
