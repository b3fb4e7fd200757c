"""区域天气更新

每个区域每 tick 按固定顺序更新：
1. 季节/昼夜/海拔目标温度
2. 温度按热惯性向目标松弛 + 噪声
3. 锋面修正
4. 湿度
5. 降水
6. 风速
7. 污染影响
8. 干旱
"""

from __future__ import annotations

import logging
import math

from ...core.random import WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Biome, Region, WorldLayer, clamp01
from ...models.world import DAYS_PER_YEAR, WorldTime
from .constants import (
    BIOME_BASE_HUMIDITY,
    BIOME_BASE_TEMPERATURE,
    BIOME_BASE_WIND,
    BIOME_SEASONAL_AMPLITUDE,
    COASTAL_BIOMES,
    DEFAULT_BASE_WIND,
    DIURNAL_PEAK_HOUR,
    MONSOON_PHASE_DAY,
    SEASONAL_HUMIDITY_BIOMES,
    SOLSTICE_DAY,
)
from .drought import update_drought
from .fronts import aggregate_front_modifiers, maybe_spawn_front
from .models import ClimateContext
from .pollution import apply_pollution_effects

logger = logging.getLogger(__name__)

# 地下与水下对气温波动的缓冲
LAYER_BUFFER: dict[WorldLayer, float] = {
    WorldLayer.SURFACE: 1.0,
    WorldLayer.UNDERWATER: 0.4,
    WorldLayer.UNDERGROUND: 0.1,
}


def latitude_amplification(latitude: float) -> float:
    """赤道附近 1.0，向极地线性增至 2.0"""
    return 1 + max(0.0, abs(latitude) - 30) / 60


def hemisphere_sign(latitude: float) -> float:
    return -1.0 if latitude < 0 else 1.0


def seasonal_target_temperature(region: Region, time: WorldTime, config: ClimateConfig) -> float:
    """区域在当前日期与时刻的目标温度"""
    buffer = LAYER_BUFFER[region.layer]
    base = BIOME_BASE_TEMPERATURE[region.biome]
    amplitude = BIOME_SEASONAL_AMPLITUDE[region.biome]

    day_angle = (time.day - SOLSTICE_DAY) / DAYS_PER_YEAR * 2 * math.pi
    seasonal = (
        amplitude
        * latitude_amplification(region.latitude)
        * math.cos(day_angle)
        * hemisphere_sign(region.latitude)
        * buffer
    )

    diurnal_amplitude = 3 + 0.05 * abs(region.latitude)
    diurnal = math.cos((time.hour - DIURNAL_PEAK_HOUR) / 12 * math.pi) * diurnal_amplitude * buffer

    altitude = -(region.elevation / 1000) * config.lapse_rate_per_km

    return base + seasonal + diurnal + altitude


def thermal_inertia(biome: Biome, config: ClimateConfig) -> float:
    if biome in COASTAL_BIOMES:
        return config.thermal_inertia_ocean
    if biome == Biome.DESERT:
        return config.thermal_inertia_desert
    return config.thermal_inertia_default


def humidity_baseline(region: Region, time: WorldTime, config: ClimateConfig) -> float:
    """群系基准湿度，草原类叠加雨季/旱季起伏"""
    base = BIOME_BASE_HUMIDITY[region.biome]
    if region.biome in SEASONAL_HUMIDITY_BIOMES:
        phase = (time.day - MONSOON_PHASE_DAY) / DAYS_PER_YEAR * 2 * math.pi
        base += config.grassland_seasonal_humidity * math.sin(phase) * hemisphere_sign(region.latitude)
    return base


def base_wind(biome: Biome) -> float:
    return BIOME_BASE_WIND.get(biome, DEFAULT_BASE_WIND)


def update_region_weather(
    ctx: ClimateContext,
    region: Region,
    time: WorldTime,
    rng: WorldRNG,
    config: ClimateConfig,
) -> bool:
    """推进单个区域的天气

    Returns:
        本 tick 是否刚进入干旱
    """
    climate = region.climate
    inertia = thermal_inertia(region.biome, config)

    # === 1-2. 温度松弛 ===
    target_temp = seasonal_target_temperature(region, time, config)
    climate.temperature += (target_temp - climate.temperature) * inertia
    climate.temperature += rng.gaussian(0, config.temperature_noise_std)

    # === 3. 锋面 ===
    maybe_spawn_front(ctx, region, time.tick, rng, config)
    mods = aggregate_front_modifiers(ctx, region.id)
    climate.temperature += mods.temperature * config.front_temperature_scale

    # === 4. 湿度 ===
    target_humidity = clamp01(humidity_baseline(region, time, config) + mods.humidity * config.front_humidity_scale)
    climate.humidity += (target_humidity - climate.humidity) * config.humidity_relax_rate
    climate.humidity = clamp01(climate.humidity + rng.gaussian(0, config.humidity_noise_std))

    # === 5. 降水：暖空气容纳更多水汽 ===
    if climate.humidity > config.rain_humidity_threshold:
        base_precip = (climate.humidity - 0.5) * 150 * (1 + max(0.0, climate.temperature) / 40)
    else:
        base_precip = rng.uniform(0, config.rain_trickle_max)
    climate.precipitation = max(
        0.0, base_precip * mods.precipitation_mul + rng.gaussian(0, config.precipitation_noise_std)
    )

    # === 6. 风速 ===
    target_wind = base_wind(region.biome) + mods.wind * config.front_wind_scale
    climate.wind_speed += (target_wind - climate.wind_speed) * config.wind_relax_rate
    climate.wind_speed = max(0.0, climate.wind_speed + rng.gaussian(0, config.wind_noise_std))

    # === 7. 污染 ===
    apply_pollution_effects(region, inertia, config)

    # === 8. 干旱 ===
    drought = ctx.drought_for(region.id)
    started = update_drought(region, drought, config)
    if drought.active:
        climate.humidity = clamp01(climate.humidity - config.drought_humidity_drain * drought.severity)
        climate.temperature += config.drought_max_warming * drought.severity * inertia

    return started
