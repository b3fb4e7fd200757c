"""非火山类自然灾害检查"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from ...core.random import WeightedOption, WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Biome, Region
from ...models.world import EventEffect, EventLevel, EventType, WorldEvent
from .constants import COASTAL_BIOMES
from .models import DroughtState

logger = logging.getLogger(__name__)


class DisasterKind(Enum):
    EARTHQUAKE = "earthquake"
    FLOOD = "flood"
    SEVERE_STORM = "severe_storm"
    WILDFIRE = "wildfire"
    LANDSLIDE = "landslide"
    TORNADO = "tornado"
    TSUNAMI = "tsunami"


@dataclass(frozen=True)
class DisasterProfile:
    kind: DisasterKind
    event_type: EventType
    description: str


_NATURAL = EventType.NATURAL_DISASTER
_WEATHER = EventType.WEATHER_EXTREME

DISASTER_PROFILES: dict[DisasterKind, DisasterProfile] = {
    DisasterKind.EARTHQUAKE: DisasterProfile(DisasterKind.EARTHQUAKE, _NATURAL, "大地剧烈震动，{name} 发生地震。"),
    DisasterKind.FLOOD: DisasterProfile(DisasterKind.FLOOD, _NATURAL, "连日暴雨，{name} 洪水泛滥。"),
    DisasterKind.SEVERE_STORM: DisasterProfile(DisasterKind.SEVERE_STORM, _WEATHER, "狂风暴雨席卷 {name}。"),
    DisasterKind.WILDFIRE: DisasterProfile(DisasterKind.WILDFIRE, _NATURAL, "干燥的 {name} 燃起了野火。"),
    DisasterKind.LANDSLIDE: DisasterProfile(DisasterKind.LANDSLIDE, _NATURAL, "{name} 的山坡在雨水中崩塌。"),
    DisasterKind.TORNADO: DisasterProfile(DisasterKind.TORNADO, _WEATHER, "龙卷风扫过 {name} 的开阔地带。"),
    DisasterKind.TSUNAMI: DisasterProfile(DisasterKind.TSUNAMI, _WEATHER, "海啸巨浪拍向 {name} 的海岸。"),
}


def disaster_candidates(region: Region) -> list[WeightedOption[DisasterKind]]:
    """根据区域的海拔、降水、风、湿度与群系给出灾害权重（纯函数）"""
    climate = region.climate
    weights = {
        DisasterKind.EARTHQUAKE: 3.0 if region.elevation > 500 else 1.0,
        DisasterKind.FLOOD: 3.0 if climate.precipitation > 80 else 0.5,
        DisasterKind.SEVERE_STORM: 3.0 if climate.wind_speed > 30 else 1.0,
        DisasterKind.WILDFIRE: 3.0 if climate.humidity < 0.3 else 0.2,
        DisasterKind.LANDSLIDE: 2.5 if region.elevation > 400 and climate.precipitation > 50 else 0.3,
        DisasterKind.TORNADO: 2.0 if region.biome in (Biome.GRASSLAND, Biome.SAVANNA) else 0.3,
        DisasterKind.TSUNAMI: 1.5 if region.biome in COASTAL_BIOMES else 0.0,
    }
    return [WeightedOption(kind, w) for kind, w in weights.items() if w > 0]


def check_natural_disaster(
    region: Region,
    drought: DroughtState | None,
    rng: WorldRNG,
    config: ClimateConfig,
    tick: int,
) -> WorldEvent | None:
    """干旱灾害优先，其次是受污染放大的随机自然灾害"""
    if (
        drought is not None
        and drought.active
        and drought.severity > config.drought_disaster_severity
        and rng.chance(config.drought_disaster_chance * drought.severity)
    ):
        logger.info(f"[灾害] {region.id} 严重干旱 (强度 {drought.severity:.2f})")
        return WorldEvent(
            id=rng.token(),
            event_type=EventType.NATURAL_DISASTER,
            level=EventLevel.REGIONAL,
            region_ids=[region.id],
            description=f"{region.name} 遭遇严重干旱，河床龟裂，植被枯黄。",
            tick=tick,
            effects=[EventEffect("drought", drought.severity, region_id=region.id)],
        )

    chance = config.disaster_base_chance * (1 + region.climate.pollution * config.disaster_pollution_scale)
    if not rng.chance(chance):
        return None

    kind = rng.weighted_choice(disaster_candidates(region))
    profile = DISASTER_PROFILES[kind]
    severity = rng.uniform(0.3, 1.0)
    logger.info(f"[灾害] {region.id} 发生 {kind.value} (强度 {severity:.2f})")
    return WorldEvent(
        id=rng.token(),
        event_type=profile.event_type,
        level=EventLevel.REGIONAL,
        region_ids=[region.id],
        description=profile.description.format(name=region.name),
        tick=tick,
        effects=[EventEffect(kind.value, severity, region_id=region.id)],
    )
