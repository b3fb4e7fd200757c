"""气候引擎数据模型

锋面、干旱、火山三类持续状态统一收纳在 ClimateContext 中，
由 ClimateEngine 实例持有，不使用模块级全局变量。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class WeatherFrontType(Enum):
    """天气系统类型"""
    WARM_FRONT = "warm_front"
    COLD_FRONT = "cold_front"
    OCCLUDED_FRONT = "occluded_front"
    HIGH_PRESSURE = "high_pressure"
    LOW_PRESSURE = "low_pressure"
    TROPICAL_STORM = "tropical_storm"
    MONSOON = "monsoon"
    BLIZZARD = "blizzard"
    HEATWAVE = "heatwave"


@dataclass(frozen=True)
class FrontTemplate:
    """锋面模板（生成锋面时的基础修正值）"""
    front_type: WeatherFrontType
    temperature_mod: float
    humidity_mod: float
    wind_mod: float
    precipitation_mul: float
    min_duration: int
    max_duration: int


@dataclass
class WeatherFront:
    """活动中的天气系统"""
    id: str
    front_type: WeatherFrontType
    intensity: float              # 0..1，每 tick 衰减 3%
    remaining_ticks: int
    origin_region_id: str
    affected_region_ids: set[str]
    spread_probability: float
    temperature_mod: float
    humidity_mod: float
    wind_mod: float
    precipitation_mul: float

    def is_expired(self, min_intensity: float) -> bool:
        return self.remaining_ticks <= 0 or self.intensity < min_intensity


@dataclass
class FrontModifiers:
    """某区域所有锋面按强度叠加后的修正值"""
    temperature: float = 0.0
    humidity: float = 0.0
    wind: float = 0.0
    precipitation_mul: float = 1.0


@dataclass
class DroughtState:
    ticks_without_rain: int = 0
    severity: float = 0.0
    active: bool = False


@dataclass
class VolcanicState:
    pressure: float = 0.0
    erupting: bool = False
    eruption_ticks_left: int = 0
    ash_region_ids: set[str] = field(default_factory=set)


class EclipseType(Enum):
    SOLAR = "solar"
    LUNAR = "lunar"


@dataclass(frozen=True)
class CelestialState:
    """天体状态（纯计算结果）"""
    solar_elevation: float  # 度，负值为夜晚
    tidal_force: float      # 0..1，新月/满月时为 1


@dataclass
class ClimateContext:
    """气候引擎的持续状态容器

    世界重置时调用 reset()，多个世界可各自持有独立实例。
    """
    fronts: dict[str, WeatherFront] = field(default_factory=dict)
    droughts: dict[str, DroughtState] = field(default_factory=dict)
    volcanoes: dict[str, VolcanicState] = field(default_factory=dict)

    def reset(self) -> None:
        self.fronts.clear()
        self.droughts.clear()
        self.volcanoes.clear()

    def fronts_affecting(self, region_id: str) -> list[WeatherFront]:
        return [f for f in self.fronts.values() if region_id in f.affected_region_ids]

    def drought_for(self, region_id: str) -> DroughtState:
        """惰性创建干旱状态"""
        state = self.droughts.get(region_id)
        if state is None:
            state = DroughtState()
            self.droughts[region_id] = state
        return state
