"""世界时间与世界事件"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

# ========== 时间常量 ==========
TICKS_PER_YEAR = 86400
DAYS_PER_YEAR = 365
TICKS_PER_DAY = TICKS_PER_YEAR / DAYS_PER_YEAR
TICKS_PER_HOUR = TICKS_PER_DAY / 24
DAYS_PER_SEASON = DAYS_PER_YEAR / 4
LUNAR_CYCLE_DAYS = 29.5


class Season(Enum):
    SPRING = "spring"
    SUMMER = "summer"
    AUTUMN = "autumn"
    WINTER = "winter"


class LunarPhase(Enum):
    """月相（按周期顺序排列，index 0 为新月，4 为满月）"""
    NEW = "new"
    WAXING_CRESCENT = "waxing_crescent"
    FIRST_QUARTER = "first_quarter"
    WAXING_GIBBOUS = "waxing_gibbous"
    FULL = "full"
    WANING_GIBBOUS = "waning_gibbous"
    LAST_QUARTER = "last_quarter"
    WANING_CRESCENT = "waning_crescent"

    @property
    def index(self) -> int:
        return _LUNAR_ORDER.index(self)


_LUNAR_ORDER = list(LunarPhase)
_SEASON_ORDER = list(Season)


@dataclass(frozen=True)
class WorldTime:
    """由世界驱动器在每个 tick 提供的时间记录"""
    tick: int
    year: int
    day: int        # 0..364
    hour: int       # 0..23
    season: Season
    lunar_phase: LunarPhase
    is_day: bool

    @classmethod
    def from_tick(cls, tick: int) -> WorldTime:
        """根据全局 tick 推算日历、季节与月相"""
        year = int(tick // TICKS_PER_YEAR)
        tick_in_year = tick % TICKS_PER_YEAR
        day = min(DAYS_PER_YEAR - 1, int(tick_in_year // TICKS_PER_DAY))
        hour = min(23, int((tick_in_year % TICKS_PER_DAY) // TICKS_PER_HOUR))
        season = _SEASON_ORDER[min(3, int(day // DAYS_PER_SEASON))]

        lunar_cycle_ticks = LUNAR_CYCLE_DAYS * TICKS_PER_DAY
        lunar_progress = (tick % lunar_cycle_ticks) / lunar_cycle_ticks
        lunar_phase = _LUNAR_ORDER[int(lunar_progress * 8) % 8]

        return cls(
            tick=tick,
            year=year,
            day=day,
            hour=hour,
            season=season,
            lunar_phase=lunar_phase,
            is_day=6 <= hour < 20,
        )


class EventType(Enum):
    """世界事件类型"""
    NATURAL_DISASTER = "natural_disaster"
    WEATHER_EXTREME = "weather_extreme"
    ECLIPSE = "eclipse"
    EXTINCTION = "extinction"
    RESOURCE_DEPLETION = "resource_depletion"
    POLLUTION_CRISIS = "pollution_crisis"
    CATASTROPHE = "catastrophe"


class EventLevel(Enum):
    """事件影响范围"""
    REGIONAL = "regional"
    CONTINENTAL = "continental"
    GLOBAL = "global"
    SPECIES = "species"    # 物种级（食物网连锁）


@dataclass
class EventEffect:
    """事件附带的效果（供叙事/广播层解读）"""
    effect_type: str
    magnitude: float
    region_id: str | None = None
    species_id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "effect_type": self.effect_type,
            "magnitude": self.magnitude,
            "region_id": self.region_id,
            "species_id": self.species_id,
        }


@dataclass
class WorldEvent:
    """每个 tick 输出给叙事/广播层的世界事件"""
    event_type: EventType
    level: EventLevel
    region_ids: list[str]
    description: str
    tick: int
    effects: list[EventEffect] = field(default_factory=list)
    resolved: bool = False
    id: str = ""  # 由 WorldRNG.token() 分配

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "event_type": self.event_type.value,
            "level": self.level.value,
            "region_ids": list(self.region_ids),
            "description": self.description,
            "tick": self.tick,
            "effects": [e.to_dict() for e in self.effects],
            "resolved": self.resolved,
        }
