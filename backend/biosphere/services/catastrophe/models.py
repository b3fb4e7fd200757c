"""灾变系统数据模型"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np


class CatastropheType(Enum):
    """灾变类型"""
    DISEASE_OUTBREAK = "disease_outbreak"  # 疫病爆发
    FLOOD = "flood"                        # 洪水
    LANDSLIDE = "landslide"                # 山体滑坡
    FOREST_FIRE = "forest_fire"            # 森林大火
    FAMINE = "famine"                      # 饥荒
    TOXIC_BLOOM = "toxic_bloom"            # 有毒藻华
    PLAGUE = "plague"                      # 大瘟疫


class EffectType(Enum):
    """灾变持续效果"""
    POPULATION_KILL = "population_kill"
    PLANT_DESTROY = "plant_destroy"
    RESOURCE_DESTROY = "resource_destroy"
    CLIMATE_DISRUPTION = "climate_disruption"
    MUTATION_SURGE = "mutation_surge"  # 只通过演化压力体现


@dataclass
class CatastropheEffect:
    effect_type: EffectType
    magnitude: float
    species_filter: str | None = None


@dataclass
class Catastrophe:
    """活动中的灾变"""
    catastrophe_type: CatastropheType
    region_ids: list[str]
    severity: float           # 0..1
    tick_started: int
    duration: int
    ticks_remaining: int
    cause: str
    effects: list[CatastropheEffect] = field(default_factory=list)
    mutation_bonus: float = 0.0
    id: str = ""  # 由 WorldRNG.token() 分配

    def affects(self, region_id: str) -> bool:
        return region_id in self.region_ids


@dataclass(frozen=True)
class StressVector:
    """区域环境压力（每 tick 重算，不持久化）

    五个核心分量均在 0..1；water_stress 为辅助分量，只参与复合灾变计数。
    """
    region_id: str
    pollution: float = 0.0
    deforestation: float = 0.0
    overpopulation: float = 0.0
    soil_degradation: float = 0.0
    disease_risk: float = 0.0
    water_stress: float = 0.0

    def components(self) -> np.ndarray:
        return np.array([
            self.pollution,
            self.deforestation,
            self.overpopulation,
            self.soil_degradation,
            self.disease_risk,
        ])

    def high_stress_count(self, threshold: float = 0.5) -> int:
        """超过阈值的压力分量数（含 water_stress）"""
        values = np.append(self.components(), self.water_stress)
        return int(np.count_nonzero(values > threshold))
