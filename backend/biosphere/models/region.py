"""区域图数据模型

区域（Region）是世界空间图上的离散节点：有层级、生物群系、经纬度与海拔，
挂载气候状态、资源储量、动物种群与植物种群，并记录相邻区域 id。
区域在世界播种时创建，之后每个 tick 被三大引擎原地修改，运行期间不会销毁。
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from enum import Enum


class InvariantViolation(Exception):
    """状态不变量被破坏（属于程序缺陷，严格模式下直接抛出）"""


class WorldLayer(Enum):
    """世界层级"""
    SURFACE = "surface"          # 地表
    UNDERWATER = "underwater"    # 水下
    UNDERGROUND = "underground"  # 地下


class Biome(Enum):
    """生物群系"""
    TROPICAL_RAINFOREST = "tropical_rainforest"
    TEMPERATE_FOREST = "temperate_forest"
    BOREAL_FOREST = "boreal_forest"
    SAVANNA = "savanna"
    GRASSLAND = "grassland"
    DESERT = "desert"
    TUNDRA = "tundra"
    MOUNTAIN = "mountain"
    WETLAND = "wetland"
    COASTAL = "coastal"
    CORAL_REEF = "coral_reef"
    OPEN_OCEAN = "open_ocean"
    DEEP_OCEAN = "deep_ocean"
    HYDROTHERMAL_VENT = "hydrothermal_vent"
    KELP_FOREST = "kelp_forest"
    CAVE_SYSTEM = "cave_system"
    UNDERGROUND_RIVER = "underground_river"
    SUBTERRANEAN_ECOSYSTEM = "subterranean_ecosystem"


@dataclass
class ClimateState:
    """区域气候状态

    湿度与污染恒在 [0, 1]，降水与风速恒 >= 0；温度不设界。
    """
    temperature: float = 15.0    # °C
    humidity: float = 0.5        # 0..1
    precipitation: float = 0.0   # mm 当量
    wind_speed: float = 0.0
    pollution: float = 0.0       # 0..1

    def violations(self) -> list[str]:
        """列出当前违反的不变量"""
        problems = []
        for name in ("temperature", "humidity", "precipitation", "wind_speed", "pollution"):
            if not math.isfinite(getattr(self, name)):
                problems.append(f"{name} 非有限值: {getattr(self, name)}")
        if not 0.0 <= self.humidity <= 1.0:
            problems.append(f"humidity 越界: {self.humidity}")
        if not 0.0 <= self.pollution <= 1.0:
            problems.append(f"pollution 越界: {self.pollution}")
        if self.precipitation < 0.0:
            problems.append(f"precipitation 为负: {self.precipitation}")
        if self.wind_speed < 0.0:
            problems.append(f"wind_speed 为负: {self.wind_speed}")
        return problems

    def enforce_invariants(self, strict: bool = False) -> None:
        """校验并钳制气候不变量

        Args:
            strict: True 时发现违规直接抛出 InvariantViolation
        """
        if strict:
            problems = self.violations()
            if problems:
                raise InvariantViolation("; ".join(problems))
        self.humidity = clamp01(self.humidity)
        self.pollution = clamp01(self.pollution)
        self.precipitation = max(0.0, self.precipitation)
        self.wind_speed = max(0.0, self.wind_speed)


@dataclass
class Resource:
    """资源储量（植物性食物、矿物等）"""
    resource_type: str
    quantity: float
    renewal_rate: float
    max_quantity: float
    # 潮汐对再生速率的当期倍率，每 tick 由气候引擎重写，不累乘进 renewal_rate
    tidal_factor: float = 1.0


@dataclass
class Population:
    """某物种在某区域的种群"""
    species_id: str
    count: int = 0
    # 由玩家/智能体操控的个体 id
    character_ids: list[str] = field(default_factory=list)


@dataclass
class PlantPopulation:
    """植物种群"""
    plant_type: str
    biomass: float
    max_biomass: float
    growth_rate: float
    spread_rate: float
    destroyed: bool = False
    ticks_below_threshold: int = 0


@dataclass
class Region:
    """世界空间图上的一个区域节点"""
    id: str
    name: str
    layer: WorldLayer
    biome: Biome
    latitude: float = 0.0
    longitude: float = 0.0
    elevation: float = 0.0
    climate: ClimateState = field(default_factory=ClimateState)
    resources: list[Resource] = field(default_factory=list)
    populations: list[Population] = field(default_factory=list)
    plants: list[PlantPopulation] = field(default_factory=list)
    # 相邻区域 id；保持插入顺序以保证同种子下遍历顺序一致
    connections: list[str] = field(default_factory=list)

    def connect(self, other_id: str) -> None:
        if other_id != self.id and other_id not in self.connections:
            self.connections.append(other_id)

    def total_population(self) -> int:
        return sum(p.count for p in self.populations)

    def get_population(self, species_id: str) -> Population | None:
        for pop in self.populations:
            if pop.species_id == species_id:
                return pop
        return None

    def ensure_population(self, species_id: str) -> Population:
        """获取种群记录，不存在时创建一个空种群"""
        pop = self.get_population(species_id)
        if pop is None:
            pop = Population(species_id=species_id, count=0)
            self.populations.append(pop)
        return pop

    def living_plants(self) -> list[PlantPopulation]:
        return [p for p in self.plants if not p.destroyed]


def clamp01(value: float) -> float:
    return max(0.0, min(1.0, value))
