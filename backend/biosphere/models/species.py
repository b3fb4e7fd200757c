"""物种特征数据（只读）

物种分类与遗传定义由外部系统维护，本核心只按 species_id 查询特征。
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Protocol

from .region import WorldLayer


class Diet(Enum):
    """食性"""
    HERBIVORE = "herbivore"
    CARNIVORE = "carnivore"
    OMNIVORE = "omnivore"
    DETRITIVORE = "detritivore"
    FILTER_FEEDER = "filter_feeder"


@dataclass(frozen=True)
class SpeciesTraits:
    lifespan: int = 1000           # tick
    size: float = 10.0             # 体型（相对单位）
    diet: Diet = Diet.HERBIVORE
    habitat: tuple[WorldLayer, ...] = (WorldLayer.SURFACE,)
    reproduction_rate: float = 1.0
    gestation_ticks: int = 10
    maturity_ticks: int = 50
    aquatic: bool = False
    can_fly: bool = False


@dataclass(frozen=True)
class Species:
    id: str
    common_name: str
    traits: SpeciesTraits = field(default_factory=SpeciesTraits)


class SpeciesRegistry:
    """按 species_id 查询的只读物种注册表"""

    def __init__(self, species: list[Species] | None = None):
        self._species: dict[str, Species] = {}
        for sp in species or []:
            self.register(sp)

    def register(self, species: Species) -> None:
        self._species[species.id] = species

    def get(self, species_id: str) -> Species | None:
        return self._species.get(species_id)

    def __contains__(self, species_id: object) -> bool:
        return species_id in self._species

    def __iter__(self) -> Iterator[Species]:
        return iter(self._species.values())

    def __len__(self) -> int:
        return len(self._species)


class CharacterRegistry(Protocol):
    """玩家/智能体角色系统的回调接口"""

    def mark_dead(self, character_id: str, tick: int, cause: str) -> None:
        ...
