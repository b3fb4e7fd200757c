"""世界状态快照

核心只负责把状态转换为可序列化结构并能无损恢复，落盘与回放日志由外部持久化层处理。
浮点数经 JSON 往返后保持逐位一致。
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, Mapping

from ...models.region import (
    Biome,
    ClimateState,
    PlantPopulation,
    Population,
    Region,
    Resource,
    WorldLayer,
)
from ...schemas.snapshot import (
    CatastropheEffectSnapshot,
    CatastropheSnapshot,
    ClimateSnapshot,
    EcosystemSnapshot,
    FoodWebEdge,
    PlantSnapshot,
    PopulationSnapshot,
    RegionSnapshot,
    ResourceSnapshot,
    WorldSnapshot,
)
from ..catastrophe.models import Catastrophe, CatastropheEffect, CatastropheType, EffectType
from ..ecology.food_web import EcosystemState, FoodWebRelation

logger = logging.getLogger(__name__)


@dataclass
class RestoredWorld:
    """从快照恢复出的世界状态"""
    tick: int
    regions: dict[str, Region]
    ecosystem: EcosystemState
    catastrophes: list[Catastrophe] = field(default_factory=list)
    extinct_species: set[str] = field(default_factory=set)


class SnapshotService:
    """世界状态 <-> WorldSnapshot 的转换"""

    # ========== 区域 ==========

    @staticmethod
    def region_to_snapshot(region: Region) -> RegionSnapshot:
        c = region.climate
        return RegionSnapshot(
            id=region.id,
            name=region.name,
            layer=region.layer.value,
            biome=region.biome.value,
            latitude=region.latitude,
            longitude=region.longitude,
            elevation=region.elevation,
            connections=list(region.connections),
            climate=ClimateSnapshot(
                temperature=c.temperature,
                humidity=c.humidity,
                precipitation=c.precipitation,
                wind_speed=c.wind_speed,
                pollution=c.pollution,
            ),
            resources=[
                ResourceSnapshot(
                    resource_type=r.resource_type,
                    quantity=r.quantity,
                    renewal_rate=r.renewal_rate,
                    max_quantity=r.max_quantity,
                )
                for r in region.resources
            ],
            populations=[
                PopulationSnapshot(species_id=p.species_id, count=p.count, character_ids=list(p.character_ids))
                for p in region.populations
            ],
            plants=[
                PlantSnapshot(
                    plant_type=p.plant_type,
                    biomass=p.biomass,
                    max_biomass=p.max_biomass,
                    growth_rate=p.growth_rate,
                    spread_rate=p.spread_rate,
                    destroyed=p.destroyed,
                    ticks_below_threshold=p.ticks_below_threshold,
                )
                for p in region.plants
            ],
        )

    @staticmethod
    def region_from_snapshot(data: RegionSnapshot) -> Region:
        return Region(
            id=data.id,
            name=data.name,
            layer=WorldLayer(data.layer),
            biome=Biome(data.biome),
            latitude=data.latitude,
            longitude=data.longitude,
            elevation=data.elevation,
            climate=ClimateState(**data.climate.model_dump()),
            resources=[Resource(**r.model_dump()) for r in data.resources],
            populations=[Population(**p.model_dump()) for p in data.populations],
            plants=[PlantPopulation(**p.model_dump()) for p in data.plants],
            connections=list(data.connections),
        )

    # ========== 生态 ==========

    @staticmethod
    def ecosystem_to_snapshot(state: EcosystemState) -> EcosystemSnapshot:
        return EcosystemSnapshot(
            food_web=[
                FoodWebEdge(predator_id=r.predator_id, prey_id=r.prey_id, efficiency=r.efficiency)
                for r in state.food_web
            ],
            carrying_capacity=dict(state.carrying_capacity),
            species_capacity=dict(state.species_capacity),
            default_capacity=state.default_capacity,
        )

    @staticmethod
    def ecosystem_from_snapshot(data: EcosystemSnapshot) -> EcosystemState:
        return EcosystemState(
            food_web=[FoodWebRelation(e.predator_id, e.prey_id, e.efficiency) for e in data.food_web],
            carrying_capacity=dict(data.carrying_capacity),
            species_capacity=dict(data.species_capacity),
            default_capacity=data.default_capacity,
        )

    # ========== 灾变 ==========

    @staticmethod
    def catastrophe_to_snapshot(cat: Catastrophe) -> CatastropheSnapshot:
        return CatastropheSnapshot(
            id=cat.id,
            catastrophe_type=cat.catastrophe_type.value,
            region_ids=list(cat.region_ids),
            severity=cat.severity,
            tick_started=cat.tick_started,
            duration=cat.duration,
            ticks_remaining=cat.ticks_remaining,
            cause=cat.cause,
            effects=[
                CatastropheEffectSnapshot(
                    effect_type=e.effect_type.value,
                    magnitude=e.magnitude,
                    species_filter=e.species_filter,
                )
                for e in cat.effects
            ],
            mutation_bonus=cat.mutation_bonus,
        )

    @staticmethod
    def catastrophe_from_snapshot(data: CatastropheSnapshot) -> Catastrophe:
        return Catastrophe(
            id=data.id,
            catastrophe_type=CatastropheType(data.catastrophe_type),
            region_ids=list(data.region_ids),
            severity=data.severity,
            tick_started=data.tick_started,
            duration=data.duration,
            ticks_remaining=data.ticks_remaining,
            cause=data.cause,
            effects=[
                CatastropheEffect(EffectType(e.effect_type), e.magnitude, e.species_filter)
                for e in data.effects
            ],
            mutation_bonus=data.mutation_bonus,
        )

    # ========== 整体 ==========

    def capture(
        self,
        tick: int,
        regions: Mapping[str, Region],
        ecosystem: EcosystemState,
        catastrophes: Iterable[Catastrophe] = (),
        extinct_species: Iterable[str] = (),
    ) -> WorldSnapshot:
        snapshot = WorldSnapshot(
            tick=tick,
            regions=[self.region_to_snapshot(r) for r in regions.values()],
            ecosystem=self.ecosystem_to_snapshot(ecosystem),
            catastrophes=[self.catastrophe_to_snapshot(c) for c in catastrophes],
            extinct_species=sorted(extinct_species),
        )
        logger.debug(f"[快照] tick {tick}: {len(snapshot.regions)} 个区域, {len(snapshot.catastrophes)} 个活动灾变")
        return snapshot

    def restore(self, snapshot: WorldSnapshot) -> RestoredWorld:
        regions = {r.id: self.region_from_snapshot(r) for r in snapshot.regions}
        restored = RestoredWorld(
            tick=snapshot.tick,
            regions=regions,
            ecosystem=self.ecosystem_from_snapshot(snapshot.ecosystem),
            catastrophes=[self.catastrophe_from_snapshot(c) for c in snapshot.catastrophes],
            extinct_species=set(snapshot.extinct_species),
        )
        logger.info(f"[快照] 已恢复 tick {snapshot.tick} 的世界状态（{len(regions)} 个区域）")
        return restored

    @staticmethod
    def to_json(snapshot: WorldSnapshot) -> str:
        return snapshot.model_dump_json()

    @staticmethod
    def from_json(payload: str | bytes) -> WorldSnapshot:
        return WorldSnapshot.model_validate_json(payload)
