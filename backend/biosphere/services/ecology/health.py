"""生态健康检查与灭绝连锁"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Region
from ...models.species import Diet, SpeciesRegistry
from ...models.world import EventEffect, EventLevel, EventType, WorldEvent
from .food_web import EcosystemState

logger = logging.getLogger(__name__)


def global_population_counts(regions: Mapping[str, Region]) -> dict[str, int]:
    counts: dict[str, int] = {}
    for region in regions.values():
        for pop in region.populations:
            counts[pop.species_id] = counts.get(pop.species_id, 0) + pop.count
    return counts


def _species_name(registry: SpeciesRegistry, species_id: str) -> str:
    species = registry.get(species_id)
    return species.common_name if species is not None else species_id


def check_ecosystem_health(
    region: Region,
    registry: SpeciesRegistry,
    global_counts: Mapping[str, int],
    extinct_species: set[str],
    config: EcosystemConfig,
    tick: int,
    rng: WorldRNG,
) -> tuple[list[WorldEvent], list[str]]:
    """扫描区域的灭绝、资源枯竭与污染危机，并移除数量为 0 的种群

    Args:
        global_counts: 全图各物种总数
        extinct_species: 已宣告全球灭绝的物种，本函数会追加新灭绝的物种

    Returns:
        (事件列表, 本次新宣告全球灭绝的物种 id)
    """
    events: list[WorldEvent] = []
    newly_extinct: list[str] = []

    # === 灭绝 ===
    for pop in region.populations:
        if pop.count > 0:
            continue
        name = _species_name(registry, pop.species_id)
        if global_counts.get(pop.species_id, 0) <= 0 and pop.species_id not in extinct_species:
            extinct_species.add(pop.species_id)
            newly_extinct.append(pop.species_id)
            logger.info(f"[灭绝] {name} 已在全球灭绝 (tick {tick})")
            events.append(WorldEvent(
                id=rng.token(),
                event_type=EventType.EXTINCTION,
                level=EventLevel.GLOBAL,
                region_ids=[region.id],
                description=f"{name} 在全球范围内灭绝，最后的个体已经消逝。",
                tick=tick,
                effects=[EventEffect("extinction", 1.0, species_id=pop.species_id)],
                resolved=True,
            ))
        else:
            logger.info(f"[灭绝] {name} 在 {region.id} 局部灭绝")
            events.append(WorldEvent(
                id=rng.token(),
                event_type=EventType.EXTINCTION,
                level=EventLevel.REGIONAL,
                region_ids=[region.id],
                description=f"{name} 在 {region.name} 局部灭绝。",
                tick=tick,
                effects=[EventEffect("local_extinction", 0.5, region_id=region.id, species_id=pop.species_id)],
                resolved=True,
            ))

    # === 资源枯竭 ===
    for resource in region.resources:
        if resource.quantity < resource.max_quantity * config.resource_depletion_ratio:
            events.append(WorldEvent(
                id=rng.token(),
                event_type=EventType.RESOURCE_DEPLETION,
                level=EventLevel.REGIONAL,
                region_ids=[region.id],
                description=f"{region.name} 的 {resource.resource_type} 严重枯竭，生态系统难以为继。",
                tick=tick,
                effects=[EventEffect("resource_depletion", 0.7, region_id=region.id)],
            ))

    # === 污染危机 ===
    if region.climate.pollution > config.pollution_crisis_threshold:
        events.append(WorldEvent(
            id=rng.token(),
            event_type=EventType.POLLUTION_CRISIS,
            level=EventLevel.REGIONAL,
            region_ids=[region.id],
            description=f"{region.name} 被严重污染笼罩，生命在挣扎。",
            tick=tick,
            effects=[EventEffect("pollution_crisis", region.climate.pollution, region_id=region.id)],
        ))

    region.populations = [p for p in region.populations if p.count > 0]
    return events, newly_extinct


def extinction_cascade(
    species_id: str,
    ecosystem: EcosystemState,
    registry: SpeciesRegistry,
    tick: int,
    rng: WorldRNG,
    region_ids: list[str] | None = None,
) -> list[WorldEvent]:
    """物种灭绝对食物网上下游的连锁影响"""
    events: list[WorldEvent] = []
    name = _species_name(registry, species_id)
    region_ids = list(region_ids or [])

    # 失去食物来源的捕食者
    for relation in ecosystem.predators_of(species_id):
        predator_name = _species_name(registry, relation.predator_id)
        events.append(WorldEvent(
            id=rng.token(),
            event_type=EventType.EXTINCTION,
            level=EventLevel.SPECIES,
            region_ids=region_ids,
            description=f"{predator_name} 失去了猎物 {name}，食物来源岌岌可危。",
            tick=tick,
            effects=[EventEffect("food_loss", relation.efficiency, species_id=relation.predator_id)],
        ))

    # 摆脱天敌的猎物
    for relation in ecosystem.prey_of(species_id):
        prey_name = _species_name(registry, relation.prey_id)
        events.append(WorldEvent(
            id=rng.token(),
            event_type=EventType.EXTINCTION,
            level=EventLevel.SPECIES,
            region_ids=region_ids,
            description=f"天敌 {name} 消失后，{prey_name} 的数量可能失控增长。",
            tick=tick,
            effects=[EventEffect("predator_release", relation.efficiency, species_id=relation.prey_id)],
        ))

    species = registry.get(species_id)
    if species is not None and species.traits.diet == Diet.HERBIVORE:
        events.append(WorldEvent(
            id=rng.token(),
            event_type=EventType.EXTINCTION,
            level=EventLevel.SPECIES,
            region_ids=region_ids,
            description=f"{name} 灭绝后啃食压力解除，植被重新占领大地。",
            tick=tick,
            effects=[EventEffect("vegetation_recovery", 0.5, species_id=species_id)],
        ))

    if events:
        logger.info(f"[连锁] {name} 灭绝引发 {len(events)} 个连锁事件")
    return events
