"""过载区域向邻区的种群迁徙

迁徙分两步：先基于全图种群总数快照规划，再统一执行。
规划阶段累计每个目的地的迁入量，保证任何目的地都不会被迁徙填满。
"""

from __future__ import annotations

import logging
import math
from collections import defaultdict
from dataclasses import dataclass
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Region
from ...models.species import SpeciesRegistry
from .food_web import EcosystemState

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class MigrationRecord:
    species_id: str
    from_region_id: str
    to_region_id: str
    count: int


def migration_chance(pressure: float, config: EcosystemConfig) -> float:
    """拥挤度越高迁徙概率越大，最高 10%"""
    if pressure < config.migration_pressure:
        return 0.0
    return min(config.migration_max_chance, (pressure - config.migration_pressure) * config.migration_chance_scale)


def plan_migrations(
    regions: Mapping[str, Region],
    ecosystem: EcosystemState,
    registry: SpeciesRegistry,
    rng: WorldRNG,
    config: EcosystemConfig,
) -> list[MigrationRecord]:
    totals = {rid: region.total_population() for rid, region in regions.items()}
    incoming: dict[str, int] = defaultdict(int)
    plans: list[MigrationRecord] = []

    for region in regions.values():
        pressure = totals[region.id] / ecosystem.capacity_for(region.id)
        chance = migration_chance(pressure, config)
        if chance <= 0:
            continue

        for pop in region.populations:
            if pop.count < config.migration_min_population:
                continue
            species = registry.get(pop.species_id)
            if species is None:
                continue
            if not rng.chance(chance):
                continue

            for neighbor_id in region.connections:
                target = regions.get(neighbor_id)
                if target is None or target.layer not in species.traits.habitat:
                    continue

                ceiling = math.floor(ecosystem.capacity_for(target.id) * config.migration_target_ceiling)
                room = ceiling - totals[target.id] - incoming[target.id]
                if room <= 0:
                    continue

                fraction = rng.uniform(config.migration_min_fraction, config.migration_max_fraction)
                count = min(room, max(1, round(pop.count * fraction)))
                incoming[target.id] += count
                plans.append(MigrationRecord(pop.species_id, region.id, target.id, count))
                break  # 每个物种每 tick 只迁徙一次

    return plans


def apply_migrations(regions: Mapping[str, Region], plans: list[MigrationRecord]) -> None:
    for plan in plans:
        source = regions[plan.from_region_id].get_population(plan.species_id)
        if source is None:
            continue
        moved = min(plan.count, source.count)
        source.count -= moved
        regions[plan.to_region_id].ensure_population(plan.species_id).count += moved
        plan.count = moved
        logger.info(f"[迁徙] {plan.species_id}: {plan.from_region_id} -> {plan.to_region_id} ({moved})")
