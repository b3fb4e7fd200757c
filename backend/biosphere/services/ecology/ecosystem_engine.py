"""种群/生态引擎主入口"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Region
from ...models.species import CharacterRegistry, SpeciesRegistry
from ...models.world import WorldEvent, WorldTime
from .food_web import EcosystemState
from .health import check_ecosystem_health, extinction_cascade, global_population_counts
from .incidental import IncidentalKill, process_incidental_kills
from .migration import MigrationRecord, apply_migrations, plan_migrations
from .plants import spread_plants, update_plants
from .population_dynamics import PopulationUpdate, crowding_pollution, regenerate_resources, update_populations

logger = logging.getLogger(__name__)


@dataclass
class EcosystemTickResult:
    """生态引擎单 tick 结果"""
    events: list[WorldEvent] = field(default_factory=list)
    updates: list[PopulationUpdate] = field(default_factory=list)
    migrations: list[MigrationRecord] = field(default_factory=list)
    incidental_kills: list[IncidentalKill] = field(default_factory=list)
    extinct_species: list[str] = field(default_factory=list)


class EcosystemEngine:
    """种群/生态引擎

    食物网与承载力由 EcosystemState 提供（世界播种时给定），
    物种特征从只读的 SpeciesRegistry 查询。
    """

    def __init__(
        self,
        registry: SpeciesRegistry,
        rng: WorldRNG,
        state: EcosystemState | None = None,
        config: EcosystemConfig | None = None,
        characters: CharacterRegistry | None = None,
    ):
        self.registry = registry
        self.rng = rng
        self.config = config or EcosystemConfig()
        self.state = state or EcosystemState(default_capacity=self.config.default_carrying_capacity)
        self.characters = characters
        self.extinct_species: set[str] = set()

    def tick(self, regions: Mapping[str, Region], time: WorldTime) -> EcosystemTickResult:
        result = EcosystemTickResult()

        # === 1. 区域内更新：种群、误伤、植物、资源、拥挤污染 ===
        for region in regions.values():
            result.updates.extend(update_populations(region, self.state, self.registry, self.rng, self.config))
            result.incidental_kills.extend(process_incidental_kills(
                region, self.registry, self.rng, self.config, time.tick, self.characters
            ))
            update_plants(region, self.config)
            regenerate_resources(region, self.config)
            crowding_pollution(region, self.state, self.config)

        # === 2. 植物扩散 ===
        for region in regions.values():
            spread_plants(region, regions, self.rng, self.config)

        # === 3. 迁徙（先规划后执行） ===
        plans = plan_migrations(regions, self.state, self.registry, self.rng, self.config)
        apply_migrations(regions, plans)
        result.migrations = plans

        # === 4. 健康检查与灭绝连锁 ===
        counts = global_population_counts(regions)
        for region in regions.values():
            events, newly_extinct = check_ecosystem_health(
                region, self.registry, counts, self.extinct_species, self.config, time.tick, self.rng
            )
            result.events.extend(events)
            for species_id in newly_extinct:
                result.events.extend(extinction_cascade(
                    species_id, self.state, self.registry, time.tick, self.rng, [region.id]
                ))
            result.extinct_species.extend(newly_extinct)

        if result.migrations or result.extinct_species:
            logger.debug(
                f"[生态] tick {time.tick}: 迁徙 {len(result.migrations)} 次，"
                f"全球灭绝 {len(result.extinct_species)} 种"
            )
        return result

    def reset(self) -> None:
        self.extinct_species.clear()
