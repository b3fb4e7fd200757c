"""种群动态：内禀增长、资源消耗、捕食、密度调节

每个区域的所有种群在同一快照上计算捕食关系，避免遍历顺序造成的重复计算。
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Population, Region, Resource, WorldLayer
from ...models.species import Diet, SpeciesRegistry, SpeciesTraits
from .food_web import EcosystemState
from .plants import graze_plants

logger = logging.getLogger(__name__)

PLANT_RESOURCE_TYPES = frozenset({
    "vegetation", "grass", "berries", "fruit", "seeds", "algae", "kelp", "plankton",
    "bamboo", "leaves", "roots", "bark", "nectar", "pollen", "fungi",
})
FILTER_RESOURCE_TYPES = frozenset({"plankton", "krill", "algae", "organic_matter"})


@dataclass(slots=True)
class PopulationUpdate:
    """单个种群本 tick 的变化明细"""
    region_id: str
    species_id: str
    old_count: int
    new_count: int
    growth_rate: float
    resource_satisfaction: float
    predation_loss: float
    prey_bonus: float

    @property
    def delta(self) -> int:
        return self.new_count - self.old_count


def species_growth_rate(traits: SpeciesTraits) -> float:
    """内禀增长率

    出生率由繁殖率与妊娠期决定，性成熟相对寿命越晚出生率越低；
    死亡率为寿命的倒数。
    """
    maturity_factor = 1 / (1 + traits.maturity_ticks / max(1, traits.lifespan))
    birth_rate = traits.reproduction_rate / max(1, traits.gestation_ticks) * 0.01 * maturity_factor
    death_rate = 1 / max(1, traits.lifespan)
    return max(0.0001, birth_rate - death_rate * 0.5)


def consume_from_pool(resources: Sequence[Resource], demand: float, draw_rate: float) -> float:
    """按比例从资源池中取食，返回满足的需求量

    资源池为空时视为不受资源限制。
    """
    if not resources or demand <= 0:
        return demand
    available = sum(r.quantity for r in resources)
    if available <= 0:
        return 0.0

    consumed = min(available, demand)
    ratio = consumed / available
    for r in resources:
        r.quantity = max(0.0, r.quantity - r.quantity * ratio * draw_rate)
    return consumed


def consume_resources(region: Region, pop: Population, traits: SpeciesTraits, config: EcosystemConfig) -> float:
    """种群取食，返回 0..1 的资源满足度"""
    if pop.count <= 0:
        return 1.0

    per_capita = config.consumption_per_capita * max(0.1, traits.size / 50)
    demand = pop.count * per_capita

    if traits.diet in (Diet.HERBIVORE, Diet.OMNIVORE):
        if traits.diet == Diet.OMNIVORE:
            demand *= 0.5
        grazed = graze_plants(region, demand * config.grazing_fraction)
        pool = [r for r in region.resources if r.resource_type in PLANT_RESOURCE_TYPES] or region.resources
        consumed = consume_from_pool(pool, demand - grazed, config.consumption_draw_rate)
        return min(1.0, (grazed + consumed) / demand)

    if traits.diet == Diet.DETRITIVORE:
        # 分解者主要回收死物质，不明显消耗资源
        available = sum(r.quantity for r in region.resources)
        consumed = min(available * 0.01, demand)
        return min(1.0, (consumed + 0.5) / max(0.01, demand))

    if traits.diet == Diet.FILTER_FEEDER:
        pool = [r for r in region.resources if r.resource_type in FILTER_RESOURCE_TYPES]
        if not pool:
            return 0.5
        return min(1.0, consume_from_pool(pool, demand, config.consumption_draw_rate) / demand)

    # 肉食者的能量来自猎物
    return config.carnivore_satisfaction


def temperature_stress(region: Region, traits: SpeciesTraits, config: EcosystemConfig) -> float:
    """地表物种在极端温度下的额外死亡率，水下/地下物种不受影响"""
    if WorldLayer.UNDERGROUND in traits.habitat or WorldLayer.UNDERWATER in traits.habitat:
        return 0.0
    temp = region.climate.temperature
    if temp > config.heat_stress_threshold:
        return (temp - config.heat_stress_threshold) * config.temperature_stress_scale
    if temp < config.cold_stress_threshold:
        return (config.cold_stress_threshold - temp) * config.temperature_stress_scale
    return 0.0


def update_populations(
    region: Region,
    ecosystem: EcosystemState,
    registry: SpeciesRegistry,
    rng: WorldRNG,
    config: EcosystemConfig,
) -> list[PopulationUpdate]:
    """推进一个区域内所有种群一个 tick"""
    capacity = ecosystem.capacity_for(region.id)
    snapshot = {pop.species_id: pop.count for pop in region.populations}
    total = sum(snapshot.values())
    updates: list[PopulationUpdate] = []

    for pop in region.populations:
        if pop.count <= 0:
            continue

        species = registry.get(pop.species_id)
        if species is None:
            logger.warning(f"[种群] 物种 {pop.species_id} 不在注册表中，跳过 {region.id} 的本轮更新")
            continue
        traits = species.traits

        # === 1. 内禀增长率 ===
        growth_rate = species_growth_rate(traits)

        # === 2. 取食 ===
        satisfaction = consume_resources(region, pop, traits, config)

        # === 3. 被捕食损失 ===
        predation_loss = 0.0
        for relation in ecosystem.predators_of(pop.species_id):
            predation_loss += snapshot.get(relation.predator_id, 0) * relation.efficiency * config.predation_loss_scale

        # === 4. 捕食收益 / 断粮 ===
        prey_bonus = 0.0
        prey_relations = ecosystem.prey_of(pop.species_id)
        if prey_relations:
            prey_total = 0
            for relation in prey_relations:
                prey_count = snapshot.get(relation.prey_id, 0)
                prey_total += prey_count
                if prey_count > 0:
                    prey_bonus += prey_count / (prey_count + pop.count) * relation.efficiency * config.predator_gain_scale
            if prey_total == 0 and traits.diet == Diet.CARNIVORE:
                predation_loss += config.starvation_rate

        # === 5. 密度调节（超载时为负） ===
        species_cap = ecosystem.species_capacity_for(region.id, pop.species_id)
        density = min(1 - total / capacity, 1 - pop.count / species_cap)
        if density >= 0:
            growth = pop.count * (growth_rate * satisfaction + prey_bonus) * density
        else:
            growth = pop.count * growth_rate * density

        # === 6. 环境胁迫 ===
        pollution_penalty = region.climate.pollution * config.pollution_mortality
        losses = pop.count * (predation_loss + pollution_penalty + temperature_stress(region, traits, config))

        # === 7. 人口学噪声 ===
        noise = rng.gaussian(0, math.sqrt(max(1, pop.count)) * config.demographic_noise)

        # === 8. 最小可存活种群 / 小种群恢复 ===
        mvp_penalty = 0.0
        if 0 < pop.count < config.min_viable_population:
            mvp_penalty = (config.min_viable_population - pop.count) * config.mvp_penalty
        recovery_bonus = 0.0
        if (
            config.min_viable_population < pop.count < config.recovery_threshold
            and satisfaction > config.recovery_satisfaction
            and predation_loss < 0.001
        ):
            recovery_bonus = growth_rate * config.recovery_bonus

        delta = growth - losses + noise + pop.count * (recovery_bonus - mvp_penalty)
        old_count = pop.count
        pop.count = max(0, round(pop.count + delta))

        updates.append(PopulationUpdate(
            region_id=region.id,
            species_id=pop.species_id,
            old_count=old_count,
            new_count=pop.count,
            growth_rate=growth_rate,
            resource_satisfaction=satisfaction,
            predation_loss=predation_loss,
            prey_bonus=prey_bonus,
        ))

    return updates


def regenerate_resources(region: Region, config: EcosystemConfig) -> None:
    """资源向上限恢复，污染越重恢复越慢"""
    pollution_factor = max(config.regen_min_factor, 1 - region.climate.pollution * config.regen_pollution_damping)
    for r in region.resources:
        r.quantity = min(r.max_quantity, r.quantity + r.renewal_rate * r.tidal_factor * pollution_factor)


def crowding_pollution(region: Region, ecosystem: EcosystemState, config: EcosystemConfig) -> float:
    """过度拥挤的种群产生污染并写回区域气候，返回新增污染量"""
    capacity = ecosystem.capacity_for(region.id)
    total = region.total_population()
    threshold = capacity * config.crowding_pollution_threshold
    if total <= threshold:
        return 0.0

    added = (total - threshold) / capacity * config.crowding_pollution_rate
    region.climate.pollution = min(1.0, region.climate.pollution + added)
    return added
