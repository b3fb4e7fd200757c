"""误伤：大型物种在同一栖息层对小型物种造成的踩踏死亡"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field

from ...core.random import WorldRNG
from ...models.config import EcosystemConfig
from ...models.region import Region
from ...models.species import CharacterRegistry, SpeciesRegistry, SpeciesTraits

logger = logging.getLogger(__name__)

TRAMPLED_CAUSE = "trampled"


@dataclass(slots=True)
class IncidentalKill:
    region_id: str
    large_species_id: str
    small_species_id: str
    killed: int
    character_kills: list[str] = field(default_factory=list)


def shares_habitat(a: SpeciesTraits, b: SpeciesTraits) -> bool:
    return any(layer in b.habitat for layer in a.habitat)


def incidental_kill_count(
    large_size: float,
    small_size: float,
    large_count: int,
    small_count: int,
    config: EcosystemConfig,
) -> tuple[int, float]:
    """踩踏死亡数 floor(0.001 * (体型比/10) * 大型种群数)

    Returns:
        (死亡数, 原始踩踏率)；体型比不超过 10 倍时为 (0, 0)
    """
    size_ratio = large_size / max(1.0, small_size)
    if size_ratio <= config.incidental_size_ratio:
        return 0, 0.0
    kill_rate = config.incidental_kill_scale * (size_ratio / config.incidental_size_ratio) * large_count
    return min(small_count, math.floor(kill_rate)), kill_rate


def process_incidental_kills(
    region: Region,
    registry: SpeciesRegistry,
    rng: WorldRNG,
    config: EcosystemConfig,
    tick: int,
    characters: CharacterRegistry | None = None,
) -> list[IncidentalKill]:
    results: list[IncidentalKill] = []

    for large_pop in region.populations:
        if large_pop.count <= 0:
            continue
        large = registry.get(large_pop.species_id)
        if large is None:
            continue

        for small_pop in region.populations:
            if small_pop is large_pop or small_pop.count <= 0:
                continue
            small = registry.get(small_pop.species_id)
            if small is None or not shares_habitat(large.traits, small.traits):
                continue

            killed, kill_rate = incidental_kill_count(
                large.traits.size, small.traits.size, large_pop.count, small_pop.count, config
            )
            if killed <= 0:
                continue

            small_pop.count -= killed

            # 被操控的个体逐个判定
            victims = []
            per_character_chance = kill_rate / max(1, small_pop.count + killed)
            for character_id in list(small_pop.character_ids):
                if rng.chance(per_character_chance):
                    small_pop.character_ids.remove(character_id)
                    victims.append(character_id)
                    if characters is not None:
                        characters.mark_dead(character_id, tick, TRAMPLED_CAUSE)

            if victims:
                logger.info(f"[误伤] {region.id}: {large.common_name} 踩死了角色 {victims}")
            results.append(IncidentalKill(
                region_id=region.id,
                large_species_id=large_pop.species_id,
                small_species_id=small_pop.species_id,
                killed=killed,
                character_kills=victims,
            ))

    return results
