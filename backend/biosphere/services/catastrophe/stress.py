"""环境压力计算（纯函数）"""

from __future__ import annotations

from ...models.config import CatastropheConfig
from ...models.region import Region
from ..ecology.food_web import EcosystemState
from ..ecology.plants import plant_biomass_ratio
from .models import StressVector


def calculate_stress(region: Region, ecosystem: EcosystemState, config: CatastropheConfig) -> StressVector:
    """由区域气候、植被与种群状态计算压力向量"""
    capacity = ecosystem.capacity_for(region.id)
    total = region.total_population()

    deforestation = 1 - plant_biomass_ratio(region) if region.plants else 0.0
    overpopulation = min(1.0, total / max(1, capacity))

    if region.plants:
        overgrazed = sum(1 for p in region.plants if p.ticks_below_threshold > config.soil_overgrazing_ticks)
        soil_degradation = overgrazed / len(region.plants)
    else:
        soil_degradation = 0.0

    pollution = region.climate.pollution
    return StressVector(
        region_id=region.id,
        pollution=pollution,
        deforestation=max(0.0, min(1.0, deforestation)),
        overpopulation=overpopulation,
        soil_degradation=soil_degradation,
        disease_risk=min(1.0, (pollution + overpopulation) / 2),
        water_stress=max(0.0, 1 - region.climate.humidity),
    )
