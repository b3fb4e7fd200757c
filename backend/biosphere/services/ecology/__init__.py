"""
种群/生态引擎模块

- food_web: 食物网关系与承载力表
- population_dynamics: 增长、取食、捕食、密度调节、资源再生、拥挤污染
- plants: 植物生长、过度啃食与扩散
- migration: 过载迁徙
- incidental: 大型物种踩踏误伤
- health: 灭绝/资源枯竭/污染危机检查与灭绝连锁
"""

from .ecosystem_engine import EcosystemEngine, EcosystemTickResult
from .food_web import (
    BIOME_CAPACITY_MULTIPLIER,
    EcosystemState,
    FoodWebRelation,
    biome_capacity,
    species_capacity_key,
)
from .health import check_ecosystem_health, extinction_cascade, global_population_counts
from .incidental import IncidentalKill, incidental_kill_count, process_incidental_kills
from .migration import MigrationRecord, apply_migrations, plan_migrations
from .plants import BIOME_PLANTS, default_plants, plant_biomass_ratio, spread_plants, update_plants
from .population_dynamics import (
    PopulationUpdate,
    consume_resources,
    crowding_pollution,
    regenerate_resources,
    species_growth_rate,
    update_populations,
)

__all__ = [
    # 主引擎
    "EcosystemEngine",
    "EcosystemTickResult",
    # 食物网
    "EcosystemState",
    "FoodWebRelation",
    "BIOME_CAPACITY_MULTIPLIER",
    "biome_capacity",
    "species_capacity_key",
    # 种群动态
    "PopulationUpdate",
    "species_growth_rate",
    "consume_resources",
    "update_populations",
    "regenerate_resources",
    "crowding_pollution",
    # 植物
    "BIOME_PLANTS",
    "default_plants",
    "plant_biomass_ratio",
    "update_plants",
    "spread_plants",
    # 迁徙与误伤
    "MigrationRecord",
    "plan_migrations",
    "apply_migrations",
    "IncidentalKill",
    "incidental_kill_count",
    "process_incidental_kills",
    # 健康
    "check_ecosystem_health",
    "extinction_cascade",
    "global_population_counts",
]
