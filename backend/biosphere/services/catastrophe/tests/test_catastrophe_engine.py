"""灾变引擎测试：压力计算、触发门槛、灾变推进与演化压力"""

import pytest

from ....core.random import WorldRNG
from ....models.config import CatastropheConfig
from ....models.region import Biome, ClimateState, PlantPopulation, Population, Region, Resource, WorldLayer
from ....models.world import EventType, WorldTime
from ...ecology.food_web import EcosystemState
from ..catastrophe_engine import CatastropheEngine
from ..models import Catastrophe, CatastropheEffect, CatastropheType, EffectType, StressVector
from ..stress import calculate_stress
from ..triggers import propose_catastrophe

NO_CHANCE = dict(
    disease_chance=0.0, flood_chance=0.0, fire_chance=0.0, famine_chance=0.0,
    toxic_bloom_chance=0.0, soil_famine_chance=0.0, plague_chance=0.0,
)


def make_catastrophe(region_id: str = "r1", severity: float = 0.5, remaining: int = 10, effects=None) -> Catastrophe:
    return Catastrophe(
        catastrophe_type=CatastropheType.FLOOD,
        region_ids=[region_id],
        severity=severity,
        tick_started=0,
        duration=remaining,
        ticks_remaining=remaining,
        cause="测试",
        effects=effects or [],
        mutation_bonus=severity * 3,
    )


class TestStress:
    """测试压力向量"""

    def setup_method(self):
        self.config = CatastropheConfig()
        self.ecosystem = EcosystemState(carrying_capacity={"r1": 1000})

    def test_stress_components(self):
        """测试各压力分量的计算"""
        region = Region("r1", "r1", WorldLayer.SURFACE, Biome.GRASSLAND)
        region.climate = ClimateState(humidity=0.2, pollution=0.4)
        region.populations = [Population("deer", 500)]
        region.plants = [
            PlantPopulation("grass", 100.0, 500.0, 0.05, 0.005, ticks_below_threshold=150),
            PlantPopulation("shrub", 0.0, 400.0, 0.03, 0.003),
        ]

        stress = calculate_stress(region, self.ecosystem, self.config)

        assert stress.pollution == 0.4
        assert stress.deforestation == pytest.approx(1 - 100 / 900)
        assert stress.overpopulation == 0.5
        assert stress.soil_degradation == 0.5
        assert stress.disease_risk == pytest.approx(0.45)
        assert stress.water_stress == pytest.approx(0.8)
        assert ((stress.components() >= 0) & (stress.components() <= 1)).all()

    def test_no_plants_no_deforestation(self):
        """测试没有植物的区域不计植被破坏"""
        region = Region("r1", "r1", WorldLayer.UNDERGROUND, Biome.CAVE_SYSTEM)
        stress = calculate_stress(region, self.ecosystem, self.config)
        assert stress.deforestation == 0.0
        assert stress.soil_degradation == 0.0

    def test_overpopulation_capped(self):
        """测试过载分量不超过 1"""
        region = Region("r1", "r1", WorldLayer.SURFACE, Biome.GRASSLAND, populations=[Population("deer", 5000)])
        assert calculate_stress(region, self.ecosystem, self.config).overpopulation == 1.0

    def test_high_stress_count_includes_water(self):
        """测试高压力计数包含缺水分量"""
        stress = StressVector("r1", pollution=0.6, overpopulation=0.9, water_stress=0.7)
        assert stress.high_stress_count(0.5) == 3


class TestTriggers:
    """测试触发门槛"""

    def setup_method(self):
        self.region = Region("r1", "r1", WorldLayer.SURFACE, Biome.GRASSLAND)

    def test_low_stress_never_triggers(self):
        """测试所有压力低于 0.1 时 1000 次检查都不触发"""
        stress = StressVector("r1", 0.05, 0.05, 0.05, 0.05, 0.05, 0.05)
        rng = WorldRNG(2024)
        counters: dict[str, int] = {}
        for check in range(1000):
            assert propose_catastrophe(self.region, stress, check * 25, rng, CatastropheConfig(), counters) is None

    def test_disease_needs_pollution_and_crowding(self):
        """测试疫病需要污染与过载同时偏高"""
        config = CatastropheConfig(**{**NO_CHANCE, "disease_chance": 1.0})
        counters: dict[str, int] = {}
        rng = WorldRNG(0)

        mild = StressVector("r1", pollution=0.65, overpopulation=0.5)
        assert propose_catastrophe(self.region, mild, 25, rng, config, counters) is None

        severe = StressVector("r1", pollution=0.9, overpopulation=0.9, disease_risk=0.9)
        cat = propose_catastrophe(self.region, severe, 50, rng, config, counters)
        assert cat.catastrophe_type == CatastropheType.DISEASE_OUTBREAK
        assert cat.severity == pytest.approx(0.77)
        assert cat.mutation_bonus == pytest.approx(0.77 * 3)
        assert cat.ticks_remaining == cat.duration == 200

    def test_famine_counter(self):
        """测试持续过载第 10 次检查后才可能爆发饥荒"""
        config = CatastropheConfig(**{**NO_CHANCE, "famine_chance": 1.0})
        counters: dict[str, int] = {}
        stress = StressVector("r1", overpopulation=0.9)
        rng = WorldRNG(0)

        for check in range(9):
            assert propose_catastrophe(self.region, stress, check * 25, rng, config, counters) is None
        assert counters["r1"] == 225

        cat = propose_catastrophe(self.region, stress, 250, rng, config, counters)
        assert cat.catastrophe_type == CatastropheType.FAMINE

    def test_famine_counter_decays(self):
        """测试过载缓解后计数回落"""
        counters = {"r1": 100}
        propose_catastrophe(self.region, StressVector("r1", overpopulation=0.3), 25, WorldRNG(0), CatastropheConfig(**NO_CHANCE), counters)
        assert counters["r1"] == 90

    def test_flood_becomes_landslide_on_high_ground(self):
        """测试高海拔区域的洪水变为山体滑坡"""
        config = CatastropheConfig(**{**NO_CHANCE, "flood_chance": 1.0})
        stress = StressVector("r1", deforestation=0.9)
        self.region.climate.precipitation = 30.0

        assert propose_catastrophe(self.region, stress, 25, WorldRNG(0), config, {}).catastrophe_type == CatastropheType.FLOOD
        self.region.elevation = 800
        assert propose_catastrophe(self.region, stress, 25, WorldRNG(0), config, {}).catastrophe_type == CatastropheType.LANDSLIDE

    def test_toxic_bloom_only_in_water(self):
        """测试有毒藻华只发生在水域"""
        config = CatastropheConfig(**{**NO_CHANCE, "toxic_bloom_chance": 1.0})
        stress = StressVector("r1", pollution=0.9, water_stress=0.5)
        assert propose_catastrophe(self.region, stress, 25, WorldRNG(0), config, {}) is None

        reef = Region("reef", "reef", WorldLayer.UNDERWATER, Biome.CORAL_REEF)
        cat = propose_catastrophe(reef, stress, 25, WorldRNG(0), config, {})
        assert cat.catastrophe_type == CatastropheType.TOXIC_BLOOM


class TestCatastropheEngine:
    """测试灾变引擎"""

    def setup_method(self):
        self.engine = CatastropheEngine(WorldRNG(7))
        self.region = Region("r1", "r1", WorldLayer.SURFACE, Biome.GRASSLAND)
        self.regions = {"r1": self.region}

    def test_evolution_pressure_baseline(self):
        """测试没有灾变时演化压力恰为 1.0"""
        assert self.engine.get_evolution_pressure("r1") == 1.0

    def test_evolution_pressure_with_catastrophe(self):
        """测试每个活动灾变叠加 1 + 3 * severity"""
        self.engine.add_catastrophe(make_catastrophe(severity=0.5))
        assert self.engine.get_evolution_pressure("r1") == pytest.approx(3.5)
        assert self.engine.get_evolution_pressure("elsewhere") == 1.0

    def test_expiry_emits_single_resolved_event(self):
        """测试剩余 1 tick 的灾变推进后输出一个已解决事件并被移除"""
        cat = make_catastrophe(remaining=1)
        self.engine.add_catastrophe(cat)

        events = self.engine.tick_catastrophe(cat, self.regions, tick=10)

        assert len(events) == 1
        assert events[0].resolved
        assert events[0].event_type == EventType.CATASTROPHE
        assert self.engine.get_all_active() == []
        assert self.engine.get_evolution_pressure("r1") == 1.0

    def test_population_kill_effect(self):
        """测试种群杀伤效果"""
        self.region.populations = [Population("deer", 100000), Population("wolf", 100000)]
        cat = make_catastrophe(severity=1.0, effects=[CatastropheEffect(EffectType.POPULATION_KILL, 0.3, species_filter="deer")])
        self.engine.add_catastrophe(cat)

        self.engine.tick_catastrophe(cat, self.regions, tick=1)

        assert self.region.get_population("deer").count == 99970
        assert self.region.get_population("wolf").count == 100000

    def test_resource_and_plant_destroy(self):
        """测试资源与植物破坏效果"""
        self.region.resources = [Resource("grass", 1000.0, 1.0, 1000.0)]
        self.region.plants = [PlantPopulation("grass", 500.0, 500.0, 0.05, 0.005)]
        cat = make_catastrophe(severity=1.0, effects=[
            CatastropheEffect(EffectType.RESOURCE_DESTROY, 0.4),
            CatastropheEffect(EffectType.PLANT_DESTROY, 0.5),
        ])

        self.engine.tick_catastrophe(cat, self.regions, tick=1)

        assert self.region.resources[0].quantity == pytest.approx(1000 * (1 - 0.4 * 0.005))
        assert self.region.plants[0].biomass == pytest.approx(500 * (1 - 0.5 * 0.005))

    def test_one_active_catastrophe_per_region(self):
        """测试区域已有活动灾变时不再触发"""
        engine = CatastropheEngine(WorldRNG(7), CatastropheConfig(**{**NO_CHANCE, "disease_chance": 1.0}))
        stress = StressVector("r1", pollution=0.9, overpopulation=0.9, disease_risk=0.9)

        assert engine.check_triggers(self.region, stress, 25) is not None
        assert engine.check_triggers(self.region, stress, 50) is None
        assert len(engine.get_active_catastrophes("r1")) == 1

    def test_triggers_checked_every_25_ticks(self):
        """测试只在每 25 个 tick 检查触发，并输出开始事件"""
        engine = CatastropheEngine(WorldRNG(7), CatastropheConfig(**{**NO_CHANCE, "disease_chance": 1.0}))
        ecosystem = EcosystemState(carrying_capacity={"r1": 1000})
        self.region.climate.pollution = 0.9
        self.region.populations = [Population("deer", 900)]

        assert engine.tick(self.regions, ecosystem, WorldTime.from_tick(24)) == []
        assert engine.get_stress("r1").overpopulation == pytest.approx(0.9)

        events = engine.tick(self.regions, ecosystem, WorldTime.from_tick(25))
        assert len(events) == 1
        assert events[0].event_type == EventType.CATASTROPHE
        assert not events[0].resolved
        active = engine.get_all_active()
        assert len(active) == 1
        assert active[0].ticks_remaining == active[0].duration - 1

    def test_same_seed_gives_same_ids(self):
        """测试相同种子下灾变与事件 id 完全一致"""
        def run(seed: int) -> tuple[list[str], list[str]]:
            engine = CatastropheEngine(WorldRNG(seed), CatastropheConfig(**{**NO_CHANCE, "disease_chance": 1.0}))
            region = Region("r1", "r1", WorldLayer.SURFACE, Biome.GRASSLAND)
            region.climate.pollution = 0.9
            region.populations = [Population("deer", 900)]
            events = engine.tick({"r1": region}, EcosystemState(carrying_capacity={"r1": 1000}), WorldTime.from_tick(25))
            return [c.id for c in engine.get_all_active()], [e.id for e in events]

        first, second = run(7), run(7)
        assert first == second
        assert len(first[0]) == 1 and len(first[0][0]) == 12
        assert run(8)[0] != first[0]

    def test_add_catastrophe_assigns_missing_id(self):
        """测试登记没有 id 的灾变时由引擎分配，已有 id 保持不变"""
        anonymous = make_catastrophe()
        named = make_catastrophe()
        named.id = "saved"
        self.engine.add_catastrophe(anonymous)
        self.engine.add_catastrophe(named)

        assert len(anonymous.id) == 12
        assert named.id == "saved"
        assert len(self.engine.get_all_active()) == 2

    def test_quiet_world_stays_quiet(self):
        """测试低压力世界长期运行不触发任何灾变"""
        ecosystem = EcosystemState(carrying_capacity={"r1": 1000})
        self.region.climate = ClimateState(humidity=0.95, pollution=0.05)
        self.region.populations = [Population("deer", 50)]
        self.region.plants = [PlantPopulation("grass", 500.0, 500.0, 0.05, 0.005)]

        for check in range(1, 1001):
            assert self.engine.tick(self.regions, ecosystem, WorldTime.from_tick(check * 25)) == []
        assert self.engine.get_all_active() == []

    def test_clear(self):
        """测试清空活动灾变与压力缓存"""
        self.engine.add_catastrophe(make_catastrophe())
        self.engine.calculate_stress(self.region, EcosystemState())
        self.engine.clear()
        assert self.engine.get_all_active() == []
        assert self.engine.get_stress("r1") is None


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
