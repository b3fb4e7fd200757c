"""生态健康检查、灭绝连锁与植物测试"""

import pytest

from ....core.random import WorldRNG
from ....models.config import EcosystemConfig
from ....models.region import Biome, PlantPopulation, Population, Region, Resource, WorldLayer
from ....models.species import Diet, Species, SpeciesRegistry, SpeciesTraits
from ....models.world import EventLevel, EventType
from ..food_web import EcosystemState
from ..health import check_ecosystem_health, extinction_cascade, global_population_counts
from ..plants import default_plants, graze_plants, plant_biomass_ratio, spread_plants, update_plants


class TestEcosystemHealth:
    """测试健康检查"""

    def setup_method(self):
        self.config = EcosystemConfig()
        self.rng = WorldRNG(5)
        self.registry = SpeciesRegistry([
            Species("deer", "鹿", SpeciesTraits(diet=Diet.HERBIVORE)),
            Species("wolf", "狼", SpeciesTraits(diet=Diet.CARNIVORE)),
        ])
        self.a = Region("a", "河谷", WorldLayer.SURFACE, Biome.GRASSLAND)
        self.b = Region("b", "高地", WorldLayer.SURFACE, Biome.GRASSLAND)

    def test_global_extinction(self):
        """测试全图归零时宣告全球灭绝并移除种群"""
        self.a.populations = [Population("deer", 0), Population("wolf", 10)]
        regions = {"a": self.a, "b": self.b}
        extinct: set[str] = set()

        events, newly = check_ecosystem_health(
            self.a, self.registry, global_population_counts(regions), extinct, self.config, tick=3, rng=self.rng
        )

        assert newly == ["deer"]
        assert extinct == {"deer"}
        assert [e.level for e in events] == [EventLevel.GLOBAL]
        assert events[0].event_type == EventType.EXTINCTION
        assert self.a.get_population("deer") is None

    def test_local_extinction(self):
        """测试其它区域仍有个体时只是局部灭绝"""
        self.a.populations = [Population("deer", 0)]
        self.b.populations = [Population("deer", 40)]
        regions = {"a": self.a, "b": self.b}

        events, newly = check_ecosystem_health(
            self.a, self.registry, global_population_counts(regions), set(), self.config, tick=3, rng=self.rng
        )

        assert newly == []
        assert events[0].level == EventLevel.REGIONAL
        assert events[0].effects[0].effect_type == "local_extinction"

    def test_global_extinction_reported_once(self):
        """测试已宣告灭绝的物种不再重复宣告"""
        self.a.populations = [Population("deer", 0)]
        _, newly = check_ecosystem_health(self.a, self.registry, {"deer": 0}, {"deer"}, self.config, tick=9, rng=self.rng)
        assert newly == []

    def test_resource_depletion(self):
        """测试资源低于上限 5% 时报告枯竭"""
        self.a.resources = [Resource("grass", 4.0, 1.0, 100.0), Resource("berries", 50.0, 1.0, 100.0)]
        events, _ = check_ecosystem_health(self.a, self.registry, {}, set(), self.config, tick=1, rng=self.rng)
        assert [e.event_type for e in events] == [EventType.RESOURCE_DEPLETION]

    def test_pollution_crisis_threshold(self):
        """测试污染超过 0.7 触发污染危机"""
        self.a.climate.pollution = 0.6
        events, _ = check_ecosystem_health(self.a, self.registry, {}, set(), self.config, tick=1, rng=self.rng)
        assert events == []

        self.a.climate.pollution = 0.75
        events, _ = check_ecosystem_health(self.a, self.registry, {}, set(), self.config, tick=1, rng=self.rng)
        assert [e.event_type for e in events] == [EventType.POLLUTION_CRISIS]


class TestExtinctionCascade:
    """测试灭绝连锁"""

    def setup_method(self):
        self.rng = WorldRNG(5)
        self.registry = SpeciesRegistry([
            Species("grass_eater", "食草兽", SpeciesTraits(diet=Diet.HERBIVORE)),
            Species("hunter", "猎手", SpeciesTraits(diet=Diet.CARNIVORE)),
            Species("beetle", "甲虫", SpeciesTraits(diet=Diet.DETRITIVORE)),
        ])
        self.ecosystem = EcosystemState()
        self.ecosystem.add_relation("hunter", "grass_eater", 0.6)
        self.ecosystem.add_relation("grass_eater", "beetle", 0.2)

    def test_cascade_effects(self):
        """测试食草动物灭绝：捕食者断粮、猎物解放、植被恢复"""
        events = extinction_cascade("grass_eater", self.ecosystem, self.registry, 12, self.rng, ["a"])
        effects = [e.effects[0] for e in events]

        assert [f.effect_type for f in effects] == ["food_loss", "predator_release", "vegetation_recovery"]
        assert effects[0].species_id == "hunter"
        assert effects[0].magnitude == 0.6
        assert effects[1].species_id == "beetle"
        assert all(e.level == EventLevel.SPECIES for e in events)
        assert len({e.id for e in events}) == 3
        assert all(len(e.id) == 12 for e in events)

    def test_isolated_species_no_cascade(self):
        """测试没有食物网关系的非食草物种不产生连锁"""
        assert extinction_cascade("unknown", self.ecosystem, self.registry, 1, self.rng) == []


class TestPlants:
    """测试植物种群"""

    def setup_method(self):
        self.config = EcosystemConfig()

    def test_default_plants(self):
        """测试默认植被为上限的 70%"""
        plants = default_plants(Biome.GRASSLAND)
        assert [p.plant_type for p in plants] == ["grass", "shrub"]
        assert plants[0].biomass == pytest.approx(350.0)

    def test_logistic_growth_capped(self):
        """测试植物生长不超过上限"""
        region = Region("r", "r", WorldLayer.SURFACE, Biome.GRASSLAND, plants=default_plants(Biome.GRASSLAND))
        for _ in range(2000):
            update_plants(region, self.config)
        for plant in region.plants:
            assert plant.biomass <= plant.max_biomass
        assert plant_biomass_ratio(region) > 0.95

    def test_overgrazing_destroys_after_500_ticks(self):
        """测试连续 500 tick 低于 5% 后永久消失"""
        plant = PlantPopulation("grass", biomass=1.0, max_biomass=500.0, growth_rate=0.0, spread_rate=0.0)
        region = Region("r", "r", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[plant])

        for _ in range(499):
            assert update_plants(region, self.config) == []
        assert not plant.destroyed

        assert update_plants(region, self.config) == [plant]
        assert plant.destroyed
        assert region.living_plants() == []

    def test_recovery_resets_counter(self):
        """测试生物量回升后计数清零"""
        plant = PlantPopulation("grass", biomass=1.0, max_biomass=500.0, growth_rate=0.0, spread_rate=0.0)
        region = Region("r", "r", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[plant])
        for _ in range(10):
            update_plants(region, self.config)
        plant.biomass = 300.0
        update_plants(region, self.config)
        assert plant.ticks_below_threshold == 0

    def test_graze_proportional(self):
        """测试按现存生物量比例啃食"""
        region = Region("r", "r", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[
            PlantPopulation("grass", 300.0, 500.0, 0.05, 0.005),
            PlantPopulation("shrub", 100.0, 400.0, 0.03, 0.003),
        ])
        assert graze_plants(region, 40.0) == pytest.approx(40.0)
        assert region.plants[0].biomass == pytest.approx(270.0)
        assert region.plants[1].biomass == pytest.approx(90.0)

    def test_spread_to_compatible_neighbor(self):
        """测试茂盛植物只向相容群系扩散"""
        source = Region("a", "a", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[
            PlantPopulation("grass", 500.0, 500.0, 0.05, spread_rate=1.0),
        ])
        desert = Region("d", "d", WorldLayer.SURFACE, Biome.DESERT)
        meadow = Region("m", "m", WorldLayer.SURFACE, Biome.TUNDRA)
        source.connect("d")
        source.connect("m")
        regions = {"a": source, "d": desert, "m": meadow}

        assert spread_plants(source, regions, WorldRNG(0), self.config) == 1
        assert desert.plants == []
        assert meadow.plants[0].plant_type == "grass"
        assert meadow.plants[0].biomass == pytest.approx(50.0)

    def test_spread_revives_destroyed_plant(self):
        """测试邻区已消失的同种植物被重新播种"""
        source = Region("a", "a", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[
            PlantPopulation("grass", 500.0, 500.0, 0.05, spread_rate=1.0),
        ])
        dead = PlantPopulation("grass", 0.0, 500.0, 0.05, 0.005, destroyed=True, ticks_below_threshold=600)
        target = Region("b", "b", WorldLayer.SURFACE, Biome.GRASSLAND, plants=[dead])
        source.connect("b")

        spread_plants(source, {"a": source, "b": target}, WorldRNG(0), self.config)
        assert not dead.destroyed
        assert dead.ticks_below_threshold == 0
        assert dead.biomass == pytest.approx(50.0)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
