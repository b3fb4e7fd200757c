"""气候引擎集成测试"""

import math

import pytest

from ....core.random import WorldRNG
from ....models.config import ClimateConfig
from ....models.region import Biome, ClimateState, InvariantViolation, Region, Resource, WorldLayer
from ....models.world import EventType, WorldTime
from ..climate_engine import ClimateEngine


def build_regions() -> dict[str, Region]:
    """覆盖三个层级与若干极端群系的小型区域图"""
    regions = {
        "plain": Region("plain", "平原", WorldLayer.SURFACE, Biome.GRASSLAND, latitude=35),
        "desert": Region("desert", "沙漠", WorldLayer.SURFACE, Biome.DESERT, latitude=20),
        "coast": Region("coast", "海岸", WorldLayer.SURFACE, Biome.COASTAL, latitude=-10, elevation=300),
        "peak": Region("peak", "高山", WorldLayer.SURFACE, Biome.MOUNTAIN, latitude=60, elevation=3000),
        "reef": Region("reef", "珊瑚礁", WorldLayer.UNDERWATER, Biome.CORAL_REEF, latitude=-5),
        "cave": Region("cave", "洞穴", WorldLayer.UNDERGROUND, Biome.CAVE_SYSTEM),
    }
    regions["plain"].climate = ClimateState(temperature=20, humidity=0.5, pollution=0.9)
    regions["coast"].resources.append(Resource("fish", 500, 0.01, 1000))
    edges = [("plain", "desert"), ("plain", "coast"), ("coast", "reef"), ("plain", "peak"), ("peak", "cave")]
    for a, b in edges:
        regions[a].connect(b)
        regions[b].connect(a)
    return regions


class TestClimateInvariants:
    """测试长时间运行后的气候不变量"""

    def test_invariants_hold_over_many_ticks(self):
        """测试数千 tick 后湿度、污染、降水、风速仍在合法范围内"""
        regions = build_regions()
        engine = ClimateEngine(WorldRNG(7), strict_invariants=True)

        for tick in range(1, 3001):
            engine.tick(regions, WorldTime.from_tick(tick * 37))

        for region in regions.values():
            c = region.climate
            assert 0.0 <= c.humidity <= 1.0
            assert 0.0 <= c.pollution <= 1.0
            assert c.precipitation >= 0.0
            assert c.wind_speed >= 0.0
            assert math.isfinite(c.temperature)

    def test_strict_mode_raises_on_violation(self):
        """测试严格模式下越界状态直接抛出"""
        climate = ClimateState(humidity=1.4)
        with pytest.raises(InvariantViolation):
            climate.enforce_invariants(strict=True)

    def test_lenient_mode_clamps(self):
        """测试默认模式在写入点钳制"""
        climate = ClimateState(humidity=1.4, pollution=-0.2, precipitation=-3, wind_speed=-1)
        climate.enforce_invariants()
        assert climate.humidity == 1.0
        assert climate.pollution == 0.0
        assert climate.precipitation == 0.0
        assert climate.wind_speed == 0.0


class TestClimateEngine:
    """测试气候引擎的状态管理"""

    def test_same_seed_same_climate(self):
        """测试相同种子得到完全相同的气候序列"""
        a, b = build_regions(), build_regions()
        engine_a = ClimateEngine(WorldRNG(123))
        engine_b = ClimateEngine(WorldRNG(123))

        for tick in range(1, 200):
            time = WorldTime.from_tick(tick)
            engine_a.tick(a, time)
            engine_b.tick(b, time)

        for rid in a:
            assert a[rid].climate == b[rid].climate

    def test_reset_clears_context(self):
        """测试重置后锋面、干旱、火山状态全部清空"""
        regions = build_regions()
        engine = ClimateEngine(WorldRNG(1), ClimateConfig(front_spawn_chance=1.0))
        engine.tick(regions, WorldTime.from_tick(100))

        assert engine.get_active_fronts()
        assert engine.get_drought_state("plain") is not None
        assert engine.get_volcanic_state("peak") is not None

        engine.reset()
        assert engine.get_active_fronts() == []
        assert engine.get_drought_state("plain") is None
        assert engine.get_volcanic_state("peak") is None

    def test_volcanic_state_only_for_potential_regions(self):
        """测试只有具备火山潜势的区域才会创建火山状态"""
        regions = build_regions()
        engine = ClimateEngine(WorldRNG(3))
        engine.tick(regions, WorldTime.from_tick(1))

        assert engine.get_volcanic_state("plain") is None
        assert engine.get_volcanic_state("peak") is not None
        assert engine.get_volcanic_state("cave") is not None

    def test_front_query_by_region(self):
        """测试按区域查询锋面"""
        regions = build_regions()
        engine = ClimateEngine(WorldRNG(9), ClimateConfig(front_spawn_chance=1.0))
        engine.tick(regions, WorldTime.from_tick(50))

        for front in engine.get_active_fronts("plain"):
            assert "plain" in front.affected_region_ids

    def test_eclipse_event_is_global(self):
        """测试日月食事件覆盖全部区域"""
        regions = build_regions()
        config = ClimateConfig(solar_eclipse_chance=1.0, lunar_eclipse_chance=1.0)
        engine = ClimateEngine(WorldRNG(5), config)

        # tick 0 附近为新月
        events = engine.tick(regions, WorldTime.from_tick(10))
        eclipses = [e for e in events if e.event_type == EventType.ECLIPSE]
        assert len(eclipses) == 1
        assert set(eclipses[0].region_ids) == set(regions)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
