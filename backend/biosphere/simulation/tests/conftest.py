"""模拟驱动测试共享夹具"""

import logging

import pytest

from ...models.region import Biome, WorldLayer
from ...models.species import Diet, Species, SpeciesRegistry, SpeciesTraits
from ..world import World


def build_world(seed_populations: bool = True) -> World:
    """五个区域、横跨三个层级的小世界"""
    world = World()
    world.add_region("plains", "大平原", WorldLayer.SURFACE, Biome.GRASSLAND, latitude=35, longitude=10)
    world.add_region("jungle", "雨林", WorldLayer.SURFACE, Biome.TROPICAL_RAINFOREST, latitude=3, longitude=20)
    world.add_region("shore", "海岸", WorldLayer.SURFACE, Biome.COASTAL, latitude=-12, longitude=30, elevation=250)
    world.add_region("reef", "珊瑚礁", WorldLayer.UNDERWATER, Biome.CORAL_REEF, latitude=-14, longitude=32)
    world.add_region("caves", "地下洞穴", WorldLayer.UNDERGROUND, Biome.CAVE_SYSTEM, latitude=34, longitude=11)

    for a, b in (("plains", "jungle"), ("plains", "shore"), ("jungle", "shore"), ("shore", "reef"), ("plains", "caves")):
        world.connect(a, b)

    world.add_resource("plains", "grass", 5000.0, 5.0)
    world.add_resource("jungle", "fruit", 8000.0, 8.0)
    world.add_resource("reef", "plankton", 3000.0, 6.0)

    if seed_populations:
        world.seed_population("plains", "deer", 8000)
        world.seed_population("plains", "wolf", 300)
        world.seed_population("jungle", "deer", 2000)
        world.seed_population("reef", "sardine", 5000)
        world.seed_population("caves", "bat", 1200)
        world.ecosystem.add_relation("wolf", "deer", 0.4)
    return world


@pytest.fixture
def registry() -> SpeciesRegistry:
    return SpeciesRegistry([
        Species("deer", "鹿", SpeciesTraits(size=25.0, reproduction_rate=4.0)),
        Species("wolf", "狼", SpeciesTraits(size=40.0, diet=Diet.CARNIVORE, reproduction_rate=2.0)),
        Species("sardine", "沙丁鱼", SpeciesTraits(
            size=1.0, diet=Diet.FILTER_FEEDER, habitat=(WorldLayer.UNDERWATER,), aquatic=True, reproduction_rate=10.0,
        )),
        Species("bat", "蝙蝠", SpeciesTraits(
            size=2.0, diet=Diet.OMNIVORE, habitat=(WorldLayer.UNDERGROUND, WorldLayer.SURFACE), can_fly=True,
        )),
    ])


@pytest.fixture
def world() -> World:
    return build_world()


@pytest.fixture
def root_logging():
    """保存并恢复根日志器，供会调用 setup_logging 的测试使用"""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)
