"""气候引擎常量表（按生物群系）"""

from __future__ import annotations

from ...models.region import Biome

B = Biome

# 年均基准温度 (°C)
BIOME_BASE_TEMPERATURE: dict[Biome, float] = {
    B.TROPICAL_RAINFOREST: 27.0,
    B.TEMPERATE_FOREST: 12.0,
    B.BOREAL_FOREST: -2.0,
    B.SAVANNA: 25.0,
    B.GRASSLAND: 14.0,
    B.DESERT: 30.0,
    B.TUNDRA: -10.0,
    B.MOUNTAIN: 2.0,
    B.WETLAND: 16.0,
    B.COASTAL: 17.0,
    B.CORAL_REEF: 25.0,
    B.OPEN_OCEAN: 18.0,
    B.DEEP_OCEAN: 4.0,
    B.HYDROTHERMAL_VENT: 60.0,
    B.KELP_FOREST: 12.0,
    B.CAVE_SYSTEM: 14.0,
    B.UNDERGROUND_RIVER: 12.0,
    B.SUBTERRANEAN_ECOSYSTEM: 15.0,
}

# 季节振幅 (°C)
BIOME_SEASONAL_AMPLITUDE: dict[Biome, float] = {
    B.TROPICAL_RAINFOREST: 2.0,
    B.TEMPERATE_FOREST: 14.0,
    B.BOREAL_FOREST: 22.0,
    B.SAVANNA: 5.0,
    B.GRASSLAND: 16.0,
    B.DESERT: 18.0,
    B.TUNDRA: 25.0,
    B.MOUNTAIN: 18.0,
    B.WETLAND: 12.0,
    B.COASTAL: 8.0,
    B.CORAL_REEF: 3.0,
    B.OPEN_OCEAN: 5.0,
    B.DEEP_OCEAN: 1.0,
    B.HYDROTHERMAL_VENT: 0.5,
    B.KELP_FOREST: 5.0,
    B.CAVE_SYSTEM: 2.0,
    B.UNDERGROUND_RIVER: 1.0,
    B.SUBTERRANEAN_ECOSYSTEM: 1.0,
}

# 基准湿度 (0..1)
BIOME_BASE_HUMIDITY: dict[Biome, float] = {
    B.TROPICAL_RAINFOREST: 0.85,
    B.TEMPERATE_FOREST: 0.6,
    B.BOREAL_FOREST: 0.5,
    B.SAVANNA: 0.35,
    B.GRASSLAND: 0.45,
    B.DESERT: 0.1,
    B.TUNDRA: 0.3,
    B.MOUNTAIN: 0.4,
    B.WETLAND: 0.8,
    B.COASTAL: 0.65,
    B.CORAL_REEF: 0.75,
    B.OPEN_OCEAN: 0.7,
    B.DEEP_OCEAN: 0.9,
    B.HYDROTHERMAL_VENT: 0.95,
    B.KELP_FOREST: 0.8,
    B.CAVE_SYSTEM: 0.6,
    B.UNDERGROUND_RIVER: 0.85,
    B.SUBTERRANEAN_ECOSYSTEM: 0.55,
}

# 基准风速，未列出的群系取 DEFAULT_BASE_WIND
BIOME_BASE_WIND: dict[Biome, float] = {
    B.OPEN_OCEAN: 18.0,
    B.COASTAL: 14.0,
    B.MOUNTAIN: 16.0,
    B.GRASSLAND: 12.0,
}
DEFAULT_BASE_WIND = 8.0

# 每 tick 污染吸收量，植被/藻类越茂密吸收越多
POLLUTION_ABSORPTION: dict[Biome, float] = {
    B.TROPICAL_RAINFOREST: 0.003,
    B.TEMPERATE_FOREST: 0.002,
    B.BOREAL_FOREST: 0.0015,
    B.WETLAND: 0.002,
    B.KELP_FOREST: 0.0015,
}
DEFAULT_POLLUTION_ABSORPTION = 0.0005

# 受潮汐影响、热惯性大的水体/海岸群系
COASTAL_BIOMES: frozenset[Biome] = frozenset({
    B.COASTAL,
    B.CORAL_REEF,
    B.OPEN_OCEAN,
    B.DEEP_OCEAN,
    B.HYDROTHERMAL_VENT,
    B.KELP_FOREST,
})

# 湿度有雨季/旱季起伏的群系
SEASONAL_HUMIDITY_BIOMES: frozenset[Biome] = frozenset({B.SAVANNA, B.GRASSLAND})

# 夏至（北半球）对应的年内日序
SOLSTICE_DAY = 172
# 雨季相位基准日
MONSOON_PHASE_DAY = 80
# 春分对应日序（太阳赤纬）
EQUINOX_DAY = 81
AXIAL_TILT = 23.44
# 日温峰值时刻
DIURNAL_PEAK_HOUR = 14
