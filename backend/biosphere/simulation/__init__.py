"""
世界模拟驱动

- world: 区域图容器与播种工具
- context: 单 tick 输出汇总
- engine: 气候 -> 生态 -> 灾变 的 tick 编排
"""

from .context import TickResult
from .engine import WorldSimulation
from .world import BIOME_INITIAL_CLIMATE, World, initial_climate

__all__ = [
    "BIOME_INITIAL_CLIMATE",
    "TickResult",
    "World",
    "WorldSimulation",
    "initial_climate",
]
