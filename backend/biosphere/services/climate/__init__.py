"""
气候引擎模块

提供区域气候的逐 tick 更新：
- 季节/昼夜/海拔温度曲线与热惯性
- 天气锋面的生成、扩散与衰减
- 干旱状态机
- 污染扩散（邻接矩阵）与温室效应
- 潮汐、日月食
- 火山压力与喷发
- 非火山自然灾害

使用示例：
```python
from biosphere.services.climate import ClimateEngine

engine = ClimateEngine(rng=WorldRNG(42))
events = engine.tick(regions, time)
```
"""

from .climate_engine import ClimateEngine
from .models import (
    ClimateContext,
    CelestialState,
    DroughtState,
    EclipseType,
    FrontModifiers,
    VolcanicState,
    WeatherFront,
    WeatherFrontType,
)
from .celestial import celestial_state, roll_eclipse
from .disasters import DisasterKind, disaster_candidates
from .fronts import FRONT_TEMPLATES, aggregate_front_modifiers, front_candidates
from .pollution import diffuse_pollution
from .volcanic import volcanic_potential
from .weather import seasonal_target_temperature, thermal_inertia

__all__ = [
    # 主引擎
    "ClimateEngine",
    "ClimateContext",
    # 数据模型
    "WeatherFront",
    "WeatherFrontType",
    "FrontModifiers",
    "DroughtState",
    "VolcanicState",
    "CelestialState",
    "EclipseType",
    "DisasterKind",
    # 纯函数
    "FRONT_TEMPLATES",
    "front_candidates",
    "aggregate_front_modifiers",
    "disaster_candidates",
    "celestial_state",
    "roll_eclipse",
    "diffuse_pollution",
    "volcanic_potential",
    "seasonal_target_temperature",
    "thermal_inertia",
]
