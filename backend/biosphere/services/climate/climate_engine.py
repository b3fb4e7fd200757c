"""气候引擎主入口

整合锋面、污染扩散、天体、区域天气、火山与自然灾害，提供统一的 tick 接口。
"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import ClimateConfig
from ...models.region import Region
from ...models.world import WorldEvent, WorldTime
from .celestial import (
    apply_eclipse_effects,
    apply_tidal_effects,
    build_eclipse_event,
    celestial_state,
    roll_eclipse,
)
from .disasters import check_natural_disaster
from .fronts import advance_fronts
from .models import ClimateContext, DroughtState, VolcanicState, WeatherFront
from .pollution import diffuse_pollution
from .volcanic import update_volcano
from .weather import update_region_weather

logger = logging.getLogger(__name__)


class ClimateEngine:
    """气候引擎

    使用示例：
    ```python
    engine = ClimateEngine(rng=WorldRNG(42))
    events = engine.tick(regions, WorldTime.from_tick(1000))
    ```
    """

    def __init__(
        self,
        rng: WorldRNG,
        config: ClimateConfig | None = None,
        strict_invariants: bool = False,
    ):
        self.rng = rng
        self.config = config or ClimateConfig()
        self.strict_invariants = strict_invariants
        self.context = ClimateContext()

    def tick(self, regions: Mapping[str, Region], time: WorldTime) -> list[WorldEvent]:
        """推进全图气候一个 tick

        Args:
            regions: 区域表（原地修改）
            time: 本 tick 的世界时间

        Returns:
            本 tick 产生的世界事件
        """
        events: list[WorldEvent] = []

        # === 1. 锋面推进与扩散 ===
        advance_fronts(self.context, regions, self.rng, self.config)

        # === 2. 全图污染扩散 ===
        diffuse_pollution(regions, self.config)

        # === 3. 全球天体事件 ===
        eclipse = roll_eclipse(time, self.rng, self.config)
        if eclipse is not None:
            logger.info(f"[天象] 发生{eclipse.value}食 (tick {time.tick})")
            events.append(build_eclipse_event(eclipse, list(regions), time.tick, self.rng))

        # === 4. 逐区域更新 ===
        for region in regions.values():
            update_region_weather(self.context, region, time, self.rng, self.config)

            celestial = celestial_state(time, region.latitude)
            if eclipse is not None:
                apply_eclipse_effects(region, eclipse, celestial, self.config)

            apply_tidal_effects(region, celestial, self.config)

            disaster = update_volcano(self.context, region, regions, self.rng, self.config, time.tick)
            if disaster is None:
                disaster = check_natural_disaster(
                    region, self.context.droughts.get(region.id), self.rng, self.config, time.tick
                )
            if disaster is not None:
                events.append(disaster)

        # 火山灰等跨区域写入可能落在已更新的区域上，统一在最后校验
        for region in regions.values():
            region.climate.enforce_invariants(strict=self.strict_invariants)

        return events

    # ========== 查询接口 ==========

    def get_active_fronts(self, region_id: str | None = None) -> list[WeatherFront]:
        if region_id is None:
            return list(self.context.fronts.values())
        return self.context.fronts_affecting(region_id)

    def get_drought_state(self, region_id: str) -> DroughtState | None:
        return self.context.droughts.get(region_id)

    def get_volcanic_state(self, region_id: str) -> VolcanicState | None:
        return self.context.volcanoes.get(region_id)

    def reset(self) -> None:
        """世界重置时清空锋面、干旱与火山状态"""
        self.context.reset()
        logger.debug("[气候] 上下文已重置")
