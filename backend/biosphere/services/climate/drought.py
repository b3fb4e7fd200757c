"""干旱状态机"""

from __future__ import annotations

import logging
import math

from ...models.config import ClimateConfig
from ...models.region import Region
from .constants import BIOME_BASE_HUMIDITY
from .models import DroughtState

logger = logging.getLogger(__name__)


def drought_severity(ticks_without_rain: int, onset_ticks: int) -> float:
    """对数刻度的干旱强度，未超过起始阈值时为 0"""
    if ticks_without_rain <= onset_ticks:
        return 0.0
    return min(1.0, math.log2(ticks_without_rain - onset_ticks + 1) / 8)


def update_drought(region: Region, state: DroughtState, config: ClimateConfig) -> bool:
    """根据本 tick 的降水与湿度推进干旱计数

    降水 < 5 且湿度低于群系基准的 60% 计为一个无雨 tick；
    降雨时计数回落 drought_recovery_step，强度随之回落。

    Returns:
        本 tick 是否刚进入干旱
    """
    climate = region.climate
    base_humidity = BIOME_BASE_HUMIDITY[region.biome]
    is_dry = (
        climate.precipitation < config.drought_precip_threshold
        and climate.humidity < base_humidity * config.drought_humidity_ratio
    )

    if is_dry:
        state.ticks_without_rain += 1
    else:
        state.ticks_without_rain = max(0, state.ticks_without_rain - config.drought_recovery_step)

    was_active = state.active
    state.severity = drought_severity(state.ticks_without_rain, config.drought_onset_ticks)
    state.active = state.severity > 0

    if state.active and not was_active:
        logger.info(f"[干旱] {region.id} 进入干旱（连续 {state.ticks_without_rain} tick 无雨）")
        return True
    if was_active and not state.active:
        logger.info(f"[干旱] {region.id} 干旱解除")
    return False
