"""灾变引擎主入口

压力计算 -> 触发判定 -> 活动灾变推进。灾变的持续效果会写回区域的
种群、植物、资源与气候状态，并通过演化压力影响外部的遗传系统。
"""

from __future__ import annotations

import logging
from typing import Mapping

from ...core.random import WorldRNG
from ...models.config import CatastropheConfig
from ...models.region import Region
from ...models.world import EventEffect, EventLevel, EventType, WorldEvent, WorldTime
from ..ecology.food_web import EcosystemState
from .models import Catastrophe, EffectType, StressVector
from .stress import calculate_stress
from .triggers import propose_catastrophe

logger = logging.getLogger(__name__)

CATASTROPHE_NAMES = {
    "disease_outbreak": "疫病",
    "flood": "洪水",
    "landslide": "山体滑坡",
    "forest_fire": "森林大火",
    "famine": "饥荒",
    "toxic_bloom": "有毒藻华",
    "plague": "大瘟疫",
}


class CatastropheEngine:
    """灾变引擎"""

    def __init__(self, rng: WorldRNG, config: CatastropheConfig | None = None):
        self.rng = rng
        self.config = config or CatastropheConfig()
        self._stress: dict[str, StressVector] = {}
        self._active: dict[str, Catastrophe] = {}
        self._overpopulation_ticks: dict[str, int] = {}

    # ========== 单步操作 ==========

    def calculate_stress(self, region: Region, ecosystem: EcosystemState) -> StressVector:
        stress = calculate_stress(region, ecosystem, self.config)
        self._stress[region.id] = stress
        return stress

    def check_triggers(self, region: Region, stress: StressVector, tick: int) -> Catastrophe | None:
        """判定区域是否触发新灾变；区域已有活动灾变时不再触发"""
        if any(cat.affects(region.id) for cat in self._active.values()):
            return None

        catastrophe = propose_catastrophe(
            region, stress, tick, self.rng, self.config, self._overpopulation_ticks
        )
        if catastrophe is not None:
            self._active[catastrophe.id] = catastrophe
            logger.info(
                f"[灾变] {region.id} 爆发 {catastrophe.catastrophe_type.value} "
                f"(强度 {catastrophe.severity:.2f}, 持续 {catastrophe.duration})"
            )
        return catastrophe

    def tick_catastrophe(self, catastrophe: Catastrophe, regions: Mapping[str, Region], tick: int) -> list[WorldEvent]:
        """推进单个灾变：计时、施加效果，到期时移除并返回结束事件"""
        catastrophe.ticks_remaining -= 1
        severity = catastrophe.severity

        for region_id in catastrophe.region_ids:
            region = regions.get(region_id)
            if region is None:
                continue
            for effect in catastrophe.effects:
                kind = effect.effect_type
                if kind == EffectType.POPULATION_KILL:
                    kill_rate = effect.magnitude * severity * self.config.kill_scale
                    for pop in region.populations:
                        if effect.species_filter and pop.species_id != effect.species_filter:
                            continue
                        killed = round(pop.count * kill_rate)
                        if killed > 0:
                            pop.count = max(0, pop.count - killed)
                elif kind == EffectType.RESOURCE_DESTROY:
                    destroy_rate = effect.magnitude * severity * self.config.destroy_scale
                    for resource in region.resources:
                        resource.quantity = max(0.0, resource.quantity * (1 - destroy_rate))
                elif kind == EffectType.PLANT_DESTROY:
                    destroy_rate = effect.magnitude * severity * self.config.destroy_scale
                    for plant in region.plants:
                        if not plant.destroyed:
                            plant.biomass = max(0.0, plant.biomass * (1 - destroy_rate))
                elif kind == EffectType.CLIMATE_DISRUPTION:
                    sign = 1.0 if self.rng.chance(0.5) else -1.0
                    region.climate.temperature += sign * self.config.climate_shift_scale * effect.magnitude
                # MUTATION_SURGE 通过 get_evolution_pressure 体现

        if catastrophe.ticks_remaining > 0:
            return []

        self._active.pop(catastrophe.id, None)
        name = CATASTROPHE_NAMES.get(catastrophe.catastrophe_type.value, catastrophe.catastrophe_type.value)
        logger.info(f"[灾变] {name} 平息 ({', '.join(catastrophe.region_ids)})")
        return [WorldEvent(
            id=self.rng.token(),
            event_type=EventType.CATASTROPHE,
            level=EventLevel.REGIONAL,
            region_ids=list(catastrophe.region_ids),
            description=f"{name}已经平息。{catastrophe.cause}。",
            tick=tick,
            effects=[EventEffect("catastrophe_end", severity)],
            resolved=True,
        )]

    # ========== 整体推进 ==========

    def tick(self, regions: Mapping[str, Region], ecosystem: EcosystemState, time: WorldTime) -> list[WorldEvent]:
        events: list[WorldEvent] = []
        check_triggers = time.tick % max(1, self.config.trigger_check_interval) == 0

        for region in regions.values():
            stress = self.calculate_stress(region, ecosystem)
            if not check_triggers:
                continue
            catastrophe = self.check_triggers(region, stress, time.tick)
            if catastrophe is not None:
                events.append(self._start_event(catastrophe))

        for catastrophe in list(self._active.values()):
            events.extend(self.tick_catastrophe(catastrophe, regions, time.tick))

        return events

    def _start_event(self, catastrophe: Catastrophe) -> WorldEvent:
        name = CATASTROPHE_NAMES.get(catastrophe.catastrophe_type.value, catastrophe.catastrophe_type.value)
        return WorldEvent(
            id=self.rng.token(),
            event_type=EventType.CATASTROPHE,
            level=EventLevel.REGIONAL,
            region_ids=list(catastrophe.region_ids),
            description=f"{name}爆发：{catastrophe.cause}。",
            tick=catastrophe.tick_started,
            effects=[EventEffect(e.effect_type.value, e.magnitude) for e in catastrophe.effects],
        )

    # ========== 查询接口 ==========

    def get_evolution_pressure(self, region_id: str) -> float:
        """演化压力倍率：无灾变时恰为 1.0，每个活动灾变叠加 1 + 3*severity"""
        pressure = 1.0
        for catastrophe in self._active.values():
            if catastrophe.affects(region_id):
                pressure += 1 + catastrophe.severity * self.config.mutation_bonus_scale
        return pressure

    def get_active_catastrophes(self, region_id: str) -> list[Catastrophe]:
        return [c for c in self._active.values() if c.affects(region_id)]

    def get_all_active(self) -> list[Catastrophe]:
        return list(self._active.values())

    def get_stress(self, region_id: str) -> StressVector | None:
        return self._stress.get(region_id)

    def add_catastrophe(self, catastrophe: Catastrophe) -> None:
        """登记一个外部构造或从快照恢复的灾变"""
        if not catastrophe.id:
            catastrophe.id = self.rng.token()
        self._active[catastrophe.id] = catastrophe

    def clear(self) -> None:
        self._stress.clear()
        self._active.clear()
        self._overpopulation_ticks.clear()
