"""World Simulation - 世界模拟驱动（瘦中枢）

每个 tick 严格按 气候 -> 生态 -> 灾变 的顺序推进一次，三个引擎共享同一个
WorldRNG 与同一张区域图。本模块只负责编排与汇总，不包含任何领域规则。

使用示例：
```python
world = World()
world.add_region("r1", "平原", WorldLayer.SURFACE, Biome.GRASSLAND, latitude=30)
sim = WorldSimulation(world, registry, seed=42)
result = sim.tick()
```
"""

from __future__ import annotations

import logging
from time import monotonic, sleep
from typing import Callable, Iterable

from ..core.config import Settings, get_settings, setup_logging
from ..core.random import WorldRNG
from ..models.config import EngineConfig, load_engine_config
from ..models.species import CharacterRegistry, SpeciesRegistry
from ..models.world import WorldTime
from ..schemas.snapshot import WorldSnapshot
from ..services.catastrophe.catastrophe_engine import CatastropheEngine
from ..services.catastrophe.models import Catastrophe
from ..services.climate.climate_engine import ClimateEngine
from ..services.ecology.ecosystem_engine import EcosystemEngine
from ..services.system.snapshot import SnapshotService
from .context import TickResult
from .world import World

logger = logging.getLogger(__name__)


class WorldSimulation:
    """世界模拟中枢"""

    def __init__(
        self,
        world: World,
        registry: SpeciesRegistry,
        rng: WorldRNG | None = None,
        seed: int | None = None,
        config: EngineConfig | None = None,
        strict_invariants: bool = False,
        characters: CharacterRegistry | None = None,
        tick_interval_ms: int = 1000,
    ):
        self.world = world
        # 实时运行时相邻 tick 的间隔
        self.tick_interval_ms = tick_interval_ms
        self.registry = registry
        self.rng = rng or WorldRNG(seed)
        self.config = config or EngineConfig()

        self.climate = ClimateEngine(self.rng, self.config.climate, strict_invariants=strict_invariants)
        self.ecosystem = EcosystemEngine(
            registry,
            self.rng,
            state=world.ecosystem,
            config=self.config.ecosystem,
            characters=characters,
        )
        self.catastrophe = CatastropheEngine(self.rng, self.config.catastrophe)
        self.snapshots = SnapshotService()

        logger.info(
            f"[模拟] 初始化完成: {len(world.regions)} 个区域, {len(registry)} 个物种, "
            f"起始 tick {world.tick}"
        )

    @classmethod
    def from_settings(
        cls,
        world: World,
        registry: SpeciesRegistry,
        settings: Settings | None = None,
        characters: CharacterRegistry | None = None,
        configure_logging: bool = True,
    ) -> WorldSimulation:
        """按全局配置（种子、严格模式、引擎调参 YAML、日志、tick 间隔）构造

        作为进程启动入口使用时顺带初始化日志系统；嵌入到已配置好日志的宿主中时
        传 configure_logging=False。
        """
        settings = settings or get_settings()
        if configure_logging:
            setup_logging(settings)
        return cls(
            world,
            registry,
            seed=settings.world_seed,
            config=load_engine_config(settings.engine_config_path),
            strict_invariants=settings.strict_invariants,
            characters=characters,
            tick_interval_ms=settings.tick_interval_ms,
        )

    # ========== 推进 ==========

    def tick(self) -> TickResult:
        """推进一个世界 tick"""
        self.world.tick += 1
        time = WorldTime.from_tick(self.world.tick)
        regions = self.world.regions
        result = TickResult(tick=time.tick, time=time)

        # === 1. 气候 ===
        result.events.extend(self.climate.tick(regions, time))

        # === 2. 种群/生态 ===
        eco = self.ecosystem.tick(regions, time)
        result.events.extend(eco.events)
        result.population_updates = eco.updates
        result.migrations = eco.migrations
        result.incidental_kills = eco.incidental_kills

        # === 3. 灾变 ===
        result.events.extend(self.catastrophe.tick(regions, self.world.ecosystem, time))
        result.active_catastrophes = len(self.catastrophe.get_all_active())

        if result.events:
            logger.debug(f"[模拟] tick {time.tick}: {len(result.events)} 个事件")
        return result

    def run(self, ticks: int) -> list[TickResult]:
        if ticks < 0:
            raise ValueError(f"ticks 不能为负: {ticks}")
        return [self.tick() for _ in range(ticks)]

    def run_realtime(
        self,
        ticks: int,
        sleep_fn: Callable[[float], None] = sleep,
        clock: Callable[[], float] = monotonic,
    ) -> list[TickResult]:
        """按 tick_interval_ms 的节奏推进 ticks 个 tick

        tick 自身的耗时计入间隔；某个 tick 超时则不再等待，也不补偿，
        直接进入下一个 tick。最后一个 tick 之后不等待。
        """
        if ticks < 0:
            raise ValueError(f"ticks 不能为负: {ticks}")
        interval = self.tick_interval_ms / 1000
        results: list[TickResult] = []
        for i in range(ticks):
            started = clock()
            results.append(self.tick())
            if i == ticks - 1:
                break
            remaining = interval - (clock() - started)
            if remaining > 0:
                sleep_fn(remaining)
            else:
                logger.warning(f"[模拟] tick {self.world.tick} 耗时超过间隔 {self.tick_interval_ms}ms")
        return results

    def reset(self) -> None:
        """清空各引擎的运行期状态（锋面/干旱/火山、灭绝记录、活动灾变），不动区域图"""
        self.climate.reset()
        self.ecosystem.reset()
        self.catastrophe.clear()
        logger.info(f"[模拟] 引擎状态已重置 (tick {self.world.tick})")

    # ========== 查询 ==========

    def evolution_pressure(self, region_id: str) -> float:
        return self.catastrophe.get_evolution_pressure(region_id)

    def active_catastrophes(self, region_id: str | None = None) -> list[Catastrophe]:
        if region_id is None:
            return self.catastrophe.get_all_active()
        return self.catastrophe.get_active_catastrophes(region_id)

    # ========== 快照 ==========

    def snapshot(self) -> WorldSnapshot:
        return self.snapshots.capture(
            self.world.tick,
            self.world.regions,
            self.world.ecosystem,
            self.catastrophe.get_all_active(),
            self.ecosystem.extinct_species,
        )

    def restore(self, snapshot: WorldSnapshot) -> None:
        """从快照恢复；锋面、干旱与火山状态不入快照，恢复后从零开始"""
        restored = self.snapshots.restore(snapshot)
        self.reset()

        self.world.tick = restored.tick
        self.world.regions = restored.regions
        self.world.ecosystem = restored.ecosystem
        self.ecosystem.state = restored.ecosystem
        self.ecosystem.extinct_species = set(restored.extinct_species)
        self._register_catastrophes(restored.catastrophes)

    def _register_catastrophes(self, catastrophes: Iterable[Catastrophe]) -> None:
        for catastrophe in catastrophes:
            self.catastrophe.add_catastrophe(catastrophe)
