"""TickResult - 单个世界 tick 的输出汇总"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ..models.world import WorldEvent, WorldTime
    from ..services.ecology.incidental import IncidentalKill
    from ..services.ecology.migration import MigrationRecord
    from ..services.ecology.population_dynamics import PopulationUpdate


@dataclass
class TickResult:
    """一个 tick 结束后交给外部（叙事/广播、持久化、遗传）的数据

    Attributes:
        tick: 本 tick 编号
        time: 本 tick 的世界时间
        events: 三个引擎按顺序产生的世界事件
        population_updates: 种群变化明细
        migrations: 本 tick 执行的迁徙
        incidental_kills: 踩踏误伤记录
        active_catastrophes: tick 结束时的活动灾变数
    """
    tick: int
    time: WorldTime
    events: list[WorldEvent] = field(default_factory=list)
    population_updates: list[PopulationUpdate] = field(default_factory=list)
    migrations: list[MigrationRecord] = field(default_factory=list)
    incidental_kills: list[IncidentalKill] = field(default_factory=list)
    active_catastrophes: int = 0

    @property
    def event_count(self) -> int:
        return len(self.events)
