"""
世界随机数源

整个世界只共享一个可复现的随机数发生器（numpy Generator），
气候、生态、灾变三个引擎都从同一个实例同步取数，保证相同种子下
每个 tick 的结果完全一致。

加权选择被拆成两部分：
- 权重计算：由各子系统的纯函数根据区域状态给出 WeightedOption 列表
- 抽签：WorldRNG.weighted_choice 只负责按权重抽取
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Generic, Sequence, TypeVar

import numpy as np

T = TypeVar("T")


@dataclass(frozen=True)
class WeightedOption(Generic[T]):
    """带权重的候选结果"""
    outcome: T
    weight: float


class WorldRNG:
    """可设定种子的世界随机数发生器"""

    def __init__(self, seed: int | None = None):
        self.seed = seed
        self._gen = np.random.default_rng(seed)
        # 标识流从同一种子派生，独立于模拟序列
        self._ids = self._gen.spawn(1)[0]

    def random(self) -> float:
        """[0, 1) 均匀分布"""
        return float(self._gen.random())

    def chance(self, probability: float) -> bool:
        return self.random() < probability

    def uniform(self, low: float, high: float) -> float:
        return low + self.random() * (high - low)

    def randint(self, low: int, high: int) -> int:
        """闭区间 [low, high] 上的整数"""
        return int(self._gen.integers(low, high + 1))

    def gaussian(self, mean: float = 0.0, std: float = 1.0) -> float:
        if std <= 0:
            return mean
        return float(self._gen.normal(mean, std))

    def token(self) -> str:
        """12 位十六进制标识（事件、灾变 id）"""
        return f"{int(self._ids.integers(0, 2**48)):012x}"

    def weighted_choice(self, options: Sequence[WeightedOption[T]]) -> T:
        """按权重抽取一个结果

        权重 <= 0 的候选永远不会被选中。

        Raises:
            ValueError: 没有任何正权重候选
        """
        total = sum(opt.weight for opt in options if opt.weight > 0)
        if total <= 0 or not math.isfinite(total):
            raise ValueError("weighted_choice 需要至少一个正权重候选")

        roll = self.random() * total
        last: WeightedOption[T] | None = None
        for opt in options:
            if opt.weight <= 0:
                continue
            roll -= opt.weight
            last = opt
            if roll <= 0:
                return opt.outcome
        # 浮点累计误差兜底：返回最后一个正权重候选
        return last.outcome  # type: ignore[union-attr]

    # ========== 状态导出（供外部持久化层使用） ==========

    def get_state(self) -> dict[str, Any]:
        return {
            "simulation": self._gen.bit_generator.state,
            "ids": self._ids.bit_generator.state,
        }

    def set_state(self, state: dict[str, Any]) -> None:
        self._gen.bit_generator.state = state["simulation"]
        self._ids.bit_generator.state = state["ids"]
