"""污染扩散与污染对气候的影响

扩散在整张区域图上一次性完成：先对所有区域的污染浓度拍快照，
用邻接矩阵一次算出全部转移量，再统一写回，结果与遍历顺序无关。
"""

from __future__ import annotations

import logging
from typing import Mapping

import numpy as np

from ...models.config import ClimateConfig
from ...models.region import Region, clamp01
from .constants import DEFAULT_POLLUTION_ABSORPTION, POLLUTION_ABSORPTION

logger = logging.getLogger(__name__)


def build_adjacency(regions: Mapping[str, Region]) -> tuple[list[str], np.ndarray]:
    """构建有向邻接矩阵 A[i, j] = j 在 i 的相邻列表中

    指向不存在区域的连接被忽略。
    """
    ids = list(regions)
    index = {rid: i for i, rid in enumerate(ids)}
    adjacency = np.zeros((len(ids), len(ids)), dtype=bool)
    for rid, region in regions.items():
        i = index[rid]
        for neighbor_id in region.connections:
            j = index.get(neighbor_id)
            if j is not None and j != i:
                adjacency[i, j] = True
    return ids, adjacency


def compute_pollution_flow(pollution: np.ndarray, adjacency: np.ndarray, config: ClimateConfig) -> np.ndarray:
    """计算一次扩散的转移矩阵 flow[i, j]（从 i 流向 j 的量）

    只有浓度高于邻居且高于扩散下限的区域才会向外输出，
    因此 flow 中的每一项都从高浓度指向低浓度。
    """
    diff = pollution[:, None] - pollution[None, :]
    active = adjacency & (diff > 0) & (pollution[:, None] > config.pollution_diffusion_floor)
    return np.where(active, diff * config.pollution_diffusion_rate, 0.0)


def diffuse_pollution(regions: Mapping[str, Region], config: ClimateConfig) -> None:
    """全图污染扩散 + 各区域按群系自然吸收"""
    if not regions:
        return

    ids, adjacency = build_adjacency(regions)
    snapshot = np.array([regions[rid].climate.pollution for rid in ids], dtype=float)

    flow = compute_pollution_flow(snapshot, adjacency, config)
    updated = snapshot - flow.sum(axis=1) + flow.sum(axis=0)

    absorption = np.array(
        [POLLUTION_ABSORPTION.get(regions[rid].biome, DEFAULT_POLLUTION_ABSORPTION) for rid in ids],
        dtype=float,
    )
    updated = np.clip(updated - absorption, 0.0, 1.0)

    for rid, value in zip(ids, updated):
        regions[rid].climate.pollution = float(value)


def apply_pollution_effects(
    region: Region,
    thermal_inertia: float,
    config: ClimateConfig,
) -> None:
    """污染的温室增温、降水抑制与湿度抑制

    增温与湿度抑制按各自松弛速率缩放，稳态偏移分别为 +5°C 与 -0.05。
    """
    climate = region.climate
    p = climate.pollution
    if p <= 0:
        return
    climate.temperature += p * config.greenhouse_max_warming * thermal_inertia
    climate.precipitation = max(0.0, climate.precipitation * (1 - p * config.pollution_precip_suppression))
    climate.humidity = clamp01(
        climate.humidity - p * config.pollution_humidity_suppression * config.humidity_relax_rate
    )
