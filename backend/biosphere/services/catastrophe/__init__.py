"""
灾变引擎模块

压力向量（污染、植被破坏、过载、土壤退化、疫病风险）驱动灾变触发，
灾变的持续效果写回气候与种群，并提供演化压力倍率。
"""

from .catastrophe_engine import CatastropheEngine
from .models import Catastrophe, CatastropheEffect, CatastropheType, EffectType, StressVector
from .stress import calculate_stress
from .triggers import create_catastrophe, propose_catastrophe

__all__ = [
    "CatastropheEngine",
    "Catastrophe",
    "CatastropheEffect",
    "CatastropheType",
    "EffectType",
    "StressVector",
    "calculate_stress",
    "create_catastrophe",
    "propose_catastrophe",
]
