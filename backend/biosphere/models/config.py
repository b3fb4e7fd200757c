from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, ConfigDict, Field

logger = logging.getLogger(__name__)


class ClimateConfig(BaseModel):
    """气候引擎参数"""
    model_config = ConfigDict(extra="ignore")

    # ========== 温度 ==========
    temperature_noise_std: float = 0.3
    # 热惯性：海洋升降温最慢，沙漠最快
    thermal_inertia_ocean: float = 0.02
    thermal_inertia_desert: float = 0.08
    thermal_inertia_default: float = 0.05
    lapse_rate_per_km: float = 6.5

    # ========== 湿度 / 降水 / 风 ==========
    humidity_relax_rate: float = 0.03
    humidity_noise_std: float = 0.01
    grassland_seasonal_humidity: float = 0.15  # 草原、稀树草原的雨季/旱季振幅
    rain_humidity_threshold: float = 0.6
    rain_trickle_max: float = 5.0
    precipitation_noise_std: float = 2.0
    wind_relax_rate: float = 0.05
    wind_noise_std: float = 0.5

    # ========== 锋面 ==========
    front_spawn_chance: float = 0.01
    max_fronts_per_region: int = 3
    front_decay: float = 0.97
    front_min_intensity: float = 0.05
    front_temperature_scale: float = 0.05
    front_humidity_scale: float = 0.05
    front_wind_scale: float = 0.1

    # ========== 污染 ==========
    greenhouse_max_warming: float = 5.0
    pollution_precip_suppression: float = 0.3
    pollution_humidity_suppression: float = 0.05
    pollution_diffusion_rate: float = 0.005
    pollution_diffusion_floor: float = 0.01  # 低于此浓度的区域不向外扩散

    # ========== 干旱 ==========
    drought_precip_threshold: float = 5.0
    drought_humidity_ratio: float = 0.6
    drought_onset_ticks: int = 24
    drought_recovery_step: int = 3
    drought_humidity_drain: float = 0.02
    drought_max_warming: float = 1.5
    drought_disaster_severity: float = 0.5
    drought_disaster_chance: float = 0.005

    # ========== 潮汐 / 日月食 ==========
    tidal_renewal_swing: float = 0.3  # (tidal - 0.5) * 0.3 => ±15%
    tidal_wind_swing: float = 4.0
    tidal_humidity_swing: float = 0.03
    solar_eclipse_chance: float = 0.0001
    lunar_eclipse_chance: float = 0.001
    solar_eclipse_cooling: float = 5.0
    solar_eclipse_wind: float = 3.0
    lunar_eclipse_warming: float = 0.5

    # ========== 火山 ==========
    pressure_build_min: float = 0.0001
    pressure_build_max: float = 0.001
    eruption_pressure_min: float = 0.5
    eruption_pressure_knee: float = 0.7
    eruption_chance_scale: float = 0.005
    eruption_min_ticks: int = 6
    eruption_max_ticks: int = 24
    eruption_cooling: float = 2.0
    eruption_humidity: float = 0.05
    eruption_precipitation: float = 10.0
    eruption_pollution: float = 0.15
    ash_spread_chance: float = 0.1
    ash_cooling: float = 0.5
    ash_pollution: float = 0.01

    # ========== 自然灾害 ==========
    disaster_base_chance: float = 0.0001
    disaster_pollution_scale: float = 4.0  # 满污染时概率放大到 5 倍


class EcosystemConfig(BaseModel):
    """种群/生态引擎参数"""
    model_config = ConfigDict(extra="ignore")

    default_carrying_capacity: int = 10000

    # ========== 增长 ==========
    min_viable_population: int = 5
    mvp_penalty: float = 0.01
    recovery_threshold: int = 20
    recovery_satisfaction: float = 0.7
    recovery_bonus: float = 0.5
    # 人口学噪声：gaussian(0, sqrt(N) * demographic_noise)，0 表示关闭
    demographic_noise: float = 0.005
    pollution_mortality: float = 0.002
    heat_stress_threshold: float = 45.0
    cold_stress_threshold: float = -30.0
    temperature_stress_scale: float = 0.001

    # ========== 捕食 ==========
    predation_loss_scale: float = 0.001
    predator_gain_scale: float = 0.01
    starvation_rate: float = 0.01

    # ========== 资源消耗 ==========
    consumption_per_capita: float = 0.001
    consumption_draw_rate: float = 0.1
    carnivore_satisfaction: float = 0.8
    grazing_fraction: float = 0.5  # 食草需求中直接啃食植物生物量的比例
    regen_pollution_damping: float = 0.5
    regen_min_factor: float = 0.1

    # ========== 植物 ==========
    plant_initial_ratio: float = 0.7
    plant_pollution_damping: float = 0.5
    overgrazing_threshold: float = 0.05
    overgrazing_destroy_ticks: int = 500
    plant_spread_min_ratio: float = 0.7
    plant_seed_fraction: float = 0.1

    # ========== 迁徙 ==========
    migration_pressure: float = 0.7
    migration_chance_scale: float = 0.05
    migration_max_chance: float = 0.1
    migration_min_population: int = 10
    migration_target_ceiling: float = 0.9
    migration_min_fraction: float = 0.1
    migration_max_fraction: float = 0.2

    # ========== 误伤（踩踏） ==========
    incidental_size_ratio: float = 10.0
    incidental_kill_scale: float = 0.001

    # ========== 健康检查 / 污染反馈 ==========
    resource_depletion_ratio: float = 0.05
    pollution_crisis_threshold: float = 0.7
    crowding_pollution_threshold: float = 0.8
    crowding_pollution_rate: float = 0.0001


class CatastropheConfig(BaseModel):
    """灾变引擎参数

    触发概率为试玩调出的经验值，修改会直接影响游戏平衡。
    """
    model_config = ConfigDict(extra="ignore")

    trigger_check_interval: int = 25
    soil_overgrazing_ticks: int = 100

    # ========== 触发概率（每次检查） ==========
    disease_chance: float = 0.05
    flood_chance: float = 0.08
    fire_chance: float = 0.04
    famine_chance: float = 0.1
    toxic_bloom_chance: float = 0.06
    soil_famine_chance: float = 0.08
    plague_chance: float = 0.03

    # 饥荒计数器：过载时每次检查 +25，恢复时 -10，超过 200 才可能爆发饥荒
    famine_counter_step: int = 25
    famine_counter_decay: int = 10
    famine_counter_threshold: int = 200

    # ========== 效果强度 ==========
    kill_scale: float = 0.001
    destroy_scale: float = 0.005
    climate_shift_scale: float = 0.01
    mutation_bonus_scale: float = 3.0


class EngineConfig(BaseModel):
    """三大引擎的聚合配置"""
    model_config = ConfigDict(extra="ignore")

    climate: ClimateConfig = Field(default_factory=ClimateConfig)
    ecosystem: EcosystemConfig = Field(default_factory=EcosystemConfig)
    catastrophe: CatastropheConfig = Field(default_factory=CatastropheConfig)

    @classmethod
    def from_yaml(cls, path: Path | str) -> "EngineConfig":
        """从 YAML 读取覆盖项，未给出的字段保持默认值"""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        return cls.model_validate(data.get("engine", data))


def load_engine_config(config_path: Path | str | None = None) -> EngineConfig:
    """加载引擎配置，文件缺失时退回默认值"""
    if config_path is None:
        return EngineConfig()

    path = Path(config_path)
    if not path.exists():
        logger.debug(f"Config file not found: {path}; using defaults")
        return EngineConfig()

    config = EngineConfig.from_yaml(path)
    logger.info(f"[配置] 已从 {path} 加载引擎参数")
    return config
