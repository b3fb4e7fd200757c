from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings


# config.py 位于 backend/biosphere/core/config.py，向上三级为项目根目录
PROJECT_ROOT = Path(__file__).resolve().parents[3]


class Settings(BaseSettings):
    """Global configuration for the world simulation core."""

    app_name: str = "Biosphere"

    # ========== 世界运行配置 ==========
    # 随机种子：留空则每次启动随机
    world_seed: int | None = Field(default=None, alias="WORLD_SEED")
    # 每个世界 tick 对应的真实时间间隔（毫秒），由外部驱动器使用
    tick_interval_ms: int = Field(default=1000, alias="TICK_INTERVAL_MS")
    # 严格不变量模式：开发/测试时违规直接抛错，生产环境在写入点钳制
    strict_invariants: bool = Field(default=False, alias="STRICT_INVARIANTS")
    # 引擎调参 YAML（可选），覆盖 EngineConfig 默认值
    engine_config_path: str | None = Field(default=None, alias="ENGINE_CONFIG_PATH")

    # 日志配置
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default=str(PROJECT_ROOT / "data/logs"))
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")
    log_to_console: bool = Field(default=True, alias="LOG_TO_CONSOLE")

    model_config = {
        "env_file": str(PROJECT_ROOT / ".env"),
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "populate_by_name": True,
    }


def setup_logging(settings: Settings) -> None:
    """配置全局日志系统

    Args:
        settings: 应用配置对象
    """
    log_level = getattr(logging, settings.log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # 清除已存在的handlers，避免重复输出
    root_logger.handlers.clear()

    formatter = logging.Formatter(
        fmt='%(asctime)s [%(levelname)s] %(name)s: %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    if settings.log_to_file:
        log_dir = Path(settings.log_dir)
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(
            log_dir / "simulation.log",
            encoding='utf-8',
            mode='a'
        )
        file_handler.setLevel(log_level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    if settings.log_to_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # numpy 等第三方库保持安静
    logging.getLogger("numpy").setLevel(logging.WARNING)

    root_logger.info(f"日志系统初始化完成 - 级别: {settings.log_level}, 目录: {settings.log_dir}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings()
