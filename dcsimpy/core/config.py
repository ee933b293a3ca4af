"""
Config - Configuration Definitions

功能: 定义仿真配置参数和常量

主要内容:
- 仿真时间类型定义（秒，浮点数）
- 容量单位常量
- 默认参数值
- SimulationConfig: 仿真运行参数
"""

from typing import TypeAlias
from dataclasses import dataclass, asdict
import logging

from .errors import ConfigError

# 仿真时间以秒为单位
SimTime: TypeAlias = float

# 容量单位常量
MEGA = 1024 * 1024
GIGA = 1024 * 1024 * 1024

# 仿真配置
DEFAULT_SIMULATION_TIME = 86_400.0  # one simulated day
DEFAULT_MONITORING_INTERVAL = 300.0  # 5 minutes between overload checks
DEFAULT_FORWARD_TICK_DELAY = 0.0

# 主机利用率历史
DEFAULT_HISTORY_LENGTH = 30
MIN_HISTORY_SAMPLES = 12

# 迁移策略
DEFAULT_SAFETY_PARAMETER = 1.5
DEFAULT_STATIC_THRESHOLD = 0.9

# 日志配置
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_LOG_FILE = "dcsimpy.log"

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


@dataclass
class SimulationConfig:
    """
    仿真配置类

    包含仿真运行所需的时间、历史和日志参数
    """

    # 时间配置
    simulation_time: SimTime = DEFAULT_SIMULATION_TIME
    monitoring_interval: SimTime = DEFAULT_MONITORING_INTERVAL
    forward_tick_delay: SimTime = DEFAULT_FORWARD_TICK_DELAY

    # 利用率历史配置
    history_length: int = DEFAULT_HISTORY_LENGTH
    min_history_samples: int = MIN_HISTORY_SAMPLES

    # 日志配置
    log_level: str = DEFAULT_LOG_LEVEL
    log_file: str = DEFAULT_LOG_FILE

    def validate(self) -> None:
        """
        验证配置参数的有效性

        Raises:
            ConfigError: 任何参数无效时
        """
        if self.simulation_time <= 0:
            raise ConfigError(f"simulation_time must be positive, got {self.simulation_time}")
        if self.monitoring_interval <= 0:
            raise ConfigError(f"monitoring_interval must be positive, got {self.monitoring_interval}")
        if self.forward_tick_delay < 0:
            raise ConfigError(f"forward_tick_delay cannot be negative, got {self.forward_tick_delay}")
        if self.min_history_samples <= 0:
            raise ConfigError("min_history_samples must be positive")
        if self.history_length < self.min_history_samples:
            raise ConfigError(
                f"history_length ({self.history_length}) is shorter than "
                f"min_history_samples ({self.min_history_samples})"
            )
        if logging.getLevelName(self.log_level.upper()) == f"Level {self.log_level.upper()}":
            raise ConfigError(f"unknown log level {self.log_level!r}")

    def setup_logging(self) -> None:
        """按 log_level 和 log_file 配置标准库日志"""
        configure_logging(self.log_level, self.log_file)

    def to_dict(self) -> dict:
        """
        将配置转换为字典

        Returns:
            配置字典
        """
        return asdict(self)


def configure_logging(level: str = DEFAULT_LOG_LEVEL, log_file: str = "") -> None:
    """Set up the standard library root logger for a simulation run."""
    handlers = [logging.StreamHandler()]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT, handlers=handlers, force=True)
