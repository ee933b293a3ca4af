"""
Core components of dcsimpy

- eventlist.py: 事件调度系统
- config.py: 配置定义
- errors.py: 异常类型
- logger/: 日志系统
"""

from .eventlist import EventList, EventKind, EventScheduler, SimEntity, SimEvent
from .config import SimTime, SimulationConfig, configure_logging
from .errors import (
    SimulationError, UnresolvableDestinationError, UnroutableUplinkError,
    InsufficientHistoryError, TopologyError, ConfigError,
)
from .logger import Logger, Logged, Logfile

__all__ = [
    'EventList', 'EventKind', 'EventScheduler', 'SimEntity', 'SimEvent',
    'SimTime', 'SimulationConfig', 'configure_logging',
    'SimulationError', 'UnresolvableDestinationError', 'UnroutableUplinkError',
    'InsufficientHistoryError', 'TopologyError', 'ConfigError',
    'Logger', 'Logged', 'Logfile',
]
