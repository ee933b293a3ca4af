"""
Base Logger Class - 基础日志类

功能: 定义所有日志事件类型，提供统一的日志记录接口

主要类:
- Logger: 日志记录器基类
- Logger.EventType: 日志事件类型枚举
"""

from enum import IntEnum
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from .logfile import Logfile


class Logger:
    """
    日志记录器基类

    定义了所有日志事件类型，具体的记录器通过 Logfile 写出记录
    """

    class EventType(IntEnum):
        SWITCH_EVENT = 0
        SWITCH_RECORD = 1
        HOST_EVENT = 2
        MIGRATION_EVENT = 3

    def __init__(self):
        self._logfile: Optional['Logfile'] = None

    def setLogfile(self, logfile: 'Logfile') -> None:
        self._logfile = logfile

    def logfile(self) -> Optional['Logfile']:
        return self._logfile
