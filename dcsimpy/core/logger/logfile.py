"""
Logfile - 日志文件管理器

功能: 管理仿真的记录输出

主要类:
- Logfile: 日志文件管理器

记录格式（每行一条）: 时间 类型 ID 事件 值1 值2 值3
"""

from typing import List, Optional, TextIO, TYPE_CHECKING
import logging
import os

from .base import Logger
from .core import Logged

if TYPE_CHECKING:
    from ..eventlist import EventList

logger = logging.getLogger(__name__)


class Logfile:
    """
    日志文件管理器

    管理所有日志器的输出；时间戳来自事件列表的当前仿真时间
    """

    def __init__(self, filename: str, eventlist: 'EventList'):
        self._filename = filename
        self._eventlist = eventlist
        self._starttime = 0.0
        self._loggers: List[Logger] = []
        self._records = 0

        # 确保目录存在
        dirname = os.path.dirname(filename)
        if dirname:
            os.makedirs(dirname, exist_ok=True)

        self._file: Optional[TextIO] = open(filename, 'w')
        logger.debug("opened logfile %s", filename)

    def setStartTime(self, starttime: float) -> None:
        """设置开始记录日志的时间"""
        self._starttime = starttime

    def addLogger(self, log: Logger) -> None:
        """添加一个日志器"""
        self._loggers.append(log)
        log.setLogfile(self)

    def write(self, msg: str) -> None:
        if self._file:
            self._file.write(msg + '\n')
            self._file.flush()

    def writeName(self, item: Logged) -> None:
        """写入对象的 ID 和名称"""
        self.write(f"# {item.get_id()} {item.str()}")

    def writeRecord(self, type_val: int, id_val: int, ev: int,
                    val1: float, val2: float, val3: float) -> None:
        """写入日志记录，自动添加时间戳"""
        now = self._eventlist.now()
        if now < self._starttime or not self._file:
            return
        self._file.write(f"{now} {int(type_val)} {id_val} {int(ev)} {val1} {val2} {val3}\n")
        self._file.flush()
        self._records += 1

    def record_count(self) -> int:
        return self._records

    def close(self) -> None:
        if self._file:
            self._file.close()
            self._file = None
