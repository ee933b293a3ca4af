"""
Core Logger Classes - 核心日志类

功能: 提供日志系统的核心基础设施

主要类:
- Logged: 日志基类，为对象提供唯一ID和名称
"""


class Logged:
    """
    日志基类

    为对象提供唯一ID和名称，所有需要记录的对象（交换机、主机、监控器）都应继承此类。
    ID 全局递增，Logfile.writeName 用它写出 ID -> 名称 映射
    """

    LASTIDNUM: int = 0

    IdType = int

    def __init__(self, name: str):
        self._name = name
        self._log_id = Logged.LASTIDNUM
        Logged.LASTIDNUM += 1

    def str(self) -> str:
        return self._name

    def get_id(self) -> IdType:
        return self._log_id
