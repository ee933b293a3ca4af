"""
Migration Logger Classes - 迁移决策日志类

功能: 记录主机过载检测和 VM 迁移决策
"""

from enum import IntEnum
from typing import TYPE_CHECKING, List

from .base import Logger

if TYPE_CHECKING:
    from ...power.migration_trigger import MigrationDecision


class MigrationLogger(Logger):
    """迁移决策日志记录器：每个决策写一条记录，并在内存中保留决策列表"""

    class MigrationEvent(IntEnum):
        HOST_OK = 0             # 未过载
        HOST_OVERLOADED = 1     # 过载并找到迁移目标
        NO_FEASIBLE_TARGET = 2  # 过载但选择策略和后备策略都没有结果
        STATIC_FALLBACK = 3     # 历史不足，使用静态阈值

    def __init__(self):
        super().__init__()
        self._decisions: List['MigrationDecision'] = []

    def log_decision(self, decision: 'MigrationDecision') -> None:
        self._decisions.append(decision)
        if not self._logfile:
            return

        if not decision.overloaded:
            ev = self.MigrationEvent.HOST_OK
        elif decision.migrations:
            ev = self.MigrationEvent.HOST_OVERLOADED
        else:
            ev = self.MigrationEvent.NO_FEASIBLE_TARGET

        self._logfile.writeRecord(
            Logger.EventType.MIGRATION_EVENT,
            decision.host_id,
            ev,
            decision.utilization,
            decision.threshold,
            float(len(decision.migrations)),
        )
        if decision.static_fallback:
            self._logfile.writeRecord(
                Logger.EventType.MIGRATION_EVENT,
                decision.host_id,
                self.MigrationEvent.STATIC_FALLBACK,
                decision.utilization,
                decision.threshold,
                0.0,
            )

    def decisions(self) -> List['MigrationDecision']:
        return list(self._decisions)
