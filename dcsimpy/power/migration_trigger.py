"""
Migration trigger - 迁移触发器

功能: 判断主机是否过载，过载时通过注入的策略决定要迁移的 VM

主要类:
- StaticThreshold: 历史不足时使用的静态阈值
- VmSelectionPolicy: VM 选择策略接口
- FallbackAllocationPolicy: 选择策略没有结果时的后备策略接口
- MigrationDecision: 一次评估的结果
- MigrationTrigger: 无状态的触发器

主要函数:
- upper_threshold: 由阈值度量得到利用率上限
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import List, Sequence, Tuple, TYPE_CHECKING
import logging

from ..core.config import DEFAULT_SAFETY_PARAMETER, DEFAULT_STATIC_THRESHOLD

if TYPE_CHECKING:
    from ..datacenter.host import NetworkHost

logger = logging.getLogger(__name__)

# (vm id, target host id)
Migration = Tuple[int, int]


def upper_threshold(measure: float, safety_parameter: float = DEFAULT_SAFETY_PARAMETER) -> float:
    """1 - s * measure: the more variable the load, the lower the threshold."""
    return 1.0 - safety_parameter * measure


class StaticThreshold:
    """固定的利用率上限"""

    def __init__(self, threshold: float = DEFAULT_STATIC_THRESHOLD):
        if not 0.0 < threshold <= 1.0:
            raise ValueError(f"static threshold must be in (0, 1], got {threshold}")
        self.threshold = threshold

    def __float__(self) -> float:
        return self.threshold


class VmSelectionPolicy(ABC):
    """Chooses which VMs of an overloaded host to move, and where."""

    @abstractmethod
    def select_migrations(self, host: 'NetworkHost',
                          candidates: Sequence['NetworkHost']) -> List[Migration]:
        """Empty list when no feasible migration exists."""


class FallbackAllocationPolicy(ABC):
    """Consulted once when the selection policy finds nothing."""

    @abstractmethod
    def select_migrations(self, host: 'NetworkHost',
                          candidates: Sequence['NetworkHost']) -> List[Migration]:
        """Empty list when no feasible migration exists."""


@dataclass
class MigrationDecision:
    """一次过载评估的结果"""
    host_id: int
    utilization: float
    threshold: float
    overloaded: bool
    migrations: List[Migration] = field(default_factory=list)
    used_fallback: bool = False
    static_fallback: bool = False
    time: float = 0.0


class MigrationTrigger:
    """
    迁移触发器

    未过载时不调用任何策略；过载时选择策略恰好调用一次，
    选择策略没有结果时后备策略恰好调用一次
    """

    def __init__(self, selection_policy: VmSelectionPolicy,
                 fallback_policy: FallbackAllocationPolicy):
        self._selection_policy = selection_policy
        self._fallback_policy = fallback_policy

    @staticmethod
    def is_overloaded(utilization: float, threshold: float) -> bool:
        return utilization > threshold

    def evaluate(self, host: 'NetworkHost', utilization: float, threshold: float,
                 candidates: Sequence['NetworkHost']) -> MigrationDecision:
        decision = MigrationDecision(host.host_id, utilization, threshold,
                                     self.is_overloaded(utilization, threshold))
        if not decision.overloaded:
            return decision

        decision.migrations = list(self._selection_policy.select_migrations(host, candidates))
        if not decision.migrations:
            decision.used_fallback = True
            decision.migrations = list(self._fallback_policy.select_migrations(host, candidates))

        if decision.migrations:
            logger.info("host %d overloaded (%.3f > %.3f): %d migrations",
                        host.host_id, utilization, threshold, len(decision.migrations))
        else:
            logger.warning("host %d overloaded (%.3f > %.3f) but no feasible migration",
                           host.host_id, utilization, threshold)
        return decision
