"""
OverloadMonitor - 周期性过载监控

功能: 每个监控周期检查所有主机的利用率，必要时触发 VM 迁移

对每个主机:
1. 读取利用率历史快照并计算 IQR 度量
2. 由度量得到利用率上限；历史不足时使用静态阈值
3. 用最后一个样本作为当前利用率，交给 MigrationTrigger 评估
4. 把迁移结果写入 VmPlacement 并记录决策；同一轮中已迁入的 MIPS
   计入后续候选主机的负载
"""

from typing import List, Optional, TYPE_CHECKING
import logging

from ..core.config import DEFAULT_MONITORING_INTERVAL, DEFAULT_SAFETY_PARAMETER, SimTime
from ..core.eventlist import EventKind, EventList, SimEntity, SimEvent
from ..core.logger.migration import MigrationLogger
from .migration_trigger import MigrationDecision, MigrationTrigger, StaticThreshold, upper_threshold
from .overload_detector import InterQuartileRangeDetector

if TYPE_CHECKING:
    from ..datacenter.placement import VmPlacement
    from ..datacenter.topology import DatacenterTopology

logger = logging.getLogger(__name__)


class OverloadMonitor(SimEntity):
    """周期性监控实体，处理 HOST_MONITOR 事件"""

    def __init__(
        self,
        eventlist: EventList,
        topology: 'DatacenterTopology',
        placement: 'VmPlacement',
        trigger: MigrationTrigger,
        detector: Optional[InterQuartileRangeDetector] = None,
        static_threshold: Optional[StaticThreshold] = None,
        safety_parameter: float = DEFAULT_SAFETY_PARAMETER,
        interval: SimTime = DEFAULT_MONITORING_INTERVAL,
        migration_logger: Optional[MigrationLogger] = None,
        dynamic_threshold: bool = True,
        name: str = "OverloadMonitor",
    ):
        super().__init__(eventlist, name)
        if interval <= 0:
            raise ValueError(f"monitoring interval must be positive, got {interval}")
        self._topology = topology
        self._placement = placement
        self._trigger = trigger
        self._detector = detector or InterQuartileRangeDetector()
        self._static_threshold = static_threshold or StaticThreshold()
        self._safety_parameter = safety_parameter
        self._interval = interval
        self._migration_logger = migration_logger or MigrationLogger()
        self._dynamic_threshold = dynamic_threshold
        self._decisions: List[MigrationDecision] = []
        self._ticks = 0

    @property
    def interval(self) -> SimTime:
        return self._interval

    @property
    def migration_logger(self) -> MigrationLogger:
        return self._migration_logger

    def start(self) -> None:
        """Schedule the first monitoring tick one interval from now."""
        self.schedule(self.get_id(), self._interval, EventKind.HOST_MONITOR)

    def process_event(self, event: SimEvent) -> None:
        if event.kind != EventKind.HOST_MONITOR:
            raise ValueError(f"{self.str()} cannot handle {event.kind.name}")
        self.check_hosts()
        self.schedule(self.get_id(), self._interval, EventKind.HOST_MONITOR)

    def threshold_for(self, host_id: int):
        """
        Returns:
            (threshold, static_fallback)
        """
        if not self._dynamic_threshold:
            return float(self._static_threshold), True
        history = self._topology.utilization_history(host_id)
        result = self._detector.compute_threshold_measure(history)
        if result.ok:
            return upper_threshold(result.measure, self._safety_parameter), False
        return float(self._static_threshold), True

    def check_hosts(self) -> List[MigrationDecision]:
        """Evaluate every host once and apply the resulting migrations."""
        self._ticks += 1
        now = self.eventlist().now()
        self._placement.clear_pending()
        hosts = self._topology.hosts()
        decisions = []

        for host in hosts:
            threshold, static_fallback = self.threshold_for(host.host_id)
            candidates = [h for h in hosts if h.host_id != host.host_id]
            decision = self._trigger.evaluate(host, host.current_utilization(), threshold, candidates)
            decision.static_fallback = static_fallback
            decision.time = now

            for vm_id, target_host_id in decision.migrations:
                self._placement.migrate(vm_id, target_host_id)

            self._migration_logger.log_decision(decision)
            decisions.append(decision)

        overloaded = sum(1 for d in decisions if d.overloaded)
        logger.info("monitor tick %d at %s: %d hosts, %d overloaded",
                    self._ticks, now, len(decisions), overloaded)
        self._decisions.extend(decisions)
        return decisions

    def decisions(self) -> List[MigrationDecision]:
        return list(self._decisions)

    def tick_count(self) -> int:
        return self._ticks
