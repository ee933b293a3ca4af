"""
DatacenterNetwork - Simulation Facade

功能: 根据 DatacenterConfig 组装一次完整的仿真（事件列表、拓扑、VM 放置、
过载监控和日志），并提供发送数据包、记录利用率、运行仿真的接口

主要类:
- DatacenterNetwork
"""

from typing import Optional
import logging

from ..core.config import SimTime
from ..core.eventlist import EventList
from ..core.logger.logfile import Logfile
from ..core.logger.migration import MigrationLogger
from ..datacenter.placement import VmPlacement
from ..datacenter.topology import DatacenterTopology
from ..packets.network_packet import NetworkPacket
from ..power.migration_trigger import MigrationTrigger, StaticThreshold
from ..power.monitor import OverloadMonitor
from ..power.overload_detector import InterQuartileRangeDetector
from ..power.policies import FirstFitFallback, MinimumUtilizationSelection
from .config_parser import DatacenterConfig, ThresholdPolicy
from .report import SimulationReport

logger = logging.getLogger(__name__)


class DatacenterNetwork:
    """
    数据中心仿真

    典型用法::

        net = DatacenterNetwork(DatacenterConfig())
        net.place_vm(0, net.topology.hosts()[0].host_id, mips=250)
        net.place_vm(1, net.topology.hosts()[5].host_id, mips=250)
        net.send(0, 1, size=1500)
        net.run()
        net.report().print_summary()
    """

    def __init__(self, config: Optional[DatacenterConfig] = None,
                 logfile: Optional[str] = None, sample_period: SimTime = 1.0,
                 monitoring: bool = True):
        """
        Args:
            config: 仿真配置（默认最小三层树）
            logfile: 结构化日志文件路径，为空时不写记录
            sample_period: 交换机采样日志的周期
            monitoring: 是否启动周期性过载监控
        """
        self._config = config or DatacenterConfig()
        self._config.validate()
        sim = self._config.simulation

        self._eventlist = EventList(sim.simulation_time)
        self._placement = VmPlacement()
        self._topology = DatacenterTopology.from_config(self._config, self._eventlist, self._placement)

        self._logfile: Optional[Logfile] = None
        migration_logger = MigrationLogger()
        if logfile:
            self._logfile = Logfile(logfile, self._eventlist)
            self._logfile.addLogger(migration_logger)
            for switch in self._topology.switches():
                self._logfile.writeName(switch)
                switch.add_logger(self._logfile, sample_period)

        static = StaticThreshold(self._config.static_threshold)
        trigger = MigrationTrigger(
            MinimumUtilizationSelection(self._placement),
            FirstFitFallback(self._placement, static.threshold),
        )
        self._monitor = OverloadMonitor(
            self._eventlist, self._topology, self._placement, trigger,
            detector=InterQuartileRangeDetector(sim.min_history_samples),
            static_threshold=static,
            safety_parameter=self._config.safety_parameter,
            interval=sim.monitoring_interval,
            migration_logger=migration_logger,
            dynamic_threshold=self._config.threshold_policy == ThresholdPolicy.IQR,
        )
        if monitoring:
            self._monitor.start()

    @property
    def config(self) -> DatacenterConfig:
        return self._config

    @property
    def eventlist(self) -> EventList:
        return self._eventlist

    @property
    def topology(self) -> DatacenterTopology:
        return self._topology

    @property
    def placement(self) -> VmPlacement:
        return self._placement

    @property
    def monitor(self) -> OverloadMonitor:
        return self._monitor

    def place_vm(self, vm_id: int, host_id: int, mips: float = 0.0) -> None:
        self._topology.get_host(host_id)
        self._placement.place(vm_id, host_id, mips)

    def send(self, sender_vm_id: int, receiver_vm_id: int, size: float) -> NetworkPacket:
        """Create a packet and hand it to the sender VM's host now."""
        host = self._topology.get_host(self._placement.host_id_for_vm(sender_vm_id))
        packet = NetworkPacket(sender_vm_id, receiver_vm_id, size,
                               self._eventlist.now(), sender_host_id=host.host_id)
        host.send_packet(packet)
        return packet

    def record_utilization(self, host_id: int, utilization: float) -> None:
        self._topology.get_host(host_id).record_utilization(utilization)

    def run(self, until: Optional[SimTime] = None) -> int:
        """
        运行仿真直到没有事件或到达 until

        Returns:
            执行的事件数量
        """
        processed = self._eventlist.run(until)
        logger.info("simulation stopped at %s after %d events", self._eventlist.now(), processed)
        return processed

    def get_sim_time(self) -> SimTime:
        return self._eventlist.now()

    def get_stats(self) -> dict:
        return {
            'sim_time': self.get_sim_time(),
            'pending_events': self._eventlist.pending_count(),
            'hosts': len(self._topology.hosts()),
            'switches': len(self._topology.switches()),
            'vms': len(self._placement),
            'migrations': self._placement.migration_count(),
        }

    def report(self) -> SimulationReport:
        return SimulationReport.from_run(self._topology, self._monitor)

    def close(self) -> None:
        if self._logfile:
            self._logfile.close()
            self._logfile = None
