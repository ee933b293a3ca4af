"""
SimulationReport - 仿真结果统计

功能: 汇总已投递的数据包、交换机计数和迁移决策，
写出 CSV 文件并在终端打印摘要表格

主要类:
- SimulationReport
"""

from typing import Dict, Iterable, List, Optional, TYPE_CHECKING
import os

import pandas as pd
from rich.console import Console
from rich.table import Table

from ..packets.network_packet import NetworkPacket

if TYPE_CHECKING:
    from ..datacenter.switch_node import SwitchNode
    from ..datacenter.topology import DatacenterTopology
    from ..power.migration_trigger import MigrationDecision
    from ..power.monitor import OverloadMonitor

PACKET_COLUMNS = [
    'packet_id', 'sender_vm_id', 'receiver_vm_id', 'sender_host_id', 'receiver_host_id',
    'size', 'creation_time', 'send_time', 'receive_time', 'latency',
]
SWITCH_COLUMNS = [
    'switch_id', 'name', 'level', 'packets_received', 'packets_forwarded',
    'bytes_forwarded', 'local_deliveries',
]
DECISION_COLUMNS = [
    'time', 'host_id', 'utilization', 'threshold', 'overloaded', 'migrations',
    'used_fallback', 'static_fallback',
]


class SimulationReport:
    """
    仿真报告

    所有表格都是 pandas DataFrame；write_csv 把它们写到一个目录下
    """

    def __init__(self, packets: Iterable[NetworkPacket] = (),
                 switches: Iterable['SwitchNode'] = (),
                 decisions: Iterable['MigrationDecision'] = ()):
        self._packets = list(packets)
        self._switches = list(switches)
        self._decisions = list(decisions)

    @classmethod
    def from_run(cls, topology: 'DatacenterTopology',
                 monitor: Optional['OverloadMonitor'] = None) -> 'SimulationReport':
        packets = [pkt for host in topology.hosts() for pkt in host.received_packets()]
        decisions = monitor.decisions() if monitor else []
        return cls(packets, topology.switches(), decisions)

    def packets_frame(self) -> pd.DataFrame:
        rows = [
            {
                'packet_id': pkt.packet_id,
                'sender_vm_id': pkt.sender_vm_id,
                'receiver_vm_id': pkt.receiver_vm_id,
                'sender_host_id': pkt.sender_host_id,
                'receiver_host_id': pkt.receiver_host_id,
                'size': pkt.size,
                'creation_time': pkt.creation_time,
                'send_time': pkt.send_time,
                'receive_time': pkt.receive_time,
                'latency': pkt.latency(),
            }
            for pkt in self._packets
        ]
        return pd.DataFrame(rows, columns=PACKET_COLUMNS)

    def switches_frame(self) -> pd.DataFrame:
        rows = [
            {
                'switch_id': sw.get_id(),
                'name': sw.str(),
                'level': sw.level.name,
                'packets_received': sw.get_packets_received(),
                'packets_forwarded': sw.get_packets_forwarded(),
                'bytes_forwarded': sw.get_bytes_forwarded(),
                'local_deliveries': sw.get_local_deliveries(),
            }
            for sw in self._switches
        ]
        return pd.DataFrame(rows, columns=SWITCH_COLUMNS)

    def decisions_frame(self) -> pd.DataFrame:
        rows = [
            {
                'time': d.time,
                'host_id': d.host_id,
                'utilization': d.utilization,
                'threshold': d.threshold,
                'overloaded': d.overloaded,
                'migrations': len(d.migrations),
                'used_fallback': d.used_fallback,
                'static_fallback': d.static_fallback,
            }
            for d in self._decisions
        ]
        return pd.DataFrame(rows, columns=DECISION_COLUMNS)

    def summary(self) -> Dict[str, float]:
        packets = self.packets_frame()
        decisions = self.decisions_frame()
        latency = pd.to_numeric(packets['latency'], errors='coerce').dropna()
        return {
            'packets_delivered': len(packets),
            'bytes_delivered': float(packets['size'].sum()) if len(packets) else 0.0,
            'mean_latency': float(latency.mean()) if len(latency) else 0.0,
            'max_latency': float(latency.max()) if len(latency) else 0.0,
            'monitor_decisions': len(decisions),
            'overloaded_decisions': int(decisions['overloaded'].sum()) if len(decisions) else 0,
            'migrations': int(decisions['migrations'].sum()) if len(decisions) else 0,
        }

    def write_csv(self, path: str, prefix: str = "") -> List[str]:
        """
        写出 packets.csv、switches.csv 和 migrations.csv

        Returns:
            写出的文件路径
        """
        os.makedirs(path, exist_ok=True)
        written = []
        for name, frame in (('packets', self.packets_frame()),
                            ('switches', self.switches_frame()),
                            ('migrations', self.decisions_frame())):
            file_path = os.path.join(path, f"{prefix}{name}.csv")
            frame.to_csv(file_path, index=False)
            written.append(file_path)
        return written

    def summary_table(self) -> Table:
        table = Table(title="Simulation summary")
        table.add_column("metric")
        table.add_column("value", justify="right")
        for key, value in self.summary().items():
            table.add_row(key, f"{value:.6f}" if isinstance(value, float) else str(value))
        return table

    def print_summary(self, console: Optional[Console] = None) -> None:
        (console or Console()).print(self.summary_table())
