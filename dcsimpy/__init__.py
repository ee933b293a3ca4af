"""
dcsimpy - discrete-event simulation of datacenter networks

- core/: 事件调度、配置、异常和日志
- packets/: 网络数据包
- queues/: 按目的地分组的数据包队列
- datacenter/: 交换机、主机、拓扑和 VM 放置
- power/: 主机过载检测和 VM 迁移
- api/: 仿真组装、配置解析和结果统计
"""

__version__ = "0.1.0"

from .core import EventList, EventKind, SimulationConfig, SimulationError
from .packets import NetworkPacket
from .datacenter import DatacenterTopology, NetworkHost, SwitchLevel, SwitchNode, VmPlacement
from .power import InterQuartileRangeDetector, MigrationTrigger, OverloadMonitor
from .api import DatacenterConfig, DatacenterNetwork, SimulationReport

__all__ = [
    'EventList', 'EventKind', 'SimulationConfig', 'SimulationError',
    'NetworkPacket',
    'DatacenterTopology', 'NetworkHost', 'SwitchLevel', 'SwitchNode', 'VmPlacement',
    'InterQuartileRangeDetector', 'MigrationTrigger', 'OverloadMonitor',
    'DatacenterConfig', 'DatacenterNetwork', 'SimulationReport',
]
