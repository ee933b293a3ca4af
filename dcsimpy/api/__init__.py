"""
API - Simulation Interface

- datacenter_network.py: 组装并运行一次仿真
- config_parser.py: 配置解析器
- report.py: 仿真结果统计
"""

from .config_parser import DatacenterConfig, SwitchConfig, ThresholdPolicy
from .datacenter_network import DatacenterNetwork
from .report import SimulationReport

__all__ = [
    'DatacenterConfig',
    'SwitchConfig',
    'ThresholdPolicy',
    'DatacenterNetwork',
    'SimulationReport',
]
