"""
Simulation errors

功能: 定义仿真核心抛出的异常类型

主要类:
- SimulationError: 所有仿真异常的基类
- UnresolvableDestinationError: VM 没有对应的主机
- UnroutableUplinkError: 需要上行但交换机没有上行链路
- InsufficientHistoryError: 主机利用率历史样本不足
- TopologyError: 拓扑连接错误（端口耗尽、层级不匹配）
- ConfigError: 配置参数无效

None of these are retried: routing and threshold computation are deterministic
functions of the current state.
"""

from typing import Optional


class SimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class UnresolvableDestinationError(SimulationError):
    """A receiver VM id has no host in the placement map."""

    def __init__(self, vm_id: int, where: Optional[str] = None):
        self.vm_id = vm_id
        self.where = where
        msg = f"VM {vm_id} is not placed on any host"
        if where:
            msg += f" (while routing at {where})"
        super().__init__(msg)


class UnroutableUplinkError(SimulationError):
    """A packet has to ascend but the switch has no uplink switch configured."""

    def __init__(self, switch_name: str):
        self.switch_name = switch_name
        super().__init__(f"{switch_name} has no uplink switch to forward the packet to")


class InsufficientHistoryError(SimulationError):
    """Not enough utilization samples to compute a robust threshold measure."""

    def __init__(self, available: int, required: int):
        self.available = available
        self.required = required
        super().__init__(
            f"not enough host utilization history: {available} non-zero samples, "
            f"{required} required"
        )


class TopologyError(SimulationError):
    """Invalid wiring of switches and hosts."""


class ConfigError(SimulationError):
    """Invalid configuration value."""
