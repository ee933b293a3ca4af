"""
DatacenterConfig - Configuration Parser

功能: 解析和管理数据中心仿真的配置参数

主要类:
- ThresholdPolicy: 过载阈值策略
- SwitchConfig: 单个层级的交换机参数
- DatacenterConfig: 完整的仿真配置

配置对应关系:
- 拓扑规模 -> root_switches / aggregate_switches / edge_switches_per_aggregate / hosts_per_edge
- 交换机参数 -> root / aggregate / edge
- 上行链路选择 -> uplink_policy
- 迁移阈值 -> threshold_policy / safety_parameter / static_threshold
- 仿真参数 -> simulation
"""

from dataclasses import asdict, dataclass, field, fields
from enum import Enum
from typing import Any, Dict
import json

from ..core.config import (
    DEFAULT_SAFETY_PARAMETER, DEFAULT_STATIC_THRESHOLD, SimTime, SimulationConfig,
)
from ..core.errors import ConfigError
from ..datacenter.constants import LEVEL_DEFAULTS, SwitchLevel
from ..datacenter.uplink_selection import UplinkPolicy


class ThresholdPolicy(Enum):
    """过载阈值策略枚举"""
    IQR = "iqr"          # 1 - s * IQR，历史不足时退回静态阈值
    STATIC = "static"    # 始终使用静态阈值


@dataclass
class SwitchConfig:
    """一个层级的交换机参数"""
    ports: int
    uplink_bandwidth: float
    downlink_bandwidth: float
    switching_delay: SimTime

    @classmethod
    def defaults(cls, level: SwitchLevel) -> 'SwitchConfig':
        return cls(**LEVEL_DEFAULTS[level])

    def validate(self, level: SwitchLevel) -> None:
        name = level.name.lower()
        if self.ports <= 0:
            raise ConfigError(f"{name}.ports must be positive, got {self.ports}")
        if self.downlink_bandwidth <= 0:
            raise ConfigError(f"{name}.downlink_bandwidth must be positive")
        if level != SwitchLevel.ROOT and self.uplink_bandwidth <= 0:
            raise ConfigError(f"{name}.uplink_bandwidth must be positive")
        if self.switching_delay < 0:
            raise ConfigError(f"{name}.switching_delay cannot be negative")


@dataclass
class DatacenterConfig:
    """
    数据中心仿真配置

    默认是一个最小的三层树：1 个根交换机、1 个汇聚交换机、
    2 个边缘交换机、每个边缘交换机 4 台主机
    """

    # 拓扑配置
    root_switches: int = 1
    aggregate_switches: int = 1
    edge_switches_per_aggregate: int = 2
    hosts_per_edge: int = 4
    host_mips: float = 1000.0

    # 交换机配置
    root: SwitchConfig = field(default_factory=lambda: SwitchConfig.defaults(SwitchLevel.ROOT))
    aggregate: SwitchConfig = field(default_factory=lambda: SwitchConfig.defaults(SwitchLevel.AGGREGATE))
    edge: SwitchConfig = field(default_factory=lambda: SwitchConfig.defaults(SwitchLevel.EDGE))

    # 路由配置
    uplink_policy: UplinkPolicy = UplinkPolicy.FIRST
    hash_salt: int = 0

    # 迁移配置
    threshold_policy: ThresholdPolicy = ThresholdPolicy.IQR
    safety_parameter: float = DEFAULT_SAFETY_PARAMETER
    static_threshold: float = DEFAULT_STATIC_THRESHOLD

    # 仿真配置
    simulation: SimulationConfig = field(default_factory=SimulationConfig)

    def switch_config(self, level: SwitchLevel) -> SwitchConfig:
        return {
            SwitchLevel.ROOT: self.root,
            SwitchLevel.AGGREGATE: self.aggregate,
            SwitchLevel.EDGE: self.edge,
        }[SwitchLevel(level)]

    @property
    def host_count(self) -> int:
        return self.aggregate_switches * self.edge_switches_per_aggregate * self.hosts_per_edge

    def to_dict(self) -> Dict[str, Any]:
        """
        将配置转换为字典

        Returns:
            配置字典（枚举转换为字符串值）
        """
        return {
            'root_switches': self.root_switches,
            'aggregate_switches': self.aggregate_switches,
            'edge_switches_per_aggregate': self.edge_switches_per_aggregate,
            'hosts_per_edge': self.hosts_per_edge,
            'host_mips': self.host_mips,
            'root': asdict(self.root),
            'aggregate': asdict(self.aggregate),
            'edge': asdict(self.edge),
            'uplink_policy': self.uplink_policy.value,
            'hash_salt': self.hash_salt,
            'threshold_policy': self.threshold_policy.value,
            'safety_parameter': self.safety_parameter,
            'static_threshold': self.static_threshold,
            'simulation': self.simulation.to_dict(),
        }

    @classmethod
    def from_dict(cls, config_dict: Dict[str, Any]) -> 'DatacenterConfig':
        """
        从字典创建配置

        交换机参数可以只给出部分字段，其余取该层级的默认值

        Raises:
            ConfigError: 未知字段或无效的枚举值
        """
        config_dict = dict(config_dict)
        known = {f.name for f in fields(cls)}
        unknown = set(config_dict) - known
        if unknown:
            raise ConfigError(f"unknown configuration keys: {sorted(unknown)}")

        try:
            if 'uplink_policy' in config_dict:
                config_dict['uplink_policy'] = UplinkPolicy(config_dict['uplink_policy'])
            if 'threshold_policy' in config_dict:
                config_dict['threshold_policy'] = ThresholdPolicy(config_dict['threshold_policy'])
        except ValueError as err:
            raise ConfigError(str(err)) from err

        for key, level in (('root', SwitchLevel.ROOT),
                           ('aggregate', SwitchLevel.AGGREGATE),
                           ('edge', SwitchLevel.EDGE)):
            if key in config_dict:
                params = dict(LEVEL_DEFAULTS[level])
                overrides = config_dict[key]
                bad = set(overrides) - set(params)
                if bad:
                    raise ConfigError(f"unknown {key} switch parameters: {sorted(bad)}")
                params.update(overrides)
                config_dict[key] = SwitchConfig(**params)

        if 'simulation' in config_dict:
            sim = config_dict['simulation']
            bad = set(sim) - {f.name for f in fields(SimulationConfig)}
            if bad:
                raise ConfigError(f"unknown simulation parameters: {sorted(bad)}")
            config_dict['simulation'] = SimulationConfig(**sim)

        return cls(**config_dict)

    @classmethod
    def from_json_file(cls, path: str) -> 'DatacenterConfig':
        with open(path, 'r', encoding='utf-8') as f:
            return cls.from_dict(json.load(f))

    def validate(self) -> None:
        """
        验证配置参数的有效性

        Raises:
            ConfigError: 任何参数无效时
        """
        for name in ('root_switches', 'aggregate_switches',
                     'edge_switches_per_aggregate', 'hosts_per_edge'):
            if getattr(self, name) <= 0:
                raise ConfigError(f"{name} must be positive, got {getattr(self, name)}")
        if self.host_mips <= 0:
            raise ConfigError(f"host_mips must be positive, got {self.host_mips}")

        for level in SwitchLevel:
            self.switch_config(level).validate(level)

        # 端口数限制下游连接数
        if self.aggregate_switches > self.root.ports:
            raise ConfigError(
                f"{self.aggregate_switches} aggregate switches do not fit in {self.root.ports} root ports"
            )
        if self.edge_switches_per_aggregate > self.aggregate.ports:
            raise ConfigError(
                f"{self.edge_switches_per_aggregate} edge switches do not fit in "
                f"{self.aggregate.ports} aggregate ports"
            )
        if self.hosts_per_edge > self.edge.ports:
            raise ConfigError(f"{self.hosts_per_edge} hosts do not fit in {self.edge.ports} edge ports")

        if self.safety_parameter < 0:
            raise ConfigError(f"safety_parameter cannot be negative, got {self.safety_parameter}")
        if not 0.0 < self.static_threshold <= 1.0:
            raise ConfigError(f"static_threshold must be in (0, 1], got {self.static_threshold}")

        self.simulation.validate()
