"""
Datacenter network components

Tree-shaped datacenter network: switches at three levels, hosts under the
edge switches, and the VM placement map routing resolves receivers against.
"""

from .constants import LEVEL_DEFAULTS, LinkDirection, SwitchLevel
from .delay_model import batch_size, transmission_delay
from .host import HostRegistry, NetworkHost
from .placement import VmHostOracle, VmPlacement
from .uplink_selection import (
    FirstUplinkSelector, HashUplinkSelector, LoadAwareUplinkSelector,
    RoundRobinUplinkSelector, UplinkPolicy, UplinkSelector, make_uplink_selector,
)
from .switch_node import SwitchNode, aggregate_switch, edge_switch, make_switch, root_switch
from .topology import DatacenterTopology

__all__ = [
    'LEVEL_DEFAULTS', 'LinkDirection', 'SwitchLevel',
    'batch_size', 'transmission_delay',
    'HostRegistry', 'NetworkHost',
    'VmHostOracle', 'VmPlacement',
    'FirstUplinkSelector', 'HashUplinkSelector', 'LoadAwareUplinkSelector',
    'RoundRobinUplinkSelector', 'UplinkPolicy', 'UplinkSelector', 'make_uplink_selector',
    'SwitchNode', 'aggregate_switch', 'edge_switch', 'make_switch', 'root_switch',
    'DatacenterTopology',
]
