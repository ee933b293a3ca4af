"""
Three-tier datacenter topology

Root switches at the top, aggregate switches under every root, edge switches
under one aggregate each, and hosts under one edge switch each:

    root_0 ... root_R
       |  \\  /  |
     agg_0 ... agg_A
      / \\
  edge_0_0 edge_0_1 ...
    |  |
  host host ...

The topology also acts as the host registry used by non-leaf routing and as
the utilization-history provider read by the overload monitor.
"""

from dataclasses import asdict
from typing import Dict, List, Optional, TYPE_CHECKING
import logging

from ..core.errors import TopologyError
from ..core.eventlist import EventList
from ..power.utilization_history import UtilizationHistoryProvider
from .constants import SwitchLevel
from .host import HostRegistry, NetworkHost
from .placement import VmPlacement
from .switch_node import SwitchNode, make_switch
from .uplink_selection import make_uplink_selector

if TYPE_CHECKING:
    from ..api.config_parser import DatacenterConfig

logger = logging.getLogger(__name__)


class DatacenterTopology(HostRegistry, UtilizationHistoryProvider):
    """Switches and hosts of one datacenter, indexed by id."""

    def __init__(self, eventlist: EventList, placement: Optional[VmPlacement] = None):
        self._eventlist = eventlist
        self._placement = placement if placement is not None else VmPlacement()
        self._hosts: Dict[int, NetworkHost] = {}
        self._switches: Dict[int, SwitchNode] = {}

    @property
    def eventlist(self) -> EventList:
        return self._eventlist

    @property
    def placement(self) -> VmPlacement:
        return self._placement

    # Registration

    def add_host(self, host: NetworkHost, edge: SwitchNode) -> NetworkHost:
        edge.connect_host(host)
        self._hosts[host.host_id] = host
        return host

    def add_switch(self, switch: SwitchNode, uplinks: Optional[List[SwitchNode]] = None) -> SwitchNode:
        for upper in uplinks or []:
            switch.connect_uplink(upper)
        self._switches[switch.get_id()] = switch
        return switch

    # HostRegistry / UtilizationHistoryProvider

    def get_host(self, host_id: int) -> NetworkHost:
        try:
            return self._hosts[host_id]
        except KeyError:
            raise TopologyError(f"no host with id {host_id}") from None

    def utilization_history(self, host_id: int):
        return self.get_host(host_id).history.snapshot()

    # Queries

    def hosts(self) -> List[NetworkHost]:
        return list(self._hosts.values())

    def switches(self, level: Optional[SwitchLevel] = None) -> List[SwitchNode]:
        if level is None:
            return list(self._switches.values())
        return [s for s in self._switches.values() if s.level == level]

    def switch(self, switch_id: int) -> SwitchNode:
        try:
            return self._switches[switch_id]
        except KeyError:
            raise TopologyError(f"no switch with id {switch_id}") from None

    def root_switches(self) -> List[SwitchNode]:
        return self.switches(SwitchLevel.ROOT)

    def aggregate_switches(self) -> List[SwitchNode]:
        return self.switches(SwitchLevel.AGGREGATE)

    def edge_switches(self) -> List[SwitchNode]:
        return self.switches(SwitchLevel.EDGE)

    def edge_switch_of(self, host_id: int) -> SwitchNode:
        edge_id = self.get_host(host_id).edge_switch_id
        if edge_id is None:
            raise TopologyError(f"host {host_id} is not connected to an edge switch")
        return self.switch(edge_id)

    # Construction

    @classmethod
    def from_config(cls, config: 'DatacenterConfig', eventlist: EventList,
                    placement: Optional[VmPlacement] = None) -> 'DatacenterTopology':
        """
        Build the whole tree described by ``config``.

        Every aggregate switch is connected to every root switch; each edge
        switch has a single aggregate uplink.

        Raises:
            TopologyError: A switch runs out of ports
        """
        topo = cls(eventlist, placement)
        tick_delay = config.simulation.forward_tick_delay

        def new_switch(name: str, level: SwitchLevel, uplinks: List[SwitchNode]) -> SwitchNode:
            params = asdict(config.switch_config(level))
            switch = make_switch(
                eventlist, name, level, topo.placement, topo,
                uplink_selector=make_uplink_selector(config.uplink_policy, config.hash_salt),
                forward_tick_delay=tick_delay,
                **params,
            )
            return topo.add_switch(switch, uplinks)

        roots = [new_switch(f"root_{r}", SwitchLevel.ROOT, [])
                 for r in range(config.root_switches)]

        host_index = 0
        for a in range(config.aggregate_switches):
            agg = new_switch(f"agg_{a}", SwitchLevel.AGGREGATE, roots)
            for e in range(config.edge_switches_per_aggregate):
                edge = new_switch(f"edge_{a}_{e}", SwitchLevel.EDGE, [agg])
                for _ in range(config.hosts_per_edge):
                    host = NetworkHost(eventlist, f"host_{host_index}", config.host_mips,
                                       config.simulation.history_length)
                    topo.add_host(host, edge)
                    host_index += 1

        logger.info("built topology: %d root, %d aggregate, %d edge switches, %d hosts",
                    len(roots), len(topo.aggregate_switches()),
                    len(topo.edge_switches()), len(topo._hosts))
        return topo

    def __len__(self) -> int:
        return len(self._hosts) + len(self._switches)
