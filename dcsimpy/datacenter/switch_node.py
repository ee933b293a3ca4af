"""
Switch node for tree-shaped datacenter networks.

One SwitchNode type serves every level of the tree. The level decides the
differences: an edge switch (the leaf level) has hosts below it, aggregate and
root switches have switches below them. Packets are never forwarded one by
one; they are queued per destination and sent as a batch on the next forward
tick, all packets of a batch paying the same transmission delay.
"""

from typing import Dict, List, Optional
import logging

from ..core.config import DEFAULT_FORWARD_TICK_DELAY, SimTime
from ..core.errors import TopologyError, UnresolvableDestinationError
from ..core.eventlist import EventKind, EventList, SimEntity, SimEvent
from ..core.logger.switch import SwitchLogger, SwitchLoggerFactory
from ..packets.network_packet import NetworkPacket
from ..queues.packet_queue import PacketQueueMap
from .constants import LEVEL_DEFAULTS, LinkDirection, SwitchLevel
from .delay_model import batch_size, transmission_delay
from .host import HostRegistry, NetworkHost
from .placement import VmHostOracle
from .uplink_selection import FirstUplinkSelector, UplinkSelector

logger = logging.getLogger(__name__)


class SwitchNode(SimEntity):
    """
    A switch at one level of the topology.

    Handles three events:
    - NETWORK_EVENT_UP: a packet arriving from below (a host or a lower switch)
    - NETWORK_EVENT_DOWN: a packet arriving from an upper switch
    - NETWORK_EVENT_SEND: the forward tick, which sends every queued batch
    """

    def __init__(
        self,
        eventlist: EventList,
        name: str,
        level: SwitchLevel,
        placement: VmHostOracle,
        hosts: HostRegistry,
        ports: int,
        uplink_bandwidth: float,
        downlink_bandwidth: float,
        switching_delay: SimTime,
        uplink_selector: Optional[UplinkSelector] = None,
        forward_tick_delay: SimTime = DEFAULT_FORWARD_TICK_DELAY,
    ):
        """
        Args:
            eventlist: Event list used to schedule deliveries
            name: Switch name
            level: Topology level (ROOT, AGGREGATE or EDGE)
            placement: Resolves receiver VMs to hosts
            hosts: Host registry, used to find the edge switch of a host
            ports: Maximum number of downstream connections
            uplink_bandwidth: Bandwidth toward the root
            downlink_bandwidth: Bandwidth toward the hosts
            switching_delay: Fixed latency added to every batch
            uplink_selector: Uplink choice when ascending (first uplink by default)
            forward_tick_delay: Delay between a packet intake and the forward tick
        """
        super().__init__(eventlist, name)
        if ports <= 0:
            raise TopologyError(f"{name}: a switch needs at least one port, got {ports}")
        if switching_delay < 0:
            raise ValueError(f"{name}: switching delay cannot be negative")

        self._level = SwitchLevel(level)
        self._placement = placement
        self._host_registry = hosts
        self._ports = ports
        self._uplink_bandwidth = uplink_bandwidth
        self._downlink_bandwidth = downlink_bandwidth
        self._switching_delay = switching_delay
        self._uplink_selector = uplink_selector or FirstUplinkSelector()
        self._forward_tick_delay = forward_tick_delay

        self._uplink_switches: List['SwitchNode'] = []
        self._downlink_switches: List['SwitchNode'] = []
        self._hosts: Dict[int, NetworkHost] = {}

        # destination id -> packets waiting for the next forward tick
        self._packet_to_host = PacketQueueMap()
        self._packet_to_uplink = PacketQueueMap()
        self._packet_to_downlink = PacketQueueMap()
        self._tick_pending = False

        self._packets_received = 0
        self._packets_forwarded = 0
        self._bytes_forwarded = 0.0
        self._local_deliveries = 0
        self._switch_logger: Optional[SwitchLogger] = None

    # Topology

    @property
    def level(self) -> SwitchLevel:
        return self._level

    @property
    def ports(self) -> int:
        return self._ports

    @property
    def uplink_bandwidth(self) -> float:
        return self._uplink_bandwidth

    @property
    def downlink_bandwidth(self) -> float:
        return self._downlink_bandwidth

    @property
    def switching_delay(self) -> SimTime:
        return self._switching_delay

    @property
    def uplink_selector(self) -> UplinkSelector:
        return self._uplink_selector

    def set_uplink_selector(self, selector: UplinkSelector) -> None:
        self._uplink_selector = selector

    def is_leaf(self) -> bool:
        """Edge switches have hosts, not switches, below them."""
        return self._level == SwitchLevel.EDGE

    def connect_host(self, host: NetworkHost) -> None:
        if not self.is_leaf():
            raise TopologyError(f"{self.str()} is a {self._level.name} switch; only edge switches connect hosts")
        if host.host_id in self._hosts:
            return
        if len(self._hosts) >= self._ports:
            raise TopologyError(f"{self.str()} has no free port for {host.str()} ({self._ports} ports)")
        host.connect_edge_switch(self.get_id())
        self._hosts[host.host_id] = host

    def connect_uplink(self, upper: 'SwitchNode') -> None:
        """Wire this switch under ``upper`` (one level up)."""
        if upper.level != self._level - 1:
            raise TopologyError(
                f"cannot connect {self.str()} ({self._level.name}) under {upper.str()} ({upper.level.name})"
            )
        if upper in self._uplink_switches:
            return
        upper._add_downlink(self)
        self._uplink_switches.append(upper)

    def _add_downlink(self, lower: 'SwitchNode') -> None:
        if len(self._downlink_switches) >= self._ports:
            raise TopologyError(f"{self.str()} has no free port for {lower.str()} ({self._ports} ports)")
        self._downlink_switches.append(lower)

    def uplink_switches(self) -> List['SwitchNode']:
        return list(self._uplink_switches)

    def downlink_switches(self) -> List['SwitchNode']:
        return list(self._downlink_switches)

    def hosts(self) -> List[NetworkHost]:
        return list(self._hosts.values())

    def has_host(self, host_id: int) -> bool:
        return host_id in self._hosts

    def reaches_edge(self, edge_switch_id: int) -> bool:
        """True if ``edge_switch_id`` is this switch or lies below it."""
        if self.get_id() == edge_switch_id:
            return True
        return any(d.reaches_edge(edge_switch_id) for d in self._downlink_switches)

    def downlink_toward(self, host_id: int) -> Optional['SwitchNode']:
        """The downlink switch whose subtree holds ``host_id``, if any."""
        edge_id = self._host_registry.get_host(host_id).edge_switch_id
        if edge_id is None:
            return None
        for lower in self._downlink_switches:
            if lower.reaches_edge(edge_id):
                return lower
        return None

    # Routing

    def resolve_destination(self, packet: NetworkPacket) -> int:
        """Resolve the receiver VM to its host and stamp it on the packet."""
        try:
            host_id = self._placement.host_id_for_vm(packet.receiver_vm_id)
        except UnresolvableDestinationError as err:
            logger.error("%s: cannot route %s: %s", self.str(), packet, err)
            raise UnresolvableDestinationError(packet.receiver_vm_id, self.str()) from err
        packet.receiver_host_id = host_id
        return host_id

    def process_event(self, event: SimEvent) -> None:
        if event.kind == EventKind.NETWORK_EVENT_UP:
            self.process_packet_up(event.payload)
        elif event.kind == EventKind.NETWORK_EVENT_DOWN:
            self.process_packet_down(event.payload)
        elif event.kind == EventKind.NETWORK_EVENT_SEND:
            self.process_packet_forward()
        else:
            raise ValueError(f"{self.str()} cannot handle {event.kind.name}")

    def process_packet_down(self, packet: NetworkPacket) -> None:
        """
        A packet arriving from an upper switch.

        At the edge the receiver host is taken to be one of ours; there is no
        local check on this path.
        """
        self._on_arrival(packet)
        host_id = self.resolve_destination(packet)

        if self.is_leaf():
            self._packet_to_host.enqueue(host_id, packet)
        else:
            lower = self.downlink_toward(host_id)
            if lower is None:
                raise TopologyError(f"{self.str()}: no downlink leads to host {host_id}")
            self._packet_to_downlink.enqueue(lower.get_id(), packet)

        self._schedule_forward_tick()

    def process_packet_up(self, packet: NetworkPacket) -> None:
        """
        A packet arriving from below.

        It goes back down if the receiver host is below this switch, otherwise
        it ascends through the uplink chosen by the uplink selector.
        """
        self._on_arrival(packet)
        host_id = self.resolve_destination(packet)

        if self.is_leaf():
            if host_id in self._hosts:
                self._local_deliveries += 1
                self._log(SwitchLogger.SwitchEvent.ROUTE_LOCAL, packet)
                self._packet_to_host.enqueue(host_id, packet)
                self._schedule_forward_tick()
                return
        else:
            lower = self.downlink_toward(host_id)
            if lower is not None:
                self._packet_to_downlink.enqueue(lower.get_id(), packet)
                self._schedule_forward_tick()
                return

        upper = self._uplink_selector.select(self, packet, self._uplink_switches)
        self._log(SwitchLogger.SwitchEvent.ROUTE_UP, packet)
        self._packet_to_uplink.enqueue(upper.get_id(), packet)
        self._schedule_forward_tick()

    def process_packet_forward(self) -> None:
        """Send every non-empty queue as one batch and clear it."""
        self._tick_pending = False
        self._forward_queues(self._packet_to_uplink, LinkDirection.UPLINK, EventKind.NETWORK_EVENT_UP)
        self._forward_queues(self._packet_to_host, LinkDirection.DOWNLINK, EventKind.NETWORK_EVENT_HOST)
        self._forward_queues(self._packet_to_downlink, LinkDirection.DOWNLINK, EventKind.NETWORK_EVENT_DOWN)

    def _forward_queues(self, queues: PacketQueueMap, direction: LinkDirection, kind: EventKind) -> None:
        bandwidth = self._bandwidth_for(direction)
        for destination_id in queues.pending():
            batch = queues.drain(destination_id)
            delay = transmission_delay(batch, bandwidth, self._switching_delay)
            for pkt in batch:
                self.schedule(destination_id, delay, kind, pkt)
                self._log(SwitchLogger.SwitchEvent.PKT_FORWARD, pkt)
            self._packets_forwarded += len(batch)
            self._bytes_forwarded += batch_size(batch)
            logger.debug("%s: %d packets to %d (%s) in %.6f",
                         self.str(), len(batch), destination_id, kind.name, delay)

    def _bandwidth_for(self, direction: LinkDirection) -> float:
        if direction == LinkDirection.UPLINK:
            return self._uplink_bandwidth
        return self._downlink_bandwidth

    def _schedule_forward_tick(self) -> None:
        if self._tick_pending:
            return
        self._tick_pending = True
        self.schedule(self.get_id(), self._forward_tick_delay, EventKind.NETWORK_EVENT_SEND)

    def _on_arrival(self, packet: NetworkPacket) -> None:
        self._packets_received += 1
        self._log(SwitchLogger.SwitchEvent.PKT_ARRIVE, packet)

    # Queues and statistics

    def host_queue(self, host_id: int):
        return self._packet_to_host.queue(host_id)

    def uplink_queue(self, switch_id: int):
        return self._packet_to_uplink.queue(switch_id)

    def downlink_queue(self, switch_id: int):
        return self._packet_to_downlink.queue(switch_id)

    def uplink_queued_bytes(self, switch_id: int) -> float:
        return self._packet_to_uplink.queued_bytes(switch_id)

    def queued_packets(self) -> int:
        return (self._packet_to_host.total_packets()
                + self._packet_to_uplink.total_packets()
                + self._packet_to_downlink.total_packets())

    def get_packets_received(self) -> int:
        return self._packets_received

    def get_packets_forwarded(self) -> int:
        return self._packets_forwarded

    def get_bytes_forwarded(self) -> float:
        return self._bytes_forwarded

    def get_local_deliveries(self) -> int:
        return self._local_deliveries

    # Logging

    def set_switch_logger(self, switch_logger: SwitchLogger) -> None:
        self._switch_logger = switch_logger

    def add_logger(self, logfile, sample_period: float) -> SwitchLogger:
        """Attach a sampling switch logger writing to ``logfile``."""
        factory = SwitchLoggerFactory(
            logfile,
            SwitchLoggerFactory.SwitchLoggerType.LOGGER_SAMPLING,
            self._eventlist,
        )
        factory.set_sample_period(sample_period)
        self._switch_logger = factory.create_switch_logger(self)
        return self._switch_logger

    def _log(self, ev, packet: NetworkPacket) -> None:
        if self._switch_logger:
            self._switch_logger.log_switch(self, ev, packet)

    def __str__(self) -> str:
        return f"SwitchNode({self._name}, {self._level.name})"


def make_switch(
    eventlist: EventList,
    name: str,
    level: SwitchLevel,
    placement: VmHostOracle,
    hosts: HostRegistry,
    uplink_selector: Optional[UplinkSelector] = None,
    forward_tick_delay: SimTime = DEFAULT_FORWARD_TICK_DELAY,
    **overrides,
) -> SwitchNode:
    """
    Build a switch with the default parameters of its level.

    ``overrides`` may set ports, uplink_bandwidth, downlink_bandwidth and
    switching_delay.
    """
    params = dict(LEVEL_DEFAULTS[SwitchLevel(level)])
    unknown = set(overrides) - set(params)
    if unknown:
        raise TypeError(f"unknown switch parameters: {sorted(unknown)}")
    params.update(overrides)
    return SwitchNode(eventlist, name, level, placement, hosts,
                      uplink_selector=uplink_selector,
                      forward_tick_delay=forward_tick_delay, **params)


def edge_switch(eventlist: EventList, name: str, placement: VmHostOracle,
                hosts: HostRegistry, **kwargs) -> SwitchNode:
    return make_switch(eventlist, name, SwitchLevel.EDGE, placement, hosts, **kwargs)


def aggregate_switch(eventlist: EventList, name: str, placement: VmHostOracle,
                     hosts: HostRegistry, **kwargs) -> SwitchNode:
    return make_switch(eventlist, name, SwitchLevel.AGGREGATE, placement, hosts, **kwargs)


def root_switch(eventlist: EventList, name: str, placement: VmHostOracle,
                hosts: HostRegistry, **kwargs) -> SwitchNode:
    return make_switch(eventlist, name, SwitchLevel.ROOT, placement, hosts, **kwargs)
