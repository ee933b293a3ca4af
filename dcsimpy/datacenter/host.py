"""
Host class for data center networks

A host sends its packets to the edge switch it is connected to and receives
the packets the edge switch delivers to it.
"""

from abc import ABC, abstractmethod
from typing import List, Optional
import logging

from ..core.config import DEFAULT_HISTORY_LENGTH
from ..core.eventlist import EventKind, EventList, SimEntity, SimEvent
from ..core.errors import TopologyError
from ..packets.network_packet import NetworkPacket
from ..power.utilization_history import UtilizationHistory

logger = logging.getLogger(__name__)


class NetworkHost(SimEntity):
    """
    Represents a host (server) in the data center network

    It has a compute capacity in MIPS, a utilization history read by the
    overload monitor, and exactly one edge switch.
    """

    def __init__(self, eventlist: EventList, name: str, mips: float = 1000.0,
                 history_length: int = DEFAULT_HISTORY_LENGTH):
        """
        Args:
            eventlist: Event list the host registers with
            name: Name/identifier for the host
            mips: Total compute capacity
            history_length: Number of utilization samples kept
        """
        super().__init__(eventlist, name)
        if mips <= 0:
            raise ValueError(f"host mips must be positive, got {mips}")
        self._mips = mips
        self._edge_switch_id: Optional[int] = None
        self.history = UtilizationHistory(history_length)
        self._received: List[NetworkPacket] = []
        self._sent = 0

    @property
    def host_id(self) -> int:
        return self.get_id()

    @property
    def mips(self) -> float:
        return self._mips

    @property
    def edge_switch_id(self) -> Optional[int]:
        return self._edge_switch_id

    def connect_edge_switch(self, switch_id: int) -> None:
        if self._edge_switch_id is not None and self._edge_switch_id != switch_id:
            raise TopologyError(
                f"{self.str()} is already connected to edge switch {self._edge_switch_id}"
            )
        self._edge_switch_id = switch_id

    def record_utilization(self, utilization: float) -> None:
        """Append a utilization sample taken now."""
        self.history.append(self.eventlist().now(), utilization)

    def current_utilization(self) -> float:
        latest = self.history.latest()
        return latest if latest is not None else 0.0

    def send_packet(self, packet: NetworkPacket) -> None:
        """Hand a packet to the edge switch (the host NIC itself adds no delay)."""
        if self._edge_switch_id is None:
            raise TopologyError(f"{self.str()} is not connected to an edge switch")
        packet.send_time = self.eventlist().now()
        self._sent += 1
        self.schedule(self._edge_switch_id, 0.0, EventKind.NETWORK_EVENT_UP, packet)

    def process_event(self, event: SimEvent) -> None:
        if event.kind != EventKind.NETWORK_EVENT_HOST:
            raise ValueError(f"{self.str()} cannot handle {event.kind.name}")
        packet: NetworkPacket = event.payload
        packet.receive_time = self.eventlist().now()
        self._received.append(packet)
        logger.debug("%s received %s at %s", self.str(), packet, packet.receive_time)

    def received_packets(self) -> List[NetworkPacket]:
        return list(self._received)

    def sent_count(self) -> int:
        return self._sent

    def __str__(self) -> str:
        return f"Host({self._name})"

    def __repr__(self) -> str:
        return f"Host(name={self._name}, id={self.get_id()}, edge={self._edge_switch_id})"


class HostRegistry(ABC):
    """Host lookup by id."""

    @abstractmethod
    def get_host(self, host_id: int) -> NetworkHost:
        pass
