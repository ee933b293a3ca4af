"""
Transmission delay model for switch links.

Packets forwarded together on one link share it: the whole batch is billed
as one transfer, so every packet in the batch gets the same delay.
"""

from typing import Sequence

from ..core.config import SimTime
from ..packets.network_packet import NetworkPacket


def batch_size(packets: Sequence[NetworkPacket]) -> float:
    """Total payload size of a batch."""
    return sum(pkt.size for pkt in packets)


def transmission_delay(packets: Sequence[NetworkPacket], bandwidth: float,
                       switching_delay: SimTime) -> SimTime:
    """
    Delay for a batch of packets sent over one link.

    delay = switching_delay + sum(packet sizes) / bandwidth

    Args:
        packets: Packets queued for the same destination in one forward tick
        bandwidth: Link bandwidth, in size units per simulated second
        switching_delay: Fixed per-hop latency of the switch

    Raises:
        ValueError: Empty batch or non-positive bandwidth
    """
    if not packets:
        raise ValueError("cannot compute the transmission delay of an empty batch")
    if bandwidth <= 0:
        raise ValueError(f"link bandwidth must be positive, got {bandwidth}")
    return switching_delay + batch_size(packets) / bandwidth
