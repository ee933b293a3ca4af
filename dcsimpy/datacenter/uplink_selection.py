"""Uplink selection strategies for switches with more than one uplink."""

from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Sequence

from ..core.errors import UnroutableUplinkError
from ..packets.network_packet import NetworkPacket

if TYPE_CHECKING:
    from .switch_node import SwitchNode

MASK32 = 0xFFFFFFFF


class UplinkPolicy(Enum):
    """Uplink selection policies."""
    FIRST = "first"
    HASH = "hash"
    ROUND_ROBIN = "round_robin"
    LOAD_AWARE = "load_aware"


def freebsd_hash(target1: int, target2: int = 0, target3: int = 0) -> int:
    """FreeBSD (Bob Jenkins) mix hash over three 32-bit words."""
    a = (0x9e3779b9 + target1) & MASK32
    b = (0x9e3779b9 + target3) & MASK32
    c = target2 & MASK32

    a = (a - b - c) & MASK32; a ^= (c >> 13)
    b = (b - c - a) & MASK32; b ^= (a << 8) & MASK32
    c = (c - a - b) & MASK32; c ^= (b >> 13)
    a = (a - b - c) & MASK32; a ^= (c >> 12)
    b = (b - c - a) & MASK32; b ^= (a << 16) & MASK32
    c = (c - a - b) & MASK32; c ^= (b >> 5)
    a = (a - b - c) & MASK32; a ^= (c >> 3)
    b = (b - c - a) & MASK32; b ^= (a << 10) & MASK32
    c = (c - a - b) & MASK32; c ^= (b >> 15)

    return c


class UplinkSelector(ABC):
    """
    Picks the uplink switch a packet ascends through.

    ``choose`` only sees a non-empty candidate list; ``select`` handles the
    no-uplink case for every policy.
    """

    policy: UplinkPolicy

    def select(self, switch: 'SwitchNode', packet: NetworkPacket,
               uplinks: Sequence['SwitchNode']) -> 'SwitchNode':
        if not uplinks:
            raise UnroutableUplinkError(switch.str())
        if len(uplinks) == 1:
            return uplinks[0]
        return self.choose(switch, packet, uplinks)

    @abstractmethod
    def choose(self, switch: 'SwitchNode', packet: NetworkPacket,
               uplinks: Sequence['SwitchNode']) -> 'SwitchNode':
        pass


class FirstUplinkSelector(UplinkSelector):
    """Always the first configured uplink (single-uplink assumption)."""

    policy = UplinkPolicy.FIRST

    def choose(self, switch, packet, uplinks):
        return uplinks[0]


class HashUplinkSelector(UplinkSelector):
    """
    ECMP-style: hash of the sender/receiver VM pair.

    All packets between the same two VMs take the same uplink.
    """

    policy = UplinkPolicy.HASH

    def __init__(self, salt: int = 0):
        self._salt = salt

    def choose(self, switch, packet, uplinks):
        h = freebsd_hash(packet.sender_vm_id, packet.receiver_vm_id, self._salt)
        return uplinks[h % len(uplinks)]


class RoundRobinUplinkSelector(UplinkSelector):
    """Cycles through the uplinks packet by packet."""

    policy = UplinkPolicy.ROUND_ROBIN

    def __init__(self):
        self._crt_route = 0

    def choose(self, switch, packet, uplinks):
        choice = uplinks[self._crt_route % len(uplinks)]
        self._crt_route = (self._crt_route + 1) % len(uplinks)
        return choice


class LoadAwareUplinkSelector(UplinkSelector):
    """Uplink with the fewest bytes queued at this switch; ties go to the first."""

    policy = UplinkPolicy.LOAD_AWARE

    def choose(self, switch, packet, uplinks):
        return min(uplinks, key=lambda up: switch.uplink_queued_bytes(up.get_id()))


def make_uplink_selector(policy: UplinkPolicy, salt: int = 0) -> UplinkSelector:
    """Build the selector for a configured policy."""
    if policy == UplinkPolicy.FIRST:
        return FirstUplinkSelector()
    if policy == UplinkPolicy.HASH:
        return HashUplinkSelector(salt)
    if policy == UplinkPolicy.ROUND_ROBIN:
        return RoundRobinUplinkSelector()
    if policy == UplinkPolicy.LOAD_AWARE:
        return LoadAwareUplinkSelector()
    raise ValueError(f"unknown uplink policy {policy!r}")
