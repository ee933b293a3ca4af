"""
Packet implementations for dcsimpy
"""

from .network_packet import NetworkPacket

__all__ = ['NetworkPacket']
