"""
Queue implementations for dcsimpy
"""

from .packet_queue import PacketQueue, PacketQueueMap

__all__ = ['PacketQueue', 'PacketQueueMap']
