"""
NetworkPacket - 网络数据包

功能: 在交换机之间传递的数据包记录

主要类:
- NetworkPacket: 发送方/接收方 VM、主机 ID、负载大小和时间戳

负载大小只用于计算传输延迟，不携带实际内容。
"""

from typing import Optional
import itertools

from ..core.config import SimTime

_packet_ids = itertools.count()


class NetworkPacket:
    """
    网络数据包

    创建后只读，只有以下字段可以更新:
    - receiver_host_id: 由路由在解析接收方 VM 后设置
    - send_time / receive_time: 由发送和接收主机记录
    """

    __slots__ = ('_packet_id', '_sender_vm_id', '_receiver_vm_id', '_sender_host_id',
                 '_size', '_creation_time', 'receiver_host_id', 'send_time', 'receive_time')

    def __init__(self, sender_vm_id: int, receiver_vm_id: int, size: float,
                 creation_time: SimTime, sender_host_id: Optional[int] = None):
        if size < 0:
            raise ValueError(f"packet size cannot be negative, got {size}")
        self._packet_id = next(_packet_ids)
        self._sender_vm_id = sender_vm_id
        self._receiver_vm_id = receiver_vm_id
        self._sender_host_id = sender_host_id
        self._size = size
        self._creation_time = creation_time
        self.receiver_host_id: Optional[int] = None
        self.send_time: Optional[SimTime] = None
        self.receive_time: Optional[SimTime] = None

    @property
    def packet_id(self) -> int:
        return self._packet_id

    @property
    def sender_vm_id(self) -> int:
        return self._sender_vm_id

    @property
    def receiver_vm_id(self) -> int:
        return self._receiver_vm_id

    @property
    def sender_host_id(self) -> Optional[int]:
        return self._sender_host_id

    @property
    def size(self) -> float:
        return self._size

    @property
    def creation_time(self) -> SimTime:
        return self._creation_time

    def latency(self) -> Optional[SimTime]:
        """创建到接收的时间，尚未送达时返回 None"""
        if self.receive_time is None:
            return None
        return self.receive_time - self._creation_time

    def __str__(self) -> str:
        return f"NetworkPacket(id={self._packet_id}, vm {self._sender_vm_id}->{self._receiver_vm_id})"

    def __repr__(self) -> str:
        return (f"NetworkPacket(id={self._packet_id}, sender_vm={self._sender_vm_id}, "
                f"receiver_vm={self._receiver_vm_id}, size={self._size}, "
                f"receiver_host={self.receiver_host_id})")
