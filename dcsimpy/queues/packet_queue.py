"""
PacketQueue - Per-destination FIFO packet buffer

功能: 交换机为每个目的地（主机或交换机）维护的待发送数据包队列

主要类:
- PacketQueue: 单个目的地的先进先出队列
- PacketQueueMap: 目的地 ID -> PacketQueue 的映射，由交换机拥有

关键实现:
- 入队：append()到队尾，保持到达顺序
- 取出：drain_all() 一次取出全部数据包并清空队列，同一个数据包不会被发送两次
- 不限制队列深度
"""

from collections import deque
from typing import Deque, Dict, Iterator, List, Tuple

from ..packets.network_packet import NetworkPacket


class PacketQueue:
    """
    单个目的地的 FIFO 队列
    """

    def __init__(self, destination_id: int):
        self._destination_id = destination_id
        self._enqueued: Deque[NetworkPacket] = deque()
        self._queued_bytes = 0.0
        self._total_enqueued = 0

    @property
    def destination_id(self) -> int:
        return self._destination_id

    def enqueue(self, packet: NetworkPacket) -> None:
        self._enqueued.append(packet)
        self._queued_bytes += packet.size
        self._total_enqueued += 1

    def drain_all(self) -> List[NetworkPacket]:
        """
        取出全部数据包（按到达顺序）并清空队列

        Returns:
            队列中的数据包列表；空队列返回空列表
        """
        drained = list(self._enqueued)
        self._enqueued.clear()
        self._queued_bytes = 0.0
        return drained

    def queued_bytes(self) -> float:
        return self._queued_bytes

    def total_enqueued(self) -> int:
        return self._total_enqueued

    def __len__(self) -> int:
        return len(self._enqueued)

    def __iter__(self) -> Iterator[NetworkPacket]:
        return iter(self._enqueued)

    def __repr__(self) -> str:
        return f"PacketQueue(dest={self._destination_id}, packets={len(self._enqueued)})"


class PacketQueueMap:
    """
    目的地 ID -> PacketQueue

    目的地第一次出现时创建队列；遍历顺序为目的地首次出现的顺序
    """

    def __init__(self):
        self._queues: Dict[int, PacketQueue] = {}

    def enqueue(self, destination_id: int, packet: NetworkPacket) -> None:
        queue = self._queues.get(destination_id)
        if queue is None:
            queue = PacketQueue(destination_id)
            self._queues[destination_id] = queue
        queue.enqueue(packet)

    def drain(self, destination_id: int) -> List[NetworkPacket]:
        queue = self._queues.get(destination_id)
        if queue is None:
            return []
        return queue.drain_all()

    def queue(self, destination_id: int) -> PacketQueue:
        if destination_id not in self._queues:
            self._queues[destination_id] = PacketQueue(destination_id)
        return self._queues[destination_id]

    def pending(self) -> List[int]:
        """有待发送数据包的目的地 ID"""
        return [dest for dest, queue in self._queues.items() if len(queue) > 0]

    def queued_bytes(self, destination_id: int) -> float:
        queue = self._queues.get(destination_id)
        return queue.queued_bytes() if queue else 0.0

    def total_packets(self) -> int:
        return sum(len(queue) for queue in self._queues.values())

    def items(self) -> Iterator[Tuple[int, PacketQueue]]:
        return iter(self._queues.items())

    def __contains__(self, destination_id: int) -> bool:
        return destination_id in self._queues

    def __len__(self) -> int:
        return len(self._queues)
