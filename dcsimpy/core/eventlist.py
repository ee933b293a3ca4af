"""
EventList - Discrete Event Simulation Scheduler

功能: 离散事件调度系统，管理仿真中的所有事件

主要类:
- EventKind: 事件类型枚举
- SimEvent: 一个待处理的事件（时间、目标、类型、负载）
- EventScheduler: 核心组件依赖的调度接口
- SimEntity: 可以接收事件的仿真实体基类
- EventList: 事件调度器

事件严格按时间戳非递减顺序执行；时间戳相同的事件按提交顺序 (FIFO) 执行。
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Dict, List, Optional
import bisect
import logging

from .config import SimTime
from .errors import SimulationError
from .logger.core import Logged

logger = logging.getLogger(__name__)


class EventKind(IntEnum):
    """事件类型"""
    NETWORK_EVENT_UP = 0      # packet arriving from below
    NETWORK_EVENT_DOWN = 1    # packet arriving from above
    NETWORK_EVENT_SEND = 2    # forward tick
    NETWORK_EVENT_HOST = 3    # packet delivered to a host
    HOST_MONITOR = 4          # overload monitoring tick
    LOGGER_SAMPLE = 5         # periodic logger sample


@dataclass
class SimEvent:
    """
    一个已调度的事件

    serial 是全局提交序号，用于在时间戳相同时保持 FIFO 顺序
    """
    time: SimTime
    serial: int
    target_id: int
    kind: EventKind
    payload: Any = None
    source_id: Optional[int] = field(default=None)


class EventScheduler(ABC):
    """
    调度接口

    路由和迁移逻辑只通过这个接口等待：在 now + delay 时刻投递一个事件
    """

    @abstractmethod
    def schedule_event(self, target_id: int, delay: SimTime, kind: EventKind,
                       payload: Any = None, source_id: Optional[int] = None) -> None:
        """Deliver ``kind``/``payload`` to ``target_id`` at ``now() + delay``."""

    @abstractmethod
    def now(self) -> SimTime:
        """Current simulation time."""


class SimEntity(Logged, ABC):
    """
    仿真实体基类

    所有需要接收事件的类（交换机、主机、监控器）都应该继承此类。
    构造时自动注册到事件列表，ID 由 Logged 分配。
    """

    def __init__(self, eventlist: 'EventList', name: str):
        super().__init__(name)
        self._eventlist = eventlist
        eventlist.register(self)

    def eventlist(self) -> 'EventList':
        return self._eventlist

    def schedule(self, target_id: int, delay: SimTime, kind: EventKind, payload: Any = None) -> None:
        """Schedule an event on behalf of this entity."""
        self._eventlist.schedule_event(target_id, delay, kind, payload, source_id=self.get_id())

    @abstractmethod
    def process_event(self, event: SimEvent) -> None:
        """Handle an event addressed to this entity."""


class EventList(EventScheduler):
    """
    事件调度器

    使用 时间戳 -> 事件列表 的字典加上一个有序时间戳列表，
    保证同一时间戳内的事件按提交顺序执行
    """

    def __init__(self, endtime: SimTime = 0.0):
        self._endtime = endtime
        self._lasteventtime: SimTime = 0.0
        self._serial = 0
        self._entities: Dict[int, SimEntity] = {}

        # key 是时间戳，value 是该时间戳的所有事件
        self._pending_by_time: Dict[SimTime, List[SimEvent]] = {}
        # 按时间排序的时间戳列表
        self._sorted_times: List[SimTime] = []

    # 实体注册

    def register(self, entity: SimEntity) -> None:
        self._entities[entity.get_id()] = entity

    def entity(self, entity_id: int) -> SimEntity:
        try:
            return self._entities[entity_id]
        except KeyError:
            raise SimulationError(f"no entity registered with id {entity_id}") from None

    def entities(self) -> List[SimEntity]:
        return list(self._entities.values())

    # 调度

    def set_endtime(self, endtime: SimTime) -> None:
        self._endtime = endtime

    def schedule_event(self, target_id: int, delay: SimTime, kind: EventKind,
                       payload: Any = None, source_id: Optional[int] = None) -> None:
        if delay < 0:
            raise ValueError(f"cannot schedule an event in the past (delay={delay})")
        if target_id not in self._entities:
            raise SimulationError(f"cannot schedule {kind.name} for unknown entity {target_id}")

        when = self._lasteventtime + delay
        if self._endtime and when >= self._endtime:
            logger.debug("dropping %s for %d at %s past endtime", kind.name, target_id, when)
            return

        event = SimEvent(when, self._serial, target_id, kind, payload, source_id)
        self._serial += 1

        if when not in self._pending_by_time:
            self._pending_by_time[when] = []
            bisect.insort(self._sorted_times, when)
        self._pending_by_time[when].append(event)

    def do_next_event(self) -> bool:
        """
        执行下一个事件，返回是否执行了事件
        """
        if not self._sorted_times:
            return False

        nexteventtime = self._sorted_times[0]
        events = self._pending_by_time[nexteventtime]
        event = events.pop(0)
        if not events:
            self._sorted_times.pop(0)
            del self._pending_by_time[nexteventtime]

        assert nexteventtime >= self._lasteventtime
        self._lasteventtime = nexteventtime
        self._entities[event.target_id].process_event(event)
        return True

    def run(self, until: Optional[SimTime] = None) -> int:
        """
        执行事件直到没有待处理事件，或下一个事件晚于 until

        Returns:
            执行的事件数量
        """
        processed = 0
        while self._sorted_times:
            if until is not None and self._sorted_times[0] > until:
                break
            self.do_next_event()
            processed += 1
        logger.debug("processed %d events, simulation time is now %s", processed, self._lasteventtime)
        return processed

    def now(self) -> SimTime:
        return self._lasteventtime

    def next_event_time(self) -> Optional[SimTime]:
        return self._sorted_times[0] if self._sorted_times else None

    def pending_count(self) -> int:
        """返回待处理事件的总数"""
        return sum(len(events) for events in self._pending_by_time.values())

    def pending_events(self) -> List[SimEvent]:
        """All pending events in execution order."""
        return [ev for when in self._sorted_times for ev in self._pending_by_time[when]]

    def reset(self) -> None:
        """清空所有事件并把时钟归零（实体注册保留）"""
        self._lasteventtime = 0.0
        self._serial = 0
        self._pending_by_time.clear()
        self._sorted_times.clear()
