"""
Switch Logger Classes - 交换机日志类

功能: 记录交换机相关的事件和统计信息
"""

from abc import ABC, abstractmethod
from enum import IntEnum
from typing import TYPE_CHECKING, Dict, List, Optional

from .base import Logger
from ..eventlist import EventKind, EventList, SimEntity, SimEvent

if TYPE_CHECKING:
    from ...datacenter.switch_node import SwitchNode
    from ...packets.network_packet import NetworkPacket


class SwitchLogger(Logger, ABC):
    """交换机日志记录器基类"""

    class SwitchEvent(IntEnum):
        """交换机事件类型"""
        PKT_ARRIVE = 0      # 数据包到达
        PKT_FORWARD = 1     # 数据包转发
        ROUTE_LOCAL = 2     # 同一边缘交换机内直接投递
        ROUTE_UP = 3        # 选择上行链路

    class SwitchRecord(IntEnum):
        """交换机记录类型"""
        PKT_COUNT = 0       # 数据包计数
        BYTE_COUNT = 1      # 字节计数

    @abstractmethod
    def log_switch(self, switch: 'SwitchNode', ev: 'SwitchLogger.SwitchEvent',
                   pkt: Optional['NetworkPacket'] = None) -> None:
        """记录交换机事件"""

    @staticmethod
    def event_to_str(event: IntEnum) -> str:
        return SwitchLogger.SwitchEvent(event).name


class SwitchLoggerSimple(SwitchLogger):
    """简单交换机日志记录器：每个事件写一条记录"""

    def log_switch(self, switch: 'SwitchNode', ev: SwitchLogger.SwitchEvent,
                   pkt: Optional['NetworkPacket'] = None) -> None:
        if not self._logfile:
            return
        self._logfile.writeRecord(
            Logger.EventType.SWITCH_EVENT,
            switch.get_id(),
            ev,
            float(pkt.size) if pkt else 0.0,
            float(pkt.packet_id) if pkt else 0.0,
            float(pkt.receiver_vm_id) if pkt else 0.0,
        )


class SwitchLoggerSampling(SwitchLogger, SimEntity):
    """采样交换机日志记录器：周期性写出计数后清零"""

    def __init__(self, period: float, eventlist: EventList, switch: Optional['SwitchNode'] = None):
        SimEntity.__init__(self, eventlist, "SwitchLoggerSampling")
        SwitchLogger.__init__(self)

        self._period = period
        self._switch = switch
        self._pkt_count = 0
        self._byte_count = 0
        self._forward_count = 0
        self._last_sample_time = eventlist.now()

        # 设置定期事件
        self.schedule(self.get_id(), period, EventKind.LOGGER_SAMPLE)

    def log_switch(self, switch: 'SwitchNode', ev: SwitchLogger.SwitchEvent,
                   pkt: Optional['NetworkPacket'] = None) -> None:
        if self._switch is None:
            self._switch = switch

        if ev == SwitchLogger.SwitchEvent.PKT_ARRIVE:
            self._pkt_count += 1
            self._byte_count += pkt.size if pkt else 0
        elif ev == SwitchLogger.SwitchEvent.PKT_FORWARD:
            self._forward_count += 1

    def counters(self) -> Dict[str, int]:
        return {
            'pkt_count': self._pkt_count,
            'byte_count': self._byte_count,
            'forward_count': self._forward_count,
        }

    def process_event(self, event: SimEvent) -> None:
        """处理下一个采样事件"""
        now = self.eventlist().now()

        if self._switch and self._logfile:
            interval = now - self._last_sample_time
            throughput = self._byte_count / interval if interval > 0 else 0.0
            self._logfile.writeRecord(
                Logger.EventType.SWITCH_RECORD,
                self._switch.get_id(),
                SwitchLogger.SwitchRecord.PKT_COUNT,
                float(self._pkt_count),
                float(self._forward_count),
                0.0,
            )
            self._logfile.writeRecord(
                Logger.EventType.SWITCH_RECORD,
                self._switch.get_id(),
                SwitchLogger.SwitchRecord.BYTE_COUNT,
                float(self._byte_count),
                throughput,
                0.0,
            )

        self._pkt_count = 0
        self._byte_count = 0
        self._forward_count = 0
        self._last_sample_time = now

        # 安排下一个事件
        self.schedule(self.get_id(), self._period, EventKind.LOGGER_SAMPLE)


class SwitchLoggerFactory:
    """交换机日志记录器工厂"""

    class SwitchLoggerType(IntEnum):
        LOGGER_SIMPLE = 0
        LOGGER_SAMPLING = 1

    def __init__(self, logfile, logtype: 'SwitchLoggerFactory.SwitchLoggerType', eventlist: EventList):
        self._logfile = logfile
        self._logger_type = logtype
        self._eventlist = eventlist
        self._sample_period = 1.0
        self._loggers: List[SwitchLogger] = []

    def set_sample_period(self, sample_period: float) -> None:
        self._sample_period = sample_period

    def create_switch_logger(self, switch: Optional['SwitchNode'] = None) -> SwitchLogger:
        if self._logger_type == self.SwitchLoggerType.LOGGER_SIMPLE:
            log = SwitchLoggerSimple()
        else:
            log = SwitchLoggerSampling(self._sample_period, self._eventlist, switch)

        if self._logfile:
            self._logfile.addLogger(log)
        self._loggers.append(log)
        return log
