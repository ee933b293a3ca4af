"""
UtilizationHistory - 主机利用率历史

功能: 按时间顺序（从旧到新）保存主机利用率样本，只能追加

主要类:
- UtilizationHistory: 有界的样本序列，检测器只读取快照
- UtilizationHistoryProvider: 按主机 ID 提供利用率历史的接口

主要函数:
- trim_zero_head: 去掉开头（最旧一端）的零样本
- count_non_zero_beginning: 去掉开头零样本后的样本数
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Optional, Sequence, Tuple

from ..core.config import DEFAULT_HISTORY_LENGTH, SimTime


def count_non_zero_beginning(data: Sequence[float]) -> int:
    """
    Length of ``data`` once the zero samples at its oldest end are dropped.

    A host that has not been sampled yet reports zeros, so only the samples
    from the first non-zero one onwards are real history.

    [0.0, 0.0, 0.3, 0.0, 0.5] -> 3
    """
    i = 0
    while i < len(data) and data[i] == 0:
        i += 1
    return len(data) - i


def trim_zero_head(data: Sequence[float]) -> Tuple[float, ...]:
    return tuple(data[len(data) - count_non_zero_beginning(data):])


class UtilizationHistory:
    """
    主机利用率历史

    只保留最近 max_length 个样本；时间戳必须非递减
    """

    def __init__(self, max_length: int = DEFAULT_HISTORY_LENGTH):
        if max_length <= 0:
            raise ValueError(f"max_length must be positive, got {max_length}")
        self._samples: Deque[Tuple[SimTime, float]] = deque(maxlen=max_length)

    def append(self, time: SimTime, utilization: float) -> None:
        if utilization < 0:
            raise ValueError(f"utilization cannot be negative, got {utilization}")
        if self._samples and time < self._samples[-1][0]:
            raise ValueError(
                f"utilization sample at {time} is older than the last sample at {self._samples[-1][0]}"
            )
        self._samples.append((time, utilization))

    def snapshot(self) -> Tuple[float, ...]:
        """利用率值的快照（从旧到新）"""
        return tuple(u for _, u in self._samples)

    def timestamps(self) -> Tuple[SimTime, ...]:
        return tuple(t for t, _ in self._samples)

    def latest(self) -> Optional[float]:
        return self._samples[-1][1] if self._samples else None

    @property
    def max_length(self) -> int:
        return self._samples.maxlen

    def __len__(self) -> int:
        return len(self._samples)


class UtilizationHistoryProvider(ABC):
    """Gives read access to a host's utilization history."""

    @abstractmethod
    def utilization_history(self, host_id: int) -> Sequence[float]:
        """Samples of ``host_id``, oldest first."""
