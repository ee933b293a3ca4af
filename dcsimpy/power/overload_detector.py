"""
Overload detector - 主机过载检测

功能: 根据主机利用率历史计算稳健的阈值度量（四分位距 IQR）

主要类:
- ThresholdReason: 计算失败的原因
- ThresholdResult: 计算结果（成功时带有度量值，失败时带有原因）
- InterQuartileRangeDetector: 基于 IQR 的检测器

四分位数使用 (n + 1) * p 位置估计并线性插值，即 numpy 的 ``weibull`` 方法。
样本不足不是异常，而是一个失败结果。
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple
import logging

import numpy as np

from ..core.config import MIN_HISTORY_SAMPLES
from ..core.errors import InsufficientHistoryError
from .utilization_history import count_non_zero_beginning, trim_zero_head

logger = logging.getLogger(__name__)


class ThresholdReason(Enum):
    INSUFFICIENT_HISTORY = "insufficient_history"


@dataclass(frozen=True)
class ThresholdResult:
    """阈值度量的计算结果"""
    measure: Optional[float] = None
    reason: Optional[ThresholdReason] = None
    available: int = 0
    required: int = 0

    @property
    def ok(self) -> bool:
        return self.reason is None

    def unwrap(self) -> float:
        """
        Returns:
            The measure

        Raises:
            InsufficientHistoryError: The computation failed
        """
        if not self.ok:
            raise InsufficientHistoryError(self.available, self.required)
        return self.measure

    @classmethod
    def success(cls, measure: float, available: int, required: int) -> 'ThresholdResult':
        return cls(measure=measure, available=available, required=required)

    @classmethod
    def insufficient_history(cls, available: int, required: int) -> 'ThresholdResult':
        return cls(reason=ThresholdReason.INSUFFICIENT_HISTORY, available=available, required=required)


def quartiles(data: Sequence[float]) -> Tuple[float, float]:
    """First and third quartile of ``data``."""
    q1, q3 = np.percentile(np.asarray(data, dtype=float), [25, 75], method='weibull')
    return float(q1), float(q3)


def interquartile_range(data: Sequence[float]) -> float:
    q1, q3 = quartiles(data)
    return q3 - q1


class InterQuartileRangeDetector:
    """
    基于四分位距的过载检测器

    只读取利用率历史，不保存任何状态；每次调用都重新计算
    """

    def __init__(self, min_samples: int = MIN_HISTORY_SAMPLES):
        if min_samples < 1:
            raise ValueError(f"min_samples must be at least 1, got {min_samples}")
        self._min_samples = min_samples

    @property
    def min_samples(self) -> int:
        return self._min_samples

    def compute_threshold_measure(self, history: Sequence[float]) -> ThresholdResult:
        """
        计算阈值度量

        Args:
            history: 利用率样本（从旧到新）

        Returns:
            成功时 measure 为 IQR (>= 0)；开头的零样本去掉后不足
            min_samples 个样本时返回 INSUFFICIENT_HISTORY
        """
        available = count_non_zero_beginning(history)
        if available < self._min_samples:
            logger.debug("insufficient utilization history: %d of %d samples",
                         available, self._min_samples)
            return ThresholdResult.insufficient_history(available, self._min_samples)
        measure = interquartile_range(trim_zero_head(history))
        return ThresholdResult.success(measure, available, self._min_samples)
