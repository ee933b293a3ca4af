"""
Host overload detection and VM migration

- utilization_history.py: 主机利用率历史
- overload_detector.py: IQR 阈值度量
- migration_trigger.py: 过载判断和迁移决策
- policies.py: 参考迁移策略
- monitor.py: 周期性监控实体
"""

from .utilization_history import (
    UtilizationHistory, UtilizationHistoryProvider, count_non_zero_beginning, trim_zero_head,
)
from .overload_detector import (
    InterQuartileRangeDetector, ThresholdReason, ThresholdResult, interquartile_range, quartiles,
)
from .migration_trigger import (
    FallbackAllocationPolicy, MigrationDecision, MigrationTrigger, StaticThreshold,
    VmSelectionPolicy, upper_threshold,
)
from .policies import FirstFitFallback, MinimumUtilizationSelection
from .monitor import OverloadMonitor

__all__ = [
    'UtilizationHistory', 'UtilizationHistoryProvider', 'count_non_zero_beginning', 'trim_zero_head',
    'InterQuartileRangeDetector', 'ThresholdReason', 'ThresholdResult', 'interquartile_range', 'quartiles',
    'FallbackAllocationPolicy', 'MigrationDecision', 'MigrationTrigger', 'StaticThreshold',
    'VmSelectionPolicy', 'upper_threshold',
    'FirstFitFallback', 'MinimumUtilizationSelection',
    'OverloadMonitor',
]
