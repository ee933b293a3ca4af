"""
Logger Package - 日志系统

功能: 提供仿真记录和统计系统

主要模块:
- core: 核心类（Logged）
- base: 基础Logger类和事件类型
- logfile: 记录文件
- switch: 交换机相关日志记录器
- migration: 迁移决策日志记录器

switch 和 migration 依赖事件列表，需直接从子模块导入以避免循环引用。
"""

from .core import Logged
from .base import Logger
from .logfile import Logfile

__all__ = [
    'Logged', 'Logger', 'Logfile',
]
