"""Telemetry - 统一日志和指标入口

日志格式: [module] msg
计数器: capture.sessions, capture.changed, capture.skipped, parts.skipped, monitor.errors
Gauge: monitor.sessions
"""

import logging

from .config import LOG_LEVEL

_LOG_FORMAT = "[%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """配置根 logger（由调用方在进程入口调用一次）

    Args:
        level: 日志级别名，None 使用 config.LOG_LEVEL
    """
    logging.basicConfig(level=(level or LOG_LEVEL).upper(), format=_LOG_FORMAT)


def get_logger(name: str) -> logging.Logger:
    """获取模块 logger（name 通常为 __name__）"""
    return logging.getLogger(name)


def _metric_key(name: str, labels: dict[str, str] | None) -> str:
    """name{k=v,...}，无标签时为 name"""
    if not labels:
        return name
    return name + "{" + ",".join(f"{k}={v}" for k, v in sorted(labels.items())) + "}"


class Metrics:
    """内存指标表：捕获/解析/监控的计数器与 session 数 gauge"""

    def __init__(self):
        self._counters: dict[str, int] = {}
        self._gauges: dict[str, float] = {}

    def inc(self, name: str, labels: dict[str, str] | None = None, value: int = 1) -> None:
        """递增计数器，如 inc("monitor.errors", {"session": "main"})"""
        key = _metric_key(name, labels)
        self._counters[key] = self._counters.get(key, 0) + value

    def gauge(self, name: str, value: float) -> None:
        """设置 gauge 值（目前只有 monitor.sessions）"""
        self._gauges[name] = value

    def get_counter(self, name: str, labels: dict[str, str] | None = None) -> int:
        return self._counters.get(_metric_key(name, labels), 0)

    def reset(self) -> None:
        """清空所有指标（测试间隔离）"""
        self._counters.clear()
        self._gauges.clear()


# 全局指标实例
metrics = Metrics()
