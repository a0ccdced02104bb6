"""LayoutMonitor - 布局漂移监控

周期性地读取 tmux session 的 pane 几何，重建布局并与上次记录的表达式比较，
对发生变化的 session 调用回调（同步或异步）。

使用示例:
    monitor = LayoutMonitor(TmuxClient(), on_change=save_layout)

    # 启动/停止
    await monitor.run()
    monitor.stop()

Monitor 独占其 SnapshotTimer 和表达式表，调用方无需加锁。
"""

import asyncio
import inspect
import time
from typing import Any, Callable, Coroutine

from . import config
from .adapters.tmux.client import TmuxClient
from .config import METRICS_ENABLED
from .layout.capture import capture_all_sessions
from .layout.timer import SnapshotTimer
from .models import CaptureResult, SkippedItem
from .telemetry import get_logger, metrics

logger = get_logger(__name__)

ChangeCallback = Callable[[CaptureResult], Any | Coroutine[Any, Any, Any]]


def now_ms() -> int:
    """当前时间（毫秒）"""
    return int(time.time() * 1000)


class LayoutMonitor:
    """布局漂移监控器"""

    def __init__(
        self,
        client: TmuxClient,
        timer: SnapshotTimer | None = None,
        on_change: ChangeCallback | None = None,
        previous: dict[str, str] | None = None,
        tick_interval: float | None = None,
    ):
        """初始化 LayoutMonitor

        Args:
            client: tmux 客户端
            timer: 快照调度器，None 使用默认间隔
            on_change: 布局变化回调
            previous: 已持久化的 session -> 布局表达式（启动时恢复）
            tick_interval: tick 间隔（秒），None 使用配置默认值
        """
        self._client = client
        self._timer = timer or SnapshotTimer()
        self._on_change = on_change
        self._previous: dict[str, str] = dict(previous or {})
        self._tick_interval = tick_interval or config.MONITOR_TICK_SECONDS
        self._running = False

    async def tick(self, now: int | None = None) -> list[CaptureResult]:
        """执行一次检查

        Args:
            now: 当前时间（毫秒），None 使用系统时间

        Returns:
            本次捕获的所有结果（包括未变化的）
        """
        now = now_ms() if now is None else now

        sessions = await self._client.list_sessions()
        if sessions is None:
            # 列表失败不代表 session 消失，保留已记录的状态
            logger.warning("[LayoutMonitor] Session listing failed, skipping tick")
            return []

        for gone in set(self._timer.tracked_sessions()) - set(sessions):
            self._timer.remove_session(gone)
            self._previous.pop(gone, None)

        due = self._timer.sessions_due(sessions, now)
        if not due:
            return []

        pane_outputs: dict[str, str] = {}
        for session in due:
            output = await self._client.list_panes(session)
            if output is not None:
                pane_outputs[session] = output

        skipped: list[SkippedItem] = []
        results = capture_all_sessions(due, pane_outputs, self._previous, now, skipped)
        for item in skipped:
            logger.warning(f"[LayoutMonitor] Skipped {item.name}: {item.reason}")

        for result in results:
            self._timer.record_capture(result.session, now)
            self._previous[result.session] = result.layout_expr
            if result.changed:
                logger.info(f"[LayoutMonitor] Layout changed: {result.session} -> {result.layout_expr!r}")
                await self._notify(result)

        if METRICS_ENABLED:
            metrics.gauge("monitor.sessions", len(sessions))
        return results

    async def run(self) -> None:
        """启动监控主循环

        持续运行直到调用 stop()。
        """
        if self._running:
            logger.warning("[LayoutMonitor] Already running")
            return

        self._running = True
        logger.info(f"[LayoutMonitor] Started (tick={self._tick_interval}s, interval={self._timer.interval_ms}ms)")

        try:
            while self._running:
                await self.tick()
                await asyncio.sleep(self._tick_interval)
        except asyncio.CancelledError:
            logger.info("[LayoutMonitor] Cancelled")
        finally:
            self._running = False

    def stop(self) -> None:
        """停止监控"""
        if self._running:
            self._running = False
            logger.info("[LayoutMonitor] Stopping...")

    def last_expr(self, session: str) -> str | None:
        """获取 session 最近一次记录的布局表达式"""
        return self._previous.get(session)

    @property
    def is_running(self) -> bool:
        """是否正在运行"""
        return self._running

    async def _notify(self, result: CaptureResult) -> None:
        """执行回调（带异常隔离）"""
        if self._on_change is None:
            return
        try:
            ret = self._on_change(result)
            if inspect.iscoroutine(ret):
                await ret
        except Exception as e:
            logger.error(f"[LayoutMonitor] on_change failed for {result.session}: {e}")
            if METRICS_ENABLED:
                metrics.inc("monitor.errors", {"session": result.session})
