"""SnapshotTimer - 布局快照调度

记录每个 session 上次捕获的时间，判断哪些 session 需要重新捕获。
纯簿记：无 I/O、无阻塞、无锁，任意频率调用都安全。

使用示例:
    timer = SnapshotTimer(interval_ms=5000)

    due = timer.sessions_due(["main", "dev"], now_ms)
    for session in due:
        ...  # 捕获
        timer.record_capture(session, now_ms)

    # session 被销毁
    timer.remove_session("dev")
"""

from muxlayout import config
from muxlayout.telemetry import get_logger

logger = get_logger(__name__)


class SnapshotTimer:
    """按 session 记录捕获时间戳的调度器

    共享实例时由调用方负责串行化访问。
    """

    def __init__(self, interval_ms: int | None = None):
        """初始化 SnapshotTimer

        Args:
            interval_ms: 捕获间隔（毫秒），None 使用配置默认值
        """
        self._interval_ms = config.SNAPSHOT_INTERVAL_MS if interval_ms is None else interval_ms
        self._last_capture: dict[str, int] = {}

    @property
    def interval_ms(self) -> int:
        """捕获间隔（毫秒）"""
        return self._interval_ms

    def sessions_due(self, sessions: list[str], now_ms: int) -> list[str]:
        """返回需要捕获的 session（保持输入顺序）

        从未记录的 session 立即到期；距上次捕获恰好等于间隔也算到期。

        Args:
            sessions: 当前存在的 session 名
            now_ms: 当前时间（毫秒）

        Returns:
            到期的 session 名列表
        """
        due = []
        for session in sessions:
            last = self._last_capture.get(session)
            # 时钟回拨视为未经过时间
            if last is None or max(now_ms - last, 0) >= self._interval_ms:
                due.append(session)
        return due

    def record_capture(self, session: str, now_ms: int) -> None:
        """记录一次捕获（覆盖旧值）"""
        self._last_capture[session] = now_ms

    def remove_session(self, session: str) -> None:
        """停止跟踪 session（之后同名 session 重新出现会立即到期）"""
        if self._last_capture.pop(session, None) is not None:
            logger.debug(f"[SnapshotTimer] Forgot session: {session}")

    def tracked_sessions(self) -> list[str]:
        """获取所有已记录的 session 名"""
        return list(self._last_capture.keys())
