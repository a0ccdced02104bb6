"""muxlayout 配置

配置分为以下几类：
- 快照配置：布局捕获间隔
- 监控配置：monitor tick 间隔
- Parts 配置：parts 目录文件位置
- tmux 配置：socket 路径
- 日志/指标配置
"""

import os

# === 快照配置 ===
SNAPSHOT_INTERVAL_MS = int(os.environ.get("MUXLAYOUT_SNAPSHOT_INTERVAL_MS", "5000"))  # 同一 session 两次捕获的最小间隔（毫秒）

# === 监控配置 ===
MONITOR_TICK_SECONDS = float(os.environ.get("MUXLAYOUT_MONITOR_TICK_SECONDS", "1.0"))  # monitor tick 间隔（秒）

# === Parts 配置 ===
PARTS_PATH = os.environ.get(
    "MUXLAYOUT_PARTS_PATH",
    os.path.join(os.path.expanduser("~"), ".config", "skd", "skd-library", "parts.md"),
)  # parts.md 默认位置

# === tmux 配置 ===
TMUX_SOCKET_PATH = os.environ.get("MUXLAYOUT_TMUX_SOCKET") or None  # None 使用默认 socket

# === 日志配置 ===
LOG_LEVEL = os.environ.get("MUXLAYOUT_LOG_LEVEL", "INFO")  # 日志级别

# === 指标配置 ===
METRICS_ENABLED = True  # 是否启用指标收集
