"""Terminal Adapters 模块

提供终端多路复用器适配：
- TmuxClient: tmux 子进程客户端
- parse_list_panes: pane 列表解析
"""

from .tmux import PANE_LISTING_FORMAT, TmuxClient, parse_list_panes

__all__ = [
    "TmuxClient",
    "PANE_LISTING_FORMAT",
    "parse_list_panes",
]
