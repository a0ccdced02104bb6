"""数据模型定义

布局树、tmux pane 几何、parts 条目和捕获结果。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Union

from .errors import ParseError


@dataclass
class Pane:
    """叶子节点（agent 名，tmux 捕获的 pane 为空串）"""
    agent: str = ""


@dataclass
class LayoutEntry:
    """子节点 + 可选百分比"""
    node: "LayoutNode"
    percent: int | None = None


@dataclass
class Row:
    """左右排列"""
    children: list[LayoutEntry] = field(default_factory=list)


@dataclass
class Col:
    """上下堆叠"""
    children: list[LayoutEntry] = field(default_factory=list)


LayoutNode = Union[Pane, Row, Col]


@dataclass
class TmuxPane:
    """tmux 报告的 pane 几何（字符单位，绝对坐标）"""
    id: str
    index: int
    width: int
    height: int
    top: int
    left: int
    agent: str | None = None


class TileKind(Enum):
    """Part 类型"""
    AGENT = "agent"
    COMPOSITION = "composition"
    SESSION = "session"


@dataclass(frozen=True)
class Tile:
    """命名的 layout 片段"""
    name: str
    kind: TileKind
    role: str | None = None
    layout: LayoutNode | None = None


@dataclass
class Agent:
    """Target 解析用的 agent 记录（由外部提供）"""
    name: str
    session: str | None = None
    role: str = ""


@dataclass
class CaptureResult:
    """一次布局捕获的结果"""
    session: str
    layout: LayoutNode
    layout_expr: str
    changed: bool
    timestamp_ms: int


@dataclass(frozen=True)
class SkippedItem:
    """批处理中被跳过的条目及原因"""
    name: str
    reason: str


def iter_leaves(node: LayoutNode) -> Iterator[Pane]:
    """按从左到右顺序遍历所有叶子"""
    if isinstance(node, Pane):
        yield node
        return
    for entry in node.children:
        yield from iter_leaves(entry.node)


def node_to_dict(node: LayoutNode) -> dict:
    """转换为前端使用的 JSON 结构

    {"type": "pane", "agent": ...} 或
    {"type": "row"|"col", "children": [{"node": ..., "percent": ...}]}
    """
    if isinstance(node, Pane):
        return {"type": "pane", "agent": node.agent}
    return {
        "type": "row" if isinstance(node, Row) else "col",
        "children": [
            {"node": node_to_dict(entry.node), "percent": entry.percent}
            for entry in node.children
        ],
    }


def node_from_dict(data: dict) -> LayoutNode:
    """从 node_to_dict 的结构恢复布局树

    Raises:
        ParseError: type 未知或缺少字段
    """
    try:
        node_type = data["type"]
        if node_type == "pane":
            return Pane(agent=data["agent"])
        if node_type in ("row", "col"):
            children = [
                LayoutEntry(node=node_from_dict(child["node"]), percent=child.get("percent"))
                for child in data["children"]
            ]
            return Row(children) if node_type == "row" else Col(children)
    except (KeyError, TypeError, AttributeError) as e:
        raise ParseError(f"malformed layout dict: {e!r}") from e
    raise ParseError(f"unknown layout node type: {node_type!r}")
