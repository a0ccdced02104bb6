"""Layout snapshot - rebuild a layout tree from tmux pane geometry.

tmux only reports flat pane rectangles. Because every tmux layout is produced
by successive binary splits, the tree can be recovered by grouping panes that
share a ``top`` (stacked bands -> COL) and, within a band, panes that share a
``left`` (side-by-side columns -> ROW), recursing into each group.
Arbitrary hand-placed rectangles are not guaranteed to reconstruct.
"""

from muxlayout.models import Col, LayoutEntry, LayoutNode, Pane, Row, TmuxPane


def from_panes(panes: list[TmuxPane]) -> LayoutNode:
    """Reconstruct a layout tree from a flat list of pane geometries.

    Args:
        panes: Panes of one window, in any order, sharing one coordinate space.

    Returns:
        A Pane leaf for zero or one pane, otherwise a Row/Col tree whose
        entries carry integer-truncated percentages of the parent extent.
    """
    if not panes:
        return Pane(agent="")
    if len(panes) == 1:
        return Pane(agent=panes[0].agent or "")

    top_groups = _group_by(panes, "top")
    if len(top_groups) > 1:
        total_height = _span(panes, "top", "height")
        return Col([
            LayoutEntry(
                node=from_panes(group),
                percent=_percent(max(p.height for p in group), total_height),
            )
            for group in top_groups
        ])

    left_groups = _group_by(panes, "left")
    total_width = _span(panes, "left", "width")
    if len(left_groups) > 1:
        return Row([
            LayoutEntry(
                node=from_panes(group),
                percent=_percent(max(p.width for p in group), total_width),
            )
            for group in left_groups
        ])

    # Degenerate: every pane shares both top and left
    return Row([
        LayoutEntry(node=Pane(agent=p.agent or ""), percent=_percent(p.width, total_width))
        for p in sorted(panes, key=lambda p: p.left)
    ])


def diff(a: LayoutNode, b: LayoutNode) -> bool:
    """Return True if two trees differ structurally (kind, order, names or percents)."""
    return a != b


def _group_by(panes: list[TmuxPane], attr: str) -> list[list[TmuxPane]]:
    """Group panes by an exact coordinate, groups sorted ascending by it."""
    groups: dict[int, list[TmuxPane]] = {}
    for pane in panes:
        groups.setdefault(getattr(pane, attr), []).append(pane)
    return [groups[key] for key in sorted(groups)]


def _span(panes: list[TmuxPane], origin: str, extent: str) -> int:
    """Total extent along one axis: max(origin + extent) - min(origin)."""
    start = min(getattr(p, origin) for p in panes)
    end = max(getattr(p, origin) + getattr(p, extent) for p in panes)
    return end - start


def _percent(part: int, total: int) -> int:
    if total <= 0:
        return 0
    return part * 100 // total
