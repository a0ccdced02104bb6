"""Tmux pane listing parser.

Converts ``tmux list-panes`` output into TmuxPane geometry records.
"""

import logging

from muxlayout.models import TmuxPane

logger = logging.getLogger(__name__)

# Colon delimited; pane ids ("%3") and the numeric fields never contain colons
PANE_FIELD_SEP = ":"

PANE_LISTING_FORMAT = PANE_FIELD_SEP.join([
    "#{pane_id}", "#{pane_index}", "#{pane_width}",
    "#{pane_height}", "#{pane_top}", "#{pane_left}",
])


def parse_list_panes(output: str, agents: dict[str, str] | None = None) -> list[TmuxPane]:
    """Parse pane listing text into TmuxPane records.

    Args:
        output: One ``id:index:width:height:top:left`` record per line.
        agents: Optional pane id -> agent name mapping. The listing itself
            carries no agent association.

    Returns:
        Parsed panes in listing order. Blank and malformed lines are skipped.
    """
    agents = agents or {}
    panes = []
    for line in output.splitlines():
        line = line.strip()
        if not line:
            continue
        parts = line.split(PANE_FIELD_SEP)
        if len(parts) < 6:
            logger.warning(f"Failed to parse pane line: {line!r}: expected 6 fields")
            continue
        try:
            pane_id = parts[0]
            index, width, height, top, left = (_unsigned(p) for p in parts[1:6])
        except ValueError as e:
            logger.warning(f"Failed to parse pane line: {line!r}: {e}")
            continue
        panes.append(
            TmuxPane(
                id=pane_id,
                index=index,
                width=width,
                height=height,
                top=top,
                left=left,
                agent=agents.get(pane_id),
            )
        )
    return panes


def _unsigned(text: str) -> int:
    value = int(text)
    if value < 0:
        raise ValueError(f"negative value {value}")
    return value
