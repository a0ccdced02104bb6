"""Layout capture pipeline - parse panes, reconstruct tree, serialize, diff.

Produces a CaptureResult telling whether a session's live layout has drifted
from the last recorded expression. Persisting the result is up to the caller.
"""

from muxlayout.adapters.tmux.panes import parse_list_panes
from muxlayout.config import METRICS_ENABLED
from muxlayout.errors import NoPanesError
from muxlayout.layout import expr, snapshot
from muxlayout.models import CaptureResult, SkippedItem
from muxlayout.telemetry import get_logger, metrics

logger = get_logger(__name__)


def capture_session(
    session: str,
    pane_output: str,
    previous_expr: str | None,
    now_ms: int,
    agents: dict[str, str] | None = None,
) -> CaptureResult:
    """Capture the current layout of one session.

    Args:
        session: Session name
        pane_output: Raw pane listing (``id:index:width:height:top:left`` lines)
        previous_expr: Last recorded layout expression, None if never recorded
        now_ms: Capture timestamp in milliseconds
        agents: Optional pane id -> agent name mapping

    Returns:
        CaptureResult; ``changed`` is True when there is no previous
        expression or it differs from the new one.

    Raises:
        NoPanesError: The listing yielded no panes.
    """
    panes = parse_list_panes(pane_output, agents)
    if not panes:
        raise NoPanesError(session)

    layout = snapshot.from_panes(panes)
    layout_expr = expr.serialize(layout)
    changed = previous_expr is None or previous_expr != layout_expr

    if METRICS_ENABLED:
        metrics.inc("capture.sessions")
        if changed:
            metrics.inc("capture.changed")
    logger.debug(f"[Capture] {session}: {len(panes)} panes, changed={changed}, expr={layout_expr!r}")

    return CaptureResult(
        session=session,
        layout=layout,
        layout_expr=layout_expr,
        changed=changed,
        timestamp_ms=now_ms,
    )


def capture_all_sessions(
    sessions: list[str],
    pane_outputs: dict[str, str],
    previous_layouts: dict[str, str],
    now_ms: int,
    skipped: list[SkippedItem] | None = None,
) -> list[CaptureResult]:
    """Capture every session that has pane output, in input order.

    Sessions with no pane output, or whose output holds no panes, are left
    out of the result without raising. Pass ``skipped`` to receive one
    SkippedItem per omitted session.
    """
    results = []
    for session in sessions:
        output = pane_outputs.get(session)
        if output is None:
            _skip(skipped, session, "no pane output")
            continue
        try:
            results.append(
                capture_session(session, output, previous_layouts.get(session), now_ms)
            )
        except NoPanesError as e:
            _skip(skipped, session, str(e))
    return results


def _skip(skipped: list[SkippedItem] | None, session: str, reason: str) -> None:
    logger.debug(f"[Capture] Skipping {session}: {reason}")
    if METRICS_ENABLED:
        metrics.inc("capture.skipped")
    if skipped is not None:
        skipped.append(SkippedItem(name=session, reason=reason))
