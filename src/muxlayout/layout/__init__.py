"""Layout module - expression grammar, snapshot reconstruction, capture and targeting"""

from .capture import capture_all_sessions, capture_session
from .expr import parse, serialize
from .snapshot import diff, from_panes
from .targeting import resolve, validate_format
from .timer import SnapshotTimer

__all__ = [
    "parse",
    "serialize",
    "from_panes",
    "diff",
    "capture_session",
    "capture_all_sessions",
    "SnapshotTimer",
    "resolve",
    "validate_format",
]
