"""Tmux adapter for muxlayout."""

from .client import TmuxClient
from .panes import PANE_LISTING_FORMAT, parse_list_panes

__all__ = ["TmuxClient", "PANE_LISTING_FORMAT", "parse_list_panes"]
