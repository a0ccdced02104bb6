"""Tmux client for subprocess-based tmux interaction."""

import asyncio
import logging

from muxlayout import config

from .panes import PANE_LISTING_FORMAT

logger = logging.getLogger(__name__)


class TmuxClient:
    """Client for interacting with tmux via subprocess commands.

    Provides async methods for:
    - Listing session names
    - Listing pane geometry of a session's active window
    """

    def __init__(self, socket_path: str | None = None):
        """Initialize TmuxClient.

        Args:
            socket_path: Optional tmux socket path. If None, uses
                config.TMUX_SOCKET_PATH, then the default socket.
        """
        self._socket_path = socket_path or config.TMUX_SOCKET_PATH

    async def run(self, *args: str) -> str | None:
        """Execute a tmux command.

        Args:
            *args: Command arguments (e.g., "list-panes", "-t", "main", "-F", "...")

        Returns:
            Command stdout on success, None on failure.
        """
        cmd = ["tmux"]
        if self._socket_path:
            cmd.extend(["-S", self._socket_path])
        cmd.extend(args)

        try:
            proc = await asyncio.create_subprocess_exec(
                *cmd,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
            stdout, stderr = await proc.communicate()

            if proc.returncode != 0:
                logger.warning(f"tmux command failed: {' '.join(cmd)}: {stderr.decode(errors='replace')}")
                return None

            return stdout.decode(errors="replace")

        except OSError as e:
            logger.error(f"tmux subprocess error: {e}")
            return None

    async def list_sessions(self) -> list[str] | None:
        """List tmux session names.

        Returns:
            Session names in tmux order, or None if the listing failed.
        """
        output = await self.run("list-sessions", "-F", "#{session_name}")
        if output is None:
            return None
        return [line for line in output.strip().split("\n") if line]

    async def list_panes(self, session: str) -> str | None:
        """Get the raw pane listing for a session's active window.

        Args:
            session: tmux session name

        Returns:
            ``id:index:width:height:top:left`` lines, or None on failure.
        """
        return await self.run("list-panes", "-t", session, "-F", PANE_LISTING_FORMAT)
