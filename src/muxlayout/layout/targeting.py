"""Target resolution - translate agent names and P-notation into tmux targets.

Two addressing schemes:

- P-notation: ``P0`` (pane 0 of window 0), ``P1.2`` (pane 2 of window 1),
  case-insensitive prefix. Maps to ``":<window>.<pane>"``.
- Agent name: looked up in the supplied agent list; resolves to the agent's
  session name. Pane placement within the session is handled elsewhere.
"""

import re

from muxlayout.errors import NoSessionAssignedError, ParseError, UnknownAgentError, ValidationError
from muxlayout.models import Agent

_AGENT_NAME_RE = re.compile(r"[\w-]+")


def is_p_notation(target: str) -> bool:
    """Check if a target looks like P-notation (P/p followed by a digit)."""
    return len(target) > 1 and target[0] in "Pp" and target[1].isascii() and target[1].isdigit()


def resolve(target: str, agents: list[Agent]) -> str:
    """Resolve a target string to a tmux target.

    Args:
        target: ``P<window>``, ``P<window>.<pane>`` or an agent name
        agents: Known agents

    Returns:
        ``":<window>.<pane>"`` for P-notation, else the agent's session name.

    Raises:
        ParseError: Empty target or malformed P-notation.
        UnknownAgentError: No agent has that name.
        NoSessionAssignedError: The agent has no session.
    """
    trimmed = target.strip()
    if not trimmed:
        raise ParseError("empty target string")
    if is_p_notation(trimmed):
        return _resolve_p_notation(trimmed)
    return _resolve_agent_name(trimmed, agents)


def _resolve_p_notation(target: str) -> str:
    body = target[1:]
    window, sep, pane = body.partition(".")
    window_num = _parse_index(window, "window")
    pane_num = _parse_index(pane, "pane") if sep else 0
    return f":{window_num}.{pane_num}"


def _parse_index(text: str, what: str) -> int:
    if not (text.isascii() and text.isdigit()):
        raise ParseError(f"invalid {what} number in P-notation: '{text}'")
    return int(text)


def _resolve_agent_name(name: str, agents: list[Agent]) -> str:
    agent = next((a for a in agents if a.name == name), None)
    if agent is None:
        raise UnknownAgentError(name)
    if agent.session is None:
        raise NoSessionAssignedError(name)
    return agent.session


def validate_format(target: str) -> None:
    """Check that a target is syntactically valid without resolving it.

    ``Pabc`` is a valid agent name, not broken P-notation.

    Raises:
        ValidationError: Empty, bare ``P``, malformed P-notation, or a name
            with characters other than alphanumerics, ``-`` and ``_``.
    """
    trimmed = target.strip()
    if not trimmed:
        raise ValidationError("empty target")
    if trimmed in ("P", "p"):
        raise ValidationError("bare 'P' is ambiguous; use P0, P1.2, etc.")

    if is_p_notation(trimmed):
        parts = trimmed[1:].split(".")
        if len(parts) > 2:
            raise ValidationError(f"P-notation has too many components: '{trimmed}'")
        for part in parts:
            if not (part.isascii() and part.isdigit()):
                raise ValidationError(f"non-numeric component in P-notation: '{part}'")
        return

    if not _AGENT_NAME_RE.fullmatch(trimmed):
        raise ValidationError(f"invalid characters in target name: '{trimmed}'")
