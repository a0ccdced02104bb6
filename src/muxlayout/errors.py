"""Exception types raised by the layout engine."""


class LayoutError(Exception):
    """Base class for all muxlayout errors."""


class ParseError(LayoutError, ValueError):
    """A layout expression, P-notation target or layout dict is malformed."""


class NoPanesError(LayoutError):
    """A pane listing contained no usable pane records."""

    def __init__(self, session: str):
        super().__init__(f"No panes found for session '{session}'")
        self.session = session


class UnknownAgentError(LayoutError, LookupError):
    """A target name matched no known agent."""

    def __init__(self, name: str):
        super().__init__(f"unknown agent: '{name}'")
        self.name = name


class NoSessionAssignedError(LayoutError, LookupError):
    """The target agent exists but is not placed in any session."""

    def __init__(self, name: str):
        super().__init__(f"agent '{name}' has no session assigned")
        self.name = name


class ValidationError(LayoutError, ValueError):
    """A target string failed the structural format check."""


class CycleError(LayoutError):
    """Part expansion reached a part that is already being expanded."""

    def __init__(self, path: list[str]):
        super().__init__(f"cyclic part reference: {' -> '.join(path)}")
        self.path = path
