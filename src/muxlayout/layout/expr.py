"""Layout expression grammar.

Parses and serializes the textual layout language::

    expr  := ("ROW" | "COL") "(" child ("," child)* ")"
    child := name [integer "%"] | expr [integer "%"]

Keywords are case-insensitive; serialization is canonical (uppercase keyword,
``", "`` between children, percent omitted when unset).
"""

import re

from muxlayout.errors import ParseError
from muxlayout.models import Col, LayoutEntry, LayoutNode, Pane, Row

_KEYWORDS = ("ROW", "COL")
_PUNCT = ("(", ")", ",", "%")
_TOKEN_RE = re.compile(r"[(),%]|[^\s(),%]+")


class _Parser:
    """Recursive-descent parser over a flat token list."""

    def __init__(self, text: str):
        self._text = text
        self._tokens = [(m.group(), m.start()) for m in _TOKEN_RE.finditer(text)]
        self._pos = 0

    def parse(self) -> LayoutNode:
        if not self._tokens:
            raise ParseError("empty layout expression")
        node = self._expression()
        if self._pos < len(self._tokens):
            tok, at = self._tokens[self._pos]
            if tok == ")":
                raise ParseError(f"unbalanced parentheses: unexpected ')' at position {at}")
            raise ParseError(f"unexpected trailing input {tok!r} at position {at}")
        return node

    def _peek(self, offset: int = 0) -> str | None:
        idx = self._pos + offset
        return self._tokens[idx][0] if idx < len(self._tokens) else None

    def _at(self) -> int:
        if self._pos < len(self._tokens):
            return self._tokens[self._pos][1]
        return len(self._text)

    def _expect(self, wanted: str) -> None:
        tok = self._peek()
        if tok is None:
            if wanted == ")":
                raise ParseError("unbalanced parentheses: expected ')' but reached end of input")
            raise ParseError(f"expected {wanted!r} but reached end of input")
        if tok != wanted:
            raise ParseError(f"expected {wanted!r} at position {self._at()}, got {tok!r}")
        self._pos += 1

    def _expression(self) -> LayoutNode:
        tok = self._peek()
        if tok is None or tok.upper() not in _KEYWORDS:
            raise ParseError(f"expected ROW or COL at position {self._at()}, got {tok!r}")
        keyword = tok.upper()
        self._pos += 1
        self._expect("(")

        children = [self._child()]
        while self._peek() == ",":
            self._pos += 1
            children.append(self._child())
        self._expect(")")

        return Row(children) if keyword == "ROW" else Col(children)

    def _child(self) -> LayoutEntry:
        tok = self._peek()
        if tok is None:
            raise ParseError("unbalanced parentheses: expected a child but reached end of input")
        if tok in _PUNCT:
            raise ParseError(f"missing identifier at position {self._at()}, got {tok!r}")

        if tok.upper() in _KEYWORDS and self._peek(1) == "(":
            node = self._expression()
        else:
            node = Pane(agent=tok)
            self._pos += 1

        return LayoutEntry(node=node, percent=self._percent())

    def _percent(self) -> int | None:
        tok = self._peek()
        if tok is None or tok in (")", ","):
            return None
        if tok == "%":
            raise ParseError(f"missing percent value before '%' at position {self._at()}")
        if tok == "(":
            raise ParseError(f"unexpected '(' at position {self._at()}")

        at = self._at()
        self._pos += 1
        if not (tok.isascii() and tok.isdigit()):
            raise ParseError(f"non-numeric percent {tok!r} at position {at}")
        self._expect("%")
        value = int(tok)
        if value > 100:
            raise ParseError(f"percent {value} out of range 0-100 at position {at}")
        return value


def parse(text: str) -> LayoutNode:
    """Parse a layout expression into a tree.

    A bare identifier is not an expression: the ``"pilot"`` that
    ``serialize`` produces for a single named pane does not parse back.

    Args:
        text: Expression such as ``"COL(pm 30%, ROW(worker, worker) 70%)"``.

    Returns:
        The root Row or Col node.

    Raises:
        ParseError: On unbalanced parentheses, a child without a name,
            a non-numeric or out-of-range percent, trailing input, or nesting
            deeper than the interpreter stack allows.
    """
    try:
        return _Parser(text).parse()
    except RecursionError:
        raise ParseError("layout expression nested too deeply") from None


def serialize(node: LayoutNode) -> str:
    """Serialize a tree to its canonical expression.

    A bare ``Pane`` serializes to its agent name, and ``Pane("")`` to the
    empty string (a capture of agent-less tmux panes). Neither parses back.
    """
    if isinstance(node, Pane):
        return node.agent
    keyword = "ROW" if isinstance(node, Row) else "COL"
    return f"{keyword}({', '.join(_serialize_entry(e) for e in node.children)})"


def _serialize_entry(entry: LayoutEntry) -> str:
    text = serialize(entry.node)
    if entry.percent is None:
        return text
    return f"{text} {entry.percent}%"
