"""Parts registry - parse parts.md into Tiles and expand them into layouts.

Parts are reusable layout building blocks:

- Agent: a single pane bound to a role (``role: <name>``)
- Composition: a ``ROW(...)``/``COL(...)`` layout over agents only
- Session: a layout that references other compositions or sessions

Format: markdown, one ``## <name>`` heading per part followed by its body.
Bodies that are neither a role line nor a layout expression produce no part;
they are reported in ``PartRegistry.skipped`` instead of raising.
"""

import dataclasses
from pathlib import Path
from typing import Iterator

from pydantic import BaseModel

from muxlayout import config
from muxlayout.config import METRICS_ENABLED
from muxlayout.errors import CycleError, ParseError
from muxlayout.layout.expr import parse
from muxlayout.models import LayoutEntry, LayoutNode, Pane, SkippedItem, Tile, TileKind, iter_leaves
from muxlayout.telemetry import get_logger, metrics

logger = get_logger(__name__)


class AgentSummary(BaseModel):
    name: str
    role: str | None = None


class PartSummary(BaseModel):
    name: str


class RegistrySummary(BaseModel):
    """Presentation summary of a registry, grouped by kind."""
    agents: list[AgentSummary] = []
    compositions: list[PartSummary] = []
    sessions: list[PartSummary] = []


class PartRegistry:
    """Ordered, immutable collection of parts keyed by name.

    Built once from markdown; reloading means building a new registry.
    """

    def __init__(self, parts: tuple[Tile, ...] = (), skipped: tuple[SkippedItem, ...] = ()):
        self._parts = tuple(parts)
        self._by_name = {tile.name: tile for tile in self._parts}
        self._skipped = tuple(skipped)

    @classmethod
    def from_markdown(cls, text: str) -> "PartRegistry":
        """Parse parts from markdown text (the contents of parts.md).

        Args:
            text: Markdown with ``## name`` headings

        Returns:
            Registry with classified parts; malformed parts are listed in
            ``skipped``.
        """
        provisional: list[Tile] = []
        skipped: list[SkippedItem] = []
        seen: set[str] = set()

        for name, body in _split_sections(text):
            if not name:
                skipped.append(SkippedItem(name=name, reason="empty part name"))
                continue
            if name in seen:
                skipped.append(SkippedItem(name=name, reason="duplicate part name"))
                continue
            try:
                provisional.append(_parse_part_body(name, body))
            except ParseError as e:
                skipped.append(SkippedItem(name=name, reason=str(e)))
                continue
            seen.add(name)

        parts = _classify(provisional)

        for item in skipped:
            logger.debug(f"[Parts] Skipped part {item.name!r}: {item.reason}")
        if METRICS_ENABLED and skipped:
            metrics.inc("parts.skipped", value=len(skipped))
        logger.debug(f"[Parts] Loaded {len(parts)} parts ({len(skipped)} skipped)")

        return cls(parts, tuple(skipped))

    @classmethod
    def from_file(cls, path: str | Path) -> "PartRegistry":
        """Load parts from a file. A missing file yields an empty registry."""
        try:
            text = Path(path).read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info(f"[Parts] No parts file at {path}, using empty registry")
            return cls()
        return cls.from_markdown(text)

    @classmethod
    def from_default_path(cls) -> "PartRegistry":
        """Load from ``config.PARTS_PATH``."""
        return cls.from_file(config.PARTS_PATH)

    @property
    def parts(self) -> tuple[Tile, ...]:
        return self._parts

    @property
    def skipped(self) -> tuple[SkippedItem, ...]:
        """Parts dropped during ingest, with reasons."""
        return self._skipped

    def __len__(self) -> int:
        return len(self._parts)

    def __iter__(self) -> Iterator[Tile]:
        return iter(self._parts)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def get(self, name: str) -> Tile | None:
        return self._by_name.get(name)

    def names(self) -> list[str]:
        return [tile.name for tile in self._parts]

    def by_kind(self, kind: TileKind) -> list[Tile]:
        return [tile for tile in self._parts if tile.kind is kind]

    def expand(self, name: str) -> LayoutNode | None:
        """Recursively expand a part into a concrete layout tree.

        Agents become a single Pane. For compositions and sessions, every leaf
        naming a part with a layout is replaced by that part's expansion;
        leaves naming agents or unknown names are kept as they are.

        Args:
            name: Part name

        Returns:
            The expanded tree, or None if no such part exists.

        Raises:
            CycleError: A part (directly or indirectly) contains itself.
        """
        if name not in self._by_name:
            return None
        return self._expand(name, [])

    def _expand(self, name: str, path: list[str]) -> LayoutNode:
        if name in path:
            raise CycleError(path + [name])
        tile = self._by_name[name]
        if tile.kind is TileKind.AGENT or tile.layout is None:
            return Pane(agent=name)
        return self._expand_node(tile.layout, path + [name])

    def _expand_node(self, node: LayoutNode, path: list[str]) -> LayoutNode:
        if isinstance(node, Pane):
            tile = self._by_name.get(node.agent)
            if tile is not None and tile.layout is not None:
                return self._expand(node.agent, path)
            return Pane(agent=node.agent)
        children = [
            LayoutEntry(node=self._expand_node(entry.node, path), percent=entry.percent)
            for entry in node.children
        ]
        return type(node)(children)

    def summary(self) -> RegistrySummary:
        return RegistrySummary(
            agents=[AgentSummary(name=t.name, role=t.role) for t in self.by_kind(TileKind.AGENT)],
            compositions=[PartSummary(name=t.name) for t in self.by_kind(TileKind.COMPOSITION)],
            sessions=[PartSummary(name=t.name) for t in self.by_kind(TileKind.SESSION)],
        )

    def to_dict(self) -> dict:
        return self.summary().model_dump()

    def to_json(self) -> str:
        """Serialize the grouped summary to JSON."""
        return self.summary().model_dump_json()


def _split_sections(text: str) -> Iterator[tuple[str, str]]:
    """Yield (name, body) for each ``## `` section, in document order."""
    name: str | None = None
    body: list[str] = []
    for line in text.splitlines():
        if line.startswith("## "):
            if name is not None:
                yield name, "\n".join(body)
            name = line[3:].strip()
            body = []
        elif line.startswith(("# ", "### ")):
            continue
        elif name is not None:
            body.append(line)
    if name is not None:
        yield name, "\n".join(body)


def _parse_part_body(name: str, body: str) -> Tile:
    """Classify one part body as an Agent or a (provisional) Composition.

    Raises:
        ParseError: The body is empty, not a layout, or an invalid layout.
    """
    lines = [line.strip() for line in body.splitlines() if line.strip()]
    if not lines:
        raise ParseError("empty body")

    for line in lines:
        if line.startswith("role:"):
            return Tile(name=name, kind=TileKind.AGENT, role=line[len("role:"):].strip())

    first = lines[0]
    if not first.upper().startswith(("ROW(", "COL(")):
        raise ParseError(f"body is neither 'role:' nor ROW/COL layout: {first!r}")
    return Tile(name=name, kind=TileKind.COMPOSITION, layout=parse(first))


def _classify(provisional: list[Tile]) -> tuple[Tile, ...]:
    """Promote compositions that reference non-agent parts to sessions."""
    agent_names = {t.name for t in provisional if t.kind is TileKind.AGENT}
    part_names = {t.name for t in provisional} - agent_names

    def references_parts(layout: LayoutNode) -> bool:
        return any(leaf.agent in part_names for leaf in iter_leaves(layout))

    return tuple(
        dataclasses.replace(tile, kind=TileKind.SESSION)
        if tile.kind is TileKind.COMPOSITION and references_parts(tile.layout)
        else tile
        for tile in provisional
    )
