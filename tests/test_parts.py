"""Tests for the parts registry."""

import json

import pytest

from muxlayout import config
from muxlayout.errors import CycleError
from muxlayout.models import Col, LayoutEntry, Pane, Row, TileKind
from muxlayout.parts import PartRegistry
from muxlayout.telemetry import metrics


@pytest.fixture
def registry(sample_parts):
    return PartRegistry.from_markdown(sample_parts)


class TestFromMarkdown:
    """Parsing and classification."""

    def test_total_parts_count(self, registry):
        assert len(registry) == 8
        assert registry.names() == [
            "pm", "worker", "curator", "remote",
            "rig", "dev-pair", "dev-station", "gpu-station",
        ]

    def test_parse_agents(self, registry):
        agents = registry.by_kind(TileKind.AGENT)
        assert {t.name for t in agents} == {"pm", "worker", "curator", "remote"}

    def test_agent_has_role(self, registry):
        pm = registry.get("pm")
        assert pm.kind is TileKind.AGENT
        assert pm.role == "pm"
        assert pm.layout is None

    def test_parse_compositions(self, registry):
        comps = registry.by_kind(TileKind.COMPOSITION)
        assert [t.name for t in comps] == ["rig", "dev-pair"]

    def test_composition_has_layout(self, registry):
        rig = registry.get("rig")
        assert rig.role is None
        assert rig.layout == Col([
            LayoutEntry(Pane("remote"), 70),
            LayoutEntry(Pane("worker"), 30),
        ])

    def test_parse_sessions(self, registry):
        sessions = registry.by_kind(TileKind.SESSION)
        assert [t.name for t in sessions] == ["dev-station", "gpu-station"]

    def test_session_keeps_reference_leaf(self, registry):
        ds = registry.get("dev-station")
        assert ds.layout.children[1] == LayoutEntry(Pane("dev-pair"), 70)

    def test_deep_reference_promotes_whole_part(self):
        text = "## a\nrole: a\n## pair\nROW(a, a)\n## big\nCOL(a 50%, ROW(a, COL(a, pair)) 50%)\n"
        reg = PartRegistry.from_markdown(text)
        assert reg.get("big").kind is TileKind.SESSION

    def test_unknown_leaf_names_stay_composition(self):
        reg = PartRegistry.from_markdown("## team\nROW(ghost, phantom)\n")
        assert reg.get("team").kind is TileKind.COMPOSITION

    def test_forward_reference_counts(self):
        """Classification runs after every part is ingested."""
        reg = PartRegistry.from_markdown("## outer\nROW(inner, x)\n## inner\nCOL(x, y)\n")
        assert reg.get("outer").kind is TileKind.SESSION
        assert reg.get("inner").kind is TileKind.COMPOSITION

    def test_role_line_anywhere_in_body(self):
        reg = PartRegistry.from_markdown("## lead\nThe project lead.\n  role:  pm  \n")
        lead = reg.get("lead")
        assert lead.kind is TileKind.AGENT
        assert lead.role == "pm"

    def test_layout_keyword_case_insensitive(self):
        reg = PartRegistry.from_markdown("## pair\n\nrow(a, b)\n")
        assert isinstance(reg.get("pair").layout, Row)

    def test_h1_and_h3_lines_ignored(self):
        text = "# Title\n## pm\n### notes\nrole: pm\n"
        reg = PartRegistry.from_markdown(text)
        assert reg.get("pm").role == "pm"

    def test_lines_before_first_part_ignored(self):
        reg = PartRegistry.from_markdown("role: orphan\n## pm\nrole: pm\n")
        assert reg.names() == ["pm"]

    def test_heading_name_trimmed(self):
        reg = PartRegistry.from_markdown("##   spaced name  \nrole: x\n")
        assert "spaced name" in reg

    def test_empty_input(self):
        reg = PartRegistry.from_markdown("")
        assert len(reg) == 0
        assert reg.skipped == ()


class TestSkipped:
    """Malformed parts are dropped, not raised."""

    def test_malformed_body_skipped(self):
        reg = PartRegistry.from_markdown(
            "## bad-part\nthis is not a valid layout or role\n\n## good-pm\nrole: pm\n"
        )
        assert reg.names() == ["good-pm"]
        assert [item.name for item in reg.skipped] == ["bad-part"]

    def test_unparsable_layout_skipped(self):
        reg = PartRegistry.from_markdown("## broken\nROW(a, b\n## ok\nROW(a, b)\n")
        assert reg.names() == ["ok"]
        assert "unbalanced" in reg.skipped[0].reason

    def test_empty_body_skipped(self):
        reg = PartRegistry.from_markdown("## empty\n\n## pm\nrole: pm\n")
        assert "empty" not in reg
        assert reg.skipped[0].reason == "empty body"

    def test_duplicate_name_keeps_first(self):
        reg = PartRegistry.from_markdown("## pm\nrole: lead\n## pm\nrole: other\n")
        assert reg.get("pm").role == "lead"
        assert reg.skipped[0].reason == "duplicate part name"

    def test_deeply_nested_layout_skipped(self):
        reg = PartRegistry.from_markdown("## deep\n" + "ROW(" * 5000 + "\n## pm\nrole: pm\n")
        assert reg.names() == ["pm"]
        assert reg.skipped[0].name == "deep"
        assert "nested too deeply" in reg.skipped[0].reason

    def test_skipped_metric(self):
        PartRegistry.from_markdown("## a\nnope\n## b\nalso nope\n")
        assert metrics.get_counter("parts.skipped") == 2


class TestExpand:
    """Recursive expansion."""

    def test_expand_agent(self, registry):
        assert registry.expand("pm") == Pane("pm")

    def test_expand_composition(self, registry):
        assert registry.expand("rig") == Col([
            LayoutEntry(Pane("remote"), 70),
            LayoutEntry(Pane("worker"), 30),
        ])

    def test_expand_session_recursive(self, registry):
        # dev-station = COL(pm 30%, dev-pair 70%), dev-pair = ROW(worker, worker)
        assert registry.expand("dev-station") == Col([
            LayoutEntry(Pane("pm"), 30),
            LayoutEntry(Row([LayoutEntry(Pane("worker")), LayoutEntry(Pane("worker"))]), 70),
        ])

    def test_expand_substitutes_composition_expansion(self, registry):
        gpu = registry.expand("gpu-station")
        assert gpu.children[0] == LayoutEntry(registry.expand("rig"), 80)
        assert gpu.children[1] == LayoutEntry(Pane("curator"), 20)

    def test_expand_does_not_mutate_registry(self, registry):
        registry.expand("dev-station")
        assert registry.get("dev-station").layout.children[1].node == Pane("dev-pair")

    def test_unknown_leaf_kept(self):
        reg = PartRegistry.from_markdown("## team\nROW(ghost, phantom 40%)\n")
        assert reg.expand("team") == Row([LayoutEntry(Pane("ghost")), LayoutEntry(Pane("phantom"), 40)])

    def test_get_nonexistent(self, registry):
        assert registry.get("nonexistent") is None
        assert registry.expand("nonexistent") is None

    def test_self_reference_raises_cycle_error(self):
        reg = PartRegistry.from_markdown("## loop\nROW(loop, x)\n")
        with pytest.raises(CycleError) as exc:
            reg.expand("loop")
        assert exc.value.path == ["loop", "loop"]

    def test_mutual_reference_raises_cycle_error(self):
        reg = PartRegistry.from_markdown("## a\nROW(b, x)\n## b\nCOL(a, y)\n")
        with pytest.raises(CycleError, match="a -> b -> a"):
            reg.expand("a")

    def test_shared_subpart_is_not_a_cycle(self):
        """The same part used twice in one tree is a DAG, not a cycle."""
        reg = PartRegistry.from_markdown("## w\nrole: w\n## pair\nROW(w, w)\n## quad\nCOL(pair, pair)\n")
        quad = reg.expand("quad")
        assert quad.children[0].node == quad.children[1].node == reg.expand("pair")


class TestSummary:
    """JSON summary."""

    def test_to_json_groups(self, registry):
        data = json.loads(registry.to_json())
        assert len(data["agents"]) == 4
        assert len(data["compositions"]) == 2
        assert len(data["sessions"]) == 2

    def test_to_json_shape(self):
        reg = PartRegistry.from_markdown("## pm\nrole: lead\n## pair\nROW(pm, pm)\n")
        assert json.loads(reg.to_json()) == {
            "agents": [{"name": "pm", "role": "lead"}],
            "compositions": [{"name": "pair"}],
            "sessions": [],
        }

    def test_to_dict_matches_json(self, registry):
        assert registry.to_dict() == json.loads(registry.to_json())


class TestLoading:
    """File loading."""

    def test_missing_file(self, tmp_path):
        reg = PartRegistry.from_file(tmp_path / "nonexistent" / "parts.md")
        assert len(reg) == 0

    def test_from_file(self, tmp_path, sample_parts):
        path = tmp_path / "parts.md"
        path.write_text(sample_parts, encoding="utf-8")
        assert len(PartRegistry.from_file(path)) == 8
        assert len(PartRegistry.from_file(str(path))) == 8

    def test_from_default_path(self, tmp_path, monkeypatch):
        path = tmp_path / "parts.md"
        path.write_text("## pm\nrole: pm\n", encoding="utf-8")
        monkeypatch.setattr(config, "PARTS_PATH", str(path))
        assert PartRegistry.from_default_path().names() == ["pm"]

    def test_reload_builds_new_registry(self, tmp_path):
        path = tmp_path / "parts.md"
        path.write_text("## pm\nrole: pm\n", encoding="utf-8")
        first = PartRegistry.from_file(path)
        path.write_text("## pm\nrole: pm\n## qa\nrole: qa\n", encoding="utf-8")
        second = PartRegistry.from_file(path)
        assert first.names() == ["pm"]
        assert second.names() == ["pm", "qa"]
