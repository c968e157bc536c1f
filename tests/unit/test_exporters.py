"""Unit tests for pegraph.exporters — text listing, DOT and rendering."""
from __future__ import annotations

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from pegraph.errors import RenderError
from pegraph.exporters import DotExporter, TextExporter, location_color, render_dot
from pegraph.exporters.dot import fnv1a_32
from pegraph.exporters.text import display_labels, truncate
from pegraph.model.nodes import Instance, InstanceGraph, Location

WEB_ID = "obj_web_L1_0123456789abcdef"
DB_ID = "obj_db_L2_fedcba9876543210"


def _graph() -> InstanceGraph:
    l1, l2 = Location("L1"), Location("L2")
    graph = InstanceGraph(
        nodes=[
            Instance(id=WEB_ID, type_name="web", location=l1),
            Instance(id=DB_ID, type_name="db", location=l2),
        ]
    )
    graph.add_edge(WEB_ID, DB_ID)
    return graph


class TestTruncate:
    def test_truncates(self) -> None:
        assert truncate("abcdef", 3) == "abc"

    def test_zero_keeps_whole(self) -> None:
        assert truncate("abcdef", 0) == "abcdef"

    def test_shorter_than_width(self) -> None:
        assert truncate("ab", 15) == "ab"


class TestTextExporter:
    def test_listing(self) -> None:
        text = TextExporter().export(_graph())
        assert text == (
            "---- Nodes:\n"
            "obj_web_L1_0123\n"
            "obj_db_L2_fedcb\n"
            "---- Edges:\n"
            "obj_web_L1_0123-obj_db_L2_fedcb\n"
        )

    def test_full_ids(self) -> None:
        text = TextExporter(width=0).export(_graph())
        assert f"{WEB_ID}-{DB_ID}" in text

    def test_empty_graph(self) -> None:
        assert TextExporter().export(InstanceGraph()) == "---- Nodes:\n---- Edges:\n"


LONG_A = "obj_Authenticator_L1_0123456789"
LONG_B = "obj_Authenticator_L2_fedcba9876"


def _long_type_graph() -> InstanceGraph:
    graph = InstanceGraph(
        nodes=[
            Instance(id=LONG_A, type_name="Authenticator", location=Location("L1")),
            Instance(id=LONG_B, type_name="Authenticator", location=Location("L2")),
            Instance(id=WEB_ID, type_name="web", location=Location("L1")),
        ]
    )
    graph.add_edge(WEB_ID, LONG_A)
    graph.add_edge(WEB_ID, LONG_B)
    return graph


class TestDisplayLabels:
    def test_distinct_prefixes_truncated(self) -> None:
        assert display_labels([WEB_ID, DB_ID], 15) == {
            WEB_ID: "obj_web_L1_0123",
            DB_ID: "obj_db_L2_fedcb",
        }

    def test_colliding_prefixes_kept_whole(self) -> None:
        labels = display_labels([LONG_A, LONG_B, WEB_ID], 15)
        assert labels == {LONG_A: LONG_A, LONG_B: LONG_B, WEB_ID: "obj_web_L1_0123"}

    def test_labels_always_unique(self) -> None:
        ids = [f"obj_VeryLongTypeName_L{i}_{i:04d}" for i in range(5)]
        labels = display_labels(ids, 10)
        assert len(set(labels.values())) == len(ids)

    def test_text_listing_keeps_instances_apart(self) -> None:
        text = TextExporter().export(_long_type_graph())
        assert f"obj_web_L1_0123-{LONG_A}\n" in text
        assert f"obj_web_L1_0123-{LONG_B}\n" in text

    def test_dot_keeps_instances_apart(self) -> None:
        dot = DotExporter().export(_long_type_graph())
        assert f'"obj_web_L1_0123" -> "{LONG_A}";' in dot
        assert f'"obj_web_L1_0123" -> "{LONG_B}";' in dot
        assert dot.count("colorscheme=") == 3


class TestFnv:
    def test_known_vectors(self) -> None:
        assert fnv1a_32("") == 0x811C9DC5
        assert fnv1a_32("a") == 0xE40C292C
        assert fnv1a_32("foobar") == 0xBF9CF968

    def test_color_in_range(self) -> None:
        for name in ("L1", "L2", "edge-1", "core", ""):
            assert 1 <= int(location_color(name)) <= 12

    def test_color_stable(self) -> None:
        assert location_color("L1") == location_color("L1")


class TestDotExporter:
    def test_digraph_structure(self) -> None:
        dot = DotExporter().export(_graph())
        assert dot.startswith('digraph "pegraph" {\n')
        assert dot.rstrip().endswith("}")
        assert '"obj_web_L1_0123" -> "obj_db_L2_fedcb";' in dot

    def test_node_styling(self) -> None:
        dot = DotExporter().export(_graph())
        expected = (
            '"obj_db_L2_fedcb" [colorscheme="paired12", style="filled", '
            f'color="2", fillcolor="{location_color("L2")}"];'
        )
        assert expected in dot

    def test_nodes_at_same_location_share_color(self) -> None:
        loc = Location("L1")
        graph = InstanceGraph(
            nodes=[Instance(id="a", type_name="x", location=loc), Instance(id="b", type_name="y", location=loc)]
        )
        dot = DotExporter().export(graph)
        assert dot.count(f'fillcolor="{location_color("L1")}"') == 2

    def test_quotes_escaped(self) -> None:
        graph = InstanceGraph(nodes=[Instance(id='a"b', type_name="x", location=Location("L1"))])
        assert '"a\\"b"' in DotExporter().export(graph)

    def test_custom_name(self) -> None:
        assert DotExporter(name="app").export(InstanceGraph()).startswith('digraph "app" {')


class TestRenderDot:
    def test_missing_executable(self, tmp_path: Path) -> None:
        with patch("pegraph.exporters.dot.shutil.which", return_value=None):
            with pytest.raises(RenderError, match="not found"):
                render_dot(tmp_path / "g.gv")

    def test_invokes_dot(self, tmp_path: Path) -> None:
        source = tmp_path / "g.gv"
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")
        with patch("pegraph.exporters.dot.shutil.which", return_value="/usr/bin/dot"), patch(
            "pegraph.exporters.dot.subprocess.run", return_value=completed
        ) as mock_run:
            image = render_dot(source, "png")
        assert mock_run.call_args.args[0] == ["/usr/bin/dot", "-Tpng", "-O", str(source)]
        assert image == tmp_path / "g.gv.png"

    def test_non_zero_exit(self, tmp_path: Path) -> None:
        failed = MagicMock(returncode=2, stderr="syntax error\n")
        with patch("pegraph.exporters.dot.shutil.which", return_value="/usr/bin/dot"), patch(
            "pegraph.exporters.dot.subprocess.run", return_value=failed
        ):
            with pytest.raises(RenderError, match="status 2: syntax error"):
                render_dot(tmp_path / "g.gv")
