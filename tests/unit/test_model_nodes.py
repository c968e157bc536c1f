"""Unit tests for pegraph.model.nodes."""
from __future__ import annotations

import dataclasses

import pytest

from pegraph.errors import IdentityCollisionError, InvalidEdgeError
from pegraph.model.nodes import Instance, InstanceGraph, Location, PerfData, TemplateGraph


def _instance(instance_id: str, type_name: str = "web", location: Location | None = None) -> Instance:
    return Instance(id=instance_id, type_name=type_name, location=location or Location("L1"))


class TestLocation:
    def test_compared_by_identity(self) -> None:
        assert Location("L1") != Location("L1")

    def test_hashable(self) -> None:
        loc = Location("L1")
        assert {loc: 1}[loc] == 1

    def test_starts_empty(self) -> None:
        assert Location("L1").instance_ids == []


class TestInstance:
    def test_is_frozen(self) -> None:
        instance = _instance("a")
        with pytest.raises(dataclasses.FrozenInstanceError):
            instance.id = "b"  # type: ignore[misc]

    def test_repr_mentions_location_name(self) -> None:
        assert "'L1'" in repr(_instance("a"))


class TestPerfData:
    def test_fields(self) -> None:
        perf = PerfData(latency=1.5, bandwidth=100)
        assert perf.latency == 1.5
        assert perf.bandwidth == 100


class TestTemplateGraph:
    def setup_method(self) -> None:
        self.template = TemplateGraph(
            nodes=["gw", "auth", "cache"], edges={"gw": ["auth", "cache"]}
        )

    def test_dependencies_in_order(self) -> None:
        assert self.template.dependencies("gw") == ["auth", "cache"]

    def test_dependencies_of_leaf_is_empty(self) -> None:
        assert self.template.dependencies("auth") == []

    def test_dependents(self) -> None:
        assert self.template.dependents("cache") == ["gw"]

    def test_has_edge(self) -> None:
        assert self.template.has_edge("gw", "auth")
        assert not self.template.has_edge("auth", "gw")

    def test_is_leaf(self) -> None:
        assert self.template.is_leaf("auth")
        assert not self.template.is_leaf("gw")

    def test_empty_edge_list_counts_as_leaf(self) -> None:
        template = TemplateGraph(nodes=["a"], edges={"a": []})
        assert template.is_leaf("a")

    def test_iter_edges(self) -> None:
        assert list(self.template.iter_edges()) == [("gw", "auth"), ("gw", "cache")]


class TestInstanceGraph:
    def test_add_instance_and_lookup(self) -> None:
        graph = InstanceGraph()
        a = _instance("a")
        graph.add_instance(a)
        assert "a" in graph
        assert graph.get("a") is a
        assert len(graph) == 1

    def test_duplicate_instance_rejected(self) -> None:
        graph = InstanceGraph()
        graph.add_instance(_instance("a"))
        with pytest.raises(IdentityCollisionError) as exc_info:
            graph.add_instance(_instance("a"))
        assert exc_info.value.instance_id == "a"

    def test_duplicate_instance_rejected_at_construction(self) -> None:
        with pytest.raises(IdentityCollisionError):
            InstanceGraph(nodes=[_instance("a"), _instance("a")])

    def test_instances_of(self) -> None:
        graph = InstanceGraph(nodes=[_instance("a", "web"), _instance("b", "db"), _instance("c", "web")])
        assert [n.id for n in graph.instances_of("web")] == ["a", "c"]

    def test_add_edge_is_idempotent(self) -> None:
        graph = InstanceGraph(nodes=[_instance("a"), _instance("b")])
        assert graph.add_edge("a", "b") is True
        assert graph.add_edge("a", "b") is False
        assert graph.edges == {"a": ["b"]}
        assert graph.edge_count == 1

    def test_self_loop_rejected(self) -> None:
        graph = InstanceGraph(nodes=[_instance("a")])
        with pytest.raises(InvalidEdgeError, match="self-loop"):
            graph.add_edge("a", "a")

    def test_dangling_edge_rejected(self) -> None:
        graph = InstanceGraph(nodes=[_instance("a")])
        with pytest.raises(InvalidEdgeError, match="unknown instance 'ghost'"):
            graph.add_edge("a", "ghost")
        assert graph.edges == {}

    def test_iter_edges(self) -> None:
        graph = InstanceGraph(nodes=[_instance("a"), _instance("b"), _instance("c")])
        graph.add_edge("a", "b")
        graph.add_edge("a", "c")
        graph.add_edge("b", "c")
        assert list(graph.iter_edges()) == [("a", "b"), ("a", "c"), ("b", "c")]

    def test_complete_by_default(self) -> None:
        assert InstanceGraph().complete is True
