"""Unit tests for pegraph.instantiate — required placements and projected edges."""
from __future__ import annotations

import random
import uuid

import pytest

from pegraph.errors import IdentityCollisionError
from pegraph.identity import IdentityGenerator
from pegraph.instantiate import (
    create_instance,
    create_instances,
    generate_initial_graph,
    project_edges,
)
from pegraph.model.nodes import InstanceGraph, Location, TemplateGraph


def _identity() -> IdentityGenerator:
    return IdentityGenerator.seeded(random.Random(0))


class TestCreateInstance:
    def test_registers_with_location(self) -> None:
        loc = Location("L1")
        instance = create_instance("web", loc, _identity())
        assert instance.location is loc
        assert loc.instance_ids == [instance.id]
        assert instance.type_name == "web"

    def test_added_to_graph_when_given(self) -> None:
        loc = Location("L1")
        graph = InstanceGraph()
        instance = create_instance("web", loc, _identity(), graph)
        assert graph.get(instance.id) is instance

    def test_rejected_by_graph_leaves_location_untouched(self) -> None:
        loc = Location("L1")
        fixed = uuid.UUID(int=5, version=4)
        graph = InstanceGraph()
        create_instance("web", loc, IdentityGenerator(lambda: fixed), graph)
        with pytest.raises(IdentityCollisionError):
            create_instance("web", loc, IdentityGenerator(lambda: fixed), graph)
        assert len(loc.instance_ids) == 1
        assert len(graph) == 1


class TestCreateInstances:
    def test_one_instance_per_required_location(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        requirements = {"web": [locations["L1"], locations["L2"]]}
        instances = create_instances(template, requirements, _identity())
        assert [(n.type_name, n.location.name) for n in instances] == [
            ("web", "L1"),
            ("web", "L2"),
        ]

    def test_grouped_by_template_order(self, locations) -> None:
        template = TemplateGraph(nodes=["web", "db"], edges={"web": ["db"]})
        requirements = {"db": [locations["L2"]], "web": [locations["L1"]]}
        instances = create_instances(template, requirements, _identity())
        assert [n.type_name for n in instances] == ["web", "db"]

    def test_type_without_requirement_gets_nothing(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        instances = create_instances(template, {"web": [locations["L1"]]}, _identity())
        assert all(n.type_name == "web" for n in instances)

    def test_location_shared_between_types(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        l1 = locations["L1"]
        instances = create_instances(template, {"web": [l1], "db": [l1]}, _identity())
        assert l1.instance_ids == [n.id for n in instances]

    def test_empty_requirements(self, make_template) -> None:
        assert create_instances(make_template({"web": ["db"]}), {}, _identity()) == []


class TestProjectEdges:
    def test_edges_follow_template(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        instances = create_instances(
            template,
            {"web": [locations["L1"]], "db": [locations["L1"], locations["L2"]]},
            _identity(),
        )
        web, db1, db2 = instances
        assert project_edges(template, instances) == {web.id: [db1.id, db2.id]}

    def test_no_reverse_edges(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        instances = create_instances(
            template, {"web": [locations["L1"]], "db": [locations["L1"]]}, _identity()
        )
        _, db = instances
        assert db.id not in project_edges(template, instances)

    def test_same_type_instances_not_connected_without_self_edge(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        instances = create_instances(
            template, {"web": [locations["L1"], locations["L2"]]}, _identity()
        )
        assert project_edges(template, instances) == {}


class TestGenerateInitialGraph:
    def test_builds_graph(self, locations, make_template) -> None:
        template = make_template({"web": ["db"]})
        graph = generate_initial_graph(
            template,
            {"web": [locations["L1"]], "db": [locations["L2"]]},
            identity=_identity(),
        )
        assert len(graph) == 2
        assert graph.edge_count == 1
        web, db = graph.nodes
        assert graph.has_edge(web.id, db.id)

    def test_default_identity(self, locations, make_template) -> None:
        graph = generate_initial_graph(make_template({"web": ["db"]}), {"web": [locations["L1"]]})
        assert graph.nodes[0].id.startswith("obj_web_L1_")
