"""DiagramGraph・InterfaceResolverのユニットテスト。"""

import logging
from typing import Any

import pytest

from socdrc.models.diagram import ArchitectureDiagram, CatalogueComponent, Connection
from socdrc.validators.graph import DiagramGraph, InterfaceResolver


def _iface(iid: str, direction: str = "slave", **extra: Any) -> dict[str, Any]:
    return {"id": iid, "name": iid, "direction": direction, **extra}


def _node(nid: str, label: str | None = None, interfaces: list[dict[str, Any]] | None = None, **extra: Any) -> dict[str, Any]:
    data: dict[str, Any] = {"label": nid.upper() if label is None else label, **extra}
    if interfaces is not None:
        data["interfaces"] = interfaces
    return {"id": nid, "data": data}


def _edge(eid: str, source: str, target: str, sh: str | None = None, th: str | None = None) -> dict[str, Any]:
    return {"id": eid, "source": source, "target": target, "sourceHandle": sh, "targetHandle": th}


def _graph(nodes: list[dict[str, Any]], edges: list[dict[str, Any]]) -> DiagramGraph:
    return DiagramGraph(ArchitectureDiagram.parse({"nodes": nodes, "edges": edges}))


class TestDiagramGraph:
    def test_duplicate_node_id_first_wins(self) -> None:
        graph = _graph([_node("a", "First"), _node("a", "Second")], [])
        assert len(graph) == 2
        assert graph.node("a").label == "First"  # type: ignore[union-attr]
        assert graph.index_of("a") == 0

    def test_successors_skip_missing_endpoints(self) -> None:
        graph = _graph([_node("a"), _node("b")], [_edge("e1", "a", "b"), _edge("e2", "a", "ghost")])
        assert graph.successors("a") == ["b"]
        assert graph.successors("ghost") == []
        assert graph.out_degree("a") == 2

    def test_degrees_and_connectivity(self) -> None:
        graph = _graph([_node("a"), _node("b"), _node("c")], [_edge("e1", "a", "b")])
        assert graph.in_degree("b") == 1
        assert graph.is_connected("a")
        assert graph.is_connected("b")
        assert not graph.is_connected("c")

    def test_parallel_edges_are_kept(self) -> None:
        graph = _graph([_node("a"), _node("b")], [_edge("e1", "a", "b"), _edge("e2", "a", "b")])
        assert graph.out_degree("a") == 2
        assert graph.in_degree("b") == 2
        assert graph.successors("a") == ["b"]

    def test_isolates(self) -> None:
        graph = _graph([_node("a"), _node("b"), _node("c")], [_edge("e1", "a", "ghost")])
        assert graph.isolates() == {"b", "c"}

    def test_cycles_start_at_first_node(self) -> None:
        graph = _graph([_node("a"), _node("b"), _node("c")], [_edge("e1", "b", "c"), _edge("e2", "c", "a"), _edge("e3", "a", "b")])
        assert graph.cycles() == [["a", "b", "c"]]

    def test_terminal_paths_follow_parallel_edges(self) -> None:
        graph = _graph([_node("a"), _node("b"), _node("c")], [_edge("e1", "a", "b"), _edge("e2", "a", "b"), _edge("e3", "b", "c")])
        assert graph.terminal_paths("a", max_depth=5) == [["a", "b", "c"], ["a", "b", "c"]]

    def test_label_falls_back_to_id(self) -> None:
        graph = _graph([_node("a", label="")], [])
        assert graph.label("a") == "a"
        assert graph.label("missing") == "missing"


class TestInterfaceResolver:
    def test_embedded_interfaces_preferred(self) -> None:
        graph = _graph([_node("a", interfaces=[_iface("s0")], componentId="lib")], [])
        catalogue = [CatalogueComponent.model_validate({"id": "lib", "interfaces": [_iface("other")]})]
        resolver = InterfaceResolver(graph, catalogue)
        assert [i.id for i in resolver.interfaces("a")] == ["s0"]

    def test_catalogue_fallback(self) -> None:
        graph = _graph([_node("a", componentId="lib")], [])
        catalogue = [CatalogueComponent.model_validate({"id": "lib", "interfaces": [_iface("s_axi")]})]
        resolver = InterfaceResolver(graph, catalogue)
        assert [i.id for i in resolver.interfaces("a")] == ["s_axi"]
        assert resolver.missing_interfaces == []

    def test_missing_interfaces_warned(self, caplog: pytest.LogCaptureFixture) -> None:
        graph = _graph([_node("a"), _node("b", interfaces=[_iface("s0")])], [])
        resolver = InterfaceResolver(graph)
        with caplog.at_level(logging.WARNING, logger="socdrc.validators.graph"):
            resolver.resolve_all()
            resolver.resolve_all()
        assert resolver.missing_interfaces == ["a"]
        assert sum("has no interfaces" in r.getMessage() for r in caplog.records) == 1

    def test_locations(self) -> None:
        graph = _graph(
            [_node("a", "CPU", [_iface("m0", "master", name="axi_m")]), _node("b", "DDR", [_iface("s0")])],
            [_edge("e1", "a", "b", "m0", "s0")],
        )
        resolver = InterfaceResolver(graph)
        assert resolver.location("a", "m0") == "CPU.axi_m"
        assert resolver.location("a") == "CPU"
        assert resolver.location("a", "unknown_port") == "CPU.unknown_port"
        assert resolver.connection_location(graph.edges[0]) == "CPU.axi_m → DDR.s0"

    def test_resolve_edge_with_handles(self) -> None:
        graph = _graph(
            [_node("a", interfaces=[_iface("x", "master"), _iface("y", "master")]), _node("b", interfaces=[_iface("s0")])],
            [_edge("e1", "a", "b", "y", "s0")],
        )
        source, target = InterfaceResolver(graph).resolve_edge(graph.edges[0])
        assert source is not None and source.id == "y"
        assert target is not None and target.id == "s0"

    def test_resolve_edge_without_handles_prefers_roles(self) -> None:
        graph = _graph(
            [
                _node("a", interfaces=[_iface("s_in", "slave"), _iface("m_out", "master")]),
                _node("b", interfaces=[_iface("m_x", "master"), _iface("s_x", "slave")]),
            ],
            [_edge("e1", "a", "b")],
        )
        source, target = InterfaceResolver(graph).resolve_edge(graph.edges[0])
        assert source is not None and source.id == "m_out"
        assert target is not None and target.id == "s_x"

    def test_resolve_edge_without_roles_uses_first(self) -> None:
        graph = _graph(
            [_node("a", interfaces=[_iface("o", "out")]), _node("b", interfaces=[_iface("i", "in")])],
            [_edge("e1", "a", "b")],
        )
        source, target = InterfaceResolver(graph).resolve_edge(graph.edges[0])
        assert source is not None and source.id == "o"
        assert target is not None and target.id == "i"

    def test_resolve_edge_unknown_handle(self) -> None:
        graph = _graph([_node("a", interfaces=[_iface("m0", "master")]), _node("b", interfaces=[_iface("s0")])], [])
        edge = Connection(id="e1", source="a", target="b", source_handle="nope", target_handle="s0")
        source, target = InterfaceResolver(graph).resolve_edge(edge)
        assert source is None
        assert target is not None

    def test_resolve_edge_missing_node(self) -> None:
        graph = _graph([_node("a", interfaces=[_iface("m0", "master")])], [])
        edge = Connection(id="e1", source="a", target="ghost")
        assert InterfaceResolver(graph).resolve_edge(edge) == (None, None)
