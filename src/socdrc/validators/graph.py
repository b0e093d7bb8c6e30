"""DRC用のグラフモデルとインターフェースリゾルバ。"""

import logging

import networkx as nx

from socdrc.models.diagram import ArchitectureDiagram, CatalogueComponent, ComponentInterface, ComponentNode, Connection

logger = logging.getLogger(__name__)


class DiagramGraph:
    """ダイアグラムをNetworkXの有向マルチグラフとして扱う。

    IDが重複する場合は先に現れたノードを採用する。入出力本数は存在しない
    ノードへの辺も数えるが、閉路・パスの探索は両端が存在する辺のみを辿る。
    並列辺は保持するため、同じノード列のパスは辺ごとに列挙される。
    """

    def __init__(self, diagram: ArchitectureDiagram) -> None:
        self._diagram = diagram
        self._nodes: tuple[ComponentNode, ...] = tuple(diagram.nodes)
        self._edges: tuple[Connection, ...] = tuple(diagram.edges)
        self._by_id: dict[str, ComponentNode] = {}
        self._index: dict[str, int] = {}
        for i, node in enumerate(self._nodes):
            if node.id not in self._by_id:
                self._by_id[node.id] = node
                self._index[node.id] = i

        self._graph = nx.MultiDiGraph()
        self._traversal = nx.MultiDiGraph()
        for node_id, node in self._by_id.items():
            self._graph.add_node(node_id, node=node)
            self._traversal.add_node(node_id, node=node)
        for edge in self._edges:
            self._graph.add_edge(edge.source, edge.target, connection=edge)
            if edge.source in self._by_id and edge.target in self._by_id:
                self._traversal.add_edge(edge.source, edge.target, connection=edge)
        logger.debug(
            "Built diagram graph: %d nodes, %d edges (%d traversable)",
            len(self._by_id),
            self._graph.number_of_edges(),
            self._traversal.number_of_edges(),
        )

    @property
    def diagram(self) -> ArchitectureDiagram:
        return self._diagram

    @property
    def nodes(self) -> tuple[ComponentNode, ...]:
        return self._nodes

    @property
    def edges(self) -> tuple[Connection, ...]:
        return self._edges

    def __len__(self) -> int:
        return len(self._nodes)

    def has_node(self, node_id: str) -> bool:
        return node_id in self._by_id

    def node(self, node_id: str) -> ComponentNode | None:
        return self._by_id.get(node_id)

    def index_of(self, node_id: str) -> int | None:
        """ノードがダイアグラム上で最初に現れる位置。"""
        return self._index.get(node_id)

    def successors(self, node_id: str) -> list[str]:
        """両端が存在する辺で到達できる後続ノード（重複なし、辺の定義順）。"""
        if node_id not in self._traversal:
            return []
        return list(self._traversal.successors(node_id))

    def out_degree(self, node_id: str) -> int:
        return self._graph.out_degree(node_id) if node_id in self._graph else 0

    def in_degree(self, node_id: str) -> int:
        return self._graph.in_degree(node_id) if node_id in self._graph else 0

    def isolates(self) -> set[str]:
        """接続を1本も持たないノードID。"""
        return set(nx.isolates(self._graph))

    def is_connected(self, node_id: str) -> bool:
        return self.out_degree(node_id) > 0 or self.in_degree(node_id) > 0

    def cycles(self) -> list[list[str]]:
        """有向閉路（単純閉路）をノードIDの列として返す。

        各閉路はダイアグラム上で最も先に現れるノードから始まるよう回転し、
        その位置の並びで整列する。並列辺による同一閉路は1回だけ返す。
        """
        order = self._index
        cycles: list[list[str]] = []
        for cycle in nx.simple_cycles(nx.DiGraph(self._traversal)):
            start = min(range(len(cycle)), key=lambda i: order[cycle[i]])
            cycles.append(cycle[start:] + cycle[:start])
        cycles.sort(key=lambda c: [order[node_id] for node_id in c])
        return cycles

    def terminal_paths(self, start: str, max_depth: int) -> list[list[str]]:
        """startから行き止まりのノードまでの単純パスをすべて返す。

        辺の数がmax_depth以下のパスのみ。行き止まりは後続ノードを持たない
        ノードで、start自身は含めない。
        """
        if start not in self._traversal:
            return []
        terminals = [n for n in self._traversal if n != start and self._traversal.out_degree(n) == 0]
        if not terminals:
            return []
        return [list(path) for path in nx.all_simple_paths(self._traversal, start, terminals, cutoff=max_depth)]

    def label(self, node_id: str) -> str:
        """表示用のノード名。ラベルが空ならIDを返す。"""
        node = self.node(node_id)
        if node is None or not node.label:
            return node_id
        return node.label


class InterfaceResolver:
    """ノードのインターフェース一覧を解決する。

    ダイアグラムに埋め込まれたインターフェースを優先し、無い場合のみ
    ``componentId`` でコンポーネントライブラリを引く。どちらも無いノードは
    空リストとなり、データ品質警告として記録される。
    """

    def __init__(self, graph: DiagramGraph, catalogue: list[CatalogueComponent] | None = None) -> None:
        self._graph = graph
        self._catalogue: dict[str, CatalogueComponent] = {}
        for component in catalogue or []:
            self._catalogue.setdefault(component.id, component)
        self._cache: dict[str, list[ComponentInterface]] = {}
        self._missing: list[str] = []

    @property
    def missing_interfaces(self) -> list[str]:
        """インターフェースを解決できなかったノードID（初回解決順）。"""
        return list(self._missing)

    def resolve_all(self) -> None:
        for node in self._graph.nodes:
            self.interfaces(node.id)

    def interfaces(self, node_id: str) -> list[ComponentInterface]:
        if node_id in self._cache:
            return self._cache[node_id]
        node = self._graph.node(node_id)
        resolved: list[ComponentInterface] = []
        if node is not None:
            resolved = self._resolve(node)
        self._cache[node_id] = resolved
        return resolved

    def _resolve(self, node: ComponentNode) -> list[ComponentInterface]:
        if node.interfaces:
            return list(node.interfaces)

        component = self._catalogue.get(node.component_id) if node.component_id else None
        if component is not None and component.interfaces:
            logger.debug(
                "Using %d catalogue interfaces for node %s (%s)",
                len(component.interfaces),
                node.label,
                node.id,
            )
            return list(component.interfaces)

        logger.warning("Node %s (%s) has no interfaces in diagram data", node.label, node.id)
        self._missing.append(node.id)
        return []

    def find(self, node_id: str, interface_id: str | None) -> ComponentInterface | None:
        if interface_id is None:
            return None
        for iface in self.interfaces(node_id):
            if iface.id == interface_id:
                return iface
        return None

    def interface_name(self, node_id: str, interface_id: str) -> str:
        iface = self.find(node_id, interface_id)
        return iface.name if iface is not None and iface.name else interface_id

    def location(self, node_id: str, interface_id: str | None = None) -> str:
        """``NodeLabel.InterfaceName`` 形式の位置表記。"""
        node_name = self._graph.label(node_id)
        if not interface_id:
            return node_name
        return f"{node_name}.{self.interface_name(node_id, interface_id)}"

    def connection_location(self, edge: Connection) -> str:
        """``Source.Iface → Target.Iface`` 形式の接続表記。"""
        source = self.location(edge.source, edge.source_handle)
        target = self.location(edge.target, edge.target_handle)
        return f"{source} → {target}"

    def resolve_edge(self, edge: Connection) -> tuple[ComponentInterface | None, ComponentInterface | None]:
        """接続の実効インターフェース（送信側, 受信側）を返す。

        ハンドル指定があればそのインターフェース、無ければ送信側は最初の
        master、受信側は最初のslave、いずれも無ければ先頭のインターフェース。
        """
        if not self._graph.has_node(edge.source) or not self._graph.has_node(edge.target):
            return None, None
        source = self._pick(edge.source, edge.source_handle, "master")
        target = self._pick(edge.target, edge.target_handle, "slave")
        return source, target

    def _pick(self, node_id: str, handle: str | None, role: str) -> ComponentInterface | None:
        interfaces = self.interfaces(node_id)
        if handle:
            return self.find(node_id, handle)
        for iface in interfaces:
            if iface.direction == role:
                return iface
        return interfaces[0] if interfaces else None
