"""接続性ルール（category: Connectivity）。"""

from socdrc.models.diagram import ComponentInterface, Connection
from socdrc.models.drc import DRCViolation, Severity
from socdrc.validators.rules.base import Rule, RuleContext, edge_ids, violation


def check_port_uniqueness(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-008: 1つのポートに複数の接続がないか。

    送信側・受信側のハンドル参照を同じポートIDで数える。
    """
    usage: dict[tuple[str, str], list[Connection]] = {}
    for edge in ctx.graph.edges:
        if edge.source_handle:
            usage.setdefault((edge.source, edge.source_handle), []).append(edge)
        if edge.target_handle:
            usage.setdefault((edge.target, edge.target_handle), []).append(edge)

    results: list[DRCViolation] = []
    for (node_id, interface_id), edges in usage.items():
        if len(edges) <= 1:
            continue
        node_name = ctx.graph.label(node_id)
        intf_name = ctx.resolver.interface_name(node_id, interface_id)
        connections = edge_ids(*edges)
        results.append(
            violation(
                "DRC-CONN-008",
                location=f"{node_name}.{intf_name}",
                description=(
                    f"Port '{intf_name}' on component '{node_name}' has {len(edges)} connections. "
                    "Each port can only have one connection."
                ),
                suggestion=(
                    f"Add more ports to '{node_name}' or use a different port for each connection. "
                    "Interconnects should have sufficient ports for all connected components."
                ),
                affected_components=[node_id],
                affected_interfaces=[interface_id],
                affected_connections=connections,
                details={
                    "nodeId": node_id,
                    "nodeName": node_name,
                    "interfaceId": interface_id,
                    "interfaceName": intf_name,
                    "connectionCount": len(edges),
                    "connections": connections,
                },
            )
        )
    return results


def check_endpoint_existence(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-003: 接続の両端ノードが存在するか。"""
    results: list[DRCViolation] = []
    for edge in ctx.graph.edges:
        if edge.id:
            location = f"Connection {edge.id}"
        else:
            location = f"Connection from '{edge.source}' to '{edge.target}'"

        if not ctx.graph.has_node(edge.source):
            results.append(
                violation(
                    "DRC-CONN-003",
                    location=location,
                    description=f"Source node '{edge.source}' does not exist",
                    suggestion="Remove the invalid connection or add the missing component",
                    affected_connections=edge_ids(edge),
                    details={"missingNode": edge.source, "targetNode": edge.target, "edgeId": edge.id or "N/A"},
                )
            )
        if not ctx.graph.has_node(edge.target):
            results.append(
                violation(
                    "DRC-CONN-003",
                    location=location,
                    description=f"Target node '{edge.target}' does not exist",
                    suggestion="Remove the invalid connection or add the missing component",
                    affected_connections=edge_ids(edge),
                    details={"sourceNode": edge.source, "missingNode": edge.target, "edgeId": edge.id or "N/A"},
                )
            )
    return results


def _endpoint_details(
    ctx: RuleContext,
    edge: Connection,
    source: ComponentInterface,
    target: ComponentInterface,
    key: str,
    values: tuple[object, object],
) -> dict[str, object]:
    return {
        "source": {"node": ctx.graph.label(edge.source), "interface": source.name, key: values[0]},
        "target": {"node": ctx.graph.label(edge.target), "interface": target.name, key: values[1]},
        "connection": ctx.resolver.connection_location(edge),
    }


# (送信側の向き, 受信側の向き) → (ルールID, 重大度, 説明, 修正案)
_DIRECTION_ERRORS: dict[tuple[str, str], tuple[str, Severity, str, str]] = {
    ("slave", "slave"): (
        "DRC-CONN-001",
        "critical",
        "Slave interface connected to slave interface. Two slave interfaces cannot communicate directly.",
        "Slave interfaces must be connected to master interfaces. You may need an interconnect or bridge component.",
    ),
    ("out", "out"): (
        "DRC-CONN-007",
        "critical",
        "Output signal connected to output signal. Two outputs cannot be connected together.",
        "Connect output signals to input signals only. Check the signal direction.",
    ),
    ("in", "in"): (
        "DRC-CONN-007",
        "critical",
        "Input signal connected to input signal. Two inputs cannot be connected together.",
        "Connect input signals from output signals. Check the signal direction and connection order.",
    ),
    ("in", "out"): (
        "DRC-CONN-007",
        "warning",
        "Input connected to output. Connection direction may be reversed.",
        "Typically, connections flow from output to input. Consider reversing this connection.",
    ),
}


def check_role_matching(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-001 / DRC-CONN-007: master/slave・in/outの向きが整合しているか。

    両端のインターフェースが解決できた接続のみ検査する。
    """
    results: list[DRCViolation] = []
    for edge in ctx.graph.edges:
        source, target = ctx.resolver.resolve_edge(edge)
        if source is None or target is None:
            continue

        common = {
            "location": ctx.resolver.connection_location(edge),
            "affected_components": [edge.source, edge.target],
            "affected_interfaces": [source.id, target.id],
            "affected_connections": edge_ids(edge),
            "details": _endpoint_details(
                ctx, edge, source, target, "direction", (source.direction, target.direction)
            ),
        }

        if source.direction == "master" and target.direction != "slave":
            results.append(
                violation(
                    "DRC-CONN-001",
                    description=(
                        f"Master interface connected to non-slave interface ({target.direction}). "
                        "Master interfaces must connect to slave interfaces."
                    ),
                    suggestion=(
                        "Ensure master interfaces connect only to slave interfaces. "
                        "If connecting to an interconnect, use its slave port."
                    ),
                    **common,
                )
            )
            continue

        error = _DIRECTION_ERRORS.get((source.direction, target.direction))
        if error is not None:
            rule_id, severity, description, suggestion = error
            results.append(
                violation(rule_id, severity=severity, description=description, suggestion=suggestion, **common)
            )
    return results


def check_bus_type(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-002: 両端のバス種別が一致しているか。プロトコル変換は仮定しない。"""
    results: list[DRCViolation] = []
    for edge in ctx.graph.edges:
        source, target = ctx.resolver.resolve_edge(edge)
        if source is None or target is None:
            continue
        if not source.bus_type or not target.bus_type:
            continue
        if source.normalized_bus_type == target.normalized_bus_type:
            continue
        results.append(
            violation(
                "DRC-CONN-002",
                location=ctx.resolver.connection_location(edge),
                description=f"Bus type mismatch: {source.bus_type} → {target.bus_type}",
                suggestion="Change interface types to match or add a protocol converter",
                affected_components=[edge.source, edge.target],
                affected_interfaces=[source.id, target.id],
                affected_connections=edge_ids(edge),
                details=_endpoint_details(ctx, edge, source, target, "busType", (source.bus_type, target.bus_type)),
            )
        )
    return results


def check_multiple_masters(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-005: 1つのslaveインターフェースに複数のmasterが接続されていないか。

    インターコネクト・アービタ・クロスバーと判定されたノードは対象外。
    """
    groups: dict[tuple[str, str], list[Connection]] = {}
    for edge in ctx.graph.edges:
        if not ctx.graph.has_node(edge.target):
            continue
        groups.setdefault((edge.target, edge.target_handle or "default"), []).append(edge)

    results: list[DRCViolation] = []
    for (node_id, interface_id), edges in groups.items():
        first_edge_by_source: dict[str, Connection] = {}
        for edge in edges:
            first_edge_by_source.setdefault(edge.source, edge)
        if len(first_edge_by_source) <= 1:
            continue

        node = ctx.graph.node(node_id)
        if node is None or ctx.is_arbiter(node):
            continue

        handle = None if interface_id == "default" else interface_id
        slave_location = ctx.resolver.location(node_id, handle)
        target_interface = ctx.resolver.find(node_id, handle)
        interface_name = target_interface.name if target_interface is not None else interface_id

        masters = []
        for source_id, edge in first_edge_by_source.items():
            full_path = ctx.resolver.location(source_id, edge.source_handle)
            masters.append(
                {
                    "nodeName": ctx.graph.label(source_id),
                    "interfaceName": (
                        ctx.resolver.interface_name(source_id, edge.source_handle)
                        if edge.source_handle
                        else "unknown"
                    ),
                    "fullPath": full_path,
                }
            )

        results.append(
            violation(
                "DRC-CONN-005",
                location=slave_location,
                description=f"{len(masters)} masters connected to slave interface without arbitration",
                suggestion="Add an AXI Crossbar, Arbiter, or Interconnect between masters and this slave interface",
                affected_components=[node_id, *first_edge_by_source],
                affected_interfaces=[target_interface.id] if target_interface is not None else [],
                affected_connections=edge_ids(*edges),
                details={
                    "slave": {
                        "node": ctx.graph.label(node_id),
                        "interface": interface_name,
                        "fullPath": slave_location,
                    },
                    "masterCount": len(masters),
                    "masters": masters,
                    "connections": [f"{m['fullPath']} → {slave_location}" for m in masters],
                },
            )
        )
    return results


def _connected_interfaces(ctx: RuleContext) -> dict[str, set[str]]:
    """ノードID → 接続済みインターフェースID。ハンドル無しの接続は実効インターフェースを数える。"""
    connected: dict[str, set[str]] = {}
    for edge in ctx.graph.edges:
        source, target = ctx.resolver.resolve_edge(edge)
        if edge.source_handle:
            connected.setdefault(edge.source, set()).add(edge.source_handle)
        elif source is not None:
            connected.setdefault(edge.source, set()).add(source.id)
        if edge.target_handle:
            connected.setdefault(edge.target, set()).add(edge.target_handle)
        elif target is not None:
            connected.setdefault(edge.target, set()).add(target.id)
    return connected


def check_unconnected_interfaces(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-CONN-004 / DRC-CONN-006: 未接続のmaster（warning）・slave（info）インターフェース。

    optionalなインターフェースは、check_optional_portsが有効な場合のみ検査する。
    """
    connected = _connected_interfaces(ctx)
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        used = connected.get(node.id, set())
        for intf in ctx.resolver.interfaces(node.id):
            if intf.id in used:
                continue
            if intf.optional and not ctx.options.check_optional_ports:
                continue
            if intf.direction == "master":
                rule_id = "DRC-CONN-004"
                description = "Master interface is not connected"
                suggestion = "Connect to a slave interface or mark as optional if intentional"
            elif intf.direction == "slave":
                rule_id = "DRC-CONN-006"
                description = "Slave interface is not connected"
                suggestion = "Connect from a master interface or remove if unused"
            else:
                continue
            results.append(
                violation(
                    rule_id,
                    location=ctx.resolver.location(node.id, intf.id),
                    description=description,
                    suggestion=suggestion,
                    affected_components=[node.id],
                    affected_interfaces=[intf.id],
                    details={
                        "node": ctx.graph.label(node.id),
                        "interface": intf.name,
                        "direction": intf.direction,
                        "busType": intf.bus_type,
                        "optional": intf.optional,
                    },
                )
            )
    return results


RULES: tuple[Rule, ...] = (
    check_port_uniqueness,
    check_endpoint_existence,
    check_role_matching,
    check_bus_type,
    check_multiple_masters,
    check_unconnected_interfaces,
)
