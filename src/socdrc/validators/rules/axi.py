"""AXI4パラメータ整合性ルール（category: AXI4 Parameters）。

両端の実効インターフェースのバス種別が共にAXI系（大文字小文字を区別せず
"AXI"を含む）の接続のみを対象とする。
"""

from socdrc.models.diagram import ComponentInterface, Connection
from socdrc.models.drc import DRCViolation
from socdrc.validators.rules.base import Rule, RuleContext, edge_ids, violation


def _axi_pairs(ctx: RuleContext) -> list[tuple[Connection, ComponentInterface, ComponentInterface]]:
    pairs = []
    for edge in ctx.graph.edges:
        source, target = ctx.resolver.resolve_edge(edge)
        if source is None or target is None:
            continue
        if source.is_axi and target.is_axi:
            pairs.append((edge, source, target))
    return pairs


def _pair_violation(
    ctx: RuleContext,
    rule_id: str,
    edge: Connection,
    source: ComponentInterface,
    target: ComponentInterface,
    key: str,
    values: tuple[object, object],
    description: str,
    suggestion: str,
) -> DRCViolation:
    connection = ctx.resolver.connection_location(edge)
    return violation(
        rule_id,
        location=connection,
        description=description,
        suggestion=suggestion,
        affected_components=[edge.source, edge.target],
        affected_interfaces=[source.id, target.id],
        affected_connections=edge_ids(edge),
        details={
            "source": {"node": ctx.graph.label(edge.source), "interface": source.name, key: values[0]},
            "target": {"node": ctx.graph.label(edge.target), "interface": target.name, key: values[1]},
            "connection": connection,
        },
    )


def _is_number(value: object) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def check_data_width(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-AXI-PARAM-001: データ幅の一致。"""
    results: list[DRCViolation] = []
    for edge, source, target in _axi_pairs(ctx):
        if not source.data_width or not target.data_width or source.data_width == target.data_width:
            continue
        results.append(
            _pair_violation(
                ctx,
                "DRC-AXI-PARAM-001",
                edge,
                source,
                target,
                "dataWidth",
                (source.data_width, target.data_width),
                f"AXI4 data width mismatch: {source.data_width}-bit → {target.data_width}-bit",
                "Use matching data widths or add a width converter",
            )
        )
    return results


def check_id_width(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-AXI-PARAM-002: master側のIDがslave側のIDフィールドに収まるか。

    masterのID幅がslaveより狭い場合は問題にしない。
    """
    results: list[DRCViolation] = []
    for edge, source, target in _axi_pairs(ctx):
        if not _is_number(source.id_width) or not _is_number(target.id_width):
            continue
        if not source.id_width or not target.id_width or source.id_width <= target.id_width:
            continue
        results.append(
            _pair_violation(
                ctx,
                "DRC-AXI-PARAM-002",
                edge,
                source,
                target,
                "idWidth",
                (source.id_width, target.id_width),
                f"Master ID width ({source.id_width} bits) exceeds slave ID width ({target.id_width} bits)",
                (
                    f"Increase slave ID width to at least {source.id_width} bits "
                    f"or reduce master ID width to {target.id_width} bits"
                ),
            )
        )
    return results


def check_addr_width(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-AXI-PARAM-003: アドレス幅の一致。"""
    results: list[DRCViolation] = []
    for edge, source, target in _axi_pairs(ctx):
        if not source.addr_width or not target.addr_width or source.addr_width == target.addr_width:
            continue
        results.append(
            _pair_violation(
                ctx,
                "DRC-AXI-PARAM-003",
                edge,
                source,
                target,
                "addrWidth",
                (source.addr_width, target.addr_width),
                f"AXI4 address width mismatch: {source.addr_width}-bit → {target.addr_width}-bit",
                "Consider using consistent address widths or verify address mapping",
            )
        )
    return results


def check_clock_frequency(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-AXI-PARAM-004: クロック記述（speed）の一致。DRC-PERF-002と重複して報告されうる。"""
    results: list[DRCViolation] = []
    for edge, source, target in _axi_pairs(ctx):
        if not source.speed or not target.speed or source.speed == target.speed:
            continue
        results.append(
            _pair_violation(
                ctx,
                "DRC-AXI-PARAM-004",
                edge,
                source,
                target,
                "speed",
                (source.speed, target.speed),
                f"Clock frequency mismatch: {source.speed} → {target.speed}",
                "Add clock domain crossing logic or synchronize to same clock",
            )
        )
    return results


RULES: tuple[Rule, ...] = (
    check_data_width,
    check_id_width,
    check_addr_width,
    check_clock_frequency,
)
