"""トポロジールール（category: Topology）。"""

from socdrc.models.drc import DRCViolation
from socdrc.validators.rules.base import Rule, RuleContext, violation


def check_cycles(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-TOPO-001: 接続グラフの循環依存。"""
    results: list[DRCViolation] = []
    for node_ids in ctx.graph.cycles():
        labels = [ctx.graph.label(node_id) for node_id in node_ids]
        path_labels = [*labels, labels[0]]
        results.append(
            violation(
                "DRC-TOPO-001",
                location=" → ".join(path_labels),
                description="Circular dependency detected in connection path",
                suggestion="Remove one connection to break the cycle or restructure the design",
                affected_components=node_ids,
                details={"cyclePath": path_labels, "cycleLength": len(node_ids)},
            )
        )
    return results


def check_isolated(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-TOPO-002: 接続を1本も持たないコンポーネント。"""
    isolated = ctx.graph.isolates()
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        if node.id not in isolated:
            continue
        label = ctx.graph.label(node.id)
        results.append(
            violation(
                "DRC-TOPO-002",
                location=label,
                description=f"Component '{label}' has no connections",
                suggestion="Connect to other components or remove if unused",
                affected_components=[node.id],
            )
        )
    return results


def check_interconnect_fanout(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-TOPO-003: インターコネクトの入出力本数が上限を超えていないか。"""
    limit = ctx.settings.max_interconnect_fanout
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        if not ctx.is_interconnect(node):
            continue
        fanout = ctx.graph.out_degree(node.id)
        fanin = ctx.graph.in_degree(node.id)
        if fanout <= limit and fanin <= limit:
            continue
        results.append(
            violation(
                "DRC-TOPO-003",
                location=ctx.graph.label(node.id),
                description=f"High fanout/fanin count: {fanin} inputs, {fanout} outputs",
                suggestion="Consider splitting into multiple interconnects or using hierarchical design",
                affected_components=[node.id],
                details={"fanin": fanin, "fanout": fanout, "limit": limit},
            )
        )
    return results


RULES: tuple[Rule, ...] = (
    check_cycles,
    check_isolated,
    check_interconnect_fanout,
)
