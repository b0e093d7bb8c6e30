"""性能ルール（category: Performance）。"""

from socdrc.models.drc import DRCViolation
from socdrc.validators.rules.base import Rule, RuleContext, edge_ids, violation


def check_clock_domain_crossing(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-PERF-002: 両端のクロック記述（speed）が異なる接続。

    バス種別を問わない。AXI向けのDRC-AXI-PARAM-004と同時に報告されうる。
    """
    results: list[DRCViolation] = []
    for edge in ctx.graph.edges:
        source, target = ctx.resolver.resolve_edge(edge)
        if source is None or target is None:
            continue
        if not source.speed or not target.speed or source.speed == target.speed:
            continue
        results.append(
            violation(
                "DRC-PERF-002",
                location=f"{ctx.graph.label(edge.source)} → {ctx.graph.label(edge.target)}",
                description=f"Clock domain crossing detected: {source.speed} → {target.speed}",
                suggestion="Add clock domain crossing synchronizers (async FIFO or dual-clock FIFO)",
                affected_components=[edge.source, edge.target],
                affected_connections=edge_ids(edge),
                details={
                    "sourceClockFreq": source.speed,
                    "targetClockFreq": target.speed,
                    "sourceInterface": source.name,
                    "targetInterface": target.name,
                },
            )
        )
    return results


def check_long_paths(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-PERF-003: masterを持つノードから始まる長い接続パス。

    最短経路ではなく、閾値を超えるパスをすべて報告する。
    """
    threshold = ctx.settings.long_path_threshold
    results: list[DRCViolation] = []
    for index, node in enumerate(ctx.graph.nodes):
        if ctx.graph.index_of(node.id) != index:
            continue
        if not any(intf.direction == "master" for intf in ctx.resolver.interfaces(node.id)):
            continue
        for node_ids in ctx.graph.terminal_paths(node.id, ctx.settings.max_path_depth):
            if len(node_ids) <= threshold:
                continue
            labels = [ctx.graph.label(node_id) for node_id in node_ids]
            results.append(
                violation(
                    "DRC-PERF-003",
                    location=" → ".join(labels),
                    description=f"Long connection path detected ({len(node_ids)} hops)",
                    suggestion="Consider direct connection or reducing intermediate components for better latency",
                    affected_components=node_ids,
                    details={"pathLength": len(node_ids), "path": labels},
                )
            )
    return results


RULES: tuple[Rule, ...] = (
    check_clock_domain_crossing,
    check_long_paths,
)
