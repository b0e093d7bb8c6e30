"""命名規則ルール（category: Naming Convention）。"""

import re

from socdrc.models.drc import DRCViolation
from socdrc.validators.rules.base import Rule, RuleContext, violation


def check_unique_labels(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-NAME-001: 同じラベルを持つ複数のコンポーネント。

    空ラベルはDRC-PARAM-VALID-001で扱うため対象外。
    """
    by_label: dict[str, list[str]] = {}
    for node in ctx.graph.nodes:
        if node.label.strip():
            by_label.setdefault(node.label, []).append(node.id)

    results: list[DRCViolation] = []
    for label, node_ids in by_label.items():
        if len(node_ids) <= 1:
            continue
        results.append(
            violation(
                "DRC-NAME-001",
                location=label,
                description=f"Duplicate component name '{label}' used {len(node_ids)} times",
                suggestion="Use unique names for each component instance (e.g., CPU_0, CPU_1)",
                affected_components=node_ids,
                details={"duplicateCount": len(node_ids), "nodeIds": node_ids},
            )
        )
    return results


def check_interface_names(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-NAME-002: インターフェース名が英字始まり・英数字/_/-のみで構成されているか。"""
    pattern = re.compile(ctx.settings.interface_name_pattern)
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        for intf in ctx.resolver.interfaces(node.id):
            if pattern.fullmatch(intf.name):
                continue
            results.append(
                violation(
                    "DRC-NAME-002",
                    location=f"{ctx.graph.label(node.id)}.{intf.name}",
                    description=f"Interface name '{intf.name}' doesn't follow naming convention",
                    suggestion="Use lowercase with underscores or hyphens (e.g., axi_master_0)",
                    affected_components=[node.id],
                    affected_interfaces=[intf.id],
                )
            )
    return results


RULES: tuple[Rule, ...] = (
    check_unique_labels,
    check_interface_names,
)
