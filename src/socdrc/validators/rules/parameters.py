"""パラメータ妥当性ルール（category: Parameter Validity）。"""

import math

from socdrc.models.drc import DRCViolation
from socdrc.validators.rules.base import Rule, RuleContext, violation


def check_required_label(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-PARAM-VALID-001: ラベルが空のコンポーネント。"""
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        if node.label.strip():
            continue
        results.append(
            violation(
                "DRC-PARAM-VALID-001",
                location=f"Component {node.id}",
                description="Component missing required label/name",
                suggestion="Add a descriptive label to the component",
                affected_components=[node.id],
                details={"nodeId": node.id, "modelType": node.model_type or "Unknown"},
            )
        )
    return results


def _is_valid_width(value: object) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return not math.isnan(value) and value > 0


def check_data_width(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-PARAM-VALID-002 / DRC-PARAM-VALID-003: インターフェースのdataWidth。

    欠落・数値でない・0以下はcritical、正の値だが標準幅でないものはwarning。
    """
    canonical = ctx.settings.canonical_data_widths
    results: list[DRCViolation] = []
    for node in ctx.graph.nodes:
        for intf in ctx.resolver.interfaces(node.id):
            location = f"{ctx.graph.label(node.id)}.{intf.name}"
            width = intf.data_width
            if width is None:
                results.append(
                    violation(
                        "DRC-PARAM-VALID-002",
                        location=location,
                        description=f"Interface '{intf.name}' is missing required 'dataWidth' property",
                        suggestion=(
                            'Add a "dataWidth" property to the interface with a numeric value '
                            "(e.g., 64, 128, 256, 512, 1024)"
                        ),
                        affected_components=[node.id],
                        affected_interfaces=[intf.id],
                        details={
                            "interfaceName": intf.name,
                            "interfaceId": intf.id,
                            "availableProperties": intf.declared_fields(),
                        },
                    )
                )
                continue

            if not _is_valid_width(width):
                results.append(
                    violation(
                        "DRC-PARAM-VALID-002",
                        location=location,
                        description=f"Interface '{intf.name}' has invalid 'dataWidth' value: {width}",
                        suggestion='Set "dataWidth" to a positive numeric value (e.g., 64, 128, 256, 512, 1024)',
                        affected_components=[node.id],
                        affected_interfaces=[intf.id],
                        details={"currentDataWidth": width, "dataWidthType": type(width).__name__},
                    )
                )
                continue

            if width not in canonical:
                results.append(
                    violation(
                        "DRC-PARAM-VALID-003",
                        location=location,
                        description=f"Unusual interface data width: {width} bits",
                        suggestion=f"Consider using standard widths: {', '.join(str(w) for w in canonical)}",
                        affected_components=[node.id],
                        affected_interfaces=[intf.id],
                        details={"currentDataWidth": width, "recommendedWidths": list(canonical)},
                    )
                )
    return results


RULES: tuple[Rule, ...] = (
    check_required_label,
    check_data_width,
)
