"""DRC結果のテキスト整形。アシスタントや人が読むためのMarkdownを生成する。"""

from typing import Any

from socdrc.models.drc import DRCResult, DRCViolation
from socdrc.validators.rules.catalogue import CATEGORY_ORDER


def _endpoint_line(label: str, endpoint: dict[str, Any]) -> str:
    line = f"   - {label}: {endpoint.get('node') or 'N/A'}"
    if endpoint.get("interface"):
        line += f".{endpoint['interface']}"
    if endpoint.get("direction"):
        line += f" ({endpoint['direction']})"
    if endpoint.get("busType"):
        line += f" [{endpoint['busType']}]"
    if endpoint.get("dataWidth"):
        line += f" {endpoint['dataWidth']}-bit"
    return line


def format_violations(violations: list[DRCViolation]) -> str:
    """違反をカテゴリ別にまとめたMarkdownを返す。"""
    if not violations:
        return "No violations found."

    grouped: dict[str, list[DRCViolation]] = {}
    for v in violations:
        grouped.setdefault(v.category, []).append(v)

    lines = [f"Found {len(violations)} DRC violation(s):", ""]
    for category in sorted(grouped, key=CATEGORY_ORDER.index):
        items = grouped[category]
        lines.append(f"## {category} Issues ({len(items)})")
        for idx, v in enumerate(items, start=1):
            lines.append(f"{idx}. **{v.rule_name}** [{v.rule_id}] - {v.severity}")
            lines.append(f"   - Problem: {v.description}")
            if v.location and v.location != "N/A":
                lines.append(f"   - Location: {v.location}")
            if v.suggestion:
                lines.append(f"   - How to fix: {v.suggestion}")
            details = v.details or {}
            if isinstance(details.get("source"), dict):
                lines.append(_endpoint_line("Source", details["source"]))
            if isinstance(details.get("target"), dict):
                lines.append(_endpoint_line("Target", details["target"]))
            if details.get("masters"):
                masters = ", ".join(m["fullPath"] for m in details["masters"])
                lines.append(f"   - Competing masters: {masters}")
        lines.append("")
    return "\n".join(lines).rstrip() + "\n"


def format_summary(result: DRCResult) -> str:
    """合否と重大度別件数の1段落サマリ。"""
    status = "PASSED" if result.passed else "FAILED"
    summary = result.summary
    return (
        f"DRC {status}: {summary.critical} critical, {summary.warning} warning, "
        f"{summary.info} info ({result.total_checks} violation(s) total, checked at {result.timestamp})."
    )
