"""ルール関数の共通コンテキストとヘルパー。"""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from socdrc.models.diagram import ComponentNode, Connection
from socdrc.models.drc import DRCOptions, DRCRuleSettings, DRCViolation, Severity
from socdrc.validators.graph import DiagramGraph, InterfaceResolver
from socdrc.validators.rules.catalogue import RULE_CATALOGUE

NodePredicate = Callable[[ComponentNode], bool]


@dataclass(frozen=True)
class RuleContext:
    """1回のDRC実行で全ルールが共有する読み取り専用の入力。"""

    graph: DiagramGraph
    resolver: InterfaceResolver
    options: DRCOptions
    settings: DRCRuleSettings
    arbiter_predicate: NodePredicate | None = None

    def is_interconnect(self, node: ComponentNode) -> bool:
        """modelType/categoryによるインターコネクト判定。"""
        categories = self.settings.interconnect_categories
        return node.model_type in categories or node.category in categories

    def is_arbiter(self, node: ComponentNode) -> bool:
        """複数masterの調停が可能なコンポーネントか。

        既定ではインターコネクト判定に加え、ラベルにキーワード
        （crossbar/arbiter/interconnect）を含むものを対象とする。
        """
        if self.arbiter_predicate is not None:
            return self.arbiter_predicate(node)
        if self.is_interconnect(node):
            return True
        label = node.label.lower()
        return any(keyword.lower() in label for keyword in self.settings.interconnect_keywords)


Rule = Callable[[RuleContext], list[DRCViolation]]


def violation(
    rule_id: str,
    *,
    location: str,
    description: str,
    suggestion: str,
    severity: Severity | None = None,
    affected_components: list[str] | None = None,
    affected_interfaces: list[str] | None = None,
    affected_connections: list[str] | None = None,
    details: dict[str, Any] | None = None,
) -> DRCViolation:
    """カタログからルール名・カテゴリ・既定の重大度を補って違反を生成する。"""
    rule = RULE_CATALOGUE[rule_id]
    return DRCViolation(
        rule_id=rule.id,
        rule_name=rule.name,
        severity=severity or rule.severity,
        category=rule.category,
        location=location,
        description=description,
        suggestion=suggestion,
        affected_components=affected_components,
        affected_interfaces=affected_interfaces,
        affected_connections=affected_connections,
        details=details,
    )


def edge_ids(*edges: Connection) -> list[str]:
    """IDを持つ接続のIDリスト。"""
    return [edge.id for edge in edges if edge.id]
