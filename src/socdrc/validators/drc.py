"""DRCエンジン。全ルールグループを固定順で実行し、結果を組み立てる。"""

import logging
from datetime import UTC, datetime
from typing import Any

from socdrc.models.diagram import ArchitectureDiagram, CatalogueComponent
from socdrc.models.drc import DRCOptions, DRCResult, DRCRuleSettings, DRCRun, RuleCategory
from socdrc.validators.collector import ViolationCollector
from socdrc.validators.graph import DiagramGraph, InterfaceResolver
from socdrc.validators.rules import address, axi, connectivity, naming, parameters, performance, topology
from socdrc.validators.rules.base import NodePredicate, Rule, RuleContext

logger = logging.getLogger(__name__)

# 実行順はviolation IDの採番順にのみ影響する
RULE_GROUPS: tuple[tuple[RuleCategory, tuple[Rule, ...]], ...] = (
    ("Connectivity", connectivity.RULES),
    ("AXI4 Parameters", axi.RULES),
    ("Address Space", address.RULES),
    ("Topology", topology.RULES),
    ("Performance", performance.RULES),
    ("Parameter Validity", parameters.RULES),
    ("Naming Convention", naming.RULES),
)


class DRCChecker:
    """SoCアーキテクチャダイアグラムのデザインルールチェッカー。

    呼び出し間で状態を持たない。違反カウンタは1回の実行ごとに作り直す。
    """

    def __init__(
        self,
        settings: DRCRuleSettings | None = None,
        arbiter_predicate: NodePredicate | None = None,
    ) -> None:
        self._settings = settings or DRCRuleSettings()
        self._arbiter_predicate = arbiter_predicate

    @property
    def settings(self) -> DRCRuleSettings:
        return self._settings

    def run(
        self,
        diagram: ArchitectureDiagram | dict[str, Any],
        catalogue: list[CatalogueComponent] | None = None,
        options: DRCOptions | None = None,
    ) -> DRCRun:
        """ダイアグラムを検査し、結果とデータ品質警告を返す。

        Raises:
            InvalidDiagramError: ダイアグラムの構造が不正な場合。ルールは実行されない。
        """
        parsed = ArchitectureDiagram.parse(diagram)
        graph = DiagramGraph(parsed)
        resolver = InterfaceResolver(graph, catalogue)
        resolver.resolve_all()
        ctx = RuleContext(
            graph=graph,
            resolver=resolver,
            options=options or DRCOptions(),
            settings=self._settings,
            arbiter_predicate=self._arbiter_predicate,
        )

        collector = ViolationCollector()
        for category, rules in RULE_GROUPS:
            for rule in rules:
                collector.extend(rule(ctx))
            logger.debug("Finished %s rules: %d violations so far", category, collector.total)

        summary = collector.summary()
        result = DRCResult(
            timestamp=datetime.now(UTC).isoformat(),
            total_checks=collector.total,
            violations=collector.violations,
            summary=summary,
            passed=summary.critical == 0,
        )
        logger.info(
            "DRC complete: %d nodes, %d edges, %d critical, %d warning, %d info",
            len(graph.nodes),
            len(graph.edges),
            summary.critical,
            summary.warning,
            summary.info,
        )
        return DRCRun(result=result, data_quality_warnings=resolver.missing_interfaces)

    def analyze(
        self,
        diagram: ArchitectureDiagram | dict[str, Any],
        catalogue: list[CatalogueComponent] | None = None,
        options: DRCOptions | None = None,
    ) -> DRCResult:
        return self.run(diagram, catalogue, options).result


def analyze(
    diagram: ArchitectureDiagram | dict[str, Any],
    catalogue: list[CatalogueComponent] | None = None,
    options: DRCOptions | None = None,
) -> DRCResult:
    """既定設定でダイアグラムを検査する。"""
    return DRCChecker().analyze(diagram, catalogue, options)
