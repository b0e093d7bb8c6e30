"""DRCのMCPツール定義。"""

from typing import Any

from fastmcp import FastMCP

from socdrc.models.drc import Severity
from socdrc.models.errors import DRCError
from socdrc.services.drc import DRCService
from socdrc.validators.report import format_summary, format_violations


def register_drc_tools(mcp: FastMCP, drc_service: DRCService) -> None:
    """DRC関連のMCPツールを登録する。"""

    @mcp.tool()
    async def run_drc(
        diagram: dict[str, Any],
        catalogue: list[dict[str, Any]] | None = None,
        check_optional_ports: bool | None = None,
    ) -> dict[str, Any]:
        """SoCアーキテクチャダイアグラムにデザインルールチェック（DRC）を実行する。

        接続性・AXI4パラメータ・アドレス空間・トポロジー・性能・パラメータ妥当性・
        命名規則の7グループのルールで検査し、違反リストと重大度別件数を返します。
        critical違反が0件なら passed=true です。

        Args:
            diagram: {"nodes": [...], "edges": [...]} 形式のダイアグラム。
                nodeは {"id": str, "data": {"label": str, "interfaces": [...], ...}} 形式。
            catalogue: ダイアグラムにインターフェース情報が無いノード用の
                コンポーネント定義リスト（任意）。{"id": str, "interfaces": [...]} 形式。
            check_optional_ports: optionalなポートの未接続も報告するか（任意）。
        """
        try:
            run = await drc_service.run_check(diagram, catalogue, check_optional_ports)
            return {
                "result": run.result.to_json_dict(),
                "data_quality_warnings": run.data_quality_warnings,
            }
        except DRCError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def format_drc_report(
        diagram: dict[str, Any],
        catalogue: list[dict[str, Any]] | None = None,
        check_optional_ports: bool | None = None,
        severity: Severity | None = None,
    ) -> dict[str, Any]:
        """DRCを実行し、違反をカテゴリ別に整理したMarkdownレポートを返す。

        Args:
            diagram: {"nodes": [...], "edges": [...]} 形式のダイアグラム。
            catalogue: フォールバック用のコンポーネント定義リスト（任意）。
            check_optional_ports: optionalなポートの未接続も報告するか（任意）。
            severity: 指定した重大度の違反のみをレポートに含める（任意）。
        """
        try:
            run = await drc_service.run_check(diagram, catalogue, check_optional_ports)
            violations = run.result.violations
            if severity is not None:
                violations = [v for v in violations if v.severity == severity]
            return {
                "summary": format_summary(run.result),
                "report": format_violations(violations),
                "passed": run.result.passed,
            }
        except DRCError as e:
            return {"error": type(e).__name__, "message": str(e)}

    @mcp.tool()
    async def list_drc_rules() -> dict[str, Any]:
        """DRCルールカタログを取得する。

        カテゴリごとにルールID・名称・重大度・説明を返します。
        """
        try:
            categories = await drc_service.list_rules()
            return {"categories": categories}
        except DRCError as e:
            return {"error": type(e).__name__, "message": str(e)}
