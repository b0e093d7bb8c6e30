"""DRCの実行と設定読み込みを行うサービス。"""

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from socdrc.models.diagram import CatalogueComponent
from socdrc.models.drc import DRCOptions, DRCRuleSettings, DRCRun
from socdrc.models.errors import InvalidDiagramError, RuleConfigError
from socdrc.validators.drc import DRCChecker
from socdrc.validators.rules.catalogue import rules_by_category

logger = logging.getLogger(__name__)

SETTINGS_FILE = "drc-settings.yaml"
COMPONENT_LIBRARY_DIR = "component-library"


def _read_yaml(path: Path) -> Any:
    try:
        with open(path, encoding="utf-8") as f:
            return yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as e:
        raise RuleConfigError(path, str(e)) from e


class DRCService:
    """設定ディレクトリのルール設定・コンポーネントライブラリを使ってDRCを実行する。"""

    def __init__(self, config_dir: Path, check_optional_ports: bool = False) -> None:
        self._config_dir = config_dir
        self._check_optional_ports = check_optional_ports
        self._settings: DRCRuleSettings | None = None
        self._library: list[CatalogueComponent] | None = None

    def _load_settings(self) -> DRCRuleSettings:
        """ルール設定をYAMLファイルから読み込む。ファイルが無ければ既定値。"""
        if self._settings is not None:
            return self._settings

        path = self._config_dir / SETTINGS_FILE
        if not path.exists():
            self._settings = DRCRuleSettings()
            return self._settings

        data = _read_yaml(path) or {}
        try:
            self._settings = DRCRuleSettings.model_validate(data.get("settings") or {})
        except (AttributeError, ValidationError, ValueError) as e:
            raise RuleConfigError(path, str(e)) from e
        return self._settings

    def _load_library(self) -> list[CatalogueComponent]:
        """コンポーネントライブラリ（インターフェースのフォールバック元）を読み込む。"""
        if self._library is not None:
            return self._library

        components: list[CatalogueComponent] = []
        library_dir = self._config_dir / COMPONENT_LIBRARY_DIR
        if library_dir.exists():
            for library_file in sorted(library_dir.glob("*.yaml")):
                data = _read_yaml(library_file)
                if not data or "components" not in data:
                    continue
                try:
                    components.extend(CatalogueComponent.model_validate(c) for c in data["components"])
                except ValidationError as e:
                    raise RuleConfigError(library_file, str(e)) from e
        logger.info("Loaded %d catalogue components from %s", len(components), library_dir)
        self._library = components
        return components

    async def get_settings(self) -> DRCRuleSettings:
        return self._load_settings()

    async def run_check(
        self,
        diagram: dict[str, Any],
        catalogue: list[dict[str, Any]] | None = None,
        check_optional_ports: bool | None = None,
    ) -> DRCRun:
        """ダイアグラムにDRCを実行する。

        Args:
            diagram: ``{"nodes": [...], "edges": [...]}`` 形式のダイアグラム。
            catalogue: 呼び出し側が渡すコンポーネント定義。ライブラリより優先する。
            check_optional_ports: optionalポートも未接続チェックの対象にするか。
                Noneの場合はサーバー設定の既定値。

        Raises:
            InvalidDiagramError: ダイアグラムまたはカタログの構造が不正な場合。
            RuleConfigError: 設定ファイルが不正な場合。
        """
        try:
            supplied = [CatalogueComponent.model_validate(c) for c in catalogue or []]
        except ValidationError as e:
            raise InvalidDiagramError(
                "Invalid interface catalogue", errors=e.errors(include_url=False)
            ) from e

        if check_optional_ports is None:
            check_optional_ports = self._check_optional_ports

        checker = DRCChecker(settings=self._load_settings())
        return checker.run(
            diagram,
            catalogue=supplied + self._load_library(),
            options=DRCOptions(check_optional_ports=check_optional_ports),
        )

    async def list_rules(self) -> list[dict[str, object]]:
        """カテゴリ別のDRCルール一覧を返す。"""
        return rules_by_category()
