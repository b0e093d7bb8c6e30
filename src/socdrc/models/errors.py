"""socdrcのカスタム例外クラス。"""

from pathlib import Path
from typing import Any


class DRCError(Exception):
    """socdrcの基底例外クラス。"""


class InvalidDiagramError(DRCError):
    """ダイアグラムの構造が不正で解析を開始できない場合の例外。

    ルールは1つも実行されず、部分的な結果も返さない。
    """

    def __init__(self, message: str, errors: list[dict[str, Any]] | None = None) -> None:
        super().__init__(message)
        self.errors = errors or []


class RuleConfigError(DRCError):
    """DRC設定ファイルの読み込み・検証に失敗した場合の例外。"""

    def __init__(self, path: Path, message: str) -> None:
        super().__init__(f"Invalid DRC configuration in {path}: {message}")
        self.path = path
