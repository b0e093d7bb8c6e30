"""socdrcサーバーの設定管理。"""

from pathlib import Path

from pydantic_settings import BaseSettings

_PACKAGE_ROOT = Path(__file__).parent
_REPO_ROOT = _PACKAGE_ROOT.parent.parent


class ServerConfig(BaseSettings):
    """サーバー設定。環境変数（SOCDRC_*）から読み込み可能。"""

    model_config = {"env_prefix": "SOCDRC_"}

    config_dir: Path = _REPO_ROOT / "config"
    host: str = "0.0.0.0"
    port: int = 8000
    url_token: str = ""
    log_level: str = "INFO"

    # ツール呼び出しでフラグ未指定の場合の既定値
    check_optional_ports: bool = False
