"""FastMCPベースのMCPサーバーエントリポイント。"""

from fastmcp import FastMCP
from starlette.requests import Request
from starlette.responses import JSONResponse

from socdrc.config import ServerConfig
from socdrc.resources.drc import register_drc_resources
from socdrc.services.drc import DRCService
from socdrc.tools.drc import register_drc_tools


def create_server(config: ServerConfig | None = None) -> FastMCP:
    """socdrc MCPサーバーを作成し、ツール・リソースを登録する。

    Args:
        config: サーバー設定。Noneの場合はデフォルト設定を使用。

    Returns:
        設定済みのFastMCPインスタンス。
    """
    if config is None:
        config = ServerConfig()

    mcp = FastMCP("socdrc")

    drc_service = DRCService(config_dir=config.config_dir, check_optional_ports=config.check_optional_ports)

    register_drc_tools(mcp, drc_service)
    register_drc_resources(mcp, drc_service)

    # ヘルスチェックエンドポイント
    @mcp.custom_route("/health", methods=["GET"])
    async def health_check(request: Request) -> JSONResponse:
        return JSONResponse({"status": "ok"})

    return mcp
