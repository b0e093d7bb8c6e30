"""DRC関連のMCPリソース定義。"""

import yaml
from fastmcp import FastMCP

from socdrc.services.drc import DRCService


def register_drc_resources(mcp: FastMCP, drc_service: DRCService) -> None:
    """DRC関連のMCPリソースを登録する。"""

    @mcp.resource("socdrc://drc/rules")
    async def drc_rules() -> str:
        """DRCルールカタログを取得する。

        カテゴリ順に並んだルールID・名称・重大度の一覧を返します。
        """
        categories = await drc_service.list_rules()
        return yaml.dump({"categories": categories}, allow_unicode=True, default_flow_style=False, sort_keys=False)

    @mcp.resource("socdrc://drc/settings")
    async def drc_settings() -> str:
        """DRCルールが参照する閾値・予約アドレス範囲を取得する。"""
        settings = await drc_service.get_settings()
        data = settings.model_dump()
        for reserved in data["reserved_ranges"]:
            reserved["start"] = f"0x{reserved['start']:08X}"
            reserved["end"] = f"0x{reserved['end']:08X}"
        return yaml.dump({"settings": data}, allow_unicode=True, default_flow_style=False, sort_keys=False)
