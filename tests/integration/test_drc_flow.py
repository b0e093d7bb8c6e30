"""DRCのMCPプロトコル経由統合テスト。"""

import json
from typing import Any

import pytest
from fastmcp import Client

from socdrc.config import ServerConfig
from socdrc.server import create_server


@pytest.fixture
def mcp_server(server_config: ServerConfig) -> object:
    """テスト用MCPサーバー。"""
    return create_server(server_config)


def parse_tool_result(result: object) -> dict:
    """CallToolResultからJSONデータを抽出する。"""
    content = result.content  # type: ignore[union-attr]
    assert len(content) > 0
    return json.loads(content[0].text)  # type: ignore[union-attr]


class TestDRCFlowViaMCP:
    async def test_tools_registered(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            tools = await client.list_tools()
            names = {tool.name for tool in tools}
            assert {"run_drc", "format_drc_report", "list_drc_rules"} <= names

    async def test_run_drc(self, mcp_server: object, soc_diagram: dict[str, Any]) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("run_drc", {"diagram": soc_diagram})
            data = parse_tool_result(result)
            assert data["data_quality_warnings"] == []
            drc = data["result"]
            assert drc["passed"] is False
            assert drc["totalChecks"] == 1
            assert drc["summary"] == {"critical": 1, "warning": 0, "info": 0}
            violation = drc["violations"][0]
            assert violation["id"] == "DRC-VIOLATION-1"
            assert violation["ruleId"] == "DRC-AXI-PARAM-001"
            assert violation["affectedConnections"] == ["e2"]

    async def test_run_drc_invalid_diagram(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("run_drc", {"diagram": {"nodes": []}})
            data = parse_tool_result(result)
            assert data["error"] == "InvalidDiagramError"
            assert "edges" in data["message"]

    async def test_run_drc_with_catalogue(self, mcp_server: object) -> None:
        diagram = {
            "nodes": [
                {"id": "cpu", "data": {"label": "CPU", "componentId": "my-cpu"}},
                {"id": "ram", "data": {"label": "RAM", "componentId": "ddr4-controller"}},
            ],
            "edges": [{"id": "e1", "source": "cpu", "target": "ram"}],
        }
        catalogue = [
            {"id": "my-cpu", "interfaces": [{"id": "m0", "busType": "AXI4", "direction": "master", "dataWidth": 64}]}
        ]
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("run_drc", {"diagram": diagram, "catalogue": catalogue})
            data = parse_tool_result(result)
            assert data["data_quality_warnings"] == []
            rule_ids = [v["ruleId"] for v in data["result"]["violations"]]
            assert "DRC-AXI-PARAM-001" in rule_ids

    async def test_format_drc_report(self, mcp_server: object, soc_diagram: dict[str, Any]) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("format_drc_report", {"diagram": soc_diagram})
            data = parse_tool_result(result)
            assert data["passed"] is False
            assert data["summary"].startswith("DRC FAILED: 1 critical")
            assert "## AXI4 Parameters Issues (1)" in data["report"]

    async def test_format_drc_report_severity_filter(self, mcp_server: object, soc_diagram: dict[str, Any]) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("format_drc_report", {"diagram": soc_diagram, "severity": "info"})
            data = parse_tool_result(result)
            assert data["report"] == "No violations found."

    async def test_list_drc_rules(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            result = await client.call_tool("list_drc_rules", {})
            data = parse_tool_result(result)
            categories = [c["category"] for c in data["categories"]]
            assert categories == [
                "Connectivity",
                "AXI4 Parameters",
                "Address Space",
                "Topology",
                "Performance",
                "Parameter Validity",
                "Naming Convention",
            ]

    async def test_read_rules_resource(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            contents = await client.read_resource("socdrc://drc/rules")
            assert "DRC-CONN-001" in contents[0].text  # type: ignore[union-attr]

    async def test_read_settings_resource(self, mcp_server: object) -> None:
        async with Client(mcp_server) as client:  # type: ignore[arg-type]
            contents = await client.read_resource("socdrc://drc/settings")
            text = contents[0].text  # type: ignore[union-attr]
            assert "Boot ROM" in text
            assert "0xFFFF0000" in text
