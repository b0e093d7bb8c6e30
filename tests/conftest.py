"""テスト共通フィクスチャ。"""

from pathlib import Path
from typing import Any

import pytest

from socdrc.config import ServerConfig
from socdrc.services.drc import DRCService


@pytest.fixture
def config_dir() -> Path:
    """設定ファイルディレクトリ。"""
    return Path(__file__).parent.parent / "config"


@pytest.fixture
def drc_service(config_dir: Path) -> DRCService:
    """テスト用DRCService。"""
    return DRCService(config_dir=config_dir)


@pytest.fixture
def server_config(config_dir: Path) -> ServerConfig:
    """テスト用ServerConfig。"""
    return ServerConfig(config_dir=config_dir)


@pytest.fixture
def soc_diagram() -> dict[str, Any]:
    """CPU → Interconnect → Memory の3ノード構成。Interconnect↔Memory間のみデータ幅が異なる。"""
    return {
        "nodes": [
            {
                "id": "cpu",
                "data": {
                    "label": "CPU",
                    "interfaces": [
                        {"id": "m_axi", "name": "m_axi", "busType": "AXI4", "direction": "master", "dataWidth": 64},
                    ],
                },
            },
            {
                "id": "ic",
                "data": {
                    "label": "Interconnect",
                    "category": "Interconnect",
                    "interfaces": [
                        {"id": "s_axi", "name": "s_axi", "busType": "AXI4", "direction": "slave", "dataWidth": 64},
                        {"id": "m_axi", "name": "m_axi", "busType": "AXI4", "direction": "master", "dataWidth": 64},
                    ],
                },
            },
            {
                "id": "mem",
                "data": {
                    "label": "Memory",
                    "interfaces": [
                        {"id": "s_axi", "name": "s_axi", "busType": "AXI4", "direction": "slave", "dataWidth": 32},
                    ],
                },
            },
        ],
        "edges": [
            {"id": "e1", "source": "cpu", "target": "ic", "sourceHandle": "m_axi", "targetHandle": "s_axi"},
            {"id": "e2", "source": "ic", "target": "mem", "sourceHandle": "m_axi", "targetHandle": "s_axi"},
        ],
    }
