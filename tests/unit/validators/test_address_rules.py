"""アドレス空間ルールのユニットテスト。"""

from typing import Any

import pytest

from socdrc.models.diagram import ArchitectureDiagram
from socdrc.models.drc import DRCOptions, DRCRuleSettings, ReservedRange
from socdrc.validators.graph import DiagramGraph, InterfaceResolver
from socdrc.validators.rules import address
from socdrc.validators.rules.base import RuleContext


def _node(nid: str, base: Any, space: Any) -> dict[str, Any]:
    return {"id": nid, "data": {"label": nid.upper(), "target_addr_base": base, "target_addr_space": space}}


def _ctx(nodes: list[dict[str, Any]], settings: DRCRuleSettings | None = None) -> RuleContext:
    graph = DiagramGraph(ArchitectureDiagram.parse({"nodes": nodes, "edges": []}))
    return RuleContext(
        graph=graph,
        resolver=InterfaceResolver(graph),
        options=DRCOptions(),
        settings=settings or DRCRuleSettings(),
    )


class TestParseSize:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("4KB", 4096),
            ("1 MB", 1024**2),
            ("2gb", 2 * 1024**3),
            ("1TB", 1024**4),
            ("512", 512),
            ("64B", 64),
            ("1.5KB", 1536),
            ("0.3KB", 307),
            ("9" * 29, int("9" * 29)),
            ("0.1TB", 109951162777),
        ],
    )
    def test_valid(self, text: str, expected: int) -> None:
        assert address.parse_size(text) == expected

    @pytest.mark.parametrize("text", ["", "big", "4 KiB", "-4KB", "KB"])
    def test_invalid_is_zero(self, text: str) -> None:
        assert address.parse_size(text) == 0


class TestParseAddress:
    def test_hex_with_underscores(self) -> None:
        assert address.parse_address("0x4000_0000") == 0x40000000

    def test_decimal(self) -> None:
        assert address.parse_address("4096") == 4096

    def test_invalid(self) -> None:
        with pytest.raises(ValueError):
            address.parse_address("0xG000")


class TestCollectRanges:
    def test_incomplete_or_invalid_nodes_excluded(self) -> None:
        ctx = _ctx(
            [
                _node("ok", "0x40000000", "4KB"),
                _node("nobase", None, "4KB"),
                _node("nosize", "0x40000000", None),
                _node("badbase", "zzz", "4KB"),
                _node("badsize", "0x40000000", "lots"),
                _node("zerosize", "0x40000000", "0KB"),
                _node("negative", "-4096", "4KB"),
            ]
        )
        assert [r.node_id for r in address.collect_ranges(ctx)] == ["ok"]

    def test_legacy_address_mapping(self) -> None:
        node = {
            "id": "rom",
            "data": {"label": "ROM", "addressMapping": {"baseAddress": "0x40000000", "addressSpace": "64KB"}},
        }
        ranges = address.collect_ranges(_ctx([node]))
        assert len(ranges) == 1
        assert ranges[0].end == 0x4000FFFF


class TestOverlap:
    def test_overlapping_ranges(self) -> None:
        ctx = _ctx([_node("a", "0x40001000", "4KB"), _node("b", "0x40001800", "4KB")])
        results = address.check_overlap(ctx)
        assert len(results) == 1
        v = results[0]
        assert v.rule_id == "DRC-ADDR-001"
        assert v.severity == "critical"
        assert v.location == "A ↔ B"
        assert v.affected_components == ["a", "b"]
        assert "[0x40001000-0x40001fff]" in v.description

    def test_adjacent_ranges_ok(self) -> None:
        ctx = _ctx([_node("a", "0x40001000", "4KB"), _node("b", "0x40002000", "4KB")])
        assert address.check_overlap(ctx) == []

    def test_adjacent_ranges_beyond_float_precision(self) -> None:
        huge = "9" * 29
        ctx = _ctx([_node("a", "0", huge), _node("b", huge, "1")])
        assert [r.size for r in address.collect_ranges(ctx)] == [int(huge), 1]
        assert address.check_overlap(ctx) == []

    def test_each_pair_reported_once(self) -> None:
        ctx = _ctx(
            [_node("a", "0x40000000", "64KB"), _node("b", "0x40001000", "4KB"), _node("c", "0x40002000", "4KB")]
        )
        results = address.check_overlap(ctx)
        assert [v.affected_components for v in results] == [["a", "b"], ["a", "c"]]


class TestAlignment:
    def test_misaligned_base(self) -> None:
        results = address.check_alignment(_ctx([_node("a", "0x40001800", "4KB")]))
        assert len(results) == 1
        v = results[0]
        assert v.rule_id == "DRC-ADDR-002"
        assert v.severity == "warning"
        assert v.details is not None
        assert v.details["suggestedAddress"] == "0x40002000"

    def test_aligned_base(self) -> None:
        assert address.check_alignment(_ctx([_node("a", "0x40002000", "4KB")])) == []

    def test_non_power_of_two_size(self) -> None:
        assert address.check_alignment(_ctx([_node("a", "3000", "1000")])) == []


class TestReservedRanges:
    def test_default_boot_rom(self) -> None:
        results = address.check_reserved_ranges(_ctx([_node("a", "0x0", "4KB")]))
        assert len(results) == 1
        v = results[0]
        assert v.rule_id == "DRC-ADDR-004"
        assert v.severity == "info"
        assert "Boot ROM" in v.description

    def test_high_vectors(self) -> None:
        results = address.check_reserved_ranges(_ctx([_node("a", "0xFFFF8000", "4KB")]))
        assert [v.details["reservedRange"] for v in results if v.details] == ["High vectors"]

    def test_outside_reserved_ok(self) -> None:
        assert address.check_reserved_ranges(_ctx([_node("a", "0x40000000", "4KB")])) == []

    def test_custom_reserved_ranges(self) -> None:
        settings = DRCRuleSettings(reserved_ranges=[ReservedRange(name="Secure", start=0x40000000, end=0x4000FFFF)])
        results = address.check_reserved_ranges(_ctx([_node("a", "0x40008000", "4KB")], settings))
        assert [v.details["reservedRange"] for v in results if v.details] == ["Secure"]
