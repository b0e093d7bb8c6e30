"""アドレス空間ルール（category: Address Space）。

ベースアドレスとサイズの両方を持つノードのみを対象とする。どちらかが
空・解釈不能なノードは違反ではなく対象外として扱う。
"""

import logging
import re
from dataclasses import dataclass
from fractions import Fraction

from socdrc.models.drc import DRCViolation, parse_int_literal
from socdrc.validators.rules.base import Rule, RuleContext, violation

logger = logging.getLogger(__name__)

_SIZE_PATTERN = re.compile(r"^(\d+(?:\.\d+)?)\s*(KB|MB|GB|TB|B)?$")

_SIZE_MULTIPLIERS: dict[str, int] = {
    "B": 1,
    "KB": 1024,
    "MB": 1024**2,
    "GB": 1024**3,
    "TB": 1024**4,
}


def parse_address(text: str) -> int:
    """``0x4000_0000`` 形式の16進、または10進のアドレス文字列を整数に変換する。

    Raises:
        ValueError: 数値として解釈できない場合。
    """
    return parse_int_literal(text)


def parse_size(text: str) -> int:
    """``<数値>[KB|MB|GB|TB|B]`` 形式のサイズをバイト数に変換する。単位省略時はバイト。

    小数は切り捨てる。解釈できない場合は0を返す。
    """
    match = _SIZE_PATTERN.match(text.strip().upper())
    if match is None:
        return 0
    return int(Fraction(match.group(1)) * _SIZE_MULTIPLIERS[match.group(2) or "B"])


def to_hex(value: int) -> str:
    return f"0x{value:x}"


@dataclass(frozen=True)
class AddressRange:
    """1ノードが占有するアドレス範囲（両端を含む）。"""

    node_id: str
    label: str
    base: int
    size: int
    space: str

    @property
    def end(self) -> int:
        return self.base + self.size - 1

    def overlaps(self, start: int, end: int) -> bool:
        return not (self.end < start or end < self.base)


def collect_ranges(ctx: RuleContext) -> list[AddressRange]:
    """アドレス情報を持つノードの範囲をノード順に返す。"""
    ranges: list[AddressRange] = []
    for node in ctx.graph.nodes:
        base_text = node.address_base
        space_text = node.address_space
        if not base_text or not space_text:
            continue
        try:
            base = parse_address(base_text)
        except ValueError:
            logger.debug("Ignoring unparseable base address %r on node %s", base_text, node.id)
            continue
        if base < 0:
            logger.debug("Ignoring negative base address %r on node %s", base_text, node.id)
            continue
        size = parse_size(space_text)
        if size <= 0:
            logger.debug("Ignoring unparseable address space %r on node %s", space_text, node.id)
            continue
        ranges.append(
            AddressRange(node_id=node.id, label=ctx.graph.label(node.id), base=base, size=size, space=space_text)
        )
    return ranges


def check_overlap(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-ADDR-001: 2ノード間のアドレス範囲の重なり。"""
    ranges = collect_ranges(ctx)
    results: list[DRCViolation] = []
    for i, first in enumerate(ranges):
        for second in ranges[i + 1 :]:
            if not first.overlaps(second.base, second.end):
                continue
            results.append(
                violation(
                    "DRC-ADDR-001",
                    location=f"{first.label} ↔ {second.label}",
                    description=(
                        f"Address space overlap detected: [{to_hex(first.base)}-{to_hex(first.end)}] "
                        f"overlaps with [{to_hex(second.base)}-{to_hex(second.end)}]"
                    ),
                    suggestion="Reassign address ranges to eliminate overlap",
                    affected_components=[first.node_id, second.node_id],
                    details={
                        "component1": {"label": first.label, "base": to_hex(first.base), "end": to_hex(first.end)},
                        "component2": {"label": second.label, "base": to_hex(second.base), "end": to_hex(second.end)},
                    },
                )
            )
    return results


def check_alignment(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-ADDR-002: ベースアドレスが自身のサイズの倍数か。"""
    results: list[DRCViolation] = []
    for addr in collect_ranges(ctx):
        remainder = addr.base % addr.size
        if remainder == 0:
            continue
        suggested = addr.base - remainder + addr.size
        results.append(
            violation(
                "DRC-ADDR-002",
                location=addr.label,
                description=f"Address {to_hex(addr.base)} is not aligned to size {addr.space}",
                suggestion=f"Align base address to {addr.space} boundary (e.g., {to_hex(suggested)})",
                affected_components=[addr.node_id],
                details={
                    "baseAddress": to_hex(addr.base),
                    "size": addr.space,
                    "suggestedAddress": to_hex(suggested),
                },
            )
        )
    return results


def check_reserved_ranges(ctx: RuleContext) -> list[DRCViolation]:
    """DRC-ADDR-004: 予約済みアドレス範囲（設定で変更可能）との重なり。"""
    results: list[DRCViolation] = []
    for addr in collect_ranges(ctx):
        for reserved in ctx.settings.reserved_ranges:
            if not addr.overlaps(reserved.start, reserved.end):
                continue
            results.append(
                violation(
                    "DRC-ADDR-004",
                    location=addr.label,
                    description=f"Component uses reserved address space ({reserved.name})",
                    suggestion="Consider moving to non-reserved address range if not intentional",
                    affected_components=[addr.node_id],
                    details={
                        "reservedRange": reserved.name,
                        "reservedStart": to_hex(reserved.start),
                        "reservedEnd": to_hex(reserved.end),
                        "componentRange": f"{to_hex(addr.base)}-{to_hex(addr.end)}",
                    },
                )
            )
    return results


RULES: tuple[Rule, ...] = (
    check_overlap,
    check_alignment,
    check_reserved_ranges,
)
