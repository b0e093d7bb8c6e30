"""DRC（デザインルールチェック）関連のデータモデル。"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

Severity = Literal["critical", "warning", "info"]

RuleCategory = Literal[
    "Connectivity",
    "AXI4 Parameters",
    "Address Space",
    "Topology",
    "Performance",
    "Parameter Validity",
    "Naming Convention",
]

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DRCViolation(BaseModel):
    """DRCで検出された1件の違反。"""

    model_config = _CAMEL

    id: str = ""
    rule_id: str
    rule_name: str
    severity: Severity
    category: RuleCategory
    location: str
    description: str
    suggestion: str
    affected_components: list[str] | None = None
    affected_interfaces: list[str] | None = None
    affected_connections: list[str] | None = None
    details: dict[str, Any] | None = None


class DRCSummary(BaseModel):
    """重大度ごとの違反件数。"""

    critical: int = 0
    warning: int = 0
    info: int = 0


class DRCResult(BaseModel):
    """1回のDRC実行結果。"""

    model_config = _CAMEL

    timestamp: str
    total_checks: int
    violations: list[DRCViolation] = Field(default_factory=list)
    summary: DRCSummary = Field(default_factory=DRCSummary)
    passed: bool

    def to_json_dict(self) -> dict[str, Any]:
        """camelCaseのJSON形状に変換する。未設定の任意フィールドは出力しない。"""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class DRCRun(BaseModel):
    """DRC結果と、違反には含めないデータ品質上の警告。"""

    result: DRCResult
    data_quality_warnings: list[str] = Field(default_factory=list)


class DRCOptions(BaseModel):
    """呼び出し側が指定するDRCオプション。"""

    model_config = _CAMEL

    check_optional_ports: bool = False


class RuleDefinition(BaseModel):
    """ルールカタログの1エントリ。"""

    id: str
    name: str
    severity: Severity
    category: RuleCategory
    description: str = ""


def parse_int_literal(value: Any) -> int:
    """16進（0x...）または10進の文字列を整数に変換する。``_`` 区切りは無視する。

    Raises:
        ValueError: 数値として解釈できない場合。
    """
    if isinstance(value, bool):
        raise ValueError(f"Not an address: {value!r}")
    if isinstance(value, int):
        return value
    cleaned = str(value).strip().lower().replace("_", "")
    if cleaned.startswith("0x"):
        return int(cleaned[2:], 16)
    return int(cleaned, 10)


class ReservedRange(BaseModel):
    """予約済みアドレス範囲（両端を含む）。"""

    name: str
    start: int
    end: int

    @field_validator("start", "end", mode="before")
    @classmethod
    def _parse_address(cls, value: Any) -> int:
        return parse_int_literal(value)


def _default_reserved_ranges() -> list[ReservedRange]:
    return [
        ReservedRange(name="Boot ROM", start=0x00000000, end=0x000FFFFF),
        ReservedRange(name="High vectors", start=0xFFFF0000, end=0xFFFFFFFF),
    ]


class DRCRuleSettings(BaseModel):
    """ルールが参照する閾値・テーブル類。``config/drc-settings.yaml`` で上書きできる。"""

    reserved_ranges: list[ReservedRange] = Field(default_factory=_default_reserved_ranges)
    canonical_data_widths: list[int] = Field(default_factory=lambda: [8, 16, 32, 64, 128, 256, 512, 1024, 2048])
    interconnect_categories: list[str] = Field(default_factory=lambda: ["Interconnect"])
    interconnect_keywords: list[str] = Field(default_factory=lambda: ["crossbar", "arbiter", "interconnect"])
    max_interconnect_fanout: int = 16
    max_path_depth: int = 5
    long_path_threshold: int = 4
    interface_name_pattern: str = r"^[a-zA-Z][a-zA-Z0-9_-]*$"
