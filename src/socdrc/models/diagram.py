"""アーキテクチャダイアグラム関連のデータモデル。"""

import re
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator
from pydantic.alias_generators import to_camel

from socdrc.models.errors import InvalidDiagramError

Direction = Literal["master", "slave", "in", "out", "unknown"]

# データ幅・アドレス幅・ID幅。数値文字列は取り込み時に整数へ変換済み
WidthValue = int | float | str | bool | None

_DIRECTIONS: set[str] = {"master", "slave", "in", "out"}

# 既知のバス種別（小文字キー → 正規表記）
KNOWN_BUS_TYPES: dict[str, str] = {
    "axi4": "AXI4",
    "axi-4": "AXI4",
    "axi": "AXI4",
    "axi4-lite": "AXI4-Lite",
    "axi4lite": "AXI4-Lite",
    "axi4-stream": "AXI4-Stream",
    "axis": "AXI4-Stream",
    "ahb": "AHB",
    "apb": "APB",
    "pcie": "PCIe",
    "ddr": "DDR",
}

# 旧形式のフィールド名 → 現行フィールド名
_INTERFACE_ALIASES: dict[str, str] = {
    "width": "dataWidth",
    "addressWidth": "addrWidth",
    "type": "busType",
    "frequency": "speed",
}

_CAMEL = ConfigDict(alias_generator=to_camel, populate_by_name=True)

_INTEGER_TEXT = re.compile(r"[+-]?\d+")


def _to_text(value: Any) -> Any:
    """数値などのスカラー値を文字列にする。Noneと文字列はそのまま。"""
    if value is None or isinstance(value, (str, dict, list)):
        return value
    return str(value)


def _address_text(value: Any) -> Any:
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return _to_text(value)


def normalize_width(value: Any) -> WidthValue:
    """幅の値を揃える。

    整数表記の文字列と整数値のfloatはintにする。小数はfloatのまま、
    boolはそのまま残し、それ以外は文字列にする。
    """
    if value is None or isinstance(value, (bool, int)):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else value
    text = str(value).strip()
    if _INTEGER_TEXT.fullmatch(text):
        return int(text)
    return text


def normalize_bus_type(bus_type: str | None) -> str | None:
    """バス種別を正規表記に変換する。未知の種別はそのまま返す。"""
    if bus_type is None:
        return None
    return KNOWN_BUS_TYPES.get(bus_type.strip().lower(), bus_type.strip())


class ComponentInterface(BaseModel):
    """コンポーネントインスタンスの1ポート。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    id: str
    name: str = ""
    bus_type: str | None = None
    direction: Direction = "unknown"
    data_width: WidthValue = None
    addr_width: WidthValue = None
    id_width: WidthValue = None
    speed: str | None = None
    protocol: str | None = None
    optional: bool = False

    @model_validator(mode="before")
    @classmethod
    def _apply_legacy_aliases(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for legacy, current in _INTERFACE_ALIASES.items():
            if data.get(current) is None and data.get(legacy) is not None:
                data[current] = data[legacy]
            data.pop(legacy, None)
        for key in ("id", "name"):
            if key in data:
                data[key] = _to_text(data[key])
        if data.get("id") is None and data.get("name"):
            data["id"] = data["name"]
        if not data.get("name") and data.get("id") is not None:
            data["name"] = data["id"]
        return data

    @field_validator("direction", mode="before")
    @classmethod
    def _normalize_direction(cls, value: Any) -> str:
        text = str(value).strip().lower() if value is not None else ""
        return text if text in _DIRECTIONS else "unknown"

    @field_validator("bus_type", "speed", "protocol", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("data_width", "addr_width", "id_width", mode="before")
    @classmethod
    def _normalize_widths(cls, value: Any) -> WidthValue:
        return normalize_width(value)

    @field_validator("optional", mode="before")
    @classmethod
    def _optional_flag(cls, value: Any) -> bool:
        return value is True

    @property
    def normalized_bus_type(self) -> str | None:
        return normalize_bus_type(self.bus_type)

    @property
    def is_axi(self) -> bool:
        return self.bus_type is not None and "axi" in self.bus_type.lower()

    @property
    def bus_family(self) -> str:
        """既知のバス種別なら正規表記、それ以外は "custom"。"""
        if self.bus_type is None:
            return "custom"
        return KNOWN_BUS_TYPES.get(self.bus_type.strip().lower(), "custom")

    def declared_fields(self) -> list[str]:
        """入力データで実際に指定されていたフィールド名（camelCase）。"""
        names = [to_camel(name) for name in self.model_fields_set]
        names.extend(self.model_extra or {})
        return sorted(names)


class AddressMapping(BaseModel):
    """旧形式のアドレスマッピング定義。"""

    model_config = _CAMEL

    base_address: str | None = None
    address_space: str | None = None

    @field_validator("base_address", "address_space", mode="before")
    @classmethod
    def _address_to_text(cls, value: Any) -> Any:
        return _address_text(value)


class ComponentNode(BaseModel):
    """ダイアグラム上に配置された1コンポーネントインスタンス。

    React Flow形式（``{"id": ..., "data": {...}}``）と、属性をトップレベルに
    持つフラット形式のどちらも受け付ける。
    """

    model_config = _CAMEL

    id: str
    label: str = ""
    model_type: str | None = None
    category: str | None = None
    component_id: str | None = None
    target_addr_base: str | None = None
    target_addr_space: str | None = None
    address_mapping: AddressMapping | None = None
    interfaces: list[ComponentInterface] = Field(default_factory=list)

    @model_validator(mode="before")
    @classmethod
    def _flatten_node_data(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        inner = data.get("data")
        if not isinstance(inner, dict):
            return data
        merged = {k: v for k, v in data.items() if k != "data"}
        for key, value in inner.items():
            merged.setdefault(key, value)
        return merged

    @field_validator("id", "model_type", "category", "component_id", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("label", mode="before")
    @classmethod
    def _label_to_text(cls, value: Any) -> str:
        return "" if value is None else str(value)

    @field_validator("target_addr_base", "target_addr_space", mode="before")
    @classmethod
    def _address_to_text(cls, value: Any) -> Any:
        return _address_text(value)

    @field_validator("interfaces", mode="before")
    @classmethod
    def _interfaces_or_empty(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def address_base(self) -> str | None:
        if self.target_addr_base:
            return self.target_addr_base
        if self.address_mapping is not None:
            return self.address_mapping.base_address
        return None

    @property
    def address_space(self) -> str | None:
        if self.target_addr_space:
            return self.target_addr_space
        if self.address_mapping is not None:
            return self.address_mapping.address_space
        return None


class Connection(BaseModel):
    """2つのインターフェース間の1配線。"""

    model_config = _CAMEL

    id: str = ""
    source: str
    target: str
    source_handle: str | None = None
    target_handle: str | None = None
    label: str | None = None

    @field_validator("id", "source", "target", "label", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        return _to_text(value)

    @field_validator("source_handle", "target_handle", mode="before")
    @classmethod
    def _empty_handle(cls, value: Any) -> Any:
        return _to_text(value) or None


class ArchitectureDiagram(BaseModel):
    """DRC対象のアーキテクチャダイアグラム。解析中は変更しない。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    nodes: list[ComponentNode]
    edges: list[Connection]

    @classmethod
    def parse(cls, data: Any) -> "ArchitectureDiagram":
        """JSON形式のダイアグラムを検証して読み込む。

        Raises:
            InvalidDiagramError: nodes/edgesが欠落している等、構造が不正な場合。
        """
        if isinstance(data, cls):
            return data
        if not isinstance(data, dict):
            raise InvalidDiagramError("Diagram must be an object with 'nodes' and 'edges' arrays")
        missing = [key for key in ("nodes", "edges") if not isinstance(data.get(key), list)]
        if missing:
            raise InvalidDiagramError(
                "Invalid diagram format. Must include nodes and edges arrays "
                f"(missing or not a list: {', '.join(missing)})"
            )
        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise InvalidDiagramError(
                f"Invalid diagram format: {e.error_count()} validation error(s)",
                errors=e.errors(include_url=False),
            ) from e


class CatalogueComponent(BaseModel):
    """コンポーネントライブラリ上の1部品定義（インターフェース情報のフォールバック元）。"""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str
    name: str = ""
    interfaces: list[ComponentInterface] = Field(default_factory=list)
