"""DRCルールカタログ。ルールID・名称・既定の重大度・カテゴリを定義する。"""

from socdrc.models.drc import RuleCategory, RuleDefinition

CATEGORY_ORDER: tuple[RuleCategory, ...] = (
    "Connectivity",
    "AXI4 Parameters",
    "Address Space",
    "Topology",
    "Performance",
    "Parameter Validity",
    "Naming Convention",
)

_DEFINITIONS: list[RuleDefinition] = [
    # Connectivity
    RuleDefinition(
        id="DRC-CONN-001",
        name="Master-Slave Role Matching",
        severity="critical",
        category="Connectivity",
        description="Master interfaces must connect to slave interfaces; two slaves cannot be wired together.",
    ),
    RuleDefinition(
        id="DRC-CONN-002",
        name="Bus Type Matching",
        severity="critical",
        category="Connectivity",
        description="Both ends of a connection must declare the same bus type.",
    ),
    RuleDefinition(
        id="DRC-CONN-003",
        name="Interface and Instance Existence",
        severity="critical",
        category="Connectivity",
        description="Every connection endpoint must reference an existing component.",
    ),
    RuleDefinition(
        id="DRC-CONN-004",
        name="Unconnected Master Interface",
        severity="warning",
        category="Connectivity",
        description="Master interfaces should be connected.",
    ),
    RuleDefinition(
        id="DRC-CONN-005",
        name="Multiple Masters to One Slave Interface",
        severity="critical",
        category="Connectivity",
        description="A slave interface driven by several masters needs an arbiter or interconnect.",
    ),
    RuleDefinition(
        id="DRC-CONN-006",
        name="Unconnected Slave Interface",
        severity="info",
        category="Connectivity",
        description="Slave interfaces that are never driven.",
    ),
    RuleDefinition(
        id="DRC-CONN-007",
        name="Signal Direction Matching",
        severity="critical",
        category="Connectivity",
        description="Outputs cannot drive outputs and inputs cannot drive inputs.",
    ),
    RuleDefinition(
        id="DRC-CONN-008",
        name="Multiple Connections to Same Port",
        severity="critical",
        category="Connectivity",
        description="Each port can only have one connection.",
    ),
    # AXI4 Parameters
    RuleDefinition(
        id="DRC-AXI-PARAM-001",
        name="Data Width Matching",
        severity="critical",
        category="AXI4 Parameters",
        description="Connected AXI interfaces must use the same data width.",
    ),
    RuleDefinition(
        id="DRC-AXI-PARAM-002",
        name="ID Width Compatibility",
        severity="critical",
        category="AXI4 Parameters",
        description="A master ID width must not exceed the slave ID width.",
    ),
    RuleDefinition(
        id="DRC-AXI-PARAM-003",
        name="Address Width Consistency",
        severity="warning",
        category="AXI4 Parameters",
        description="Connected AXI interfaces should use the same address width.",
    ),
    RuleDefinition(
        id="DRC-AXI-PARAM-004",
        name="Clock Frequency Compatibility",
        severity="warning",
        category="AXI4 Parameters",
        description="Connected AXI interfaces should run at the same clock.",
    ),
    # Address Space
    RuleDefinition(
        id="DRC-ADDR-001",
        name="Address Space Overlap",
        severity="critical",
        category="Address Space",
        description="Address ranges of two components must not intersect.",
    ),
    RuleDefinition(
        id="DRC-ADDR-002",
        name="Address Alignment",
        severity="warning",
        category="Address Space",
        description="A base address should be a multiple of its address space size.",
    ),
    RuleDefinition(
        id="DRC-ADDR-004",
        name="Reserved Address Space",
        severity="info",
        category="Address Space",
        description="Component address ranges overlapping a reserved range.",
    ),
    # Topology
    RuleDefinition(
        id="DRC-TOPO-001",
        name="Circular Dependency",
        severity="critical",
        category="Topology",
        description="The connection graph must not contain directed cycles.",
    ),
    RuleDefinition(
        id="DRC-TOPO-002",
        name="Isolated Components",
        severity="warning",
        category="Topology",
        description="Components without any connection.",
    ),
    RuleDefinition(
        id="DRC-TOPO-003",
        name="Interconnect Fanout",
        severity="warning",
        category="Topology",
        description="Interconnects with too many inputs or outputs.",
    ),
    # Performance
    RuleDefinition(
        id="DRC-PERF-002",
        name="Clock Domain Crossing",
        severity="warning",
        category="Performance",
        description="Connections between interfaces running at different clocks.",
    ),
    RuleDefinition(
        id="DRC-PERF-003",
        name="Long Connection Path",
        severity="info",
        category="Performance",
        description="Long forward paths starting at a master component.",
    ),
    # Parameter Validity
    RuleDefinition(
        id="DRC-PARAM-VALID-001",
        name="Required Parameters",
        severity="critical",
        category="Parameter Validity",
        description="Every component needs a label.",
    ),
    RuleDefinition(
        id="DRC-PARAM-VALID-002",
        name="Interface Data Width Required",
        severity="critical",
        category="Parameter Validity",
        description="Every interface needs a positive numeric dataWidth.",
    ),
    RuleDefinition(
        id="DRC-PARAM-VALID-003",
        name="Data Width Range Check",
        severity="warning",
        category="Parameter Validity",
        description="Interface data widths outside the standard set.",
    ),
    # Naming Convention
    RuleDefinition(
        id="DRC-NAME-001",
        name="Unique Component Names",
        severity="warning",
        category="Naming Convention",
        description="Component labels should be unique.",
    ),
    RuleDefinition(
        id="DRC-NAME-002",
        name="Interface Naming Convention",
        severity="info",
        category="Naming Convention",
        description="Interface names should start with a letter and use letters, digits, '_' or '-'.",
    ),
]

RULE_CATALOGUE: dict[str, RuleDefinition] = {rule.id: rule for rule in _DEFINITIONS}


def rules_by_category() -> list[dict[str, object]]:
    """カテゴリ順にグループ化したルール一覧を返す。"""
    grouped: list[dict[str, object]] = []
    for category in CATEGORY_ORDER:
        rules = [
            {"id": rule.id, "name": rule.name, "severity": rule.severity, "description": rule.description}
            for rule in _DEFINITIONS
            if rule.category == category
        ]
        grouped.append({"category": category, "rules": rules})
    return grouped
