"""違反の収集とID採番。"""

from collections.abc import Iterable

from socdrc.models.drc import DRCSummary, DRCViolation


class ViolationCollector:
    """1回のDRC実行の違反を保持する。IDは ``DRC-VIOLATION-<n>`` で1から連番。"""

    def __init__(self) -> None:
        self._violations: list[DRCViolation] = []
        self._counter = 0

    def add(self, violation: DRCViolation) -> DRCViolation:
        self._counter += 1
        numbered = violation.model_copy(update={"id": f"DRC-VIOLATION-{self._counter}"})
        self._violations.append(numbered)
        return numbered

    def extend(self, violations: Iterable[DRCViolation]) -> None:
        for violation in violations:
            self.add(violation)

    @property
    def violations(self) -> list[DRCViolation]:
        return list(self._violations)

    @property
    def total(self) -> int:
        return self._counter

    def summary(self) -> DRCSummary:
        return DRCSummary(
            critical=sum(1 for v in self._violations if v.severity == "critical"),
            warning=sum(1 for v in self._violations if v.severity == "warning"),
            info=sum(1 for v in self._violations if v.severity == "info"),
        )
