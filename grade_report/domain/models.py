"""Domain models for the grade report pipeline.

These dataclasses capture the canonical shape of a parsed gradesheet row and
the derived values the report is built from.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Mapping

DISCREPANCY_EPSILON = 0.01


@dataclass(frozen=True)
class StudentRecord:
    """One student's validated grade entry for a term."""

    student_id: str
    name: str
    branch: str
    batch: str
    class_no: str
    quiz: float
    mid_sem: float
    lab_test: float
    weekly_labs: float
    pre_compre: float
    compre: float
    total_given: float
    total_computed: float = field(init=False)
    has_discrepancy: bool = field(init=False)

    def __post_init__(self) -> None:
        computed = (
            self.quiz
            + self.mid_sem
            + self.lab_test
            + self.weekly_labs
            + self.pre_compre
            + self.compre
        )
        object.__setattr__(self, "total_computed", computed)
        object.__setattr__(
            self,
            "has_discrepancy",
            abs(self.total_given - computed) > DISCREPANCY_EPSILON,
        )

    @property
    def difference(self) -> float:
        return self.total_given - self.total_computed


@dataclass(frozen=True)
class ComponentRank:
    """A single placing in the top-N list of one quantity."""

    student_id: str
    name: str
    marks: float
    rank: int


@dataclass(frozen=True)
class CohortFilter:
    """Inclusion rule for branch averages.

    Only records whose batch label mentions ``cohort`` and whose branch is not
    a joint programme (no separator character in the label) are counted.
    """

    cohort: str = "2024"
    joint_separators: tuple[str, ...] = ("&", "+")

    def accepts(self, record: StudentRecord) -> bool:
        if self.cohort not in record.batch:
            return False
        return not any(sep in record.branch for sep in self.joint_separators)


QUANTITY_PROJECTIONS: Mapping[str, Callable[[StudentRecord], float]] = {
    "Quiz": lambda r: r.quiz,
    "MidSem": lambda r: r.mid_sem,
    "LabTest": lambda r: r.lab_test,
    "WeeklyLabs": lambda r: r.weekly_labs,
    "PreCompre": lambda r: r.pre_compre,
    "Compre": lambda r: r.compre,
    "Total": lambda r: r.total_given,
}

QUANTITIES: tuple[str, ...] = tuple(QUANTITY_PROJECTIONS)


def marks_for(record: StudentRecord, quantity: str) -> float:
    return QUANTITY_PROJECTIONS[quantity](record)
