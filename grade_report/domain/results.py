"""Domain-level results for grade aggregation."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Sequence

from .models import ComponentRank, StudentRecord


def _empty_mapping() -> Mapping:
    return MappingProxyType({})


@dataclass(frozen=True)
class SummaryReport:
    general_averages: Mapping[str, float] = field(default_factory=_empty_mapping)
    branch_averages: Mapping[str, float] = field(default_factory=_empty_mapping)
    component_toppers: Mapping[str, Sequence[ComponentRank]] = field(default_factory=_empty_mapping)
    discrepancies: Sequence[StudentRecord] = field(default_factory=tuple)

    def has_discrepancies(self) -> bool:
        return bool(self.discrepancies)

    def iter_toppers(self) -> Iterable[tuple[str, ComponentRank]]:
        for quantity, ranks in self.component_toppers.items():
            for rank in ranks:
                yield quantity, rank
