"""Domain services computing the summary report facets."""
from __future__ import annotations

import logging
import threading
from collections import defaultdict
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from types import MappingProxyType
from typing import Callable, Mapping, Sequence

from grade_report.config import SETTINGS

from .models import (
    QUANTITIES,
    QUANTITY_PROJECTIONS,
    CohortFilter,
    ComponentRank,
    StudentRecord,
)
from .results import SummaryReport

logger = logging.getLogger(__name__)


class _ReportDraft:
    """Mutable report under construction, shared by the aggregate tasks.

    Every write goes through the same lock, including the per-quantity
    toppers even though each ranking task owns its own key.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.general_averages: dict[str, float] = {}
        self.branch_averages: dict[str, float] = {}
        self.component_toppers: dict[str, tuple[ComponentRank, ...]] = {}
        self.discrepancies: tuple[StudentRecord, ...] = ()

    def set_general_averages(self, averages: Mapping[str, float]) -> None:
        with self._lock:
            self.general_averages.update(averages)

    def set_branch_averages(self, averages: Mapping[str, float]) -> None:
        with self._lock:
            self.branch_averages.update(averages)

    def set_toppers(self, quantity: str, ranks: Sequence[ComponentRank]) -> None:
        with self._lock:
            self.component_toppers[quantity] = tuple(ranks)

    def set_discrepancies(self, records: Sequence[StudentRecord]) -> None:
        with self._lock:
            self.discrepancies = tuple(records)

    def freeze(self) -> SummaryReport:
        # Key order is fixed here so the report does not depend on which task finished first.
        with self._lock:
            return SummaryReport(
                general_averages=MappingProxyType(
                    {q: self.general_averages[q] for q in QUANTITIES if q in self.general_averages}
                ),
                branch_averages=MappingProxyType(
                    {branch: self.branch_averages[branch] for branch in sorted(self.branch_averages)}
                ),
                component_toppers=MappingProxyType(
                    {q: self.component_toppers[q] for q in QUANTITIES if q in self.component_toppers}
                ),
                discrepancies=self.discrepancies,
            )


def general_averages(records: Sequence[StudentRecord]) -> dict[str, float]:
    sums = dict.fromkeys(QUANTITIES, 0.0)
    for record in records:
        for quantity, project in QUANTITY_PROJECTIONS.items():
            sums[quantity] += project(record)
    count = len(records)
    return {quantity: total / count for quantity, total in sums.items()}


def branch_averages(records: Sequence[StudentRecord], cohort_filter: CohortFilter) -> dict[str, float]:
    sums: dict[str, float] = defaultdict(float)
    counts: dict[str, int] = defaultdict(int)
    for record in records:
        if not cohort_filter.accepts(record):
            continue
        sums[record.branch] += record.total_given
        counts[record.branch] += 1
    return {branch: sums[branch] / counts[branch] for branch in sums}


def rank_component(
    records: Sequence[StudentRecord],
    project: Callable[[StudentRecord], float],
    top_n: int | None = None,
) -> list[ComponentRank]:
    """Top ``top_n`` records by one quantity, best first.

    ``sorted`` is stable, so equal marks keep their input order.
    """
    if top_n is None:
        top_n = SETTINGS.top_n
    projected = [(record.student_id, record.name, project(record)) for record in records]
    ordered = sorted(projected, key=lambda entry: entry[2], reverse=True)
    return [
        ComponentRank(student_id=student_id, name=name, marks=marks, rank=position)
        for position, (student_id, name, marks) in enumerate(ordered[:top_n], start=1)
    ]


def collect_discrepancies(records: Sequence[StudentRecord]) -> list[StudentRecord]:
    return [record for record in records if record.has_discrepancy]


class ReportAggregator:
    """Computes every report facet concurrently over one record collection."""

    def __init__(self, cohort_filter: CohortFilter | None = None, top_n: int | None = None) -> None:
        if cohort_filter is None:
            cohort_filter = SETTINGS.cohort_filter
        if top_n is None:
            top_n = SETTINGS.top_n
        self._cohort_filter = cohort_filter
        self._top_n = top_n

    @property
    def cohort_filter(self) -> CohortFilter:
        return self._cohort_filter

    @property
    def top_n(self) -> int:
        return self._top_n

    def aggregate(self, records: Sequence[StudentRecord]) -> SummaryReport:
        assert len(records) > 0, "aggregate() requires at least one record"
        snapshot = tuple(records)
        draft = _ReportDraft()

        tasks: list[Callable[[], None]] = [
            partial(self._general_task, snapshot, draft),
            partial(self._branch_task, snapshot, draft),
        ]
        tasks.extend(partial(self._ranking_task, snapshot, draft, quantity) for quantity in QUANTITIES)
        tasks.append(partial(self._discrepancy_task, snapshot, draft))

        with ThreadPoolExecutor(max_workers=len(tasks), thread_name_prefix="aggregate") as pool:
            futures = [pool.submit(task) for task in tasks]
            for future in futures:
                future.result()

        report = draft.freeze()
        logger.info(
            "Aggregated %d records: %d branches, %d discrepancies",
            len(snapshot),
            len(report.branch_averages),
            len(report.discrepancies),
        )
        return report

    @staticmethod
    def _general_task(records: Sequence[StudentRecord], draft: _ReportDraft) -> None:
        draft.set_general_averages(general_averages(records))
        logger.debug("General averages computed")

    def _branch_task(self, records: Sequence[StudentRecord], draft: _ReportDraft) -> None:
        draft.set_branch_averages(branch_averages(records, self._cohort_filter))
        logger.debug("Branch averages computed for cohort %s", self._cohort_filter.cohort)

    def _ranking_task(self, records: Sequence[StudentRecord], draft: _ReportDraft, quantity: str) -> None:
        ranks = rank_component(records, QUANTITY_PROJECTIONS[quantity], self._top_n)
        draft.set_toppers(quantity, ranks)
        logger.debug("Ranked %s", quantity)

    @staticmethod
    def _discrepancy_task(records: Sequence[StudentRecord], draft: _ReportDraft) -> None:
        found = collect_discrepancies(records)
        draft.set_discrepancies(found)
        logger.debug("Collected %d discrepancies", len(found))
