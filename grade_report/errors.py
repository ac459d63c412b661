"""Exceptions raised while acquiring and parsing gradesheets."""
from __future__ import annotations


class GradeReportError(Exception):
    """Base class for recoverable grade report failures."""


class SourceFetchError(GradeReportError):
    """The gradesheet could not be downloaded."""


class GradesheetError(GradeReportError, ValueError):
    """The workbook could not be turned into grade records."""


class NoRecordsError(GradesheetError):
    """Every row of the workbook was skipped or filtered out."""
