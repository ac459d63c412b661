"""Streamlit front-end for the grade report pipeline."""
from __future__ import annotations

from io import BytesIO
from typing import Sequence

import pandas as pd
import streamlit as st

from grade_report import (
    ExcelGradeRepository,
    GenerateReportUseCase,
    RemoteGradeRepository,
    ReportAggregator,
    ReportContext,
)
from grade_report.application.dto import ReportResponse
from grade_report.config import SETTINGS
from grade_report.domain.models import QUANTITIES, StudentRecord
from grade_report.domain.results import SummaryReport
from grade_report.errors import GradeReportError
from grade_report.presentation.summary_report import discrepancies_to_rows, render_csv, render_json, render_text


st.set_page_config(page_title="Grade Report", layout="wide")
st.title("Grade Analysis Report")


def records_to_dataframe(records: Sequence[StudentRecord]) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "emplid": r.student_id,
                "name": r.name,
                "branch": r.branch,
                "batch": r.batch,
                "class_no": r.class_no,
                "quiz": r.quiz,
                "mid_sem": r.mid_sem,
                "lab_test": r.lab_test,
                "weekly_labs": r.weekly_labs,
                "pre_compre": r.pre_compre,
                "compre": r.compre,
                "total_given": r.total_given,
                "total_computed": r.total_computed,
                "has_discrepancy": r.has_discrepancy,
            }
            for r in records
        ]
    )


def averages_to_dataframe(report: SummaryReport) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {
                "component": quantity,
                "average": average,
                "max": SETTINGS.max_marks[quantity],
                "percent": average / SETTINGS.max_marks[quantity] * 100,
            }
            for quantity, average in report.general_averages.items()
        ]
    )


def toppers_to_dataframe(report: SummaryReport) -> pd.DataFrame:
    return pd.DataFrame(
        [
            {"component": quantity, "rank": r.rank, "emplid": r.student_id, "name": r.name, "marks": r.marks}
            for quantity, r in report.iter_toppers()
        ]
    )


def run_report(workbook_bytes: bytes | None, url: str, class_filter: str) -> ReportResponse:
    class_filter = class_filter.strip() or None
    if workbook_bytes is not None:
        repository = ExcelGradeRepository(BytesIO(workbook_bytes), class_filter=class_filter)
    else:
        repository = RemoteGradeRepository(url.strip(), class_filter=class_filter)
    context = ReportContext(
        repository=repository,
        aggregator=ReportAggregator(cohort_filter=SETTINGS.cohort_filter, top_n=SETTINGS.top_n),
    )
    return GenerateReportUseCase(context).execute()


if "view" not in st.session_state:
    st.session_state["view"] = "upload"
if "result" not in st.session_state:
    st.session_state["result"] = None


if st.session_state["view"] == "upload":
    col1, col2 = st.columns(2)
    with col1:
        gradesheet_file = st.file_uploader("Upload gradesheet", type=["xlsx", "xlsm"])
    with col2:
        sheet_url = st.text_input("...or paste a file / Google Sheets URL")
    class_filter = st.text_input("Class number (optional)")

    run_btn = st.button("Generate Report", disabled=not (gradesheet_file or sheet_url))
    if run_btn:
        workbook_bytes = gradesheet_file.read() if gradesheet_file else None
        with st.spinner("Aggregating..."):
            try:
                response = run_report(workbook_bytes, sheet_url, class_filter)
            except GradeReportError as exc:
                st.error(str(exc))
                response = None
        if response is not None:
            report = response.report
            st.session_state["result"] = {
                "response": response,
                "json": render_json(report),
                "diff_csv": render_csv(report.discrepancies),
                "text": render_text(report, response.record_count),
            }
            st.session_state["view"] = "results"
            st.rerun()
else:
    back_clicked = st.button("← Back", key="back_to_upload")
    if back_clicked:
        st.session_state["view"] = "upload"
        st.session_state["result"] = None
        st.rerun()

    result = st.session_state.get("result")
    if not result:
        st.info("No results available. Upload a gradesheet and generate a report first.")
    else:
        response: ReportResponse = result["response"]
        report = response.report

        st.subheader("Summary")
        st.metric("Records processed", response.record_count)
        st.metric("Discrepancies", len(report.discrepancies))
        st.metric("Branches in cohort", len(report.branch_averages))

        tabs = st.tabs(["Averages", "Toppers", "Discrepancies", "Records", "Text report"])
        with tabs[0]:
            st.dataframe(averages_to_dataframe(report))
            st.caption(f"Branch-wise averages ({SETTINGS.cohort_filter.cohort} single degree)")
            st.dataframe(
                pd.DataFrame(
                    [{"branch": branch, "average": avg} for branch, avg in report.branch_averages.items()]
                )
            )
        with tabs[1]:
            selected = st.selectbox("Component", QUANTITIES)
            toppers = toppers_to_dataframe(report)
            if not toppers.empty:
                toppers = toppers[toppers["component"] == selected]
            st.dataframe(toppers)
        with tabs[2]:
            st.dataframe(pd.DataFrame(discrepancies_to_rows(report.discrepancies)))
            st.download_button(
                "Download discrepancies CSV",
                data=result["diff_csv"],
                file_name="grade_discrepancies.csv",
                mime="text/csv",
            )
        with tabs[3]:
            st.dataframe(records_to_dataframe(response.records))
        with tabs[4]:
            st.code(result["text"])
        st.download_button(
            "Download JSON report",
            data=result["json"].encode("utf-8"),
            file_name="grade_report.json",
            mime="application/json",
        )
