"""Assessment exports.

- CSV of all stored assessments (admin download)
- Excel workbook for one assessment with three sheets:
  Assessment Summary, Recommendations, Detailed Analysis

Pure formatting of stored values; nothing is recalculated here.
"""

import csv
import io
import re
from datetime import datetime

from openpyxl import Workbook
from openpyxl.styles import Font
from openpyxl.worksheet.worksheet import Worksheet

from src.models.assessment import Assessment
from src.models.common import Jurisdiction, RiskLevel
from src.models.report import AssessmentReport

CSV_COLUMNS: list[str] = [
    "id",
    "company",
    "email",
    "phone",
    "sector",
    "location",
    "total_employees",
    "skilled_employees",
    "emirati_employees",
    "required_count",
    "gap",
    "risk_score",
    "risk_level",
    "fine_estimate",
    "created_at",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

_SLUG_PATTERN = re.compile(r"[^a-z0-9]")

# Leading characters spreadsheet applications evaluate as a formula
_FORMULA_PREFIXES = ("=", "+", "-", "@", "\t", "\r")


def report_filename(
    company_name: str,
    created_at: datetime,
    extension: str,
    *,
    fallback: str = "assessment",
) -> str:
    """emiratisation-compliance-report-<company slug>-<YYYY-MM-DD>.<ext>

    Names without any ASCII letter or digit (e.g. Arabic-only names) use
    the fallback instead; Content-Disposition headers must stay latin-1.
    """
    slug = _SLUG_PATTERN.sub("_", company_name.lower())
    if slug.strip("_") == "":
        slug = _SLUG_PATTERN.sub("_", fallback.lower())
    return (
        f"emiratisation-compliance-report-{slug}-"
        f"{created_at.date().isoformat()}.{extension}"
    )


def is_formula_like(value: object) -> bool:
    """True for text a spreadsheet would evaluate instead of display."""
    return isinstance(value, str) and value.startswith(_FORMULA_PREFIXES)


def neutralize_formula(value: object) -> object:
    """Prefix formula-like text with a quote so CSV viewers show it verbatim."""
    return f"'{value}" if is_formula_like(value) else value


def _yes_no(flag: bool) -> str:
    return "Yes" if flag else "No"


def _compliance_status(level: RiskLevel) -> str:
    return "Compliant" if level == RiskLevel.LOW else "Non-Compliant"


def export_assessments_csv(assessments: list[Assessment]) -> str:
    """Render assessments as CSV text, one row each, header first.

    Submitted text starting with a formula character is quote-prefixed.
    """
    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=CSV_COLUMNS, lineterminator="\n")
    writer.writeheader()
    for a in assessments:
        sub = a.submission
        row = {
            "id": str(a.assessment_id),
            "company": sub.contact.company_name,
            "email": sub.contact.email,
            "phone": sub.contact.phone,
            "sector": a.profile.sector,
            "location": a.profile.jurisdiction.value,
            "total_employees": a.profile.total_employees,
            "skilled_employees": a.profile.skilled_employees,
            "emirati_employees": a.profile.current_qualifying_workers,
            "required_count": a.result.required_count,
            "gap": a.result.gap,
            "risk_score": a.result.risk_score,
            "risk_level": a.result.risk_level.value,
            "fine_estimate": a.result.fine_estimate,
            "created_at": a.created_at.isoformat(),
        }
        writer.writerow({k: neutralize_formula(v) for k, v in row.items()})
    return buf.getvalue()


class AssessmentExcelExporter:
    """Generate the per-assessment Excel workbook."""

    def export(self, assessment: Assessment, report: AssessmentReport) -> bytes:
        """Return XLSX bytes for one assessment and its rendered report."""
        wb = Workbook()

        # Remove default sheet
        wb.remove(wb.active)

        self._write_summary(wb, assessment)
        self._write_recommendations(wb, report)
        self._write_detailed_analysis(wb, assessment)

        buf = io.BytesIO()
        wb.save(buf)
        return buf.getvalue()

    def _write_summary(self, wb: Workbook, a: Assessment) -> None:
        ws = wb.create_sheet("Assessment Summary")
        contact = a.submission.contact
        profile = a.profile
        result = a.result
        rows: list[tuple] = [
            ("UAE Emiratisation Compliance Report",),
            (),
            ("Company Details",),
            ("Company Name", contact.company_name),
            ("Contact Person", f"{contact.first_name} {contact.last_name}"),
            ("Email", contact.email),
            ("Phone", contact.phone),
            ("Industry Sector", profile.sector),
            ("Location", profile.jurisdiction.value),
            ("Assessment Date", a.created_at.date().isoformat()),
            (),
            ("Workforce Statistics",),
            ("Total Employees", profile.total_employees),
            ("Skilled Employees", profile.skilled_employees),
            ("Emirati Employees", profile.current_qualifying_workers),
            ("Emiratisation Percentage", f"{a.emiratisation_pct:.1f}%"),
            ("WPS & GPSSA Compliant", _yes_no(profile.payroll_compliance_confirmed)),
            ("Recent Departure", _yes_no(profile.recent_departure)),
            (),
            ("Risk Assessment",),
            ("Risk Level", result.risk_level.value.upper()),
            ("Risk Score", f"{result.risk_score}/100"),
            ("Potential Fine (AED)", float(result.fine_estimate)),
            ("MoHRE Compliance Status", _compliance_status(result.risk_level)),
        ]
        self._write_rows(ws, rows)
        for title_row in (1, 3, 12, 20):
            ws.cell(row=title_row, column=1).font = Font(bold=True)
        ws.column_dimensions["A"].width = 25
        ws.column_dimensions["B"].width = 40

    def _write_recommendations(self, wb: Workbook, report: AssessmentReport) -> None:
        ws = wb.create_sheet("Recommendations")
        rows: list[tuple] = [
            ("Compliance Recommendations",),
            ("Priority", "Recommendation"),
        ]
        rows.extend(
            (idx, rec) for idx, rec in enumerate(report.recommendations, 1)
        )
        self._write_rows(ws, rows)
        ws.cell(row=1, column=1).font = Font(bold=True)
        ws.column_dimensions["A"].width = 10
        ws.column_dimensions["B"].width = 80

    def _write_detailed_analysis(self, wb: Workbook, a: Assessment) -> None:
        ws = wb.create_sheet("Detailed Analysis")
        profile = a.profile
        result = a.result
        target_pct = a.config_snapshot.get("target_percent", "")
        compliant = profile.payroll_compliance_confirmed
        is_freezone = profile.jurisdiction == Jurisdiction.FREEZONE
        rows: list[tuple] = [
            ("Detailed Emiratisation Analysis",),
            (),
            ("Current Status",),
            ("Metric", "Current", "Required", "Gap"),
            ("Emirati Count", result.valid_count, result.required_count, result.gap),
            (
                "Target % of Skilled",
                f"{a.skilled_emiratisation_pct:.1f}%",
                f"{target_pct}%",
                "",
            ),
            (),
            ("Compliance Factors",),
            ("Factor", "Status", "Impact"),
            (
                "WPS & GPSSA Compliance",
                "Compliant" if compliant else "Non-Compliant",
                "Positive" if compliant else "High Risk",
            ),
            (
                "Location",
                "Free Zone" if is_freezone else "Mainland",
                "Exempt" if is_freezone else "Subject to Rules",
            ),
        ]
        self._write_rows(ws, rows)
        ws.cell(row=1, column=1).font = Font(bold=True)
        for col in ("A", "B", "C", "D"):
            ws.column_dimensions[col].width = 22

    @staticmethod
    def _write_rows(ws: Worksheet, rows: list[tuple]) -> None:
        for row_idx, values in enumerate(rows, 1):
            for col_idx, value in enumerate(values, 1):
                cell = ws.cell(row=row_idx, column=col_idx, value=value)
                if is_formula_like(value):
                    cell.data_type = "s"
