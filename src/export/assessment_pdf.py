"""PDF report for a single assessment.

Same content as the Excel workbook's summary and recommendations, laid out
as four tables: company details, workforce statistics, risk results and
numbered recommendations.
"""

import io
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import (
    HRFlowable,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)

from src.models.assessment import Assessment
from src.models.common import RiskLevel
from src.models.report import AssessmentReport

PDF_MEDIA_TYPE = "application/pdf"

REPORT_TITLE = "UAE Emiratisation Compliance Report"

_RISK_LEVEL_COLORS = {
    RiskLevel.HIGH: colors.HexColor("#dc3545"),
    RiskLevel.MEDIUM: colors.HexColor("#ffc107"),
    RiskLevel.LOW: colors.HexColor("#28a745"),
}


class AssessmentPdfExporter:
    """Generate the per-assessment PDF report."""

    def __init__(self) -> None:
        self.styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self) -> None:
        self.styles.add(ParagraphStyle(
            name="ReportTitle",
            parent=self.styles["Heading1"],
            fontSize=18,
            alignment=TA_CENTER,
            spaceAfter=10,
            textColor=colors.HexColor("#1a365d"),
        ))
        self.styles.add(ParagraphStyle(
            name="ReportSubtitle",
            parent=self.styles["Heading2"],
            fontSize=11,
            alignment=TA_CENTER,
            spaceAfter=10,
            textColor=colors.HexColor("#4a5568"),
        ))
        self.styles.add(ParagraphStyle(
            name="SectionHeader",
            parent=self.styles["Heading3"],
            fontSize=12,
            fontName="Helvetica-Bold",
            spaceBefore=12,
            spaceAfter=5,
            textColor=colors.HexColor("#2d3748"),
        ))
        self.styles.add(ParagraphStyle(
            name="Cell",
            parent=self.styles["Normal"],
            fontSize=9,
        ))
        self.styles.add(ParagraphStyle(
            name="Footer",
            parent=self.styles["Normal"],
            fontSize=8,
            alignment=TA_CENTER,
            textColor=colors.HexColor("#718096"),
        ))

    def sections(
        self, a: Assessment, report: AssessmentReport,
    ) -> list[tuple[str, list[list[str]]]]:
        """Section title and table rows (header first) in page order."""
        contact = a.submission.contact
        profile = a.profile
        result = a.result
        compliant = result.risk_level == RiskLevel.LOW
        return [
            ("Company Assessment Details", [
                ["Field", "Details"],
                ["Company Name", contact.company_name],
                ["Contact Person", f"{contact.first_name} {contact.last_name}"],
                ["Email", contact.email],
                ["Phone", contact.phone],
                ["Industry Sector", profile.sector],
                ["Location", profile.jurisdiction.value],
                ["Assessment Date", a.created_at.date().isoformat()],
            ]),
            ("Workforce Statistics", [
                ["Metric", "Value"],
                ["Total Employees", str(profile.total_employees)],
                ["Skilled Employees", str(profile.skilled_employees)],
                ["Emirati Employees", str(profile.current_qualifying_workers)],
                ["Emiratisation Percentage", f"{a.emiratisation_pct:.1f}%"],
                ["WPS & GPSSA Compliant",
                 "Yes" if profile.payroll_compliance_confirmed else "No"],
            ]),
            ("Risk Assessment Results", [
                ["Assessment", "Result"],
                ["Risk Level", result.risk_level.value.upper()],
                ["Risk Score", f"{result.risk_score}/100"],
                ["Potential Fine", f"AED {result.fine_estimate:,.0f}"],
                ["MoHRE Compliance Status",
                 "Compliant" if compliant else "Non-Compliant"],
            ]),
            ("Compliance Recommendations", [
                ["Priority", "Recommendation"],
                *(
                    [str(idx), rec]
                    for idx, rec in enumerate(report.recommendations, 1)
                ),
            ]),
        ]

    def export(self, assessment: Assessment, report: AssessmentReport) -> bytes:
        """Return PDF bytes for one assessment and its rendered report."""
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.5 * inch,
            leftMargin=0.5 * inch,
            topMargin=0.5 * inch,
            bottomMargin=0.5 * inch,
            title=REPORT_TITLE,
        )

        elements = [
            Paragraph(REPORT_TITLE, self.styles["ReportTitle"]),
            Paragraph(escape(report.headline), self.styles["ReportSubtitle"]),
            HRFlowable(width="100%", color=colors.HexColor("#cbd5e0")),
        ]
        for title, rows in self.sections(assessment, report):
            elements.append(Paragraph(title, self.styles["SectionHeader"]))
            if title == "Compliance Recommendations":
                table = self._create_table(rows, col_widths=[0.8 * inch, 6.2 * inch])
            else:
                table = self._create_table(rows)
            if title == "Risk Assessment Results":
                # Risk Level value cell
                table.setStyle(TableStyle([
                    ("BACKGROUND", (1, 1), (1, 1),
                     _RISK_LEVEL_COLORS[assessment.result.risk_level]),
                ]))
            elements.append(table)

        elements.append(Spacer(1, 20))
        elements.append(Paragraph(
            f"Generated {assessment.created_at.date().isoformat()} "
            f"for {escape(assessment.submission.contact.company_name)}. "
            "Estimates are indicative and not legal advice.",
            self.styles["Footer"],
        ))

        doc.build(elements)
        buffer.seek(0)
        return buffer.getvalue()

    def _create_table(
        self, rows: list[list[str]], col_widths: list[float] | None = None,
    ) -> Table:
        """Header-styled two-column table; body cells wrap as paragraphs."""
        data = [rows[0]] + [
            [Paragraph(escape(cell), self.styles["Cell"]) for cell in row]
            for row in rows[1:]
        ]
        table = Table(data, colWidths=col_widths or [2.5 * inch, 4.5 * inch])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#2d3748")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, 0), 9),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 6),
            ("TOPPADDING", (0, 0), (-1, 0), 6),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
        ]))
        return table
