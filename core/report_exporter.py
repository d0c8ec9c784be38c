# core/report_exporter.py
"""
Report Exporter
Shareable summaries of the journal for a period.

HTML -> self-contained, inline styles
PDF  -> reportlab
DOCX -> python-docx
"""

import html
import logging
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, List

from docx import Document
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from core.calculations import (
    average_type,
    color_distribution,
    gut_health_score,
    tag_correlations,
    type_distribution,
)
from core.journal_store import BRISTOL_TYPES, HEALTH_COLORS, QUICK_TAGS, STOOL_COLORS
from core.streaks import all_entries, count_total_days_with_entries
from utils.dates import month_bounds, parse_day

logger = logging.getLogger(__name__)

# ==================================================
# PATHS
# ==================================================
EXPORT_DIR = Path("data/exports")

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]
RECENT_DAYS = 14
DISCLAIMER = (
    "This report is for personal tracking only and is not a medical diagnosis. "
    "Share it with your doctor for a professional opinion."
)


def _timestamp() -> str:
    return datetime.now().strftime("%Y%m%d_%H%M%S")


# ==================================================
# DATA
# ==================================================
def filter_history(
    history: List[Dict[str, Any]],
    period: str = "all",
    year: int = None,
    month: int = None,
) -> List[Dict[str, Any]]:
    """
    period is "all" or "month" (with year and month, 1-12).
    Keeps the newest-first order of the input.
    """
    if period == "all":
        return list(history)

    if period != "month" or not year or not month:
        raise ValueError("Monthly reports need a year and a month")

    start, end = month_bounds(year, month)
    kept = []
    for day in history:
        d = parse_day(day.get("date", ""))
        if d and start <= d <= end:
            kept.append(day)
    return kept


def period_label(period: str, year: int = None, month: int = None) -> str:
    if period == "month" and year and month:
        return f"{MONTHS[month - 1]} {year}"
    return "All Time"


def report_data(history: List[Dict[str, Any]]) -> Dict[str, Any]:
    """Everything a report shows, for an already filtered history."""
    entries = all_entries(history)
    recent = sorted(history, key=lambda d: d["date"], reverse=True)[:RECENT_DAYS]

    return {
        "totalEntries": len(entries),
        "daysLogged": count_total_days_with_entries(history),
        "avgType": average_type(entries),
        "healthScore": gut_health_score(entries),
        "types": type_distribution(history),
        "colors": color_distribution(history),
        "tags": tag_correlations(history),
        "recentDays": recent,
    }


def _entry_line(e: Dict[str, Any]) -> str:
    parts = [e["time"], f"Type {e['type']} ({BRISTOL_TYPES[e['type']]['name']})"]
    if e.get("color"):
        parts.append(STOOL_COLORS.get(e["color"], {}).get("name", e["color"]))
    if e.get("tags"):
        parts.append(", ".join(QUICK_TAGS.get(t, t) for t in e["tags"]))
    line = " · ".join(parts)
    if e.get("notes"):
        line += f" ({e['notes']})"
    return line


def _format_day(date_str: str) -> str:
    d = parse_day(date_str)
    return d.strftime("%a, %b %d, %Y") if d else date_str


def _display(value) -> str:
    return "-" if value is None else str(value)


# ==================================================
# HTML
# ==================================================
_STYLE = """
body { font-family: -apple-system, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif;
       background: #f8fafc; color: #1e293b; line-height: 1.5; padding: 24px; }
.container { max-width: 800px; margin: 0 auto; background: white; border-radius: 16px; }
.header { background: linear-gradient(135deg, #8B5CF6 0%, #6366F1 100%); padding: 32px; color: white; }
.content { padding: 24px; }
.section-title { font-size: 12px; text-transform: uppercase; color: #64748b; font-weight: 600; }
.stats { display: flex; gap: 16px; }
.stat { flex: 1; background: #f8fafc; border-radius: 12px; padding: 16px; text-align: center; }
.stat-value { font-size: 28px; font-weight: 700; }
table { width: 100%; border-collapse: collapse; }
th, td { padding: 8px 12px; text-align: left; border-bottom: 1px solid #e2e8f0; }
.dot { display: inline-block; width: 12px; height: 12px; border-radius: 50%; }
.footer { font-size: 11px; color: #94a3b8; padding: 16px 24px; }
"""


def build_report_html(
    history: List[Dict[str, Any]],
    period: str = "all",
    year: int = None,
    month: int = None,
    today: date = None,
) -> str:
    filtered = filter_history(history, period, year, month)
    data = report_data(filtered)
    esc = html.escape
    exported = (today or date.today()).strftime("%A, %B %d, %Y")

    type_rows = "".join(
        f"<tr><td><span class='dot' style='background:{HEALTH_COLORS[t['health']]}'></span> "
        f"Type {t['type']}: {esc(t['name'])}</td><td>{t['count']}</td></tr>"
        for t in data["types"]
    )
    color_rows = "".join(
        f"<tr><td><span class='dot' style='background:{c['hex']}'></span> "
        f"{esc(c['name'])}</td><td>{c['count']}</td></tr>"
        for c in data["colors"]
    ) or "<tr><td colspan='2'>No colors logged</td></tr>"
    tag_rows = "".join(
        f"<tr><td>{esc(t['label'])}</td><td>{t['count']}</td><td>{_display(t['avgType'])}</td></tr>"
        for t in data["tags"]
    ) or "<tr><td colspan='3'>No tags logged</td></tr>"

    recent = "".join(
        f"<tr><td>{esc(_format_day(day['date']))}</td><td>"
        + "<br>".join(
            esc(_entry_line(e))
            for e in sorted(day["entries"], key=lambda x: x["createdAt"])
        )
        + "</td></tr>"
        for day in data["recentDays"]
    ) or "<tr><td colspan='2'>No entries in this period</td></tr>"

    return f"""<!DOCTYPE html>
<html>
<head>
<meta charset="UTF-8">
<title>Flushy Health Report</title>
<style>{_STYLE}</style>
</head>
<body>
<div class="container">
  <div class="header">
    <h1>Flushy Health Report</h1>
    <div>Exported {esc(exported)}</div>
    <div>{esc(period_label(period, year, month))}</div>
  </div>
  <div class="content">
    <p class="section-title">Overview</p>
    <div class="stats">
      <div class="stat"><div class="stat-value">{data['totalEntries']}</div>Entries</div>
      <div class="stat"><div class="stat-value">{data['daysLogged']}</div>Days logged</div>
      <div class="stat"><div class="stat-value">{_display(data['avgType'])}</div>Avg type</div>
      <div class="stat"><div class="stat-value">{_display(data['healthScore'])}</div>Gut score</div>
    </div>
    <p class="section-title">Bristol type distribution</p>
    <table><tr><th>Type</th><th>Count</th></tr>{type_rows}</table>
    <p class="section-title">Color distribution</p>
    <table><tr><th>Color</th><th>Count</th></tr>{color_rows}</table>
    <p class="section-title">Tag correlations</p>
    <table><tr><th>Tag</th><th>Logs</th><th>Avg type</th></tr>{tag_rows}</table>
    <p class="section-title">Recent activity</p>
    <table>{recent}</table>
  </div>
  <div class="footer">{esc(DISCLAIMER)}</div>
</div>
</body>
</html>
"""


# ==================================================
# PDF EXPORT
# ==================================================
def _pdf_table(rows: List[List[str]]) -> Table:
    table = Table(rows, hAlign="LEFT")
    table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#64748b")),
        ("LINEBELOW", (0, 0), (-1, -1), 0.5, colors.HexColor("#e2e8f0")),
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
    ]))
    return table


def export_report_pdf(
    history: List[Dict[str, Any]],
    period: str = "all",
    year: int = None,
    month: int = None,
) -> Path:
    """
    Export the report sections to PDF.
    Returns generated file path.
    """
    filtered = filter_history(history, period, year, month)
    data = report_data(filtered)

    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    path = EXPORT_DIR / f"flushy_report_{_timestamp()}.pdf"

    styles = getSampleStyleSheet()
    story = [
        Paragraph("Flushy Health Report", styles["Title"]),
        Paragraph(period_label(period, year, month), styles["Normal"]),
        Spacer(1, 12),
        Paragraph("Overview", styles["Heading2"]),
        _pdf_table([
            ["Entries", "Days logged", "Avg type", "Gut score"],
            [
                str(data["totalEntries"]),
                str(data["daysLogged"]),
                _display(data["avgType"]),
                _display(data["healthScore"]),
            ],
        ]),
        Paragraph("Bristol type distribution", styles["Heading2"]),
        _pdf_table(
            [["Type", "Count"]]
            + [[f"Type {t['type']}: {t['name']}", str(t["count"])] for t in data["types"]]
        ),
    ]

    if data["colors"]:
        story.append(Paragraph("Color distribution", styles["Heading2"]))
        story.append(_pdf_table(
            [["Color", "Count"]] + [[c["name"], str(c["count"])] for c in data["colors"]]
        ))

    if data["tags"]:
        story.append(Paragraph("Tag correlations", styles["Heading2"]))
        story.append(_pdf_table(
            [["Tag", "Logs", "Avg type"]]
            + [[t["label"], str(t["count"]), _display(t["avgType"])] for t in data["tags"]]
        ))

    story.append(Paragraph("Recent activity", styles["Heading2"]))
    for day in data["recentDays"]:
        story.append(Paragraph(f"<b>{html.escape(_format_day(day['date']))}</b>", styles["Normal"]))
        for e in sorted(day["entries"], key=lambda x: x["createdAt"]):
            story.append(Paragraph(html.escape(_entry_line(e)), styles["Normal"]))
        story.append(Spacer(1, 6))

    story.append(Spacer(1, 12))
    story.append(Paragraph(DISCLAIMER, styles["Italic"]))

    doc = SimpleDocTemplate(
        str(path),
        pagesize=A4,
        rightMargin=36,
        leftMargin=36,
        topMargin=36,
        bottomMargin=36,
    )
    doc.build(story)
    logger.info("PDF report written to %s", path)
    return path


# ==================================================
# DOCX EXPORT
# ==================================================
def export_report_docx(
    history: List[Dict[str, Any]],
    period: str = "all",
    year: int = None,
    month: int = None,
) -> Path:
    """
    Editable copy of the report.
    Returns generated file path.
    """
    filtered = filter_history(history, period, year, month)
    data = report_data(filtered)

    EXPORT_DIR.mkdir(parents=True, exist_ok=True)
    path = EXPORT_DIR / f"flushy_report_{_timestamp()}.docx"

    doc = Document()
    doc.add_heading("Flushy Health Report", level=0)
    doc.add_paragraph(period_label(period, year, month))

    doc.add_heading("Overview", level=1)
    doc.add_paragraph(f"Entries: {data['totalEntries']}")
    doc.add_paragraph(f"Days logged: {data['daysLogged']}")
    doc.add_paragraph(f"Average type: {_display(data['avgType'])}")
    doc.add_paragraph(f"Gut score: {_display(data['healthScore'])}")

    doc.add_heading("Bristol type distribution", level=1)
    table = doc.add_table(rows=1, cols=2)
    table.rows[0].cells[0].text = "Type"
    table.rows[0].cells[1].text = "Count"
    for t in data["types"]:
        cells = table.add_row().cells
        cells[0].text = f"Type {t['type']}: {t['name']}"
        cells[1].text = str(t["count"])

    if data["tags"]:
        doc.add_heading("Tag correlations", level=1)
        for t in data["tags"]:
            doc.add_paragraph(
                f"{t['label']}: {t['count']} logs, avg type {_display(t['avgType'])}",
                style="List Bullet",
            )

    doc.add_heading("Recent activity", level=1)
    for day in data["recentDays"]:
        doc.add_paragraph(_format_day(day["date"]), style="Heading 3")
        for e in sorted(day["entries"], key=lambda x: x["createdAt"]):
            doc.add_paragraph(_entry_line(e), style="List Bullet")

    doc.add_paragraph(DISCLAIMER)
    doc.save(path)
    logger.info("DOCX report written to %s", path)
    return path
