import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet


def _fmt(value, suffix=""):
    if value is None:
        return "-"
    return f"{value:,.2f}{suffix}"


def generate_pdf_for_plan(plan, stats, reports):
    """Generate a PDF summary for one monthly plan: header figures plus one row per branch report."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(plan.title, styles["Title"]),
        Paragraph(
            f"Target: {_fmt(plan.target_amount)} &nbsp; Deadline: {plan.deadline.isoformat()} &nbsp; "
            f"Status: {plan.status}",
            styles["Normal"],
        ),
        Paragraph(
            f"Reports: {stats['total_reports']} &nbsp; Submitted: {stats['submitted_reports']} &nbsp; "
            f"Late: {stats['late_reports']} &nbsp; Pending: {stats['pending_reports']} &nbsp; "
            f"Average progress: {_fmt(stats['avg_progress'], '%')}",
            styles["Normal"],
        ),
        Spacer(1, 16),
    ]

    data = [["Branch", "User", "Achieved", "Progress", "Status", "Submitted at"]]
    for r in reports:
        data.append([
            r.get("branch_name") or "-",
            r.get("username") or "-",
            _fmt(r.get("achieved_amount")),
            _fmt(r.get("progress_percentage"), "%"),
            r.get("status", ""),
            (r.get("submitted_at") or "-")[:16].replace("T", " "),
        ])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#1F5F8B")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (2, 1), (3, -1), "RIGHT"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 11),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))

    elements.append(table)
    doc.build(elements)
    return buf.getvalue()
