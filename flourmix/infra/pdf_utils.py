import io
from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

_HEADER_STYLE = [
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
    ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
]


def _table(header, rows):
    table = Table([header] + rows, repeatRows=1)
    table.setStyle(TableStyle(_HEADER_STYLE))
    return table


def _label(key: str) -> str:
    return key.replace("_", " ").capitalize()


def generate_pdf_for_blend(name: str, components, profile: dict) -> bytes:
    """Generate a PDF report: composition table followed by the aggregated profile."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)

    styles = getSampleStyleSheet()
    elements = [Paragraph(f"Blend report: {name}", styles["Title"]), Spacer(1, 12)]

    elements.append(Paragraph("Composition", styles["Heading2"]))
    elements.append(_table(
        ["Flour", "Catalog", "%"],
        [[c.material_name or c.material_id, c.source, f"{c.percentage:.1f}"] for c in components]
        + [["Total", "", f"{profile.get('total_percentage', 0):.1f}"]]
    ))

    for title, key, unit in (("Nutritional values", "nutritional", "g/100g"),
                             ("Protein composition", "protein_composition", "%"),
                             ("Enzymes", "enzymes", ""),
                             ("Anti-nutrients", "anti_nutrients", "")):
        elements += [Spacer(1, 12), Paragraph(title, styles["Heading2"])]
        rows = [[_label(k), f"{v:.2f}"] for k, v in profile.get(key, {}).items()]
        elements.append(_table(["", unit], rows))

    elements += [Spacer(1, 12), Paragraph("Functional properties", styles["Heading2"])]
    rows = [[_label(k), v] for k, v in profile.get("mechanical_properties", {}).items()]
    rows.append(["Solubility", profile.get("solubility", "")])
    rows.append(["Anti-nutrient level",
                 f"{profile.get('anti_nutrients_level', '')} ({profile.get('anti_nutrients_total', 0):.2f})"])
    rows.append(["Total enzymes", f"{profile.get('enzymes_total', 0):.2f}"])
    elements.append(_table(["Property", "Value"], rows))

    doc.build(elements)
    return buf.getvalue()
