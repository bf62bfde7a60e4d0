# export.py — 筛选结果导出（CSV / PDF 报告）

import base64
import csv
import logging
import os
from datetime import datetime, timezone
from io import BytesIO, StringIO

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont, TTFError
from reportlab.platypus import Image as RLImage
from reportlab.platypus import PageBreak, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .catalog import stage_counts
from .data import STAGE_COLORS
from .plotting import plot_hr_catalog, stage_label

logger = logging.getLogger(__name__)

CSV_FIELDS = ["stage", "temperature", "luminosity", "mass", "age", "metallicity"]
PDF_FONT_PATH = "static/fonts/NotoSansSC-Regular.ttf"


# ========== CSV ==========
def catalog_to_csv(samples):
    """表头固定，字段值均为数字或阶段名，不加引号"""
    buf = StringIO()
    writer = csv.writer(buf, lineterminator="\n", quoting=csv.QUOTE_NONE, escapechar="\\")
    writer.writerow(CSV_FIELDS)
    for s in samples:
        writer.writerow([getattr(s, f) for f in CSV_FIELDS])
    return buf.getvalue().rstrip("\n")


# ========== PDF ==========
def _pdf_font(font_path=PDF_FONT_PATH):
    font_name = "CJK"
    if not os.path.exists(font_path):
        return "Helvetica"
    try:
        pdfmetrics.registerFont(TTFont(font_name, font_path))
    except (TTFError, OSError) as e:
        logger.warning("PDF font registration error: %s", e)
        return "Helvetica"
    return font_name


def generate_pdf(samples, lang="zh"):
    """生成筛选结果报告：统计、赫罗图、数据表"""
    font_name = _pdf_font()
    # Helvetica 无法显示中文阶段名
    label_lang = lang if font_name != "Helvetica" else "en"

    buf = BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, leftMargin=2*cm, rightMargin=2*cm, topMargin=2*cm, bottomMargin=2*cm)
    styles = getSampleStyleSheet()
    for k in styles.byName:
        styles[k].fontName = font_name

    story = []
    story.append(Paragraph("恒星演化星表报告" if label_lang.startswith("zh") else "Stellar Evolution Catalog Report", styles["Title"]))
    story.append(Paragraph(f"Generated: {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S')} UTC", styles["Normal"]))
    story.append(Paragraph(f"Total stars: {len(samples)}", styles["Normal"]))
    story.append(Spacer(1, 12))

    count_rows = [["Stage", "Count"]]
    count_style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3e8cff")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.3, colors.gray),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
    ]
    for row, (stage, count) in enumerate(stage_counts(samples).items(), start=1):
        count_rows.append([stage_label(stage, label_lang), count])
        count_style.append(("TEXTCOLOR", (0, row), (0, row), colors.HexColor(STAGE_COLORS[stage])))
    counts_tbl = Table(count_rows, hAlign="LEFT")
    counts_tbl.setStyle(TableStyle(count_style))
    story.append(counts_tbl)
    story.append(PageBreak())

    hr_bytes = base64.b64decode(plot_hr_catalog(samples, lang=label_lang))
    story.append(Paragraph("H–R Diagram", styles["Heading2"]))
    story.append(RLImage(BytesIO(hr_bytes), width=16*cm, height=11.8*cm))
    story.append(PageBreak())

    story.append(Paragraph("Data Table", styles["Heading2"]))
    table_data = [["#"] + CSV_FIELDS]
    for i, s in enumerate(samples, start=1):
        table_data.append([
            i,
            stage_label(s.stage, label_lang),
            f"{s.temperature:.0f}",
            f"{s.luminosity:.4g}",
            f"{s.mass:.2f}",
            f"{s.age:.0f}",
            f"{s.metallicity:.2f}",
        ])
    tbl = Table(table_data, repeatRows=1, hAlign="LEFT")
    tbl.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#3e8cff")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("GRID", (0, 0), (-1, -1), 0.3, colors.gray),
        ("FONTSIZE", (0, 0), (-1, -1), 8),
        ("FONTNAME", (0, 0), (-1, -1), font_name),
    ]))
    story.append(tbl)

    doc.build(story)
    buf.seek(0)
    logger.info("PDF report built for %d stars", len(samples))
    return buf
