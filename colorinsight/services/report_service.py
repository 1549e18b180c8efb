"""
Report export: writes the recommended scheme to an A4 PDF.

Two strategies are available:

* ``structured`` lays out text blocks, swatches and a score table directly on
  a reportlab canvas using millimetre coordinates, starting a new page when
  the next block would cross the bottom margin.
* ``snapshot`` draws the whole report onto a Pillow bitmap at a fixed scale
  factor and tiles that bitmap across successive A4 pages, shifting it up by
  one page height per page until the remaining height is exhausted.
"""

import base64
import binascii
from functools import lru_cache
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Tuple

import fitz  # PyMuPDF, for its bundled CJK font
from PIL import Image, ImageDraw, ImageFont
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import ImageReader, simpleSplit
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.cidfonts import UnicodeCIDFont
from reportlab.pdfgen import canvas
from reportlab.platypus import Table, TableStyle

from colorinsight.errors import ExportError
from colorinsight.models.session import AnalysisReport
from colorinsight.models.scheme import ColorScheme
from colorinsight.scoring import contribution, weighted_score
from colorinsight.utils.constants import (
    EXPORT_STRATEGIES,
    SCORE_LABELS,
    SCORE_WEIGHTS,
    SNAPSHOT_SCALE,
)
from colorinsight.utils.logger import logger
from colorinsight.utils.utils import report_file_name

PAGE_WIDTH_MM = A4[0] / mm
PAGE_HEIGHT_MM = A4[1] / mm
MARGIN_MM = 20
CONTENT_WIDTH_MM = PAGE_WIDTH_MM - 2 * MARGIN_MM
HEADER_HEIGHT_MM = 40

BRAND_BLUE = "#4A90E2"
TEXT_DARK = "#1F2937"
TEXT_MUTED = "#6B7280"

CJK_FONT = "STSong-Light"
pdfmetrics.registerFont(UnicodeCIDFont(CJK_FONT))


def total_score(scheme: ColorScheme) -> float:
    if scheme.weighted_score is None:
        return weighted_score(scheme.scores)
    return scheme.weighted_score


def score_rows(report: AnalysisReport) -> List[List[str]]:
    """Rows of the score table: metric, score, weight, contribution, then the total."""
    scores = report.best_scheme.scores
    rows = [["Metric", "Score (0-10)", "Weight", "Contribution"]]
    for metric, weight in SCORE_WEIGHTS.items():
        rows.append([
            SCORE_LABELS[metric],
            f"{getattr(scores, metric):g}",
            f"{round(weight * 100)}%",
            f"{contribution(scores, metric):.2f}",
        ])
    rows.append(["Total Weighted Score", "", "", f"{total_score(report.best_scheme):.2f}"])
    return rows


def decode_data_uri(data_uri: str) -> Optional[Image.Image]:
    """Decode a ``data:<mime>;base64,<payload>`` image, or None if it is unusable."""
    if not data_uri or "," not in data_uri:
        return None
    try:
        payload = base64.b64decode(data_uri.split(",", 1)[1])
        image = Image.open(BytesIO(payload))
        image.load()
        return image.convert("RGB")
    except (binascii.Error, OSError) as e:
        logger.warning(f"Skipping unreadable preview image: {e}")
        return None


@lru_cache(maxsize=1)
def cjk_font_bytes() -> bytes:
    """TrueType data of the Droid Sans Fallback font shipped inside PyMuPDF."""
    return fitz.Font(ordering=0).buffer


def _is_latin(text: str) -> bool:
    try:
        text.encode("cp1252")
    except UnicodeEncodeError:
        return False
    return True


class ReportService:
    """Service for exporting analysis reports to PDF."""

    def __init__(self, font_path: Optional[str] = None):
        """
        Initialize the report service.

        Args:
            font_path: Optional TrueType font used for all snapshot text; without
                it non-Latin text falls back to the CJK font bundled with PyMuPDF
        """
        self.font_path = font_path

    def export(self, report: AnalysisReport, output_dir, strategy: str = "structured") -> Path:
        """
        Export a report to ``<output_dir>/<customer>_Color_Strategy.pdf``.

        Args:
            report: The report to export
            output_dir: Directory to write into, created if missing
            strategy: ``structured`` or ``snapshot``

        Returns:
            Path of the written file

        Raises:
            ExportError: If the strategy is unknown or the document cannot be written
        """
        if strategy not in EXPORT_STRATEGIES:
            raise ExportError(f"Unsupported export strategy: {strategy}")

        output_dir = Path(output_dir)
        output_path = output_dir / report_file_name(report.customer_name)
        if output_path.resolve().parent != output_dir.resolve():
            raise ExportError(f"Refusing to write report outside {output_dir}")
        logger.info(f"Exporting report for {report.customer_name} ({strategy}) to {output_path}")
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
            if strategy == "structured":
                self._export_structured(report, output_path)
            else:
                self._export_snapshot(report, output_path)
        except ExportError:
            raise
        except Exception as e:
            logger.error(f"Error exporting report: {e}")
            raise ExportError(f"Failed to export report: {e}") from e

        logger.info(f"Report written to {output_path}")
        return output_path

    # Structured composition

    def _export_structured(self, report: AnalysisReport, output_path: Path):
        writer = _CanvasWriter(canvas.Canvas(str(output_path), pagesize=A4))
        scheme = report.best_scheme

        writer.header(report)

        writer.heading("1. Analysis of Requirements")
        for req in report.requirements:
            page = f" (p.{req.source_page})" if req.source_page else ""
            writer.paragraph(f"• {req.text}{page}", size=10, indent=5)
            if req.summary_en:
                writer.paragraph(req.summary_en, size=9, indent=9, color=TEXT_MUTED)

        writer.gap(6)
        writer.heading("2. Recommended Color Scheme")
        writer.paragraph(scheme.name.display(), size=14)
        writer.swatches(scheme.palette.items())
        writer.label("Strategic Rationale:")
        writer.paragraph(scheme.description.display("\n"), size=10)
        writer.label("Usage Advice:")
        writer.paragraph(scheme.usage_advice.display("\n"), size=10)

        if scheme.swot and (scheme.swot.strengths or scheme.swot.weaknesses):
            writer.label("Strengths:")
            for item in scheme.swot.strengths:
                writer.paragraph(f"+ {item.display()}", size=10, indent=5)
            writer.label("Weaknesses:")
            for item in scheme.swot.weaknesses:
                writer.paragraph(f"- {item.display()}", size=10, indent=5)

        if report.preview_image:
            preview = decode_data_uri(report.preview_image)
            if preview is not None:
                writer.image(preview)

        writer.gap(6)
        writer.heading("3. Comparative Analysis Score")
        writer.table(score_rows(report))

        citations = report.citations()
        if citations:
            writer.gap(4)
            writer.heading("4. Sources")
            for citation in citations:
                writer.paragraph(f"• {citation}", size=9, indent=5, color=TEXT_MUTED)

        writer.save()

    # Snapshot-to-document

    def render_bitmap(self, report: AnalysisReport, scale: int = SNAPSHOT_SCALE) -> Image.Image:
        """Rasterize the full report at ``scale`` times A4 width at 96 dpi."""
        measure = _BitmapComposer(report, scale, self.font_path, image=None)
        height = measure.compose()
        image = Image.new("RGB", (measure.width, height), "white")
        _BitmapComposer(report, scale, self.font_path, image=image).compose()
        return image

    def _export_snapshot(self, report: AnalysisReport, output_path: Path):
        bitmap = self.render_bitmap(report)
        image_height_mm = bitmap.height * PAGE_WIDTH_MM / bitmap.width
        reader = ImageReader(bitmap)

        pdf = canvas.Canvas(str(output_path), pagesize=A4)
        height_left = image_height_mm
        position = 0.0
        while True:
            # Place the whole bitmap with its top edge ``position`` mm above the page top
            bottom = PAGE_HEIGHT_MM - image_height_mm + position
            pdf.drawImage(reader, 0, bottom * mm, width=PAGE_WIDTH_MM * mm, height=image_height_mm * mm)
            height_left -= PAGE_HEIGHT_MM
            if height_left <= 1e-6:
                break
            pdf.showPage()
            position += PAGE_HEIGHT_MM
        pdf.save()


class _CanvasWriter:
    """Top-down text flow over a reportlab canvas, measured in millimetres."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.y = MARGIN_MM

    def _font(self, text: str, bold: bool = False) -> str:
        if not _is_latin(text):
            return CJK_FONT
        return "Helvetica-Bold" if bold else "Helvetica"

    def _baseline(self, y_mm: float) -> float:
        return (PAGE_HEIGHT_MM - y_mm) * mm

    def ensure_space(self, height_mm: float):
        if self.y + height_mm > PAGE_HEIGHT_MM - MARGIN_MM:
            self.pdf.showPage()
            self.y = MARGIN_MM

    def gap(self, height_mm: float):
        self.y += height_mm

    def header(self, report: AnalysisReport):
        self.pdf.setFillColor(colors.HexColor(BRAND_BLUE))
        self.pdf.rect(0, self._baseline(HEADER_HEIGHT_MM), PAGE_WIDTH_MM * mm, HEADER_HEIGHT_MM * mm, stroke=0, fill=1)
        self.pdf.setFillColor(colors.white)
        self.pdf.setFont("Helvetica-Bold", 24)
        self.pdf.drawString(MARGIN_MM * mm, self._baseline(22), "Color Strategy Report")
        subtitle = f"Generated for: {report.customer_name}  |  {report.date.isoformat()}"
        self.pdf.setFont(self._font(subtitle), 12)
        self.pdf.drawString(MARGIN_MM * mm, self._baseline(33), subtitle)
        self.y = HEADER_HEIGHT_MM + 12

    def heading(self, text: str):
        self.ensure_space(12)
        self.pdf.setFillColor(colors.HexColor(TEXT_DARK))
        self.pdf.setFont(self._font(text, bold=True), 16)
        self.pdf.drawString(MARGIN_MM * mm, self._baseline(self.y), text)
        self.y += 9

    def label(self, text: str):
        self.ensure_space(9)
        self.y += 2
        self.pdf.setFillColor(colors.HexColor(TEXT_DARK))
        self.pdf.setFont("Helvetica-Bold", 12)
        self.pdf.drawString(MARGIN_MM * mm, self._baseline(self.y), text)
        self.y += 6

    def paragraph(self, text: str, size: int = 10, indent: float = 0, color: str = TEXT_DARK):
        width = (CONTENT_WIDTH_MM - indent) * mm
        leading_mm = size * 0.5
        for raw_line in (text or "").split("\n"):
            font = self._font(raw_line)
            for line in _wrap(raw_line, font, size, width):
                self.ensure_space(leading_mm)
                self.pdf.setFillColor(colors.HexColor(color))
                self.pdf.setFont(font, size)
                self.pdf.drawString((MARGIN_MM + indent) * mm, self._baseline(self.y), line)
                self.y += leading_mm
        self.y += 1.5

    def swatches(self, items: List[Tuple[str, str]]):
        box_w, box_h, step = 50, 30, 60
        self.ensure_space(box_h + 14)
        top = self.y
        for i, (label, hex_code) in enumerate(items):
            x = MARGIN_MM + i * step
            self.pdf.setFillColor(colors.HexColor(hex_code))
            self.pdf.rect(x * mm, self._baseline(top + box_h), box_w * mm, box_h * mm, stroke=0, fill=1)
            self.pdf.setFillColor(colors.HexColor(TEXT_DARK))
            self.pdf.setFont("Helvetica", 10)
            self.pdf.drawString(x * mm, self._baseline(top + box_h + 5), label)
            self.pdf.drawString(x * mm, self._baseline(top + box_h + 10), hex_code)
        self.y = top + box_h + 16

    def image(self, image: Image.Image):
        width_mm = CONTENT_WIDTH_MM
        height_mm = width_mm * image.height / image.width
        self.ensure_space(height_mm + 4)
        self.pdf.drawImage(
            ImageReader(image), MARGIN_MM * mm, self._baseline(self.y + height_mm),
            width=width_mm * mm, height=height_mm * mm,
        )
        self.y += height_mm + 4

    def table(self, rows: List[List[str]]):
        table = Table(rows, colWidths=[60 * mm, 35 * mm, 30 * mm, 45 * mm])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor(BRAND_BLUE)),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
            ("FONTSIZE", (0, 0), (-1, -1), 10),
        ]))
        _, height = table.wrapOn(self.pdf, CONTENT_WIDTH_MM * mm, PAGE_HEIGHT_MM * mm)
        height_mm = height / mm
        self.ensure_space(height_mm)
        table.drawOn(self.pdf, MARGIN_MM * mm, self._baseline(self.y + height_mm))
        self.y += height_mm + 4

    def save(self):
        self.pdf.save()


def _wrap(text: str, font: str, size: float, width: float) -> List[str]:
    """Word wrap; runs without spaces (CJK) that are still too wide are broken per character."""
    lines = []
    for line in simpleSplit(text, font, size, width) or [""]:
        if pdfmetrics.stringWidth(line, font, size) <= width:
            lines.append(line)
            continue
        current = ""
        for ch in line:
            if pdfmetrics.stringWidth(current + ch, font, size) > width and current:
                lines.append(current)
                current = ""
            current += ch
        lines.append(current)
    return lines


class _BitmapComposer:
    """Draws the report onto a bitmap; with ``image=None`` it only measures the height."""

    BASE_WIDTH = 794  # A4 width in pixels at 96 dpi

    def __init__(self, report: AnalysisReport, scale: int, font_path: Optional[str], image: Optional[Image.Image]):
        self.report = report
        self.scale = scale
        self.font_path = font_path
        self.width = self.BASE_WIDTH * scale
        self.margin = 48 * scale
        self.image = image
        self.draw = ImageDraw.Draw(image) if image is not None else None
        self.y = 0
        self._fonts = {}

    def font(self, size: int, text: str = ""):
        """
        Font for ``text`` at ``size`` points.

        A configured ``font_path`` is used for everything. Otherwise Latin text
        uses Pillow's default font and anything else the CJK font bundled with
        PyMuPDF, since the default font has no CJK glyphs.
        """
        px = size * self.scale
        cjk = not self.font_path and not _is_latin(text)
        key = (px, cjk)
        if key not in self._fonts:
            if self.font_path:
                self._fonts[key] = ImageFont.truetype(self.font_path, px)
            elif cjk:
                self._fonts[key] = ImageFont.truetype(BytesIO(cjk_font_bytes()), px)
            else:
                self._fonts[key] = ImageFont.load_default(size=px)
        return self._fonts[key]

    def compose(self) -> int:
        report = self.report
        scheme = report.best_scheme

        self.band("Color Strategy Report", f"Generated for: {report.customer_name}  |  {report.date.isoformat()}")
        self.text("Analysis of Requirements", 18, TEXT_DARK)
        for req in report.requirements:
            self.text(f"- {req.text}", 12, TEXT_DARK, indent=12)
        self.space(16)

        self.text("Recommended Color Scheme", 18, TEXT_DARK)
        self.text(f"{scheme.name.display()}  |  Score {total_score(scheme):.2f}", 16, BRAND_BLUE)
        self.swatches(scheme.palette.items())
        self.text(scheme.description.display("\n"), 12, TEXT_MUTED)
        self.text("Usage Advice", 14, TEXT_DARK)
        self.text(scheme.usage_advice.display("\n"), 12, TEXT_MUTED)

        preview = decode_data_uri(report.preview_image) if report.preview_image else None
        if preview is not None:
            self.picture(preview)

        self.text("Performance Analysis", 14, TEXT_DARK)
        for row in score_rows(report)[1:]:
            label, score, weight, part = row
            line = f"{label}: {score} x {weight} = {part}" if weight else f"{label}: {part}"
            self.text(line, 12, TEXT_DARK, indent=12)

        citations = report.citations()
        if citations:
            self.space(8)
            self.text("Sources", 14, TEXT_DARK)
            for citation in citations:
                self.text(f"- {citation}", 11, TEXT_MUTED, indent=12)

        self.space(24)
        return self.y

    def space(self, px: int):
        self.y += px * self.scale

    def band(self, title: str, subtitle: str):
        height = 120 * self.scale
        if self.draw:
            self.draw.rectangle([0, 0, self.width, height], fill=BRAND_BLUE)
            self.draw.text((self.margin, 30 * self.scale), title, font=self.font(28), fill="white")
            self.draw.text((self.margin, 76 * self.scale), subtitle, font=self.font(14, subtitle), fill="white")
        self.y = height + 24 * self.scale

    def text(self, text: str, size: int, color: str, indent: int = 0):
        x = self.margin + indent * self.scale
        max_width = self.width - x - self.margin
        line_height = int(size * 1.5 * self.scale)
        for raw_line in (text or "").split("\n"):
            font = self.font(size, raw_line)
            for line in self._wrap(raw_line, font, max_width):
                if self.draw:
                    self.draw.text((x, self.y), line, font=font, fill=color)
                self.y += line_height
        self.y += 4 * self.scale

    def swatches(self, items: List[Tuple[str, str]]):
        gap = 16 * self.scale
        box_w = (self.width - 2 * self.margin - 2 * gap) // 3
        box_h = 140 * self.scale
        label_font = self.font(12)
        for i, (label, hex_code) in enumerate(items):
            x = self.margin + i * (box_w + gap)
            if self.draw:
                self.draw.rectangle([x, self.y, x + box_w, self.y + box_h], fill=hex_code)
                self.draw.text((x, self.y + box_h + 6 * self.scale), f"{label}  {hex_code}", font=label_font, fill=TEXT_DARK)
        self.y += box_h + 32 * self.scale

    def picture(self, image: Image.Image):
        target_w = self.width - 2 * self.margin
        target_h = int(target_w * image.height / image.width)
        if self.draw:
            self.image.paste(image.resize((target_w, target_h)), (self.margin, self.y))
        self.y += target_h + 16 * self.scale

    @staticmethod
    def _wrap(text: str, font, max_width: int) -> List[str]:
        if not text:
            return [""]
        lines = []
        current = ""
        for word in text.split(" "):
            candidate = f"{current} {word}" if current else word
            if font.getlength(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
            current = ""
            for ch in word:
                if font.getlength(current + ch) > max_width and current:
                    lines.append(current)
                    current = ""
                current += ch
        lines.append(current)
        return lines
