"""
Export formatters and helpers shared by the report views.

Every exporter takes a list of ``ExportColumn`` and the rows to write; an
empty row list is refused with ``ExportError`` before any file is built.
"""
import csv
import io
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from xml.sax.saxutils import escape

import openpyxl
from openpyxl.styles import Font, Alignment, PatternFill
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from django.http import HttpResponse

from .exceptions import ExportError

EMPTY_EXPORT_MESSAGE = "Tidak ada data untuk diekspor"

# Header colour of exported tables (RGB 34, 211, 238)
HEADER_RGB = (34, 211, 238)
HEADER_HEX = '22D3EE'


@dataclass(frozen=True)
class ExportColumn:
    header: str
    path: str

    def value(self, row):
        return format_value(get_path(row, self.path))


def get_path(row, path):
    """Read a dotted path (``student.major.name``) from a dict or model instance."""
    value = row
    for part in path.split('.'):
        if value is None:
            return None
        if isinstance(value, dict):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def format_value(value):
    if value is None:
        return '-'
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, Decimal):
        return str(value)
    return value


def _require_rows(rows):
    rows = list(rows)
    if not rows:
        raise ExportError(EMPTY_EXPORT_MESSAGE)
    return rows


class ExcelExporter:
    """Excel workbook with a styled header row"""

    def __init__(self, title="Export", columns=None):
        self.wb = openpyxl.Workbook()
        self.ws = self.wb.active
        # Sheet titles are limited to 31 characters
        self.ws.title = title[:31]
        self.columns = list(columns or [])
        self.current_row = 1
        self._write_headers()

    def _write_headers(self):
        for col_num, column in enumerate(self.columns, 1):
            cell = self.ws.cell(row=1, column=col_num, value=column.header)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.fill = PatternFill(start_color=HEADER_HEX, end_color=HEADER_HEX, fill_type="solid")
            cell.alignment = Alignment(horizontal='center', vertical='center', wrap_text=True)

    def add_row(self, row):
        self.current_row += 1
        for col_num, column in enumerate(self.columns, 1):
            cell = self.ws.cell(row=self.current_row, column=col_num, value=column.value(row))
            cell.alignment = Alignment(horizontal='left', vertical='center', wrap_text=True)

    def add_rows(self, rows):
        for row in _require_rows(rows):
            self.add_row(row)

    def auto_adjust_columns(self):
        for column in self.ws.columns:
            max_length = max((len(str(cell.value)) for cell in column if cell.value is not None), default=0)
            self.ws.column_dimensions[column[0].column_letter].width = min(max_length + 2, 50)

    def get_response(self, filename):
        self.auto_adjust_columns()
        response = HttpResponse(
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'
        )
        response['Content-Disposition'] = f'attachment; filename="{filename}.xlsx"'
        self.wb.save(response)
        return response


class PDFExporter:
    """Landscape PDF report: title, subtitle, row count and one table"""

    def __init__(self, title="Export", subtitle=''):
        self.buffer = io.BytesIO()
        self.doc = SimpleDocTemplate(
            self.buffer,
            pagesize=landscape(A4),
            topMargin=0.5*inch,
            bottomMargin=0.5*inch,
        )
        self.styles = getSampleStyleSheet()
        self.story = []
        self.title = title
        self.subtitle = subtitle

    def add_title(self, text):
        self.story.append(Paragraph(f"<b>{escape(text)}</b>", self.styles["Title"]))
        self.story.append(Spacer(1, 6))

    def add_paragraph(self, text):
        self.story.append(Paragraph(escape(text), self.styles["Normal"]))

    def add_table(self, columns, rows):
        data = [[column.header for column in columns]]
        data.extend([str(column.value(row)) for column in columns] for row in rows)
        table = Table(data, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.Color(*(c / 255 for c in HEADER_RGB))),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.white),
            ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('ALIGN', (0, 0), (-1, -1), 'LEFT'),
            ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        self.story.append(table)

    def build_report(self, columns, rows):
        rows = _require_rows(rows)
        self.add_title(self.title)
        if self.subtitle:
            self.add_paragraph(self.subtitle)
        self.add_paragraph(f"Total Data: {len(rows)}")
        self.story.append(Spacer(1, 12))
        self.add_table(columns, rows)

    def render(self):
        self.doc.build(self.story)
        return self.buffer.getvalue()

    def get_response(self, filename):
        response = HttpResponse(self.render(), content_type='application/pdf')
        response['Content-Disposition'] = f'attachment; filename="{filename}.pdf"'
        return response


class CSVExporter:
    """CSV download with the column headers as first row"""

    def __init__(self, filename, columns):
        self.columns = list(columns)
        self.response = HttpResponse(content_type='text/csv; charset=utf-8')
        self.response['Content-Disposition'] = f'attachment; filename="{filename}.csv"'
        self.writer = csv.writer(self.response)
        self.writer.writerow([column.header for column in self.columns])

    def add_rows(self, rows):
        for row in _require_rows(rows):
            self.writer.writerow([column.value(row) for column in self.columns])

    def get_response(self):
        return self.response


def export_table(fmt, filename, title, columns, rows, subtitle=''):
    """Build a download for ``rows`` in ``fmt`` (csv, pdf or xlsx)."""
    if fmt == 'csv':
        exporter = CSVExporter(filename, columns)
        exporter.add_rows(rows)
        return exporter.get_response()
    if fmt == 'pdf':
        exporter = PDFExporter(title, subtitle=subtitle)
        exporter.build_report(columns, rows)
        return exporter.get_response(filename)
    if fmt == 'xlsx':
        exporter = ExcelExporter(title, columns)
        exporter.add_rows(rows)
        return exporter.get_response(filename)
    raise ExportError(f"Format ekspor tidak dikenal: {fmt}")


def export_filename(prefix, today=None):
    today = today or date.today()
    return f"{prefix}_{today.isoformat()}"
