from __future__ import annotations

import io
from datetime import datetime
from typing import Optional, Protocol

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen import canvas

from ..common.datetime_utils import month_name
from ..common.money import rupiah
from .model import InvoiceData

_ACCENT = colors.HexColor("#667eea")
_TEXT = colors.HexColor("#333333")
_MUTED = colors.HexColor("#666666")
_RULE = colors.HexColor("#dddddd")
_PAID = colors.HexColor("#4CAF50")
_UNPAID = colors.HexColor("#FF9800")


def format_long_date(value: Optional[datetime]) -> str:
    """datetime(2025, 6, 2) -> '2 Juni 2025'"""
    if value is None:
        return "-"
    return f"{value.day} {month_name(value.month)} {value.year}"


class InvoiceRenderer(Protocol):
    def render(self, invoice: InvoiceData) -> bytes:
        raise NotImplementedError


class ReportLabInvoiceRenderer(InvoiceRenderer):
    """One-page A4 invoice drawn straight on a reportlab canvas."""

    def __init__(self, *, company_label: str = "HR Management System"):
        self._company_label = company_label

    def render(self, invoice: InvoiceData) -> bytes:
        buffer = io.BytesIO()
        c = canvas.Canvas(buffer, pagesize=A4)
        width, height = A4
        left, right = 50, width - 50

        c.setFillColor(_ACCENT)
        c.setFont("Helvetica-Bold", 20)
        c.drawCentredString(width / 2, height - 60, "INVOICE")
        c.setFillColor(_MUTED)
        c.setFont("Helvetica", 10)
        c.drawCentredString(width / 2, height - 76, self._company_label)

        c.setFillColor(_TEXT)
        c.setFont("Helvetica", 12)
        c.drawString(left, height - 120, f"Invoice No: {invoice.order_id}")
        c.drawString(left, height - 138, f"Tanggal: {format_long_date(invoice.payment_date)}")

        c.setFillColor(_ACCENT)
        c.setFont("Helvetica-Bold", 14)
        c.drawString(left, height - 175, "TAGIHAN UNTUK:")
        c.setFillColor(_TEXT)
        c.setFont("Helvetica", 12)
        c.drawString(left, height - 193, invoice.company_name or "Perusahaan")
        c.drawString(left, height - 209, invoice.admin_email or "-")

        c.setStrokeColor(_ACCENT)
        c.setLineWidth(2)
        c.line(left, height - 230, right, height - 230)

        table_top = height - 255
        c.setFillColor(_ACCENT)
        c.setFont("Helvetica-Bold", 12)
        c.drawString(left, table_top, "DESKRIPSI")
        c.drawRightString(380, table_top, "HARGA")
        c.drawRightString(460, table_top, "JUMLAH")
        c.drawRightString(right, table_top, "TOTAL")

        c.setStrokeColor(_RULE)
        c.setLineWidth(1)
        c.line(left, table_top - 8, right, table_top - 8)

        row = table_top - 28
        c.setFillColor(_TEXT)
        c.setFont("Helvetica", 11)
        c.drawString(left, row, f"Subscription {invoice.plan_name}")
        c.drawRightString(380, row, rupiah(invoice.price_per_employee))
        c.drawRightString(460, row, f"{invoice.total_employees} karyawan")
        c.drawRightString(right, row, rupiah(invoice.total_amount))
        c.setFillColor(_MUTED)
        c.setFont("Helvetica", 9)
        c.drawString(left, row - 16, f"Periode: {invoice.period}")

        c.setStrokeColor(_RULE)
        c.line(left, row - 32, right, row - 32)

        calc_top = row - 60
        c.setFillColor(_TEXT)
        c.setFont("Helvetica", 11)
        c.drawString(left, calc_top, "Perhitungan:")
        c.setFillColor(_MUTED)
        c.setFont("Helvetica", 10)
        c.drawString(left, calc_top - 18, invoice.calculation or "-")

        total_top = calc_top - 70
        c.setFillColor(_ACCENT)
        c.setFont("Helvetica-Bold", 14)
        c.drawString(350, total_top, "TOTAL TAGIHAN:")
        c.setFillColor(_TEXT)
        c.setFont("Helvetica-Bold", 16)
        c.drawRightString(right, total_top - 24, rupiah(invoice.total_amount))

        c.setFillColor(_PAID if invoice.is_paid else _UNPAID)
        c.setFont("Helvetica-Bold", 12)
        status_text = "LUNAS" if invoice.is_paid else "PENDING"
        c.drawCentredString(width / 2, total_top - 70, f"Status Pembayaran: {status_text}")

        c.setFillColor(colors.HexColor("#999999"))
        c.setFont("Helvetica", 9)
        c.drawCentredString(width / 2, 90, "Terima kasih atas kepercayaan Anda menggunakan layanan kami")
        c.drawCentredString(width / 2, 76, self._company_label)

        c.showPage()
        c.save()
        return buffer.getvalue()
