"""
PDF-квитанция об оплате (reportlab).

Только оформление: данные берутся из подтверждённой оплаты, школы и ученика.
"""
import io
import logging
from xml.sax.saxutils import escape

from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

logger = logging.getLogger(__name__)

DEFAULT_SCHOOL_ADDRESS = '123 Education Lane, Knowledge City'


def receipt_filename(payment) -> str:
    return f'receipt-{payment.trx}.pdf'


def format_amount(amount) -> str:
    return f'${amount:,.2f}'


def render_receipt(payment) -> bytes:
    """Сформировать PDF-квитанцию и вернуть её байты."""
    school = payment.school
    student = payment.student
    approved_at = payment.approved_at or timezone.now()

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2 * cm,
        leftMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=f'Payment Receipt {payment.trx}',
    )

    styles = getSampleStyleSheet()
    school_style = ParagraphStyle(
        'SchoolName',
        parent=styles['Heading1'],
        fontSize=22,
        spaceAfter=4,
    )
    address_style = ParagraphStyle(
        'SchoolAddress',
        parent=styles['Normal'],
        fontSize=12,
        textColor=colors.HexColor('#4a5568'),
        spaceAfter=16,
    )
    title_style = ParagraphStyle(
        'ReceiptTitle',
        parent=styles['Heading2'],
        fontSize=18,
        spaceAfter=12,
    )

    content = [
        Paragraph(escape(school.name), school_style),
        Paragraph(escape(school.address or DEFAULT_SCHOOL_ADDRESS), address_style),
        Paragraph('Payment Receipt', title_style),
    ]

    details = Table(
        [
            [f'Student Name: {student.name}', f'Receipt ID: {payment.trx}'],
            [f'Class: {student.class_name}', f'Date: {timezone.localtime(approved_at):%d.%m.%Y}'],
            [f'Roll: {student.roll}', f'Method: {payment.method}'],
        ],
        colWidths=[9 * cm, 8 * cm],
    )
    details.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
        ('FONTSIZE', (0, 0), (-1, -1), 11),
        ('LINEABOVE', (0, 0), (-1, 0), 1, colors.black),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    content.append(details)
    content.append(Spacer(1, 20))

    amount = format_amount(payment.amount)
    lines = Table(
        [
            ['Description', 'Amount'],
            ['School Fees', amount],
            ['Total Paid', amount],
        ],
        colWidths=[12 * cm, 5 * cm],
    )
    lines.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTNAME', (0, 1), (-1, 1), 'Helvetica'),
        ('FONTNAME', (0, 2), (-1, 2), 'Helvetica-Bold'),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('LINEABOVE', (0, 0), (-1, 0), 1, colors.black),
        ('LINEBELOW', (0, 0), (-1, 0), 1, colors.black),
        ('LINEABOVE', (0, 2), (-1, 2), 1, colors.black),
        ('TOPPADDING', (0, 0), (-1, -1), 6),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 6),
    ]))
    content.append(lines)

    doc.build(content)
    pdf_bytes = buffer.getvalue()
    buffer.close()

    logger.info('Receipt rendered: payment=%s bytes=%s', payment.pk, len(pdf_bytes))
    return pdf_bytes
