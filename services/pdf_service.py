"""
PDF Service - printable quotes, purchase orders and service orders (reportlab).

Each builder takes the record dict (``to_dict()`` output) plus the company
profile from the app config and returns the PDF bytes.
"""

import io
import logging
from datetime import date
from typing import Dict, Any
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer

from services.pricing import format_currency, line_amount

logger = logging.getLogger(__name__)

BRAND_COLOR = colors.HexColor('#1E3A5F')
LIGHT_FILL = colors.HexColor('#F1F5F9')

COMPANY_DEFAULTS = {
    'COMPANY_NAME': 'LEBAREF',
    'COMPANY_LEGAL_NAME': 'Servicio Técnico, Industrial y Comercial de Gastronomía S.A. De C.V.',
    'COMPANY_CITY': 'Mérida',
    'COMPANY_CONTACT_EMAILS': ['lebarefmantenimiento@gmail.com', 'corporativo@lebaref.com'],
}


def quote_filename(quote: Dict) -> str:
    return f"{quote['display_number']}.pdf"


def purchase_order_filename(order: Dict) -> str:
    return f"{order['display_number']}.pdf"


def service_order_filename(ticket: Dict) -> str:
    return f"ORD-{ticket['display_number']}.pdf"


def _text(value: Any) -> str:
    """Escape for reportlab markup and keep line breaks."""
    if value in (None, ''):
        return ''
    return escape(str(value)).replace('\n', '<br/>')


def _styles():
    styles = getSampleStyleSheet()
    return {
        'normal': styles['Normal'],
        'small': ParagraphStyle('Small', parent=styles['Normal'], fontSize=8, leading=10),
        'title': ParagraphStyle(
            'DocTitle', parent=styles['Heading1'], fontSize=22,
            textColor=BRAND_COLOR, spaceAfter=4
        ),
        'subtitle': ParagraphStyle(
            'DocSubtitle', parent=styles['Heading2'], fontSize=14,
            textColor=colors.HexColor('#475569'), alignment=2
        ),
        'heading': ParagraphStyle(
            'SectionHeading', parent=styles['Heading3'], fontSize=11,
            textColor=BRAND_COLOR, spaceBefore=10, spaceAfter=4
        ),
        'center': ParagraphStyle('Center', parent=styles['Normal'], alignment=1, fontSize=9),
    }


def _company(company: Dict = None) -> Dict:
    return {**COMPANY_DEFAULTS, **(company or {})}


def _format_date(value) -> str:
    if not value:
        return 'N/A'
    if isinstance(value, date):
        return value.strftime('%d/%m/%Y')
    try:
        return date.fromisoformat(str(value)[:10]).strftime('%d/%m/%Y')
    except ValueError:
        return str(value)


def _render(story) -> bytes:
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer, pagesize=letter,
        leftMargin=0.6 * inch, rightMargin=0.6 * inch,
        topMargin=0.6 * inch, bottomMargin=0.6 * inch
    )
    doc.build(story)
    return buffer.getvalue()


def _header(story, styles, company, subtitle, identifier):
    header = Table(
        [[Paragraph(_text(company['COMPANY_NAME']), styles['title']),
          Paragraph(f"{_text(subtitle)}<br/>{_text(identifier)}", styles['subtitle'])]],
        colWidths=[3.6 * inch, 3.6 * inch]
    )
    header.setStyle(TableStyle([
        ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ('LINEBELOW', (0, 0), (-1, 0), 2, BRAND_COLOR),
        ('BOTTOMPADDING', (0, 0), (-1, 0), 8),
    ]))
    story.append(header)
    story.append(Spacer(1, 0.2 * inch))


def _info_table(rows, col_widths=(1.6 * inch, 5.6 * inch)):
    table = Table(rows, colWidths=list(col_widths))
    table.setStyle(TableStyle([
        ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('TEXTCOLOR', (0, 0), (0, -1), colors.HexColor('#475569')),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
    ]))
    return table


def _items_table(header, rows, col_widths):
    table = Table([header] + rows, colWidths=col_widths, repeatRows=1)
    table.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), BRAND_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('ALIGN', (2, 1), (-1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('ROWBACKGROUNDS', (0, 1), (-1, -1), [colors.white, LIGHT_FILL]),
        ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#CBD5E1')),
    ]))
    return table


def _totals_table(rows):
    table = Table(rows, colWidths=[5.7 * inch, 1.5 * inch])
    table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'RIGHT'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, BRAND_COLOR),
    ]))
    return table


def _text_box(story, styles, title, body, min_height=0.6 * inch):
    story.append(Paragraph(_text(title), styles['heading']))
    box = Table([[Paragraph(_text(body) or '&nbsp;', styles['normal'])]],
                colWidths=[7.2 * inch], rowHeights=None if body else [min_height])
    box.setStyle(TableStyle([
        ('BOX', (0, 0), (-1, -1), 0.75, colors.HexColor('#94A3B8')),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
    ]))
    story.append(box)


def _signature_lines(labels):
    cells = [['_' * 32 for _ in labels], list(labels)]
    width = 7.2 * inch / len(labels)
    table = Table(cells, colWidths=[width] * len(labels))
    table.setStyle(TableStyle([
        ('ALIGN', (0, 0), (-1, -1), 'CENTER'),
        ('FONTSIZE', (0, 0), (-1, -1), 9),
        ('TOPPADDING', (0, 0), (-1, 0), 36),
    ]))
    return table


# ============================================================================
# QUOTE
# ============================================================================

def build_quote_pdf(quote: Dict, company: Dict = None) -> bytes:
    """Render a quote as PDF bytes."""
    company = _company(company)
    styles = _styles()
    story = []

    _header(story, styles, company, 'COTIZACIÓN', quote['display_number'])

    story.append(_info_table([
        ['Cliente:', Paragraph(_text(quote.get('client_name')), styles['normal'])],
        ['Dirección:', Paragraph(_text(quote.get('client_address')) or 'N/A', styles['normal'])],
        ['Ciudad:', company['COMPANY_CITY']],
        ['Teléfono:', quote.get('client_phone') or 'N/A'],
        ['RFC:', quote.get('rfc') or 'N/A'],
        ['Fecha:', _format_date(quote.get('date'))],
        ['Vigencia:', _format_date(quote.get('expiration_date'))],
    ]))

    details = [
        ('Tipo de servicio:', quote.get('service_kind')),
        ('Tipo de trabajo:', quote.get('work_kind')),
        ('Equipo / lugar:', quote.get('equipment_location')),
    ]
    details = [[label, Paragraph(_text(value), styles['normal'])] for label, value in details if value]
    if details:
        story.append(Spacer(1, 0.1 * inch))
        story.append(_info_table(details))
    story.append(Spacer(1, 0.2 * inch))

    rows = []
    for idx, item in enumerate(quote.get('items') or [], start=1):
        rows.append([
            str(idx),
            Paragraph(_text(item.get('description')), styles['small']),
            item.get('unit') or 'PZA',
            str(item.get('quantity')),
            format_currency(item.get('price')),
            format_currency(line_amount(item)),
        ])
    story.append(_items_table(
        ['No.', 'Descripción', 'Unidad', 'Cantidad', 'Precio', 'Importe'],
        rows,
        [0.4 * inch, 3.3 * inch, 0.7 * inch, 0.8 * inch, 1.0 * inch, 1.0 * inch]
    ))
    story.append(Spacer(1, 0.1 * inch))
    story.append(_totals_table([
        ['Subtotal:', format_currency(quote.get('subtotal'))],
        [f"IVA ({quote.get('iva', 16):g}%):", format_currency(quote.get('iva_amount'))],
        ['Total:', format_currency(quote.get('total'))],
    ]))

    _text_box(story, styles, 'Comentarios y Diagnóstico', quote.get('observations'))
    _text_box(story, styles, 'Garantías', quote.get('policies'))
    _text_box(story, styles, 'Condiciones de Pago', quote.get('payment_terms'))

    story.append(Spacer(1, 0.3 * inch))
    story.append(_signature_lines(['FIRMA DE ACEPTACIÓN']))
    story.append(Spacer(1, 0.2 * inch))
    story.append(Paragraph('Gracias por su preferencia.', styles['center']))

    pdf = _render(story)
    logger.info(f"Generated quote PDF {quote['display_number']} ({len(pdf)} bytes)")
    return pdf


# ============================================================================
# PURCHASE ORDER
# ============================================================================

def build_purchase_order_pdf(order: Dict, company: Dict = None) -> bytes:
    """Render a purchase order as PDF bytes."""
    company = _company(company)
    styles = _styles()
    story = []

    _header(story, styles, company, 'ORDEN DE COMPRA', order['display_number'])

    story.append(_info_table([
        ['FECHA:', _format_date(order.get('date'))],
        ['NO.:', order['display_number']],
    ]))
    story.append(Spacer(1, 0.15 * inch))

    parties = Table(
        [['FACTURAR A', 'ENVIAR A'],
         [Paragraph(_text(order.get('bill_to_details')), styles['small']),
          Paragraph(_text(order.get('supplier_details')), styles['small'])]],
        colWidths=[3.6 * inch, 3.6 * inch]
    )
    parties.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, 0), BRAND_COLOR),
        ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
        ('FONTNAME', (0, 0), (-1, 0), 'Helvetica-Bold'),
        ('FONTSIZE', (0, 0), (-1, 0), 9),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('BOX', (0, 0), (-1, -1), 0.5, colors.HexColor('#CBD5E1')),
        ('INNERGRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#CBD5E1')),
    ]))
    story.append(parties)
    story.append(Spacer(1, 0.15 * inch))

    story.append(_items_table(
        ['COTIZACIÓN', 'ENVIAR VÍA', 'PAGO', 'FECHA APROX ENTREGA'],
        [[order.get('quote_display_number') or 'N/A',
          order.get('shipping_method') or 'N/A',
          order.get('payment_method') or 'N/A',
          _format_date(order.get('delivery_date'))]],
        [1.8 * inch] * 4
    ))
    story.append(Spacer(1, 0.15 * inch))

    rows = []
    for idx, item in enumerate(order.get('items') or [], start=1):
        rows.append([
            str(idx),
            Paragraph(_text(item.get('description')), styles['small']),
            item.get('unit') or 'PZA',
            str(item.get('quantity')),
            format_currency(item.get('price')),
            format_currency(line_amount(item)),
        ])
    story.append(_items_table(
        ['ARTÍCULO NO.', 'DESCRIPCIÓN', 'UNIDAD', 'CANTIDAD', 'PRECIO POR UNIDAD', 'TOTAL'],
        rows,
        [0.9 * inch, 2.7 * inch, 0.7 * inch, 0.8 * inch, 1.1 * inch, 1.0 * inch]
    ))
    story.append(Spacer(1, 0.1 * inch))

    totals = [['SUBTOTAL:', format_currency(order.get('subtotal'))]]
    if order.get('discount_percentage'):
        totals.append([
            f"DESCUENTO {order['discount_percentage']:g}%:",
            f"-{format_currency(order.get('discount_amount'))}"
        ])
    totals.append([f"IVA ({order.get('iva', 16):g}%):", format_currency(order.get('iva_amount'))])
    totals.append(['TOTAL:', format_currency(order.get('total'))])
    story.append(_totals_table(totals))

    if order.get('observations'):
        _text_box(story, styles, 'Observaciones', order.get('observations'))

    story.append(Spacer(1, 0.3 * inch))
    story.append(_signature_lines(['FIRMA AUTORIZADA']))
    story.append(Spacer(1, 0.2 * inch))
    story.append(Paragraph(_text(' / '.join(company['COMPANY_CONTACT_EMAILS'])), styles['center']))

    pdf = _render(story)
    logger.info(f"Generated purchase order PDF {order['display_number']} ({len(pdf)} bytes)")
    return pdf


# ============================================================================
# SERVICE ORDER (TICKET)
# ============================================================================

def build_service_order_pdf(ticket: Dict, company: Dict = None) -> bytes:
    """Render a ticket as a printable service order."""
    company = _company(company)
    styles = _styles()
    story = []

    _header(story, styles, company, 'ORDEN DE SERVICIO', ticket['display_number'])
    story.append(Paragraph(_text(company['COMPANY_LEGAL_NAME']), styles['center']))
    story.append(Spacer(1, 0.15 * inch))

    story.append(Paragraph('Datos del Cliente', styles['heading']))
    story.append(_info_table([
        ['Cliente:', Paragraph(_text(ticket.get('client_name')) or 'N/A', styles['normal'])],
        ['Correo:', ticket.get('user_email') or 'N/A'],
        ['Teléfono:', ticket.get('client_phone') or 'N/A'],
        ['Dirección:', Paragraph(_text(ticket.get('client_address')) or 'N/A', styles['normal'])],
    ]))

    story.append(Paragraph('Detalles del Servicio', styles['heading']))
    story.append(_items_table(
        ['Tipo de servicio', 'Equipo', 'Urgencia', 'Estado', 'Fecha', 'Precio'],
        [[(ticket.get('service_type') or '').capitalize(),
          Paragraph(_text(ticket.get('equipment_type')), styles['small']),
          (ticket.get('urgency') or '').capitalize(),
          ticket.get('status') or '',
          _format_date(ticket.get('created_at')),
          format_currency(ticket['price']) if ticket.get('price') is not None else 'N/A']],
        [1.2 * inch, 1.8 * inch, 0.9 * inch, 1.1 * inch, 1.1 * inch, 1.1 * inch]
    ))

    _text_box(story, styles, 'Descripción del Problema', ticket.get('description'))
    _text_box(story, styles, 'Notas del Técnico', None, min_height=1.5 * inch)

    story.append(Spacer(1, 0.4 * inch))
    story.append(_signature_lines(['Firma del Cliente', 'Firma del Técnico']))

    pdf = _render(story)
    logger.info(f"Generated service order PDF {ticket['display_number']} ({len(pdf)} bytes)")
    return pdf
