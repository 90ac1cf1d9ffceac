"""
Document totals for quotes and purchase orders.

Amounts are floats rounded to cents. Totals are always recomputed from the
line items, never taken from the request.
"""


def _money(value):
    return round(float(value), 2)


def line_amount(item):
    """quantity × unit price of a single line item."""
    return _money(float(item.get('quantity', 0)) * float(item.get('price', 0)))


def is_priced(item):
    """True when a line already has its own description and price."""
    return item.get('description') not in (None, '') and item.get('price') not in (None, '')


def items_subtotal(items):
    return _money(sum(line_amount(item) for item in items or []))


def calculate_quote_totals(items, iva=16):
    """
    Quote totals: IVA is charged on the full subtotal.

    Returns:
        Dict with subtotal, iva_amount and total
    """
    subtotal = items_subtotal(items)
    iva_amount = _money(subtotal * float(iva) / 100)
    return {
        'subtotal': subtotal,
        'iva_amount': iva_amount,
        'total': _money(subtotal + iva_amount),
    }


def calculate_purchase_order_totals(items, iva=16, discount_percentage=0):
    """
    Purchase order totals: the discount is applied before IVA.

    Returns:
        Dict with subtotal, discount_amount, iva_amount and total
    """
    subtotal = items_subtotal(items)
    discount_amount = _money(subtotal * float(discount_percentage or 0) / 100)
    taxable = subtotal - discount_amount
    iva_amount = _money(taxable * float(iva) / 100)
    return {
        'subtotal': subtotal,
        'discount_amount': discount_amount,
        'iva_amount': iva_amount,
        'total': _money(taxable + iva_amount),
    }


def format_currency(amount):
    """$1,234.50 style amount used on printed documents."""
    return f"${float(amount or 0):,.2f}"
