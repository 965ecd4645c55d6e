# Cart totals, GST and platform charge
# Amounts are integer paise internally; rupee floats only at the API edge

from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List

from .normalizers import to_paise


def paise_to_rupees(paise: int) -> float:
    return float((Decimal(int(paise)) / 100).quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def rupees_to_paise(rupees: Any) -> int:
    """Config / request rupee amount to paise (invalid -> 0)."""
    value = to_paise(rupees)
    return value if value is not None and value > 0 else 0


def percent_of(paise: int, percent: Any) -> int:
    """percent% of an amount, rounded half-up to the paisa."""
    rate = Decimal(str(percent or 0))
    return int((Decimal(int(paise)) * rate / 100).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def format_inr(paise: int) -> str:
    """'₹1,234.50' with Indian digit grouping; always two decimals."""
    negative = paise < 0
    rupees, fraction = divmod(abs(int(paise)), 100)
    digits = str(rupees)
    if len(digits) > 3:
        head, tail = digits[:-3], digits[-3:]
        groups = []
        while len(head) > 2:
            groups.insert(0, head[-2:])
            head = head[:-2]
        if head:
            groups.insert(0, head)
        digits = ','.join(groups + [tail])
    return f"{'-' if negative else ''}₹{digits}.{fraction:02d}"


def format_inr_compact(paise: int) -> str:
    """Display form that drops a trailing '.00'."""
    text = format_inr(paise)
    return text[:-3] if text.endswith('.00') else text


def cart_lines(lines: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Keep only lines with a positive integer quantity."""
    kept = []
    for line in lines or []:
        try:
            qty = int(line.get('qty') or 0)
        except (TypeError, ValueError):
            continue
        if qty > 0:
            kept.append({**line, 'qty': qty})
    return kept


def calc_cart_summary(lines: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
    """
    Item count and subtotal over lines carrying 'qty' and 'unit_price_paise'.

    Lines with qty <= 0 or a negative price are skipped.
    """
    item_count = 0
    subtotal = 0
    for line in cart_lines(lines):
        price = int(line.get('unit_price_paise') or 0)
        if price < 0:
            continue
        item_count += line['qty']
        subtotal += line['qty'] * price
    return {
        'item_count': item_count,
        'subtotal_paise': subtotal,
        'subtotal_label': format_inr_compact(subtotal),
    }


def quote(lines: Iterable[Dict[str, Any]], gst_percent: Any, platform_charge_paise: int) -> Dict[str, Any]:
    """
    Bill for a cart: subtotal + GST + flat platform/delivery charge.

    Args:
        lines: cart lines with qty and unit_price_paise
        gst_percent: configured GST rate
        platform_charge_paise: configured flat charge

    Returns:
        pricing dictionary with paise amounts, rupee amounts and labels
    """
    summary = calc_cart_summary(lines)
    subtotal = summary['subtotal_paise']
    gst = percent_of(subtotal, gst_percent)
    charge = max(0, int(platform_charge_paise or 0))
    total = subtotal + gst + charge

    return {
        'item_count': summary['item_count'],
        'gst_percent': float(gst_percent or 0),
        'subtotal_paise': subtotal,
        'gst_paise': gst,
        'platform_charge_paise': charge,
        'total_paise': total,
        'subtotal': paise_to_rupees(subtotal),
        'gst': paise_to_rupees(gst),
        'platform_charge': paise_to_rupees(charge),
        'total': paise_to_rupees(total),
        'labels': {
            'subtotal': format_inr_compact(subtotal),
            'gst': format_inr_compact(gst),
            'platform_charge': format_inr_compact(charge),
            'total': format_inr_compact(total),
        },
    }
