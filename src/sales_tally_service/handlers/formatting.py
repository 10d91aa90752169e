"""Presentation helpers used by the HTTP layer."""

import re
from datetime import date
from decimal import Decimal


def format_currency(value: Decimal | int) -> str:
    """Format an amount with a dollar sign and grouped thousands.

    Whole amounts drop the fractional part ("$19,000"); others keep two
    decimals ("$1,234.50").
    """
    amount = Decimal(value)
    sign = "-" if amount < 0 else ""
    amount = abs(amount)
    if amount == amount.to_integral_value():
        return f"{sign}${int(amount):,}"
    return f"{sign}${amount:,.2f}"


def report_filename(business_name: str, today: date) -> str:
    """Build the PDF file name for a shift report.

    Args:
        business_name: Business name, slugged into the file name
        today: Report date

    Returns:
        str: e.g. ``report-la-comanda-2024-05-01.pdf``
    """
    slug = re.sub(r"[^a-z0-9]", "-", business_name.lower()) or "report"
    return f"report-{slug}-{today.isoformat()}.pdf"
