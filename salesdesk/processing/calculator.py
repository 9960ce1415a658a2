"""Certification-of-origin cost calculator."""

VALUE_UPLIFT = 1.06
CHAMBER_RATE = 0.0018
FIXED_FEES = 100 + 30
NET_FACTOR = 0.94


def certification_price(invoice_value: float) -> float:
    """Return the certification price for an invoice value in euro.

    ``((value * 1.06 * 0.18%) + 100 + 30) / 0.94``
    """

    if invoice_value < 0:
        raise ValueError("Invoice value cannot be negative")
    return ((invoice_value * VALUE_UPLIFT * CHAMBER_RATE) + FIXED_FEES) / NET_FACTOR
