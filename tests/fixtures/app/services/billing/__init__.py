"""Billing exposes a single entry point; invoice.py stays internal."""

from .invoice import format_invoice


def billing(options):
    return lambda amount: format_invoice(amount, currency="EUR")
