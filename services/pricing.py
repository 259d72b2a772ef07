"""
Pricing Service

Derives sale and resale prices from a total cost and a profit margin.
"""

from collections import namedtuple

from flask import current_app, has_app_context

DEFAULT_RESALE_DISCOUNT_FACTOR = 0.80

PriceQuote = namedtuple('PriceQuote', ['sale_price', 'resale_price'])


def get_resale_discount_factor():
    """The configured reseller factor, or the default outside an app context."""
    if has_app_context():
        return float(current_app.config.get('RESALE_DISCOUNT_FACTOR', DEFAULT_RESALE_DISCOUNT_FACTOR))
    return DEFAULT_RESALE_DISCOUNT_FACTOR


def compute_prices(total_cost, margin, discount_factor=None):
    """
    Return PriceQuote(sale_price, resale_price).

    sale_price = total_cost * (1 + margin/100)
    resale_price = sale_price * discount_factor
    """
    if discount_factor is None:
        discount_factor = get_resale_discount_factor()
    sale_price = (total_cost or 0.0) * (1 + (margin or 0.0) / 100)
    return PriceQuote(sale_price, sale_price * discount_factor)


def margin_from_price(total_cost, sale_price):
    """Margin percent that turns total_cost into sale_price; None when cost is not positive."""
    if not total_cost or total_cost <= 0:
        return None
    return (sale_price / total_cost - 1) * 100


def apply_prices(record, total_cost):
    """Overwrite a recipe or product's sale/resale prices from total_cost and its margin."""
    quote = compute_prices(total_cost, record.margin)
    record.sale_price = quote.sale_price
    record.resale_price = quote.resale_price
    return quote
