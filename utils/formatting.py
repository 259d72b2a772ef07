"""
Display Formatting

Brazilian Portuguese currency formatting for the UI shell.
"""


def format_brl(value):
    """Format a number as BRL currency, e.g. 1234.5 -> 'R$ 1.234,50'."""
    if value is None:
        value = 0.0
    sign = '-' if value < 0 else ''
    text = f"{abs(value):,.2f}"  # 1,234.50
    text = text.replace(',', '_').replace('.', ',').replace('_', '.')
    return f"{sign}R$ {text}"
