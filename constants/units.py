"""
Unit Constants and Conversion Tables

Contains the purchase and measurement unit vocabularies, input aliases,
and the sub-unit conversion factors used for costing and production.
"""

# Units an ingredient can be bought in
PURCHASE_UNITS = {'g', 'kg', 'ml', 'l', 'un', 'dz', 'cx', 'pct'}

# Units a recipe line can be measured in
MEASUREMENT_UNITS = {'kg', 'g', 'l', 'ml', 'un', 'caixa'}

# Unit mappings for user input (lowercase input -> standard unit)
UNIT_MAPPINGS = {
    'grama': 'g', 'gramas': 'g', 'gr': 'g', 'g': 'g',
    'quilo': 'kg', 'quilos': 'kg', 'kilo': 'kg', 'kilos': 'kg', 'kg': 'kg',
    'mililitro': 'ml', 'mililitros': 'ml', 'ml': 'ml',
    'litro': 'l', 'litros': 'l', 'lt': 'l', 'l': 'l',
    'unidade': 'un', 'unidades': 'un', 'und': 'un', 'un': 'un',
    'duzia': 'dz', 'dúzia': 'dz', 'duzias': 'dz', 'dúzias': 'dz', 'dz': 'dz',
    'caixa': 'cx', 'caixas': 'cx', 'cx': 'cx',
    'pacote': 'pct', 'pacotes': 'pct', 'pct': 'pct',
}

# (purchase unit, requested unit) -> how many requested units make one purchase unit
SUBUNIT_FACTORS = {
    ('kg', 'g'): 1000,
    ('l', 'ml'): 1000,
}
