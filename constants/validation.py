"""
Validation Constants

Contains whitelist values and limits for validating user input
before it reaches the costing engine.
"""

# Production schedule statuses, in workflow order
SCHEDULE_STATUSES = ('pendente', 'em_producao', 'concluido')
VALID_SCHEDULE_STATUSES = set(SCHEDULE_STATUSES)

# Maximum field lengths for security
MAX_LENGTHS = {
    'ingredient_name': 100,
    'recipe_name': 200,
    'product_name': 200,
    'yield_description': 100,
    'instructions': 50000,
    'description': 5000,
}

# Upper bounds for numeric inputs
MAX_PRICE = 999999.99
MAX_QUANTITY = 999999
MAX_MARGIN = 1000
MAX_BATCHES = 1000

# Allowed image extensions
ALLOWED_EXTENSIONS = {'png', 'jpg', 'jpeg', 'gif', 'webp'}
