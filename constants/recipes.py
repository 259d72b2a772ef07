"""
Bootstrap Recipe Constants

The bakery's standard recipes loaded by `flask seed-recipes`.
Quantities are per batch; yield is the number of portions per batch.
"""

BOOTSTRAP_RECIPES = [
    {
        'name': 'Torta de Limão',
        'yield': 9,
        'ingredients': [
            ('Limão', 300, 'g'),
            ('Creme de Leite', 200, 'g'),
            ('Leite Condensado', 525, 'g'),
            ('Chantilly', 350, 'ml'),
            ('Leite em Pó', 100, 'g'),
            ('Bolacha Maisena', 117, 'g'),
            ('Manteiga/Margarina', 20, 'g'),
        ],
    },
    {
        'name': 'Banoffee',
        'yield': 6,
        'ingredients': [
            ('Doce de Leite Frimesa', 400, 'g'),
            ('Creme de Leite', 200, 'g'),
            ('Bolacha Maisena', 117, 'g'),
            ('Manteiga/Margarina', 15, 'g'),
            ('Banana', 450, 'g'),
            ('Chantilly', 350, 'ml'),
            ('Leite em Pó', 100, 'g'),
            ('Leite Condensado', 130, 'g'),
        ],
    },
    {
        'name': 'Base de Brownie',
        'yield': 30,
        'ingredients': [
            ('Ovo', 4, 'un'),
            ('Açúcar', 360, 'g'),
            ('Óleo', 100, 'ml'),
            ('Chocolate em Pó', 135, 'g'),
            ('Farinha de Trigo', 120, 'g'),
            ('Manteiga/Margarina', 15, 'g'),
        ],
    },
    {
        'name': 'Copo da Felicidade',
        'yield': 7,
        'ingredients': [
            ('Morango (Caixinha)', 1, 'un'),
            ('Granule', 60, 'g'),
            ('Leite Condensado', 790, 'g'),
            ('Creme de Leite', 800, 'g'),
            ('Chocolate em Pó', 100, 'g'),
            ('Manteiga/Margarina', 30, 'g'),
            ('Leite em Pó', 100, 'g'),
        ],
        'sub_recipe': ('Base de Brownie', 5),
    },
    {
        'name': 'Torta Holandesa',
        'yield': 8,
        'ingredients': [
            ('Barra de Chocolate', 200, 'g'),
            ('Creme de Leite', 400, 'g'),
            ('Leite Condensado', 395, 'g'),
            ('Essência de Baunilha', 15, 'ml'),
            ('Chantilly', 350, 'ml'),
            ('Bolacha Maisena', 117, 'g'),
            ('Manteiga/Margarina', 20, 'g'),
            ('Bolacha Calipso', 135, 'g'),
        ],
    },
]
