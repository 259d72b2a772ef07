"""
Models Package

Exports all database models and the db instance for use throughout the application.
"""

from .base import db, atomic

from .ingredient import Ingredient
from .recipe import Recipe, RecipeIngredient
from .product import Product
from .production import ProductionEvent, ProductionScheduleEntry
from .settings import Settings

__all__ = [
    'db',
    'atomic',
    'Ingredient',
    'Recipe',
    'RecipeIngredient',
    'Product',
    'ProductionEvent',
    'ProductionScheduleEntry',
    'Settings',
]
