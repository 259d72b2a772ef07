"""
Recipe Models

Contains the Recipe and RecipeIngredient models for managing
recipes, their ingredient lines and their cached cost/price fields.
"""

from datetime import datetime

from .base import db


class Recipe(db.Model):
    """Recipe with ingredient lines, cost roll-up and finished-goods stock."""
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), unique=True, nullable=False, index=True)
    instructions = db.Column(db.Text, default='')
    yield_description = db.Column(db.String(100), default='')  # e.g. "10 fatias"

    # Packaging, gas, etc. as a flat amount per batch
    additional_costs = db.Column(db.Float, default=0.0)
    margin = db.Column(db.Float, default=35.0)  # percent

    # Computed by services.cost / services.pricing
    total_cost = db.Column(db.Float, default=0.0)
    sale_price = db.Column(db.Float, default=0.0)
    resale_price = db.Column(db.Float, default=0.0)

    # Batches produced and not yet sold
    stock = db.Column(db.Integer, default=0)

    # Optional component recipe consumed in portions (e.g. a brownie base)
    sub_recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True)
    sub_recipe_portions = db.Column(db.Float, default=0.0)
    sub_recipe = db.relationship('Recipe', remote_side=[id])

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    ingredients = db.relationship(
        'RecipeIngredient', backref='recipe', lazy=True,
        cascade='all, delete-orphan', order_by='RecipeIngredient.id',
    )

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'instructions': self.instructions,
            'yield_description': self.yield_description,
            'ingredients': [ri.to_dict() for ri in self.ingredients],
            'additional_costs': self.additional_costs,
            'margin': self.margin,
            'total_cost': self.total_cost,
            'sale_price': self.sale_price,
            'resale_price': self.resale_price,
            'stock': self.stock,
            'sub_recipe_id': self.sub_recipe_id,
            'sub_recipe_portions': self.sub_recipe_portions,
        }


class RecipeIngredient(db.Model):
    """Ingredient line of a recipe: quantity in its own measurement unit plus cached cost."""
    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    ingredient_id = db.Column(db.Integer, db.ForeignKey('ingredient.id', ondelete='RESTRICT'), nullable=False, index=True)
    quantity = db.Column(db.Float, nullable=False)
    unit = db.Column(db.String(10), nullable=False, default='un')  # kg, g, l, ml, un or cx (caixa)
    cost = db.Column(db.Float, default=0.0)
    ingredient = db.relationship('Ingredient')

    def to_dict(self):
        return {
            'id': self.id,
            'ingredient_id': self.ingredient_id,
            'ingredient_name': self.ingredient.name if self.ingredient else None,
            'quantity': self.quantity,
            'unit': self.unit,
            'cost': self.cost,
        }
