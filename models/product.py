"""
Product Model

Contains the Product model: a sellable item priced from one recipe.
"""

from datetime import datetime

from .base import db


class Product(db.Model):
    """
    Sellable product backed by a recipe.

    production_cost is copied from the recipe when the recipe is assigned
    and is not kept in sync afterwards; re-save with recipe_id to refresh it.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text, default='')
    photo = db.Column(db.String(255), default='')
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='SET NULL'), nullable=True, index=True)
    production_cost = db.Column(db.Float, default=0.0)
    additional_costs = db.Column(db.Float, default=0.0)
    margin = db.Column(db.Float, default=35.0)
    sale_price = db.Column(db.Float, default=0.0)
    resale_price = db.Column(db.Float, default=0.0)
    active = db.Column(db.Boolean, default=True)
    stock = db.Column(db.Integer, default=0)
    min_stock = db.Column(db.Integer, default=0)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    recipe = db.relationship('Recipe', backref='products')

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'description': self.description,
            'photo': self.photo,
            'recipe_id': self.recipe_id,
            'production_cost': self.production_cost,
            'additional_costs': self.additional_costs,
            'margin': self.margin,
            'sale_price': self.sale_price,
            'resale_price': self.resale_price,
            'active': self.active,
            'stock': self.stock,
            'min_stock': self.min_stock,
        }
