"""
Ingredient Model

Contains the Ingredient model: the ledger of purchased raw materials
(insumos) that recipe costs and production stock are derived from.
"""

from datetime import datetime

from .base import db


class Ingredient(db.Model):
    """
    Purchased ingredient with lot pricing and stock on hand.

    Pricing is stored the way it is bought: purchase_price pays for
    purchase_quantity units of purchase_unit (e.g. R$ 10.00 for 1000 G).
    Stock is kept in purchase_unit as well.
    """
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), unique=True, nullable=False, index=True)

    # One of PURCHASE_UNITS (g, kg, ml, l, un, dz, cx, pct)
    purchase_unit = db.Column(db.String(10), nullable=False, default='un')

    # Total price paid for one purchase lot
    purchase_price = db.Column(db.Float, nullable=False, default=0.0)

    # Size of that lot, in purchase_unit
    purchase_quantity = db.Column(db.Float, nullable=False, default=1.0)

    # Quantity on hand, in purchase_unit
    stock = db.Column(db.Float, nullable=False, default=0.0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def unit_cost(self):
        """Cost of one purchase unit, zero when the lot size is not positive."""
        quantity = self.purchase_quantity or 0.0
        if quantity <= 0:
            return 0.0
        return (self.purchase_price or 0.0) / quantity

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'purchase_unit': self.purchase_unit,
            'purchase_price': self.purchase_price,
            'purchase_quantity': self.purchase_quantity,
            'unit_cost': self.unit_cost,
            'stock': self.stock,
        }
