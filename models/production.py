"""
Production Models

Contains the ProductionEvent log and the ProductionScheduleEntry
used to plan batches ahead of time.
"""

from datetime import date, datetime

from sqlalchemy import event

from .base import db


class ProductionEvent(db.Model):
    """Immutable log row written once per successful production run."""
    __tablename__ = 'production_event'

    id = db.Column(db.Integer, primary_key=True)
    # Plain column, not a foreign key: the log outlives deleted recipes
    recipe_id = db.Column(db.Integer, nullable=False, index=True)
    recipe_name = db.Column(db.String(200), nullable=False)
    quantity = db.Column(db.Integer, nullable=False)
    produced_on = db.Column(db.Date, nullable=False, default=date.today)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)

    def to_dict(self):
        return {
            'id': self.id,
            'recipe_id': self.recipe_id,
            'recipe_name': self.recipe_name,
            'quantity': self.quantity,
            'produced_on': self.produced_on.isoformat() if self.produced_on else None,
        }


@event.listens_for(ProductionEvent, 'before_update')
def _refuse_event_update(mapper, connection, target):
    raise ValueError('Production events are immutable')


@event.listens_for(ProductionEvent, 'before_delete')
def _refuse_event_delete(mapper, connection, target):
    raise ValueError('Production events cannot be deleted')


class ProductionScheduleEntry(db.Model):
    """Planned production of a number of batches of a recipe on a given day."""
    __tablename__ = 'production_schedule'

    id = db.Column(db.Integer, primary_key=True)
    recipe_id = db.Column(db.Integer, db.ForeignKey('recipe.id', ondelete='CASCADE'), nullable=False, index=True)
    scheduled_for = db.Column(db.Date, nullable=False, index=True)
    batches = db.Column(db.Integer, nullable=False, default=1)
    time_slot = db.Column(db.String(5), nullable=True)  # HH:MM
    status = db.Column(db.String(20), nullable=False, default='pendente')
    production_event_id = db.Column(db.Integer, db.ForeignKey('production_event.id'), nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    recipe = db.relationship('Recipe')

    def to_dict(self):
        return {
            'id': self.id,
            'recipe_id': self.recipe_id,
            'recipe_name': self.recipe.name if self.recipe else None,
            'scheduled_for': self.scheduled_for.isoformat(),
            'batches': self.batches,
            'time_slot': self.time_slot,
            'status': self.status,
            'production_event_id': self.production_event_id,
        }
