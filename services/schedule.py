"""
Production Schedule Service

Planned batches per day (the cronograma). Completing an entry runs the
production for its recipe and batch count and links the resulting event.
"""

import logging
import re

from constants import MAX_BATCHES, VALID_SCHEDULE_STATUSES
from models import ProductionScheduleEntry, Recipe, atomic, db

from .errors import NotFoundError, ValidationError
from .fields import parse_date, positive_int
from .production import run_production

logger = logging.getLogger(__name__)

DONE = 'concluido'

_TIME_SLOT = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')


def get_all():
    """Every schedule entry, earliest first."""
    return ProductionScheduleEntry.query.order_by(
        ProductionScheduleEntry.scheduled_for, ProductionScheduleEntry.time_slot, ProductionScheduleEntry.id
    ).all()


def get_by_week(start, end):
    """Entries scheduled between `start` and `end`, both inclusive."""
    start = parse_date(start, 'start')
    end = parse_date(end, 'end')
    if end < start:
        raise ValidationError('end must not be before start', field='end')
    return (
        ProductionScheduleEntry.query.filter(
            ProductionScheduleEntry.scheduled_for >= start,
            ProductionScheduleEntry.scheduled_for <= end,
        )
        .order_by(ProductionScheduleEntry.scheduled_for, ProductionScheduleEntry.time_slot, ProductionScheduleEntry.id)
        .all()
    )


def get(entry_id):
    """Return a schedule entry or raise NotFoundError."""
    entry = db.session.get(ProductionScheduleEntry, entry_id)
    if entry is None:
        raise NotFoundError(f'Schedule entry {entry_id} not found')
    return entry


def _recipe_id(value):
    recipe = db.session.get(Recipe, value) if value not in (None, '') else None
    if recipe is None:
        raise ValidationError(f'Recipe {value} not found', field='recipe_id')
    return recipe.id


def _time_slot(value):
    if value in (None, ''):
        return None
    slot = str(value).strip()
    if not _TIME_SLOT.match(slot):
        raise ValidationError('time_slot must be HH:MM', field='time_slot')
    return slot


def _status(value):
    status = (value or 'pendente').strip().lower()
    if status not in VALID_SCHEDULE_STATUSES:
        raise ValidationError(f'Invalid status: {value}', field='status')
    if status == DONE:
        raise ValidationError('Use complete to mark an entry as produced', field='status')
    return status


def create(fields):
    """Plan `batches` of a recipe for a day."""
    entry = ProductionScheduleEntry(
        recipe_id=_recipe_id(fields.get('recipe_id')),
        scheduled_for=parse_date(fields.get('scheduled_for'), 'scheduled_for'),
        batches=positive_int(fields.get('batches', 1), 'batches', max_val=MAX_BATCHES),
        time_slot=_time_slot(fields.get('time_slot')),
        status=_status(fields.get('status')),
    )
    db.session.add(entry)
    db.session.commit()
    return entry


def update(entry_id, fields):
    """Reschedule or edit a pending entry. Completed entries are frozen."""
    entry = get(entry_id)
    if entry.status == DONE:
        raise ValidationError('Completed entries cannot be changed', field='status')

    changes = {}
    if 'recipe_id' in fields:
        changes['recipe_id'] = _recipe_id(fields['recipe_id'])
    if 'scheduled_for' in fields:
        changes['scheduled_for'] = parse_date(fields['scheduled_for'], 'scheduled_for')
    if 'batches' in fields:
        changes['batches'] = positive_int(fields['batches'], 'batches', max_val=MAX_BATCHES)
    if 'time_slot' in fields:
        changes['time_slot'] = _time_slot(fields['time_slot'])
    if 'status' in fields:
        changes['status'] = _status(fields['status'])

    for key, value in changes.items():
        setattr(entry, key, value)
    db.session.commit()
    return entry


def delete(entry_id):
    entry = get(entry_id)
    db.session.delete(entry)
    db.session.commit()


def complete(entry_id):
    """
    Produce the entry's batches and mark it concluido.

    Raises:
        ValidationError: the entry was already completed
        InsufficientStockError: nothing was changed, the entry stays open
    """
    entry = get(entry_id)
    if entry.status == DONE:
        raise ValidationError('Schedule entry already completed', field='status')

    with atomic():
        event = run_production(entry.recipe_id, entry.batches)
        entry.status = DONE
        entry.production_event_id = event.id

    logger.info("Completed schedule entry %s: %s batch(es) of %s", entry.id, event.quantity, event.recipe_name)
    return entry, event
