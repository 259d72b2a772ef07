"""
Database Base Module

Creates the SQLAlchemy database instance that all models inherit from.
This is separate to avoid circular imports.
"""

from contextlib import contextmanager

from flask_sqlalchemy import SQLAlchemy

# Create the SQLAlchemy instance
# This will be initialized with the Flask app in app.py
db = SQLAlchemy()


@contextmanager
def atomic():
    """Commit everything done in the block, or roll all of it back and re-raise."""
    try:
        yield db.session
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
