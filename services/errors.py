"""
Costing Engine Errors

Validation and business-rule failures raised before any mutation.
Store errors (sqlalchemy.exc.SQLAlchemyError) are not wrapped.
"""

from dataclasses import dataclass


class CostingError(Exception):
    """Base class for errors the caller is expected to show to the user."""
    status_code = 400

    def __init__(self, message, field=None):
        super().__init__(message)
        self.message = message
        self.field = field

    def to_dict(self):
        data = {'error': self.message}
        if self.field:
            data['field'] = self.field
        return data


class ValidationError(CostingError):
    """Raised when input to an engine call is invalid."""
    pass


class NotFoundError(CostingError):
    """Raised when a referenced record does not exist."""
    status_code = 404


@dataclass(frozen=True)
class Shortage:
    """One ingredient that does not have enough stock for a production run."""
    name: str
    available: float
    required: float
    unit: str

    def __str__(self):
        return f"{self.name} (available: {_fmt(self.available)} {self.unit}, required: {_fmt(self.required)} {self.unit})"


class InsufficientStockError(CostingError):
    """Raised when one or more ingredients cannot cover a production run."""
    status_code = 409

    def __init__(self, shortages):
        self.shortages = list(shortages)
        lines = '\n'.join(str(s) for s in self.shortages)
        super().__init__(f"Insufficient stock for:\n{lines}")

    def to_dict(self):
        data = super().to_dict()
        data['shortages'] = [
            {'name': s.name, 'available': s.available, 'required': s.required, 'unit': s.unit}
            for s in self.shortages
        ]
        return data


def _fmt(value):
    """Render a quantity without trailing zeros."""
    return f"{value:.3f}".rstrip('0').rstrip('.')
