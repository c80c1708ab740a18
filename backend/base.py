from decimal import Decimal
from sqlalchemy.orm import declarative_base

class DictMixin:
    """
    Mixin providing a standardized dictionary serialization for SQLAlchemy models.

    Decimal columns are rendered as strings so exact values survive JSON encoding.
    """
    def to_dict(self):
        result = {}
        for c in self.__table__.columns:
            value = getattr(self, c.name)
            result[c.name] = str(value) if isinstance(value, Decimal) else value
        return result

Base = declarative_base(cls=DictMixin)
