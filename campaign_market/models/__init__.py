from .base import Base, BigIntPK, TimestampMixin
from . import domain

__all__ = [
    "Base",
    "BigIntPK",
    "TimestampMixin",
    "domain",
]
