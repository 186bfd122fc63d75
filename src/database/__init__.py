"""
Database module for Riskmap Cards
"""

from .connection import DatabaseConnection, get_db
from .models import Base, CardRecord

__all__ = [
    "DatabaseConnection",
    "get_db",
    "Base",
    "CardRecord",
]
