"""
Warehouse model.

Exactly one warehouse is expected to be flagged as the main one; stock
documents default to it.
"""

from sqlalchemy import Column, String, Text, Boolean

from .base import BaseModel


class Warehouse(BaseModel):
    """
    Warehouse model representing a physical stock location.

    Attributes:
        code: Unique business code (natural key)
        description: Display description
        address: Street address
        city: City name
        postal_code: Postal code (CAP)
        phone: Phone number
        is_main: True for the main warehouse
        is_active: Soft delete flag
        notes: Free text notes
    """

    __tablename__ = "warehouses"

    code = Column(String(50), nullable=False, unique=True)
    description = Column(String(200), nullable=False, default="")
    address = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True)
    postal_code = Column(String(10), nullable=True)
    phone = Column(String(50), nullable=True)
    is_main = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)
