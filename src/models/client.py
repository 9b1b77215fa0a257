"""
Client model for customers.

Clients may be followed by an agent and bound to a price list.
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Client(BaseModel):
    """
    Client model representing a customer.

    Attributes:
        code: Unique business code (natural key)
        company_name: Legal name (ragione sociale), required
        first_name: Given name for private customers
        last_name: Family name for private customers
        tax_code: Codice fiscale
        vat_number: Partita IVA
        address: Street address
        postal_code: Postal code (CAP)
        city: City name
        province: Two-letter province code
        country: Country
        phone: Phone number
        mobile: Mobile number
        email: Email address
        pec: Certified email address
        sdi_code: Electronic invoicing recipient code
        credit_limit: Maximum credit granted
        payment_days: Payment terms in days
        bank: Bank name
        iban: IBAN
        is_active: Soft delete flag
        notes: Free text notes
        agent_id: Foreign key to Agent
        price_list_id: Foreign key to PriceList
    """

    __tablename__ = "clients"

    code = Column(String(50), nullable=False, unique=True)
    company_name = Column(String(200), nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    tax_code = Column(String(20), nullable=True)
    vat_number = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    postal_code = Column(String(10), nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(5), nullable=True)
    country = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    mobile = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)
    pec = Column(String(200), nullable=True)
    sdi_code = Column(String(10), nullable=True)
    credit_limit = Column(Numeric(18, 4), nullable=False, default=0)
    payment_days = Column(Integer, nullable=True)
    bank = Column(String(200), nullable=True)
    iban = Column(String(50), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    agent_id = Column(Integer, ForeignKey("agents.id", ondelete="SET NULL"), nullable=True)
    price_list_id = Column(
        Integer, ForeignKey("price_lists.id", ondelete="SET NULL"), nullable=True
    )

    agent = relationship("Agent", back_populates="clients")
    price_list = relationship("PriceList", back_populates="clients")

    __table_args__ = (
        Index("idx_client_name", "company_name"),
        Index("idx_client_vat", "vat_number"),
    )

    def __repr__(self) -> str:
        """String representation of client."""
        return f"Client(id={self.id}, code='{self.code}', company_name='{self.company_name}')"
