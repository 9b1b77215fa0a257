"""
Supplier model for vendors the business purchases from.

Example: Supplier "F001" "Ferramenta Bianchi Srl" with 60 days payment terms.
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, Date, Numeric, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Supplier(BaseModel):
    """
    Supplier model representing a vendor.

    Attributes:
        code: Unique business code (natural key)
        company_name: Legal name (ragione sociale), required
        tax_code: Codice fiscale
        vat_number: Partita IVA
        address: Street address
        postal_code: Postal code (CAP)
        city: City name
        province: Two-letter province code
        country: Country
        phone: Phone number
        email: Email address
        pec: Certified email address
        sdi_code: Electronic invoicing recipient code
        payment_days: Payment terms in days
        bank: Bank name
        iban: IBAN
        quality_rating: Last supplier quality rating
        last_rating_date: Date of the last rating
        is_active: Soft delete flag
        notes: Free text notes

    Relationships:
        articles: Articles that have this supplier as default
    """

    __tablename__ = "suppliers"

    code = Column(String(50), nullable=False, unique=True)
    company_name = Column(String(200), nullable=False)
    tax_code = Column(String(20), nullable=True)
    vat_number = Column(String(20), nullable=True)
    address = Column(String(200), nullable=True)
    postal_code = Column(String(10), nullable=True)
    city = Column(String(100), nullable=True)
    province = Column(String(5), nullable=True)
    country = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)
    pec = Column(String(200), nullable=True)
    sdi_code = Column(String(10), nullable=True)
    payment_days = Column(Integer, nullable=True)
    bank = Column(String(200), nullable=True)
    iban = Column(String(50), nullable=True)
    quality_rating = Column(Numeric(18, 4), nullable=False, default=0)
    last_rating_date = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    articles = relationship("Article", back_populates="default_supplier", lazy="select")

    __table_args__ = (
        Index("idx_supplier_name", "company_name"),
        Index("idx_supplier_active", "is_active"),
    )

    def __repr__(self) -> str:
        """String representation of supplier."""
        return f"Supplier(id={self.id}, code='{self.code}', company_name='{self.company_name}')"
