"""
VAT register model (registri IVA).

Each row records one document in a sales or purchase VAT register. The pair
(register_type, protocol_number) identifies a row.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Boolean,
    Date,
    Numeric,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class VatRegisterEntry(BaseModel):
    """
    VatRegisterEntry model.

    Attributes:
        register_type: Register type (e.g. "VENDITE", "ACQUISTI")
        entry_date: Registration date
        document_id: Foreign key to the registered Document, required
        protocol_number: Protocol number, unique within the register
        taxable_amount: Taxable amount
        vat_rate: VAT rate percentage
        vat_amount: VAT amount
        deductible_vat: Deductible share of VAT
        non_deductible_vat: Non deductible share of VAT
        deferred_liability: True for deferred VAT liability
        liability_date: Date VAT becomes due
        description: Description
    """

    __tablename__ = "vat_register_entries"

    register_type = Column(String(20), nullable=False)
    entry_date = Column(Date, nullable=False, default=local_today)
    document_id = Column(Integer, ForeignKey("documents.id"), nullable=False)
    protocol_number = Column(String(50), nullable=False)
    taxable_amount = Column(Numeric(18, 4), nullable=False, default=0)
    vat_rate = Column(Numeric(18, 4), nullable=False, default=0)
    vat_amount = Column(Numeric(18, 4), nullable=False, default=0)
    deductible_vat = Column(Numeric(18, 4), nullable=False, default=0)
    non_deductible_vat = Column(Numeric(18, 4), nullable=False, default=0)
    deferred_liability = Column(Boolean, nullable=False, default=False)
    liability_date = Column(Date, nullable=True)
    description = Column(String(300), nullable=True)

    document = relationship("Document")

    __table_args__ = (
        UniqueConstraint("register_type", "protocol_number", name="uq_vat_register_protocol"),
        Index("idx_vat_register_date", "entry_date"),
    )
