"""
Document models (invoices, transport documents, credit notes, quotes...).

The pair (document_type, number) identifies a document. A document can be
generated from an earlier one (origin_document_id, e.g. an invoice from a
transport document); many-to-many provenance is tracked by DocumentLink.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
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


class Document(BaseModel):
    """
    Document header.

    Attributes:
        document_type: Document type (e.g. "FATTURA", "DDT")
        number: Document number, unique within its type
        document_date: Document date
        client_id: Foreign key to Client
        supplier_id: Foreign key to Supplier
        recipient_name: Recipient name as printed
        recipient_address: Recipient address as printed
        taxable_amount: Total before VAT
        vat_amount: VAT total
        total: Grand total
        global_discount: Discount on the whole document
        extra_charges: Shipping and other charges
        payment_method: Payment method label
        bank: Bank for the payment
        payment_due_date: Payment due date
        is_paid: True once paid
        payment_date: Date of payment
        recipient_vat_number: Recipient partita IVA
        recipient_tax_code: Recipient codice fiscale
        sdi_code: Electronic invoicing recipient code
        recipient_pec: Recipient certified email
        is_electronic_invoice: True for electronic invoices
        xml_file_name: Generated XML file name
        xml_sent: True once the XML was sent
        xml_sent_date: Date the XML was sent
        sdi_identifier: Identifier assigned by the exchange system
        e_invoice_status: Electronic invoice status
        origin_document_id: Foreign key to the Document this one came from
        warehouse_id: Foreign key to the Warehouse moved by this document
        reason: Transport reason (causale)
        goods_appearance: Appearance of goods
        transport_by: Who carries out the transport
        carrier: Carrier name
        package_count: Number of packages
        weight: Total weight
        reverse_charge: Reverse charge VAT regime
        split_payment: Split payment VAT regime
        notes: Free text notes
        created_by: User who created the document
    """

    __tablename__ = "documents"

    document_type = Column(String(20), nullable=False)
    number = Column(String(50), nullable=False)
    document_date = Column(Date, nullable=False, default=local_today)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    recipient_name = Column(String(200), nullable=True)
    recipient_address = Column(String(300), nullable=True)
    taxable_amount = Column(Numeric(18, 4), nullable=False, default=0)
    vat_amount = Column(Numeric(18, 4), nullable=False, default=0)
    total = Column(Numeric(18, 4), nullable=False, default=0)
    global_discount = Column(Numeric(18, 4), nullable=False, default=0)
    extra_charges = Column(Numeric(18, 4), nullable=False, default=0)
    payment_method = Column(String(100), nullable=True)
    bank = Column(String(200), nullable=True)
    payment_due_date = Column(Date, nullable=True)
    is_paid = Column(Boolean, nullable=False, default=False)
    payment_date = Column(Date, nullable=True)
    recipient_vat_number = Column(String(20), nullable=True)
    recipient_tax_code = Column(String(20), nullable=True)
    sdi_code = Column(String(10), nullable=True)
    recipient_pec = Column(String(200), nullable=True)
    is_electronic_invoice = Column(Boolean, nullable=False, default=False)
    xml_file_name = Column(String(200), nullable=True)
    xml_sent = Column(Boolean, nullable=False, default=False)
    xml_sent_date = Column(Date, nullable=True)
    sdi_identifier = Column(String(100), nullable=True)
    e_invoice_status = Column(String(50), nullable=True)
    origin_document_id = Column(
        Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    warehouse_id = Column(
        Integer, ForeignKey("warehouses.id", ondelete="SET NULL"), nullable=True
    )
    reason = Column(String(100), nullable=True)
    goods_appearance = Column(String(100), nullable=True)
    transport_by = Column(String(50), nullable=True)
    carrier = Column(String(200), nullable=True)
    package_count = Column(Integer, nullable=True)
    weight = Column(Numeric(18, 4), nullable=True)
    reverse_charge = Column(Boolean, nullable=False, default=False)
    split_payment = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)
    created_by = Column(String(100), nullable=True)

    client = relationship("Client")
    supplier = relationship("Supplier")
    warehouse = relationship("Warehouse")
    origin_document = relationship("Document", remote_side="Document.id")
    lines = relationship(
        "DocumentLine",
        back_populates="document",
        cascade="all, delete-orphan",
        order_by="DocumentLine.line_number",
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("document_type", "number", name="uq_document_type_number"),
        Index("idx_document_date", "document_date"),
        Index("idx_document_client", "client_id"),
    )

    def __repr__(self) -> str:
        """String representation of document."""
        return (
            f"Document(id={self.id}, document_type='{self.document_type}', "
            f"number='{self.number}')"
        )


class DocumentLine(BaseModel):
    """
    Document line.

    Attributes:
        document_id: Foreign key to Document
        line_number: Position within the document
        article_id: Foreign key to Article (None for free-text lines)
        description: Line description
        quantity: Quantity
        unit_of_measure: Unit of measure
        unit_price: Unit price before discounts
        discount1: First cascading discount percentage
        discount2: Second cascading discount percentage
        discount3: Third cascading discount percentage
        net_price: Unit price after discounts
        vat_rate: VAT rate percentage
        taxable_amount: Line amount before VAT
        vat_amount: Line VAT
        total: Line total
        serial_number: Serial number of the item
        lot: Lot of the item
        is_description_only: True for comment lines without amounts
        notes: Free text notes
    """

    __tablename__ = "document_lines"

    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    line_number = Column(Integer, nullable=False, default=0)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(500), nullable=False, default="")
    quantity = Column(Numeric(18, 4), nullable=False, default=0)
    unit_of_measure = Column(String(10), nullable=True)
    unit_price = Column(Numeric(18, 4), nullable=False, default=0)
    discount1 = Column(Numeric(18, 4), nullable=False, default=0)
    discount2 = Column(Numeric(18, 4), nullable=False, default=0)
    discount3 = Column(Numeric(18, 4), nullable=False, default=0)
    net_price = Column(Numeric(18, 4), nullable=False, default=0)
    vat_rate = Column(Numeric(18, 4), nullable=False, default=0)
    taxable_amount = Column(Numeric(18, 4), nullable=False, default=0)
    vat_amount = Column(Numeric(18, 4), nullable=False, default=0)
    total = Column(Numeric(18, 4), nullable=False, default=0)
    serial_number = Column(String(100), nullable=True)
    lot = Column(String(100), nullable=True)
    is_description_only = Column(Boolean, nullable=False, default=False)
    notes = Column(Text, nullable=True)

    document = relationship("Document", back_populates="lines")
    article = relationship("Article")

    __table_args__ = (Index("idx_document_line_document", "document_id", "line_number"),)


class DocumentLink(BaseModel):
    """
    Provenance link between two documents.

    Attributes:
        document_id: Foreign key to the derived Document
        origin_document_id: Foreign key to the source Document
    """

    __tablename__ = "document_links"

    document_id = Column(Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False)
    origin_document_id = Column(
        Integer, ForeignKey("documents.id", ondelete="CASCADE"), nullable=False
    )

    document = relationship("Document", foreign_keys=[document_id])
    origin_document = relationship("Document", foreign_keys=[origin_document_id])

    __table_args__ = (
        Index("idx_document_link_pair", "document_id", "origin_document_id"),
    )
