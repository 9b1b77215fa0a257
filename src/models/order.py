"""
Order models.

Orders are either client orders or supplier orders, distinguished by
order_type. The pair (order_type, number) identifies an order.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Date,
    Numeric,
    ForeignKey,
    Index,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class Order(BaseModel):
    """
    Order header.

    Attributes:
        order_type: Order type (e.g. "CLIENTE", "FORNITORE")
        number: Order number, unique within its type
        order_date: Order date
        expected_delivery_date: Expected delivery date
        client_id: Foreign key to Client (client orders)
        supplier_id: Foreign key to Supplier (supplier orders)
        taxable_amount: Total before VAT
        vat_amount: VAT total
        total: Grand total
        status: Order status
        customer_reference: Reference given by the customer
        notes: Free text notes

    Relationships:
        lines: Order lines ordered by line number
    """

    __tablename__ = "orders"

    order_type = Column(String(20), nullable=False)
    number = Column(String(50), nullable=False)
    order_date = Column(Date, nullable=False, default=local_today)
    expected_delivery_date = Column(Date, nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    taxable_amount = Column(Numeric(18, 4), nullable=False, default=0)
    vat_amount = Column(Numeric(18, 4), nullable=False, default=0)
    total = Column(Numeric(18, 4), nullable=False, default=0)
    status = Column(String(50), nullable=False, default="APERTO")
    customer_reference = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    client = relationship("Client")
    supplier = relationship("Supplier")
    lines = relationship(
        "OrderLine",
        back_populates="order",
        cascade="all, delete-orphan",
        order_by="OrderLine.line_number",
        lazy="select",
    )

    __table_args__ = (
        UniqueConstraint("order_type", "number", name="uq_order_type_number"),
        Index("idx_order_date", "order_date"),
    )

    def __repr__(self) -> str:
        """String representation of order."""
        return f"Order(id={self.id}, order_type='{self.order_type}', number='{self.number}')"


class OrderLine(BaseModel):
    """
    Order line.

    Attributes:
        order_id: Foreign key to Order
        line_number: Position within the order
        article_id: Foreign key to Article (None for free-text lines)
        description: Line description
        quantity_ordered: Quantity ordered
        quantity_delivered: Quantity already delivered
        unit_of_measure: Unit of measure
        unit_price: Unit price
        discount: Discount percentage
        vat_rate: VAT rate percentage
        total: Line total
        notes: Free text notes
    """

    __tablename__ = "order_lines"

    order_id = Column(Integer, ForeignKey("orders.id", ondelete="CASCADE"), nullable=False)
    line_number = Column(Integer, nullable=False, default=0)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="SET NULL"), nullable=True)
    description = Column(String(500), nullable=False, default="")
    quantity_ordered = Column(Numeric(18, 4), nullable=False, default=0)
    quantity_delivered = Column(Numeric(18, 4), nullable=False, default=0)
    unit_of_measure = Column(String(10), nullable=True)
    unit_price = Column(Numeric(18, 4), nullable=False, default=0)
    discount = Column(Numeric(18, 4), nullable=False, default=0)
    vat_rate = Column(Numeric(18, 4), nullable=False, default=0)
    total = Column(Numeric(18, 4), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    order = relationship("Order", back_populates="lines")
    article = relationship("Article")

    __table_args__ = (Index("idx_order_line_order", "order_id", "line_number"),)
