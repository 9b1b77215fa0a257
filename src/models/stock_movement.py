"""
Stock movement model.

Every load, unload or transfer of an article in a warehouse is an
append-only movement row. Stock levels are derived by summing movements.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class StockMovement(BaseModel):
    """
    StockMovement model.

    Attributes:
        movement_type: Movement type (e.g. "CARICO", "SCARICO")
        movement_date: Date of the movement
        article_id: Foreign key to Article
        warehouse_id: Foreign key to Warehouse
        quantity: Quantity moved (always positive, direction given by type)
        unit_cost: Unit cost at the time of the movement
        document_number: Printed number of the originating document
        document_id: Foreign key to the originating Document
        document_line_id: Foreign key to the originating DocumentLine
        serial_number: Serial number moved
        lot: Lot moved
        expiry_date: Lot expiry date
        reason: Movement reason (causale)
        notes: Free text notes
        created_by: User who recorded the movement
    """

    __tablename__ = "stock_movements"

    movement_type = Column(String(20), nullable=False)
    movement_date = Column(Date, nullable=False)
    article_id = Column(Integer, ForeignKey("articles.id"), nullable=False)
    warehouse_id = Column(Integer, ForeignKey("warehouses.id"), nullable=False)
    quantity = Column(Numeric(18, 4), nullable=False, default=0)
    unit_cost = Column(Numeric(18, 4), nullable=False, default=0)
    document_number = Column(String(50), nullable=True)
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)
    document_line_id = Column(
        Integer, ForeignKey("document_lines.id", ondelete="SET NULL"), nullable=True
    )
    serial_number = Column(String(100), nullable=True)
    lot = Column(String(100), nullable=True)
    expiry_date = Column(Date, nullable=True)
    reason = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_by = Column(String(100), nullable=True)

    article = relationship("Article")
    warehouse = relationship("Warehouse")
    document = relationship("Document")
    document_line = relationship("DocumentLine")

    __table_args__ = (
        Index("idx_stock_movement_article_warehouse", "article_id", "warehouse_id"),
        Index("idx_stock_movement_date", "movement_date"),
    )
