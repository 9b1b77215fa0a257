"""
Archived document model (document management).

Stores the metadata of a filed external document (a scanned contract, a
certificate, a drawing) and where its file lives on disk.
"""

from sqlalchemy import BigInteger, Column, Integer, String, Text, Date, ForeignKey
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class ArchivedDocument(BaseModel):
    """
    ArchivedDocument model.

    Attributes:
        protocol_number: Unique protocol number (natural key)
        protocol_date: Protocol date
        title: Document title, required
        category: Document category
        description: Description
        file_path: Path of the stored file, required
        file_extension: File extension
        file_size: File size in bytes
        client_id: Foreign key to a related Client
        supplier_id: Foreign key to a related Supplier
        article_id: Foreign key to a related Article
        status: Document status
        opened_on: Opening date of the file
        closed_on: Closing date of the file
        tags: Free tags
        notes: Free text notes
    """

    __tablename__ = "archived_documents"

    protocol_number = Column(String(50), nullable=False, unique=True)
    protocol_date = Column(Date, nullable=False, default=local_today)
    title = Column(String(300), nullable=False)
    category = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    file_path = Column(String(500), nullable=False)
    file_extension = Column(String(20), nullable=True)
    file_size = Column(BigInteger, nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id", ondelete="SET NULL"), nullable=True)
    supplier_id = Column(Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True)
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="SET NULL"), nullable=True)
    status = Column(String(50), nullable=True)
    opened_on = Column(Date, nullable=True)
    closed_on = Column(Date, nullable=True)
    tags = Column(String(500), nullable=True)
    notes = Column(Text, nullable=True)

    client = relationship("Client")
    supplier = relationship("Supplier")
    article = relationship("Article")
