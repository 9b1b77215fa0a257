"""
Price list models.

A PriceList is a named set of article prices (e.g. "Retail", "Wholesale").
ArticlePrice rows carry the price of one article inside one list for a
validity period; a list may hold several periods for the same article.
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, Date, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class PriceList(BaseModel):
    """
    PriceList model.

    Attributes:
        code: Unique business code (natural key)
        description: Display description
        valid_from: First day the list applies
        valid_to: Last day the list applies (open-ended when None)
        is_active: Soft delete flag
        notes: Free text notes
    """

    __tablename__ = "price_lists"

    code = Column(String(50), nullable=False, unique=True)
    description = Column(String(200), nullable=False, default="")
    valid_from = Column(Date, nullable=False, default=local_today)
    valid_to = Column(Date, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    prices = relationship("ArticlePrice", back_populates="price_list", lazy="select")
    clients = relationship("Client", back_populates="price_list", lazy="select")


class ArticlePrice(BaseModel):
    """
    Price of an article within a price list for a validity period.

    Rows are historical: once written they are never updated by a package
    import, only added.

    Attributes:
        price_list_id: Foreign key to PriceList
        article_id: Foreign key to Article
        price: Unit price
        discount_percent: Discount applied on the price
        valid_from: First day the price applies
        valid_to: Last day the price applies (open-ended when None)
    """

    __tablename__ = "article_prices"

    price_list_id = Column(
        Integer, ForeignKey("price_lists.id", ondelete="CASCADE"), nullable=False
    )
    article_id = Column(Integer, ForeignKey("articles.id", ondelete="CASCADE"), nullable=False)
    price = Column(Numeric(18, 4), nullable=False, default=0)
    discount_percent = Column(Numeric(18, 4), nullable=False, default=0)
    valid_from = Column(Date, nullable=False, default=local_today)
    valid_to = Column(Date, nullable=True)

    price_list = relationship("PriceList", back_populates="prices")
    article = relationship("Article", back_populates="prices")

    __table_args__ = (
        Index("idx_article_price_list_article", "price_list_id", "article_id", "valid_from"),
    )
