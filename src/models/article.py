"""
Article model for the product catalog.

An article is anything that can be sold, purchased or moved in stock. Service
articles (labour, fees) never generate stock movements.

Example: Article "VITE-M6" "Vite M6x20 zincata", 22% VAT, unit "PZ".
"""

from sqlalchemy import Column, Integer, String, Boolean, Text, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Article(BaseModel):
    """
    Article model representing a catalog item.

    Attributes:
        code: Unique business code (natural key)
        description: Short description, required
        extended_description: Long description
        ean_code: EAN barcode
        supplier_codes: Codes used by suppliers for this article
        unit_of_measure: Unit of measure (e.g. "PZ", "KG")
        purchase_price: Last purchase price
        sale_price: Base sale price
        vat_rate: VAT rate percentage
        min_stock: Reorder threshold
        tracks_sizes: Size variants are managed
        tracks_colors: Color variants are managed
        tracks_serials: Serial numbers are managed
        tracks_lots: Lots are managed
        is_service: Service article (no stock)
        is_active: Soft delete flag
        category: Category name
        subcategory: Subcategory name
        brand: Brand name
        weight: Unit weight
        volume: Unit volume
        notes: Free text notes
        default_supplier_id: Foreign key to the preferred Supplier

    Relationships:
        default_supplier: Preferred supplier
        prices: Price list entries for this article
    """

    __tablename__ = "articles"

    code = Column(String(50), nullable=False, unique=True)
    description = Column(String(300), nullable=False)
    extended_description = Column(Text, nullable=True)
    ean_code = Column(String(20), nullable=True, index=True)
    supplier_codes = Column(String(200), nullable=True)
    unit_of_measure = Column(String(10), nullable=False, default="PZ")
    purchase_price = Column(Numeric(18, 4), nullable=False, default=0)
    sale_price = Column(Numeric(18, 4), nullable=False, default=0)
    vat_rate = Column(Numeric(18, 4), nullable=False, default=22)
    min_stock = Column(Numeric(18, 4), nullable=False, default=0)
    tracks_sizes = Column(Boolean, nullable=False, default=False)
    tracks_colors = Column(Boolean, nullable=False, default=False)
    tracks_serials = Column(Boolean, nullable=False, default=False)
    tracks_lots = Column(Boolean, nullable=False, default=False)
    is_service = Column(Boolean, nullable=False, default=False)
    is_active = Column(Boolean, nullable=False, default=True)
    category = Column(String(100), nullable=True)
    subcategory = Column(String(100), nullable=True)
    brand = Column(String(100), nullable=True)
    weight = Column(Numeric(18, 4), nullable=True)
    volume = Column(Numeric(18, 4), nullable=True)
    notes = Column(Text, nullable=True)

    default_supplier_id = Column(
        Integer, ForeignKey("suppliers.id", ondelete="SET NULL"), nullable=True
    )

    default_supplier = relationship("Supplier", back_populates="articles")
    prices = relationship("ArticlePrice", back_populates="article", lazy="select")

    __table_args__ = (
        Index("idx_article_description", "description"),
        Index("idx_article_category", "category"),
    )
