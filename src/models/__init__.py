"""
Database models package.

This package contains all SQLAlchemy ORM models for the application.
"""

from .base import Base, BaseModel
from .agent import Agent
from .price_list import PriceList, ArticlePrice
from .warehouse import Warehouse
from .supplier import Supplier
from .article import Article
from .client import Client
from .contract import Contract
from .work_site import WorkSite, WorkSiteIntervention
from .service_ticket import ServiceTicket, ServiceIntervention
from .order import Order, OrderLine
from .document import Document, DocumentLine, DocumentLink
from .stock_movement import StockMovement
from .archived_document import ArchivedDocument
from .account import Account
from .journal_entry import JournalEntry, LedgerPosting
from .vat_register import VatRegisterEntry

__all__ = [
    "Base",
    "BaseModel",
    # Master data
    "Agent",
    "PriceList",
    "Warehouse",
    "Supplier",
    "Article",
    "Client",
    "ArticlePrice",
    # Contracts, work sites and after-sales service
    "Contract",
    "WorkSite",
    "WorkSiteIntervention",
    "ServiceTicket",
    "ServiceIntervention",
    # Orders and documents
    "Order",
    "OrderLine",
    "Document",
    "DocumentLine",
    "DocumentLink",
    "StockMovement",
    "ArchivedDocument",
    # Accounting
    "Account",
    "JournalEntry",
    "LedgerPosting",
    "VatRegisterEntry",
]
