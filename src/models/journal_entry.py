"""
General ledger models.

A JournalEntry (registrazione contabile) groups balanced LedgerPosting rows,
each debiting or crediting one account.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class JournalEntry(BaseModel):
    """
    JournalEntry model.

    Attributes:
        number: Unique entry number (natural key)
        entry_date: Entry date
        reason: Accounting reason (causale contabile)
        description: Description
        document_id: Foreign key to the originating Document
        total_debit: Sum of debit postings
        total_credit: Sum of credit postings
        created_by: User who recorded the entry

    Relationships:
        postings: Ledger postings of this entry
    """

    __tablename__ = "journal_entries"

    number = Column(String(50), nullable=False, unique=True)
    entry_date = Column(Date, nullable=False, default=local_today)
    reason = Column(String(100), nullable=False, default="")
    description = Column(String(300), nullable=False, default="")
    document_id = Column(Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True)
    total_debit = Column(Numeric(18, 4), nullable=False, default=0)
    total_credit = Column(Numeric(18, 4), nullable=False, default=0)
    created_by = Column(String(100), nullable=True)

    document = relationship("Document")
    postings = relationship(
        "LedgerPosting",
        back_populates="journal_entry",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (Index("idx_journal_entry_date", "entry_date"),)

    @property
    def is_balanced(self) -> bool:
        """True when debit and credit totals match."""
        return (self.total_debit or 0) == (self.total_credit or 0)


class LedgerPosting(BaseModel):
    """
    LedgerPosting model.

    Attributes:
        journal_entry_id: Foreign key to JournalEntry
        account_id: Foreign key to Account
        debit: Debit amount
        credit: Credit amount
        description: Posting description
    """

    __tablename__ = "ledger_postings"

    journal_entry_id = Column(
        Integer, ForeignKey("journal_entries.id", ondelete="CASCADE"), nullable=False, index=True
    )
    account_id = Column(Integer, ForeignKey("accounts.id"), nullable=False, index=True)
    debit = Column(Numeric(18, 4), nullable=False, default=0)
    credit = Column(Numeric(18, 4), nullable=False, default=0)
    description = Column(String(300), nullable=True)

    journal_entry = relationship("JournalEntry", back_populates="postings")
    account = relationship("Account")
