"""
Chart of accounts model (piano dei conti).

Accounts form a tree through parent_id. Only leaf accounts receive postings.

Example:
    "01"        Attivo            level 1
    "01.01"     Crediti clienti   level 2, parent "01"
    "01.01.001" Cliente Rossi     level 3, parent "01.01", leaf
"""

from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Account(BaseModel):
    """
    Account model.

    Attributes:
        code: Unique account code (natural key)
        description: Account description, required
        account_type: Account type (e.g. "PATRIMONIALE", "ECONOMICO")
        parent_id: Foreign key to the parent Account
        level: Depth in the tree, 1 for roots
        is_leaf: True when the account accepts postings
        is_active: Soft delete flag
        notes: Free text notes

    Relationships:
        parent: Parent account
        children: Child accounts
    """

    __tablename__ = "accounts"

    code = Column(String(50), nullable=False, unique=True)
    description = Column(String(200), nullable=False)
    account_type = Column(String(50), nullable=False, default="")
    parent_id = Column(Integer, ForeignKey("accounts.id", ondelete="SET NULL"), nullable=True)
    level = Column(Integer, nullable=False, default=1)
    is_leaf = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    parent = relationship("Account", remote_side="Account.id", back_populates="children")
    children = relationship("Account", back_populates="parent", lazy="select")

    __table_args__ = (Index("idx_account_parent", "parent_id"),)
