"""
Agent model for sales representatives.

Agents are assigned to clients and earn a commission on their sales.

Example: Agent "AG01" Mario Rossi with a 5% commission.
"""

from sqlalchemy import Column, String, Text, Boolean, Numeric, Index
from sqlalchemy.orm import relationship

from .base import BaseModel


class Agent(BaseModel):
    """
    Agent model representing a sales representative.

    Attributes:
        code: Unique business code (natural key)
        first_name: Given name
        last_name: Family name
        phone: Landline number
        mobile: Mobile number
        email: Email address
        commission_percent: Commission percentage on sales
        is_active: Soft delete flag
        notes: Free text notes

    Relationships:
        clients: Clients followed by this agent
    """

    __tablename__ = "agents"

    code = Column(String(50), nullable=False, unique=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    mobile = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)
    commission_percent = Column(Numeric(18, 4), nullable=False, default=0)
    is_active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    clients = relationship("Client", back_populates="agent", lazy="select")

    __table_args__ = (Index("idx_agent_active", "is_active"),)

    @property
    def full_name(self) -> str:
        """First and last name for display."""
        return f"{self.first_name} {self.last_name}".strip()
