"""
Contract model for service and maintenance agreements with clients.

Example: Contract "CT-2024-001" for client "C001", 40 hours purchased,
         invoiced quarterly.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class Contract(BaseModel):
    """
    Contract model.

    Attributes:
        number: Unique contract number (natural key)
        client_id: Foreign key to Client, required
        description: Contract description
        start_date: Contract start date
        end_date: Contract end date (open-ended when None)
        amount: Contract amount
        hours_purchased: Hours bundle purchased
        hours_remaining: Hours left in the bundle
        extra_hourly_cost: Hourly cost beyond the bundle
        contract_type: Free classification
        status: Contract status
        billing_frequency: Billing frequency label
        next_billing_date: Next scheduled invoice
        notes: Free text notes
    """

    __tablename__ = "contracts"

    number = Column(String(50), nullable=False, unique=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    description = Column(String(300), nullable=False, default="")
    start_date = Column(Date, nullable=False, default=local_today)
    end_date = Column(Date, nullable=True)
    amount = Column(Numeric(18, 4), nullable=False, default=0)
    hours_purchased = Column(Integer, nullable=True)
    hours_remaining = Column(Integer, nullable=True)
    extra_hourly_cost = Column(Numeric(18, 4), nullable=True)
    contract_type = Column(String(50), nullable=True)
    status = Column(String(50), nullable=False, default="ATTIVO")
    billing_frequency = Column(String(50), nullable=True)
    next_billing_date = Column(Date, nullable=True)
    notes = Column(Text, nullable=True)

    client = relationship("Client")

    __table_args__ = (Index("idx_contract_status", "status"),)
