"""
After-sales service models.

A ServiceTicket (scheda assistenza) tracks a product brought in for repair.
The intake and delivery documents are the transport documents that moved
the product in and out. ServiceIntervention rows log each technician session.
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    Boolean,
    Date,
    Numeric,
    ForeignKey,
    Index,
)
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class ServiceTicket(BaseModel):
    """
    ServiceTicket model.

    Attributes:
        number: Unique ticket number (natural key)
        opened_on: Ticket opening date
        closed_on: Ticket closing date
        client_id: Foreign key to Client, required
        product_description: Product under repair
        serial_number: Product serial number
        model: Product model
        reported_fault: Fault as reported by the client
        found_fault: Fault found by the technician
        under_warranty: True when covered by warranty
        status: Processing status
        assigned_technician: Technician in charge
        labour_cost: Labour cost
        material_cost: Material cost
        total_amount: Total charged
        intake_document_id: Foreign key to the intake Document
        delivery_document_id: Foreign key to the delivery Document
        notes: Free text notes
    """

    __tablename__ = "service_tickets"

    number = Column(String(50), nullable=False, unique=True)
    opened_on = Column(Date, nullable=False, default=local_today)
    closed_on = Column(Date, nullable=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    product_description = Column(String(300), nullable=False, default="")
    serial_number = Column(String(100), nullable=True)
    model = Column(String(100), nullable=True)
    reported_fault = Column(Text, nullable=True)
    found_fault = Column(Text, nullable=True)
    under_warranty = Column(Boolean, nullable=False, default=False)
    status = Column(String(50), nullable=False, default="APERTA")
    assigned_technician = Column(String(100), nullable=True)
    labour_cost = Column(Numeric(18, 4), nullable=False, default=0)
    material_cost = Column(Numeric(18, 4), nullable=False, default=0)
    total_amount = Column(Numeric(18, 4), nullable=False, default=0)
    intake_document_id = Column(
        Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    delivery_document_id = Column(
        Integer, ForeignKey("documents.id", ondelete="SET NULL"), nullable=True
    )
    notes = Column(Text, nullable=True)

    client = relationship("Client")
    intake_document = relationship("Document", foreign_keys=[intake_document_id])
    delivery_document = relationship("Document", foreign_keys=[delivery_document_id])
    interventions = relationship(
        "ServiceIntervention",
        back_populates="service_ticket",
        cascade="all, delete-orphan",
        lazy="select",
    )

    __table_args__ = (Index("idx_service_ticket_status", "status"),)


class ServiceIntervention(BaseModel):
    """
    One technician session on a service ticket.

    Attributes:
        service_ticket_id: Foreign key to ServiceTicket
        intervention_date: Session date
        technician: Technician name
        description: Work performed
        minutes_worked: Minutes of labour
        hourly_rate: Hourly labour rate
        labour_total: Labour amount charged
        notes: Free text notes
    """

    __tablename__ = "service_interventions"

    service_ticket_id = Column(
        Integer, ForeignKey("service_tickets.id", ondelete="CASCADE"), nullable=False, index=True
    )
    intervention_date = Column(Date, nullable=False)
    technician = Column(String(100), nullable=True)
    description = Column(Text, nullable=True)
    minutes_worked = Column(Integer, nullable=True)
    hourly_rate = Column(Numeric(18, 4), nullable=False, default=0)
    labour_total = Column(Numeric(18, 4), nullable=False, default=0)
    notes = Column(Text, nullable=True)

    service_ticket = relationship("ServiceTicket", back_populates="interventions")
