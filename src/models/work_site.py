"""
Work site models.

A WorkSite (cantiere) is a construction or installation job for a client.
WorkSiteIntervention rows log each day of work with its labour and
material costs.
"""

from sqlalchemy import Column, Integer, String, Text, Date, Numeric, ForeignKey, Index
from sqlalchemy.orm import relationship

from .base import BaseModel
from src.utils.datetime_utils import local_today


class WorkSite(BaseModel):
    """
    WorkSite model.

    Attributes:
        code: Unique work site code (natural key)
        client_id: Foreign key to Client, required
        description: Work site description
        address: Street address of the site
        city: City of the site
        start_date: Works start date
        end_date: Works end date
        budget_amount: Quoted amount
        costs_incurred: Costs booked so far
        revenue_accrued: Revenue accrued so far
        status: Work site status
        manager: Person in charge
        notes: Free text notes

    Relationships:
        interventions: Daily work log entries
    """

    __tablename__ = "work_sites"

    code = Column(String(50), nullable=False, unique=True)
    client_id = Column(Integer, ForeignKey("clients.id"), nullable=False, index=True)
    description = Column(String(300), nullable=False, default="")
    address = Column(String(200), nullable=True)
    city = Column(String(100), nullable=True)
    start_date = Column(Date, nullable=False, default=local_today)
    end_date = Column(Date, nullable=True)
    budget_amount = Column(Numeric(18, 4), nullable=False, default=0)
    costs_incurred = Column(Numeric(18, 4), nullable=False, default=0)
    revenue_accrued = Column(Numeric(18, 4), nullable=False, default=0)
    status = Column(String(50), nullable=False, default="APERTO")
    manager = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)

    client = relationship("Client")
    interventions = relationship(
        "WorkSiteIntervention",
        back_populates="work_site",
        cascade="all, delete-orphan",
        lazy="select",
    )


class WorkSiteIntervention(BaseModel):
    """
    One day of work on a work site.

    Attributes:
        work_site_id: Foreign key to WorkSite
        intervention_date: Day of work
        workers: Names of the workers involved
        worker_count: Number of workers
        labour_hours: Labour hours
        labour_cost: Labour cost
        material_cost: Material cost
        total_cost: Total cost
        description: Work description
        notes: Free text notes
    """

    __tablename__ = "work_site_interventions"

    work_site_id = Column(
        Integer, ForeignKey("work_sites.id", ondelete="CASCADE"), nullable=False
    )
    intervention_date = Column(Date, nullable=False)
    workers = Column(String(300), nullable=True)
    worker_count = Column(Integer, nullable=True)
    labour_hours = Column(Integer, nullable=True)
    labour_cost = Column(Numeric(18, 4), nullable=False, default=0)
    material_cost = Column(Numeric(18, 4), nullable=False, default=0)
    total_cost = Column(Numeric(18, 4), nullable=False, default=0)
    description = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)

    work_site = relationship("WorkSite", back_populates="interventions")

    __table_args__ = (
        Index("idx_work_site_intervention_site_date", "work_site_id", "intervention_date"),
    )
