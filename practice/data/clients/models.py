"""Client model - the therapy service recipient."""
from sqlalchemy import Column, String, Date, DateTime, Text, Numeric
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class Client(Base):
    """Client (patient) record."""

    __tablename__ = "clients"

    id = Column(String, primary_key=True, default=lambda: generate_id("client"))

    # Identity
    name = Column(String, nullable=False)  # Display name, "<original_name>-<unique_identifier>"
    original_name = Column(String, nullable=True)
    unique_identifier = Column(String(6), nullable=True, index=True)
    date_of_birth = Column(Date, nullable=False)
    gender = Column(String, nullable=True)
    preferred_language = Column(String, nullable=True)

    # Contact
    contact_email = Column(String, nullable=True)
    contact_phone = Column(String, nullable=True)
    address = Column(Text, nullable=True)

    # Clinical background
    medical_history = Column(Text, nullable=True)
    communication_needs = Column(Text, nullable=True)
    therapy_preferences = Column(Text, nullable=True)

    # Funding
    funds_management = Column(String, nullable=True)  # "Self-Managed" | "Advisor-Managed" | "Custodian-Managed"
    ndis_funds = Column(Numeric(precision=15, scale=2), nullable=False, default=0)

    onboarding_status = Column(String, nullable=False, default="incomplete")  # "incomplete" | "complete"

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    # Relationships
    allies = relationship("Ally", back_populates="client", passive_deletes=True)
    goals = relationship("Goal", back_populates="client", passive_deletes=True)
    sessions = relationship("Session", back_populates="client", passive_deletes=True)
    budget_settings = relationship("BudgetSettings", back_populates="client", passive_deletes=True)
