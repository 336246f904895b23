"""Clinician models - practice staff and their client assignments."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Boolean, UniqueConstraint
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class Clinician(Base):
    """A staff member who can be assigned to clients."""

    __tablename__ = "clinicians"

    id = Column(String, primary_key=True, default=lambda: generate_id("clin"))
    name = Column(String, nullable=False)
    title = Column(String, nullable=True)
    email = Column(String, nullable=False)
    specialization = Column(String, nullable=True)
    active = Column(Boolean, nullable=False, default=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)


class ClientClinician(Base):
    """Assignment of a clinician to a client in a given role."""

    __tablename__ = "client_clinicians"
    __table_args__ = (
        UniqueConstraint("client_id", "clinician_id", name="uq_client_clinician"),
    )

    id = Column(String, primary_key=True, default=lambda: generate_id("assign"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    clinician_id = Column(String, ForeignKey("clinicians.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(String, nullable=False)  # See CLINICIAN_ROLES
    assigned_date = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    notes = Column(Text, nullable=True)
