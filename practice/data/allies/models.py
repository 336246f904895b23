"""Ally model - parents, guardians and other caregivers of a client."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Boolean
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class Ally(Base):
    """A person associated with a client and the records they may see."""

    __tablename__ = "allies"

    id = Column(String, primary_key=True, default=lambda: generate_id("ally"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    name = Column(String, nullable=False)
    relationship_type = Column(String, nullable=False)  # "Parent" | "Guardian" | ...
    preferred_language = Column(String, nullable=False)
    email = Column(String, nullable=False)
    phone = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    # Access permissions
    access_therapeutics = Column(Boolean, nullable=False, default=False)
    access_financials = Column(Boolean, nullable=False, default=False)

    archived = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="allies")
