"""Therapy strategy model."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class Strategy(Base):
    """A therapy strategy that can be recommended and recorded in assessments."""

    __tablename__ = "strategies"

    id = Column(String, primary_key=True, default=lambda: generate_id("strategy"))
    name = Column(String, nullable=False)
    category = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    effectiveness = Column(Integer, nullable=True)  # 1-10
    goal_id = Column(String, ForeignKey("goals.id", ondelete="SET NULL"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
