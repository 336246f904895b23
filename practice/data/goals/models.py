"""Goal and subgoal models."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import generate_id


class Goal(Base):
    """A therapeutic objective for a client."""

    __tablename__ = "goals"

    id = Column(String, primary_key=True, default=lambda: generate_id("goal"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    importance_level = Column(String, nullable=False)  # "high" | "medium" | "low"
    status = Column(String, nullable=False, default="in_progress")

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="goals")
    subgoals = relationship("Subgoal", back_populates="goal", passive_deletes=True)


class Subgoal(Base):
    """A milestone on the way to a goal, assessed per session."""

    __tablename__ = "subgoals"

    id = Column(String, primary_key=True, default=lambda: generate_id("subgoal"))
    goal_id = Column(String, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    status = Column(String, nullable=False, default="pending")  # "pending" | "in_progress" | "complete"
    completion_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    goal = relationship("Goal", back_populates="subgoals")
