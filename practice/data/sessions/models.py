"""Session models - therapy sessions, their notes and assessments."""
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, Integer
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from practice.database import Base
from practice.data.base import JSONType, generate_id


class Session(Base):
    """A scheduled or completed therapy session."""

    __tablename__ = "sessions"

    id = Column(String, primary_key=True, default=lambda: generate_id("session"))
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)
    therapist_id = Column(String, ForeignKey("allies.id", ondelete="SET NULL"), nullable=True)

    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    session_date = Column(DateTime(timezone=True), nullable=False, index=True)
    duration = Column(Integer, nullable=False)  # Minutes
    status = Column(String, nullable=False, default="draft")  # "draft" | "completed" | "cancelled" | "billed"
    location = Column(String, nullable=True)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    client = relationship("Client", back_populates="sessions")
    note = relationship("SessionNote", back_populates="session", uselist=False, passive_deletes=True)


class SessionNote(Base):
    """Structured observations recorded for a session (one note per session)."""

    __tablename__ = "session_notes"

    id = Column(String, primary_key=True, default=lambda: generate_id("note"))
    session_id = Column(
        String, ForeignKey("sessions.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    client_id = Column(String, ForeignKey("clients.id", ondelete="CASCADE"), nullable=False, index=True)

    present_allies = Column(JSONType, nullable=False, default=list)  # Ally names

    # General observations (0-10)
    mood_rating = Column(Integer, nullable=True)
    physical_activity_rating = Column(Integer, nullable=True)
    focus_rating = Column(Integer, nullable=True)
    cooperation_rating = Column(Integer, nullable=True)

    notes = Column(Text, nullable=True)

    # Products used: [{"code": str, "quantity": int, "unit_price": str?, "description": str?}]
    products = Column(JSONType, nullable=False, default=list)

    status = Column(String, nullable=False, default="draft")  # "draft" | "completed"

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    session = relationship("Session", back_populates="note")
    assessments = relationship("GoalAssessment", back_populates="session_note", passive_deletes=True)


class GoalAssessment(Base):
    """Performance against a goal recorded in a session note."""

    __tablename__ = "goal_assessments"

    id = Column(String, primary_key=True, default=lambda: generate_id("assess"))
    session_note_id = Column(
        String, ForeignKey("session_notes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    goal_id = Column(String, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    subgoal_id = Column(String, ForeignKey("subgoals.id", ondelete="SET NULL"), nullable=True)

    achievement_level = Column(Integer, nullable=True)
    score = Column(Integer, nullable=True)
    notes = Column(Text, nullable=True)
    strategies = Column(JSONType, nullable=False, default=list)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    session_note = relationship("SessionNote", back_populates="assessments")
    milestones = relationship("MilestoneAssessment", back_populates="goal_assessment", passive_deletes=True)


class MilestoneAssessment(Base):
    """Rating of a single subgoal (milestone) within a goal assessment."""

    __tablename__ = "milestone_assessments"

    id = Column(String, primary_key=True, default=lambda: generate_id("milestone"))
    goal_assessment_id = Column(
        String, ForeignKey("goal_assessments.id", ondelete="CASCADE"), nullable=False, index=True
    )
    milestone_id = Column(String, ForeignKey("subgoals.id", ondelete="CASCADE"), nullable=False, index=True)

    rating = Column(Integer, nullable=True)  # 1-5
    strategies = Column(JSONType, nullable=False, default=list)
    notes = Column(Text, nullable=True)
    completion_date = Column(DateTime(timezone=True), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    goal_assessment = relationship("GoalAssessment", back_populates="milestones")
