"""Pydantic schemas for sessions, session notes and assessments."""
from pydantic import BaseModel, Field
from datetime import datetime
from typing import Optional, List, Literal
from decimal import Decimal

from practice.data.schemas import UpdateSchema


SessionStatus = Literal["draft", "completed", "cancelled", "billed"]
NoteStatus = Literal["draft", "completed"]


# ============================================================================
# SESSION SCHEMAS
# ============================================================================

class SessionCreate(BaseModel):
    """Schema for scheduling a session."""
    client_id: str
    therapist_id: Optional[str] = None  # Must be one of the client's allies
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    session_date: datetime
    duration: int = Field(..., ge=1)  # Minutes
    status: SessionStatus = "draft"
    location: Optional[str] = None
    notes: Optional[str] = None


class SessionUpdate(UpdateSchema):
    """Schema for updating a session."""
    required_if_set = ("title", "session_date", "duration", "status")

    therapist_id: Optional[str] = None
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = None
    session_date: Optional[datetime] = None
    duration: Optional[int] = Field(default=None, ge=1)
    status: Optional[SessionStatus] = None
    location: Optional[str] = None
    notes: Optional[str] = None


class SessionResponse(BaseModel):
    """Schema for session response."""
    id: str
    client_id: str
    therapist_id: Optional[str] = None
    title: str
    description: Optional[str] = None
    session_date: datetime
    duration: int
    status: str
    location: Optional[str] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ============================================================================
# SESSION NOTE SCHEMAS
# ============================================================================

class ProductUsage(BaseModel):
    """A budget item used during a session."""
    code: str = Field(..., min_length=1)  # Budget item code
    quantity: int = Field(..., ge=1)
    unit_price: Optional[Decimal] = Field(default=None, ge=0)
    description: Optional[str] = None


class SessionNoteCreate(BaseModel):
    """Schema for recording a session note."""
    present_allies: List[str] = []
    mood_rating: Optional[int] = Field(default=None, ge=0, le=10)
    physical_activity_rating: Optional[int] = Field(default=None, ge=0, le=10)
    focus_rating: Optional[int] = Field(default=None, ge=0, le=10)
    cooperation_rating: Optional[int] = Field(default=None, ge=0, le=10)
    notes: Optional[str] = None
    products: List[ProductUsage] = []
    status: NoteStatus = "draft"


class SessionNoteUpdate(UpdateSchema):
    """Schema for updating a session note."""
    required_if_set = ("present_allies", "products", "status")

    present_allies: Optional[List[str]] = None
    mood_rating: Optional[int] = Field(default=None, ge=0, le=10)
    physical_activity_rating: Optional[int] = Field(default=None, ge=0, le=10)
    focus_rating: Optional[int] = Field(default=None, ge=0, le=10)
    cooperation_rating: Optional[int] = Field(default=None, ge=0, le=10)
    notes: Optional[str] = None
    products: Optional[List[ProductUsage]] = None
    status: Optional[NoteStatus] = None


class SessionNoteResponse(BaseModel):
    """Schema for session note response."""
    id: str
    session_id: str
    client_id: str
    present_allies: List[str] = []
    mood_rating: Optional[int] = None
    physical_activity_rating: Optional[int] = None
    focus_rating: Optional[int] = None
    cooperation_rating: Optional[int] = None
    notes: Optional[str] = None
    products: List[ProductUsage] = []
    status: str
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


# ============================================================================
# ASSESSMENT SCHEMAS
# ============================================================================

class MilestoneAssessmentCreate(BaseModel):
    """Schema for rating a milestone (subgoal)."""
    milestone_id: str
    rating: Optional[int] = Field(default=None, ge=1, le=5)
    strategies: List[str] = []
    notes: Optional[str] = None
    completion_date: Optional[datetime] = None


class MilestoneAssessmentUpdate(UpdateSchema):
    """Schema for updating a milestone rating."""
    required_if_set = ("strategies",)

    rating: Optional[int] = Field(default=None, ge=1, le=5)
    strategies: Optional[List[str]] = None
    notes: Optional[str] = None
    completion_date: Optional[datetime] = None


class MilestoneAssessmentResponse(BaseModel):
    """Schema for milestone assessment response."""
    id: str
    goal_assessment_id: str
    milestone_id: str
    rating: Optional[int] = None
    strategies: List[str] = []
    notes: Optional[str] = None
    completion_date: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class GoalAssessmentCreate(BaseModel):
    """Schema for assessing performance against a goal."""
    goal_id: str
    subgoal_id: Optional[str] = None
    achievement_level: Optional[int] = Field(default=None, ge=0, le=10)
    score: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    strategies: List[str] = []


class GoalAssessmentUpdate(UpdateSchema):
    """Schema for updating a goal assessment."""
    required_if_set = ("strategies",)

    subgoal_id: Optional[str] = None
    achievement_level: Optional[int] = Field(default=None, ge=0, le=10)
    score: Optional[int] = Field(default=None, ge=0)
    notes: Optional[str] = None
    strategies: Optional[List[str]] = None


class GoalAssessmentResponse(BaseModel):
    """Schema for goal assessment response."""
    id: str
    session_note_id: str
    goal_id: str
    subgoal_id: Optional[str] = None
    achievement_level: Optional[int] = None
    score: Optional[int] = None
    notes: Optional[str] = None
    strategies: List[str] = []
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class GoalAssessmentWithMilestones(GoalAssessmentResponse):
    """Goal assessment with its milestone ratings."""
    milestones: List[MilestoneAssessmentResponse] = []


class SessionNoteComplete(SessionNoteResponse):
    """Session note with all performance assessments and milestones."""
    performance_assessments: List[GoalAssessmentWithMilestones] = []


# ============================================================================
# ATOMIC SESSION SCHEMAS
# ============================================================================

class GoalAssessmentFullCreate(GoalAssessmentCreate):
    """Goal assessment with nested milestone ratings."""
    milestones: List[MilestoneAssessmentCreate] = []


class SessionFullCreate(BaseModel):
    """Create a session, its note and assessments in one transaction."""
    session: SessionCreate
    note: Optional[SessionNoteCreate] = None
    assessments: List[GoalAssessmentFullCreate] = []


class SessionFullResponse(BaseModel):
    """Everything created by the atomic session endpoint."""
    session: SessionResponse
    note: Optional[SessionNoteComplete] = None
