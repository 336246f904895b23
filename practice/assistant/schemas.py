"""Assistant Pydantic schemas for request/response validation."""
from pydantic import BaseModel, Field
from typing import List, Dict, Any, Literal, Optional


class QueryContext(BaseModel):
    """What the user is currently looking at."""
    active_client_id: Optional[str] = Field(None, description="Client selected in the UI")
    active_goal_id: Optional[str] = Field(None, description="Goal selected in the UI")


class AssistantQueryRequest(BaseModel):
    """A free-text question for the assistant."""
    query: str = Field(..., min_length=1, description="The user's question")
    context: QueryContext = Field(default_factory=QueryContext, description="Active selection")


class QueryIntentResponse(BaseModel):
    type: str
    sub_category: Optional[str] = None
    client_id: Optional[str] = None
    goal_id: Optional[str] = None
    topic: Optional[str] = None


class AssistantResponse(BaseModel):
    """Assistant answer."""
    content: str = Field(..., description="Markdown-formatted answer")
    confidence: float = Field(..., ge=0, le=1, description="How sure the assistant is")
    data: Optional[Dict[str, Any]] = Field(None, description="Figures the answer was built from")
    visualization_hint: Literal["BUBBLE_CHART", "PROGRESS_CHART", "NONE"] = "NONE"
    suggested_follow_ups: List[str] = Field(default_factory=list)
    intent: Optional[QueryIntentResponse] = None


class ClassifyResponse(BaseModel):
    """Classification of a question, for debugging."""
    intent: QueryIntentResponse
    description: str
    needs_client: bool
    matched_terms: List[str] = Field(default_factory=list)
