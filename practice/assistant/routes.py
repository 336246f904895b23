"""Assistant API routes."""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from practice.database import get_db
from practice.assistant import schemas
from practice.assistant.intent import (
    classify_query,
    get_intent_description,
    matched_terms,
    needs_client_context,
)
from practice.assistant.processor import process_query

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/query", response_model=schemas.AssistantResponse)
async def query_assistant(
    request: schemas.AssistantQueryRequest,
    db: AsyncSession = Depends(get_db)
):
    """
    Ask the assistant a question.

    Questions are classified as budget, progress, strategy or general and
    answered from the active client's records. The response includes:
    - content: The answer in markdown
    - confidence: 0-1
    - visualization_hint: Which chart the UI can show beside the answer
    """
    try:
        return await process_query(db, request.query, request.context.model_dump())
    except Exception as e:
        logger.exception("Assistant query failed")
        raise HTTPException(
            status_code=500,
            detail=f"Error processing query: {str(e)}"
        )


@router.post("/classify", response_model=schemas.ClassifyResponse)
async def classify(request: schemas.AssistantQueryRequest):
    """Classify a question without answering it."""
    intent = classify_query(request.query, request.context.model_dump())
    return schemas.ClassifyResponse(
        intent=intent.to_dict(),
        description=get_intent_description(intent),
        needs_client=needs_client_context(intent),
        matched_terms=matched_terms(request.query),
    )
