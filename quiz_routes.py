"""Quiz endpoints."""
from fastapi import APIRouter, Depends

from deps import get_gateway
from errors import ValidationError
from gateway import AIGateway
from models import (
    ReadingQuestionsRequest, VocabularyQuestionsRequest,
    QUESTION_COUNT_LIMIT, clamp_count,
)

router = APIRouter()


@router.post("/api/v1/quiz/reading-questions", tags=["Quiz"],
             summary="Generate reading-comprehension questions")
async def reading_questions(
    req: ReadingQuestionsRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if not req.reading or not req.reading.strip():
        raise ValidationError("Reading content is required")

    count = clamp_count(req.questionCount, 5, QUESTION_COUNT_LIMIT)
    return await gateway.generate_reading_questions(req.reading, count, req.aiConfig)


@router.post("/api/v1/quiz/vocabulary-questions", tags=["Quiz"],
             summary="Generate vocabulary questions")
async def vocabulary_questions(
    req: VocabularyQuestionsRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if req.vocabulary is None or not isinstance(req.vocabulary, list):
        raise ValidationError("A vocabulary list is required")

    count = clamp_count(req.questionCount, 5, QUESTION_COUNT_LIMIT)
    return await gateway.generate_vocabulary_questions(req.vocabulary, count, req.aiConfig)
