"""Flashcard endpoints."""
from fastapi import APIRouter, Depends

from deps import get_gateway
from errors import ValidationError
from gateway import AIGateway
from models import FlashcardExtractRequest, MAX_WORDS_LIMIT, clamp_count

router = APIRouter()


@router.post("/api/v1/flashcards/extract", tags=["Flashcards"],
             summary="Extract vocabulary cards from a text")
async def extract_flashcards(
    req: FlashcardExtractRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if not req.text or not req.text.strip():
        raise ValidationError("Text is required")

    max_words = clamp_count(req.maxWords, 10, MAX_WORDS_LIMIT)
    return await gateway.extract_words(req.text, max_words, req.level or "all", req.aiConfig)
