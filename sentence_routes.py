"""Sentence analysis endpoint."""
from fastapi import APIRouter, Depends

from deps import get_gateway
from errors import ValidationError
from gateway import AIGateway
from models import SentenceAnalyzeRequest

router = APIRouter()


@router.post("/api/v1/sentence/analyze", tags=["Sentence"],
             summary="Break an English sentence down grammatically")
async def analyze_sentence(
    req: SentenceAnalyzeRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if not req.sentence or not req.sentence.strip():
        raise ValidationError("Sentence is required")

    return await gateway.analyze_sentence(req.sentence, req.aiConfig)
