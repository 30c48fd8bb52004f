"""Bilingual reading endpoint."""
from fastapi import APIRouter, Depends

from deps import get_gateway
from errors import ValidationError
from gateway import AIGateway
from models import ReadingGenerateRequest

router = APIRouter()


@router.post("/api/v1/reading/generate", tags=["Reading"],
             summary="Translate a text and pick out its key vocabulary",
             description="English input is translated into Chinese; any other language value treats the input as Chinese.")
async def generate_reading(
    req: ReadingGenerateRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if not req.text or not req.text.strip():
        raise ValidationError("Text is required")

    return await gateway.generate_reading_content(req.text, req.language or "en", req.aiConfig)
