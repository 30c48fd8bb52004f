"""API route handlers for the English learning service."""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from deps import get_gateway
from gateway import AIGateway
from models import AI_PROVIDERS, AITestRequest

from flashcard_routes import router as flashcard_router
from sentence_routes import router as sentence_router
from reading_routes import router as reading_router
from quiz_routes import router as quiz_router
from report_routes import router as report_router

router = APIRouter()
router.include_router(flashcard_router)
router.include_router(sentence_router)
router.include_router(reading_router)
router.include_router(quiz_router)
router.include_router(report_router)


@router.get("/api/v1/health", tags=["System"], summary="Liveness check")
async def health():
    timestamp = datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
    return {"status": "ok", "timestamp": timestamp}


@router.get("/api/v1/ai/providers", tags=["System"], summary="Provider presets for the settings form")
async def ai_providers():
    return AI_PROVIDERS


@router.post("/api/v1/ai/test", tags=["System"], summary="Check the caller's AI settings")
async def ai_test(
    req: AITestRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    return await gateway.test_connection(req.aiConfig)
