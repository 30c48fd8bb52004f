"""Learning report endpoint."""
from fastapi import APIRouter, Depends

from deps import get_gateway
from errors import ValidationError
from gateway import AIGateway
from models import ReportGenerateRequest

router = APIRouter()


@router.post("/api/v1/report/generate", tags=["Report"],
             summary="Summarise stored learning history into a report")
async def generate_report(
    req: ReportGenerateRequest,
    gateway: AIGateway = Depends(get_gateway),
):
    if not req.reportType or req.learningData is None:
        raise ValidationError("Report type and learning data are required")

    return await gateway.generate_learning_report(req.reportType, req.learningData, req.aiConfig)
