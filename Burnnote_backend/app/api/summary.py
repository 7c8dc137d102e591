from fastapi import APIRouter, Depends, Request

from app.security import Tenant, require_tenant
from app.services.summary import summarize_text
from schemas.notes import SummaryRequest, SummaryResponse

router = APIRouter()


@router.post("/ai-sum", response_model=SummaryResponse)
async def ai_summary(
    payload: SummaryRequest,
    request: Request,
    tenant: Tenant = Depends(require_tenant),
):
    state = request.app.state
    summary = await summarize_text(state.summarizer, payload.text, state.config.AI_SYSTEM_PROMPT)
    return SummaryResponse(summary=summary)
