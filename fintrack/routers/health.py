"""
Health Check Router
Simple health check endpoint
"""
from datetime import datetime, timezone

from fastapi import APIRouter, Depends

from fintrack.core.config import settings
from fintrack.core.dependencies import get_assistant
from fintrack.utils.ai_assistant import AIFinancialAssistant

router = APIRouter()


@router.get("/health")
async def health_check(assistant: AIFinancialAssistant = Depends(get_assistant)):
    """
    Health check endpoint.
    Returns API status and whether the AI assistant is live or on fallback content.
    """
    return {
        "status": "healthy",
        "service": settings.PROJECT_NAME,
        "ai": "enabled" if assistant.enabled else "disabled (using fallback)",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
