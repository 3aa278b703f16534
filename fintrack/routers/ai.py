"""
AI Router
Insights, tips and chat from the AI assistant. These endpoints never fail
because of the AI provider; they fall back to static content instead.
"""
from typing import List

from fastapi import APIRouter, Depends

from fintrack.core.dependencies import get_assistant, get_store
from fintrack.db.memory import MemoryStore
from fintrack.models.insight import ChatRequest, ChatResponse, FinancialInsight, FinancialTip, QuickTipResponse
from fintrack.utils.ai_assistant import AIFinancialAssistant

router = APIRouter()


@router.post("/insights", response_model=List[FinancialInsight])
async def generate_insights(
    store: MemoryStore = Depends(get_store),
    assistant: AIFinancialAssistant = Depends(get_assistant),
):
    return await assistant.generate_insights(store.list_transactions(), store.list_budgets())


@router.post("/chat", response_model=ChatResponse)
async def chat(
    request: ChatRequest,
    store: MemoryStore = Depends(get_store),
    assistant: AIFinancialAssistant = Depends(get_assistant),
):
    response = await assistant.chat_with_assistant(
        request.message,
        store.list_transactions(),
        store.list_budgets(),
    )
    return ChatResponse(response=response)


@router.post("/tips", response_model=List[FinancialTip])
async def generate_tips(
    store: MemoryStore = Depends(get_store),
    assistant: AIFinancialAssistant = Depends(get_assistant),
):
    return await assistant.generate_comprehensive_tips(
        store.list_transactions(),
        store.list_budgets(),
        store.list_assets(),
        store.get_settings(),
    )


@router.post("/quick-tip", response_model=QuickTipResponse)
async def quick_tip(
    store: MemoryStore = Depends(get_store),
    assistant: AIFinancialAssistant = Depends(get_assistant),
):
    tip = await assistant.generate_quick_tip(store.list_transactions(), store.list_budgets())
    return QuickTipResponse(tip=tip)
