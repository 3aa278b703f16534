from fastapi import Request

from fintrack.db.memory import MemoryStore
from fintrack.utils.ai_assistant import AIFinancialAssistant
from fintrack.utils.analyzer import FinanceAnalyzer


def get_store(request: Request) -> MemoryStore:
    return request.app.state.store


def get_analyzer(request: Request) -> FinanceAnalyzer:
    return request.app.state.analyzer


def get_assistant(request: Request) -> AIFinancialAssistant:
    return request.app.state.assistant
