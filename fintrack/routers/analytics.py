"""
Analytics Router
Derived, read-only figures: monthly totals, category spending, budget status,
weekly trends and the financial health score
"""
import logging

from fastapi import APIRouter, Depends

from fintrack.core.dependencies import get_analyzer, get_store
from fintrack.db.memory import MemoryStore
from fintrack.models.analytics import AnalyticsSummary
from fintrack.utils.analyzer import FinanceAnalyzer

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("", response_model=AnalyticsSummary, include_in_schema=False)
@router.get("/", response_model=AnalyticsSummary)
def get_analytics(
    store: MemoryStore = Depends(get_store),
    analyzer: FinanceAnalyzer = Depends(get_analyzer),
):
    transactions = store.list_transactions()
    budgets = store.list_budgets()
    logger.info(f"Computing analytics over {len(transactions)} transactions and {len(budgets)} budgets")

    return analyzer.summarize(
        transactions,
        budgets,
        assets=store.list_assets(),
        currency=store.get_settings().currency,
    )
