import datetime as dt
from typing import Dict, List

from pydantic import BaseModel

from fintrack.models.budget import Budget
from fintrack.models.common import ZERO, Money


class MonthlyTotals(BaseModel):
    total_income: Money = ZERO
    total_expenses: Money = ZERO
    net_savings: Money = ZERO


class BudgetStatus(Budget):
    percentage_used: float
    remaining: Money


class TopCategory(BaseModel):
    category: str
    amount: Money
    percentage: int


class WeeklyTrend(BaseModel):
    period: str
    start: dt.date
    end: dt.date
    amount: Money
    transactions: int
    is_current_week: bool = False


class SpendingTrends(BaseModel):
    weeks: List[WeeklyTrend]
    current_week: Money
    previous_week: Money
    weekly_change: float


class HealthScore(BaseModel):
    score: int
    label: str
    tip: str
    expense_ratio: float
    budget_compliance: float
    savings_rate: float


class AnalyticsSummary(MonthlyTotals):
    category_spending: Dict[str, Money]
    top_categories: List[TopCategory]
    budget_status: List[BudgetStatus]
    trends: SpendingTrends
    health: HealthScore
    net_worth: Money
    currency: str
