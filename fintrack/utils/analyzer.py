from __future__ import annotations

from collections import defaultdict
from datetime import date, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Callable, Dict, Iterable, List, Optional

from fintrack.models.analytics import (
    AnalyticsSummary,
    BudgetStatus,
    HealthScore,
    MonthlyTotals,
    SpendingTrends,
    TopCategory,
    WeeklyTrend,
)
from fintrack.models.asset import Asset
from fintrack.models.budget import Budget
from fintrack.models.common import ZERO, to_money
from fintrack.models.transaction import Transaction, TransactionType
from fintrack.utils.currency import CurrencyExchangeService

HEALTH_LABELS = [
    (90, "Excellent"),
    (80, "Very Good"),
    (70, "Good"),
    (60, "Fair"),
    (40, "Poor"),
]


def _percent(numerator: Decimal, denominator: Decimal) -> float:
    """numerator / denominator * 100, with x/0 defined as 0."""
    if not denominator:
        return 0.0
    return round(float(numerator / denominator * 100), 2)


def _round_half_up(value: float) -> int:
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class FinanceAnalyzer:
    """
    Read-time analytics over the stored transactions and budgets.

    Month-scoped figures compare each transaction's date with the calendar
    month of ``today`` (the clock by default), not a rolling window. Budget
    figures use the all-time ``spent`` kept by the budget accumulator.
    """

    def __init__(
        self,
        currency_service: Optional[CurrencyExchangeService] = None,
        clock: Callable[[], date] = date.today,
    ) -> None:
        self._currencies = currency_service or CurrencyExchangeService()
        self._clock = clock

    def _today(self, today: Optional[date]) -> date:
        return today or self._clock()

    def current_month(
        self,
        transactions: Iterable[Transaction],
        today: Optional[date] = None,
    ) -> List[Transaction]:
        today = self._today(today)
        return [
            t for t in transactions
            if t.date.year == today.year and t.date.month == today.month
        ]

    def monthly_totals(
        self,
        transactions: Iterable[Transaction],
        today: Optional[date] = None,
    ) -> MonthlyTotals:
        income = expenses = ZERO
        for t in self.current_month(transactions, today):
            if t.type == TransactionType.INCOME:
                income += t.amount
            else:
                expenses += t.amount
        return MonthlyTotals(
            total_income=income,
            total_expenses=expenses,
            net_savings=income - expenses,
        )

    def category_spending(
        self,
        transactions: Iterable[Transaction],
        today: Optional[date] = None,
    ) -> Dict[str, Decimal]:
        totals: Dict[str, Decimal] = defaultdict(lambda: ZERO)
        for t in self.current_month(transactions, today):
            if t.is_expense:
                totals[t.category.value] += t.amount
        return {category: to_money(total) for category, total in totals.items()}

    def top_categories(
        self,
        transactions: Iterable[Transaction],
        limit: int = 5,
        today: Optional[date] = None,
    ) -> List[TopCategory]:
        spending = self.category_spending(transactions, today)
        total = sum(spending.values(), ZERO)
        ranked = sorted(spending.items(), key=lambda item: item[1], reverse=True)
        return [
            TopCategory(
                category=category,
                amount=amount,
                percentage=_round_half_up(_percent(amount, total)),
            )
            for category, amount in ranked[:limit]
        ]

    def budget_status(self, budgets: Iterable[Budget]) -> List[BudgetStatus]:
        return [
            BudgetStatus(
                **budget.model_dump(),
                percentage_used=_percent(budget.spent, budget.amount),
                remaining=budget.amount - budget.spent,
            )
            for budget in budgets
        ]

    def weekly_trends(
        self,
        transactions: Iterable[Transaction],
        weeks: int = 4,
        today: Optional[date] = None,
    ) -> SpendingTrends:
        """
        Expense totals for the last ``weeks`` seven-day windows ending today,
        oldest first. ``weekly_change`` compares the two most recent windows.
        """
        today = self._today(today)
        expenses = [t for t in transactions if t.is_expense]

        trends: List[WeeklyTrend] = []
        for i in range(weeks - 1, -1, -1):
            end = today - timedelta(days=7 * i)
            start = end - timedelta(days=6)
            in_week = [t for t in expenses if start <= t.date <= end]
            trends.append(
                WeeklyTrend(
                    period=f"Week {i + 1}",
                    start=start,
                    end=end,
                    amount=sum((t.amount for t in in_week), ZERO),
                    transactions=len(in_week),
                    is_current_week=i == 0,
                )
            )

        current = trends[-1].amount if trends else ZERO
        previous = trends[-2].amount if len(trends) > 1 else ZERO
        return SpendingTrends(
            weeks=trends,
            current_week=current,
            previous_week=previous,
            weekly_change=_percent(current - previous, previous),
        )

    def budget_compliance(self, budgets: Iterable[Budget]) -> float:
        """Share of budgets with spent <= amount; 100 when there are none."""
        budgets = list(budgets)
        if not budgets:
            return 100.0
        compliant = sum(1 for b in budgets if b.spent <= b.amount)
        return compliant / len(budgets) * 100

    @staticmethod
    def expense_ratio(totals: MonthlyTotals) -> float:
        if not totals.total_income:
            return 0.0
        return float(totals.total_expenses / totals.total_income)

    @staticmethod
    def savings_rate(totals: MonthlyTotals) -> float:
        return _percent(totals.net_savings, totals.total_income)

    def health_score(self, totals: MonthlyTotals, budgets: Iterable[Budget]) -> HealthScore:
        expense_ratio = self.expense_ratio(totals)
        compliance = self.budget_compliance(budgets)
        savings_rate = self.savings_rate(totals)

        expense_score = max(0.0, 100 - expense_ratio * 100)
        savings_score = min(100.0, max(0.0, savings_rate * 5))
        weighted = expense_score * 0.4 + compliance * 0.3 + savings_score * 0.3
        score = min(100, max(0, _round_half_up(weighted)))

        return HealthScore(
            score=score,
            label=self.health_label(score),
            tip=self.health_tip(totals, compliance, savings_rate),
            expense_ratio=round(expense_ratio, 4),
            budget_compliance=round(compliance, 2),
            savings_rate=savings_rate,
        )

    @staticmethod
    def health_label(score: int) -> str:
        for threshold, label in HEALTH_LABELS:
            if score >= threshold:
                return label
        return "Critical"

    def health_tip(self, totals: MonthlyTotals, compliance: float, savings_rate: float) -> str:
        if totals.total_income and self.expense_ratio(totals) > 0.8:
            return "Consider reducing expenses to improve your financial health"
        if compliance < 80:
            return "Stay within budget limits to maintain financial discipline"
        if savings_rate < 10:
            return "Aim to save at least 10-20% of your income"
        return "Great job! Keep maintaining your financial discipline"

    def net_worth(self, assets: Iterable[Asset], currency: str = "USD") -> Decimal:
        total = sum(
            (self._currencies.convert(a.value, a.currency, currency) for a in assets),
            ZERO,
        )
        return to_money(total)

    def summarize(
        self,
        transactions: List[Transaction],
        budgets: List[Budget],
        assets: Optional[List[Asset]] = None,
        currency: str = "USD",
        today: Optional[date] = None,
    ) -> AnalyticsSummary:
        today = self._today(today)
        totals = self.monthly_totals(transactions, today)

        return AnalyticsSummary(
            **totals.model_dump(),
            category_spending=self.category_spending(transactions, today),
            top_categories=self.top_categories(transactions, today=today),
            budget_status=self.budget_status(budgets),
            trends=self.weekly_trends(transactions, today=today),
            health=self.health_score(totals, budgets),
            net_worth=self.net_worth(assets or [], currency),
            currency=currency,
        )
