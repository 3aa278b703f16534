"""
Budget accumulator.

Keeps every budget's ``spent`` equal to the sum of the stored expense
transactions in its category, floored at zero, by applying signed deltas as
transactions are created, updated and deleted.
"""
import logging
from decimal import Decimal
from typing import TYPE_CHECKING, Optional

from fintrack.core.events import (
    TRANSACTION_CREATED,
    TRANSACTION_DELETED,
    TRANSACTION_UPDATED,
    Event,
    EventBus,
)
from fintrack.models.budget import Budget
from fintrack.models.common import ZERO, to_money
from fintrack.models.transaction import Category, Transaction

if TYPE_CHECKING:
    from fintrack.db.memory import MemoryStore

logger = logging.getLogger(__name__)


class BudgetAccumulator:
    def __init__(self, store: "MemoryStore") -> None:
        self._store = store

    def register(self, events: EventBus) -> None:
        events.subscribe(TRANSACTION_CREATED, self.on_transaction_created)
        events.subscribe(TRANSACTION_UPDATED, self.on_transaction_updated)
        events.subscribe(TRANSACTION_DELETED, self.on_transaction_deleted)

    def unregister(self, events: EventBus) -> None:
        events.unsubscribe(TRANSACTION_CREATED, self.on_transaction_created)
        events.unsubscribe(TRANSACTION_UPDATED, self.on_transaction_updated)
        events.unsubscribe(TRANSACTION_DELETED, self.on_transaction_deleted)

    @staticmethod
    def contribution(transaction: Transaction) -> Decimal:
        """What a transaction adds to its category's budget."""
        return transaction.amount if transaction.is_expense else ZERO

    def adjust(self, category: Category, delta: Decimal) -> Optional[Budget]:
        """Apply ``delta`` to the budget for ``category``; no budget is a no-op."""
        budget = self._store.get_budget_by_category(category)
        if budget is None:
            return None

        spent = max(ZERO, to_money(budget.spent + delta))
        logger.info(f"Budget {budget.id} ({budget.category.value}) spent {budget.spent} -> {spent}")
        return self._store.set_budget_spent(category, spent)

    def expense_total(self, category: Category) -> Decimal:
        """Full recount of a category, used when a budget starts tracking it."""
        total = sum(
            (self.contribution(t) for t in self._store.transactions_by_category(category)),
            ZERO,
        )
        return to_money(total)

    def on_transaction_created(self, event: Event) -> Optional[Budget]:
        transaction: Transaction = event.payload["transaction"]
        if not transaction.is_expense:
            return None
        return self.adjust(transaction.category, transaction.amount)

    def on_transaction_deleted(self, event: Event) -> Optional[Budget]:
        transaction: Transaction = event.payload["transaction"]
        if not transaction.is_expense:
            return None
        return self.adjust(transaction.category, -transaction.amount)

    def on_transaction_updated(self, event: Event) -> None:
        before: Transaction = event.payload["before"]
        after: Transaction = event.payload["after"]
        # Reverse the old contribution as if deleted, then apply the new one
        if before.is_expense:
            self.adjust(before.category, -before.amount)
        if after.is_expense:
            self.adjust(after.category, after.amount)
