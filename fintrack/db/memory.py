"""
In-memory entity store.

Process-lifetime storage for transactions, budgets, assets and the settings
record. One instance is built by the app factory and handed to routers via
dependency injection; tests build a fresh one per test.

Callers always receive deep copies, so nothing outside the store can mutate a
stored entity. Transaction mutations are announced on the event bus; the
budget accumulator keeps ``Budget.spent`` in step from those events.
"""
import logging
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel

from fintrack.core.errors import ValidationError
from fintrack.core.events import (
    TRANSACTION_CREATED,
    TRANSACTION_DELETED,
    TRANSACTION_UPDATED,
    EventBus,
)
from fintrack.models.asset import Asset
from fintrack.models.budget import Budget
from fintrack.models.common import ZERO, to_money
from fintrack.models.settings import UserSettings
from fintrack.models.transaction import Category, Transaction
from fintrack.utils.budget_accumulator import BudgetAccumulator
from fintrack.utils.currency import CurrencyExchangeService

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


class EntityCollection(Generic[T]):
    """Keyed storage for one entity kind with a never-reused id counter."""

    def __init__(
        self,
        kind: str,
        model: Type[T],
        sort_key: Optional[Callable[[T], Any]] = None,
    ) -> None:
        self.kind = kind
        self._model = model
        self._sort_key = sort_key
        self._items: Dict[int, T] = {}
        self._next_id = 1

    def values(self) -> List[T]:
        """Stored instances, insertion order, not copied. Store internal."""
        return list(self._items.values())

    def list(self) -> List[T]:
        items = self.values()
        if self._sort_key is not None:
            # sorted() is stable, so ties keep insertion order
            items = sorted(items, key=self._sort_key, reverse=True)
        return [item.model_copy(deep=True) for item in items]

    def get(self, entity_id: int) -> Optional[T]:
        item = self._items.get(entity_id)
        return item.model_copy(deep=True) if item is not None else None

    def find(self, predicate: Callable[[T], bool]) -> Optional[T]:
        for item in self._items.values():
            if predicate(item):
                return item
        return None

    def insert(self, fields: Dict[str, Any]) -> T:
        entity_id = self._next_id
        item = self._model(id=entity_id, created_at=datetime.now(timezone.utc), **fields)
        self._next_id += 1
        self._items[entity_id] = item
        logger.info(f"Created {self.kind} {entity_id}")
        return item.model_copy(deep=True)

    def merge(self, entity_id: int, updates: Dict[str, Any]) -> Optional[T]:
        current = self._items.get(entity_id)
        if current is None:
            return None
        merged = self._model(**{**current.model_dump(), **updates})
        self._items[entity_id] = merged
        return merged.model_copy(deep=True)

    def remove(self, entity_id: int) -> Optional[T]:
        item = self._items.pop(entity_id, None)
        if item is not None:
            logger.info(f"Deleted {self.kind} {entity_id}")
        return item

    def clear(self) -> None:
        self._items.clear()
        self._next_id = 1


class MemoryStore:
    def __init__(
        self,
        events: Optional[EventBus] = None,
        currency_service: Optional[CurrencyExchangeService] = None,
    ) -> None:
        self.events = events or EventBus()
        self.currencies = currency_service or CurrencyExchangeService()

        self._transactions: EntityCollection[Transaction] = EntityCollection(
            "transaction", Transaction, sort_key=lambda t: t.date
        )
        self._budgets: EntityCollection[Budget] = EntityCollection("budget", Budget)
        self._assets: EntityCollection[Asset] = EntityCollection(
            "asset", Asset, sort_key=lambda a: (a.created_at, a.id)
        )
        self._settings: Optional[UserSettings] = None

        self.accumulator = BudgetAccumulator(self)
        self.accumulator.register(self.events)

    # Transactions

    def list_transactions(self) -> List[Transaction]:
        return self._transactions.list()

    def get_transaction(self, transaction_id: int) -> Optional[Transaction]:
        return self._transactions.get(transaction_id)

    def create_transaction(self, data: Dict[str, Any]) -> Transaction:
        fields = self._checked_amount(data, "amount", "Invalid transaction data")
        transaction = self._transactions.insert(fields)
        self.events.publish(TRANSACTION_CREATED, {"transaction": transaction})
        return transaction

    def update_transaction(self, transaction_id: int, updates: Dict[str, Any]) -> Optional[Transaction]:
        before = self._transactions.get(transaction_id)
        if before is None:
            return None
        fields = self._checked_amount(updates, "amount", "Invalid transaction data")
        after = self._transactions.merge(transaction_id, fields)
        self.events.publish(TRANSACTION_UPDATED, {"before": before, "after": after})
        return after

    def delete_transaction(self, transaction_id: int) -> bool:
        removed = self._transactions.remove(transaction_id)
        if removed is None:
            return False
        self.events.publish(TRANSACTION_DELETED, {"transaction": removed})
        return True

    def transactions_by_category(self, category: Category) -> List[Transaction]:
        return [t for t in self._transactions.list() if t.category == category]

    def transactions_by_date_range(self, start: date, end: date) -> List[Transaction]:
        return [t for t in self._transactions.list() if start <= t.date <= end]

    # Budgets

    def list_budgets(self) -> List[Budget]:
        return self._budgets.list()

    def get_budget(self, budget_id: int) -> Optional[Budget]:
        return self._budgets.get(budget_id)

    def get_budget_by_category(self, category: Category) -> Optional[Budget]:
        budget = self._budgets.find(lambda b: b.category == category)
        return budget.model_copy(deep=True) if budget is not None else None

    def create_budget(self, data: Dict[str, Any]) -> Budget:
        category = data["category"]
        self._ensure_unique_category(category)
        fields = {k: v for k, v in data.items() if k != "spent"}
        fields = self._checked_amount(fields, "amount", "Invalid budget data")
        fields["spent"] = self.accumulator.expense_total(category)
        return self._budgets.insert(fields)

    def update_budget(self, budget_id: int, updates: Dict[str, Any]) -> Optional[Budget]:
        current = self._budgets.get(budget_id)
        if current is None:
            return None
        fields = {k: v for k, v in updates.items() if k != "spent"}
        fields = self._checked_amount(fields, "amount", "Invalid budget data")
        category = fields.get("category")
        if category is not None and category != current.category:
            self._ensure_unique_category(category, exclude_id=budget_id)
            fields["spent"] = self.accumulator.expense_total(category)
        return self._budgets.merge(budget_id, fields)

    def delete_budget(self, budget_id: int) -> bool:
        return self._budgets.remove(budget_id) is not None

    def set_budget_spent(self, category: Category, spent: Decimal) -> Optional[Budget]:
        """Overwrite ``spent`` of the budget for ``category``. Accumulator only."""
        budget = self._budgets.find(lambda b: b.category == category)
        if budget is None:
            return None
        return self._budgets.merge(budget.id, {"spent": spent})

    def _ensure_unique_category(self, category: Category, exclude_id: Optional[int] = None) -> None:
        existing = self._budgets.find(lambda b: b.category == category and b.id != exclude_id)
        if existing is not None:
            raise ValidationError.for_field(
                "category",
                f"A budget for {Category(category).value} already exists",
                message="Invalid budget data",
            )

    # Assets

    def list_assets(self) -> List[Asset]:
        return self._assets.list()

    def get_asset(self, asset_id: int) -> Optional[Asset]:
        return self._assets.get(asset_id)

    def create_asset(self, data: Dict[str, Any]) -> Asset:
        fields = self._checked_amount(data, "value", "Invalid asset data")
        fields["currency"] = self._checked_currency(fields.get("currency") or "USD", "Invalid asset data")
        return self._assets.insert(fields)

    def update_asset(self, asset_id: int, updates: Dict[str, Any]) -> Optional[Asset]:
        if self._assets.get(asset_id) is None:
            return None
        fields = self._checked_amount(updates, "value", "Invalid asset data")
        if "currency" in fields:
            fields["currency"] = self._checked_currency(fields["currency"], "Invalid asset data")
        return self._assets.merge(asset_id, fields)

    def delete_asset(self, asset_id: int) -> bool:
        return self._assets.remove(asset_id) is not None

    # Settings

    def get_settings(self) -> UserSettings:
        if self._settings is None:
            self._settings = UserSettings()
        return self._settings.model_copy(deep=True)

    def update_settings(self, updates: Dict[str, Any]) -> UserSettings:
        fields = dict(updates)
        if "currency" in fields:
            fields["currency"] = self._checked_currency(fields["currency"], "Invalid settings data")
        current = self.get_settings()
        self._settings = UserSettings(**{**current.model_dump(), **fields})
        return self._settings.model_copy(deep=True)

    def _checked_currency(self, code: str, message: str) -> str:
        code = code.upper()
        if not self.currencies.is_supported(code):
            raise ValidationError.for_field("currency", f"Unsupported currency: {code}", message=message)
        return code

    def _checked_amount(self, data: Dict[str, Any], name: str, message: str) -> Dict[str, Any]:
        """Copy of ``data`` with ``name`` quantized; non-positive amounts are rejected."""
        fields = dict(data)
        if name in fields:
            amount = to_money(fields[name])
            if amount <= ZERO:
                raise ValidationError.for_field(name, f"{name} must be greater than 0", message=message)
            fields[name] = amount
        return fields

    # Utility

    def clear_all(self) -> None:
        self._transactions.clear()
        self._budgets.clear()
        self._assets.clear()
        self._settings = UserSettings()
        logger.info("Cleared all data")

    def export_data(self) -> Dict[str, Any]:
        return {
            "transactions": self.list_transactions(),
            "budgets": self.list_budgets(),
            "settings": self.get_settings(),
            "assets": self.list_assets(),
        }
