from datetime import date
from decimal import Decimal

import pytest

from fintrack.core.errors import ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.models.budget import BudgetPeriod
from fintrack.models.settings import Theme
from fintrack.models.transaction import Category


def expense(amount, category="food", on="2025-11-03", description="Groceries"):
    return {
        "amount": Decimal(amount),
        "description": description,
        "category": category,
        "type": "expense",
        "date": date.fromisoformat(on),
    }


def test_ids_start_at_one_and_are_never_reused():
    store = MemoryStore()
    first = store.create_transaction(expense("10"))
    second = store.create_transaction(expense("20"))
    assert (first.id, second.id) == (1, 2)

    assert store.delete_transaction(second.id)
    third = store.create_transaction(expense("30"))
    assert third.id == 3


def test_transactions_sorted_by_date_descending_ties_in_insertion_order():
    store = MemoryStore()
    store.create_transaction(expense("1", on="2025-11-01", description="a"))
    store.create_transaction(expense("2", on="2025-11-05", description="b"))
    store.create_transaction(expense("3", on="2025-11-01", description="c"))
    assert [t.description for t in store.list_transactions()] == ["b", "a", "c"]


def test_assets_sorted_newest_first():
    store = MemoryStore()
    store.create_asset({"name": "Car", "type": "vehicle", "value": Decimal("5000")})
    store.create_asset({"name": "Watch", "type": "jewelry", "value": Decimal("300")})
    assert [a.name for a in store.list_assets()] == ["Watch", "Car"]
    assert all(a.created_at.tzinfo is not None for a in store.list_assets())


def test_get_returns_copies():
    store = MemoryStore()
    created = store.create_transaction(expense("10"))
    created.description = "changed outside"
    assert store.get_transaction(created.id).description == "Groceries"


def test_missing_ids():
    store = MemoryStore()
    assert store.get_transaction(42) is None
    assert store.update_transaction(42, {"description": "x"}) is None
    assert store.delete_transaction(42) is False
    assert store.update_budget(42, {"amount": Decimal("1")}) is None
    assert store.delete_asset(42) is False


def test_update_merges_only_given_fields():
    store = MemoryStore()
    created = store.create_transaction(expense("10"))
    updated = store.update_transaction(created.id, {"description": "Dinner"})
    assert updated.description == "Dinner"
    assert updated.amount == Decimal("10.00")
    assert updated.created_at == created.created_at


def test_budget_defaults():
    store = MemoryStore()
    budget = store.create_budget({"category": "food", "amount": Decimal("200")})
    assert budget.spent == Decimal("0.00")
    assert budget.period == BudgetPeriod.MONTHLY


def test_budget_category_is_unique():
    store = MemoryStore()
    store.create_budget({"category": "food", "amount": Decimal("200")})
    with pytest.raises(ValidationError) as excinfo:
        store.create_budget({"category": "food", "amount": Decimal("50")})
    assert excinfo.value.errors[0]["field"] == "category"
    assert len(store.list_budgets()) == 1


def test_budget_update_to_taken_category_is_rejected():
    store = MemoryStore()
    store.create_budget({"category": "food", "amount": Decimal("200")})
    other = store.create_budget({"category": "shopping", "amount": Decimal("100")})
    with pytest.raises(ValidationError):
        store.update_budget(other.id, {"category": "food"})
    assert store.get_budget(other.id).category == Category.SHOPPING


def test_budget_spent_cannot_be_set_by_update():
    store = MemoryStore()
    budget = store.create_budget({"category": "food", "amount": Decimal("200")})
    updated = store.update_budget(budget.id, {"spent": Decimal("999"), "amount": Decimal("300")})
    assert updated.spent == Decimal("0.00")
    assert updated.amount == Decimal("300.00")


def test_non_positive_amounts_are_rejected_before_insert():
    store = MemoryStore()
    budget = store.create_budget({"category": "food", "amount": Decimal("100")})

    for amount in ("-50", "0"):
        with pytest.raises(ValidationError) as excinfo:
            store.create_transaction(expense(amount))
        assert excinfo.value.errors[0]["field"] == "amount"
    assert store.list_transactions() == []

    store.create_transaction(expense("30"))
    assert store.get_budget(budget.id).spent == Decimal("30.00")


def test_non_positive_amount_updates_are_rejected():
    store = MemoryStore()
    budget = store.create_budget({"category": "food", "amount": Decimal("100")})
    transaction = store.create_transaction(expense("30"))
    asset = store.create_asset({"name": "Car", "type": "vehicle", "value": Decimal("5000")})

    with pytest.raises(ValidationError):
        store.update_transaction(transaction.id, {"amount": Decimal("-10")})
    with pytest.raises(ValidationError):
        store.update_budget(budget.id, {"amount": Decimal("-5")})
    with pytest.raises(ValidationError):
        store.create_budget({"category": "transport", "amount": Decimal("0")})
    with pytest.raises(ValidationError) as excinfo:
        store.update_asset(asset.id, {"value": Decimal("0")})
    assert excinfo.value.errors[0]["field"] == "value"

    assert store.get_transaction(transaction.id).amount == Decimal("30.00")
    assert store.get_budget(budget.id).amount == Decimal("100.00")
    assert store.get_budget(budget.id).spent == Decimal("30.00")
    assert store.get_asset(asset.id).value == Decimal("5000.00")
    assert len(store.list_budgets()) == 1


def test_filters():
    store = MemoryStore()
    store.create_transaction(expense("10", "food", on="2025-10-30"))
    store.create_transaction(expense("20", "transport", on="2025-11-02"))
    store.create_transaction(expense("30", "food", on="2025-11-20"))

    assert [t.amount for t in store.transactions_by_category(Category.FOOD)] == [Decimal("30.00"), Decimal("10.00")]
    in_range = store.transactions_by_date_range(date(2025, 11, 1), date(2025, 11, 20))
    assert [t.amount for t in in_range] == [Decimal("30.00"), Decimal("20.00")]


def test_asset_currency_defaults_and_validation():
    store = MemoryStore()
    asset = store.create_asset({"name": "Flat", "type": "property", "value": Decimal("100000")})
    assert asset.currency == "USD"
    assert asset.description is None

    with pytest.raises(ValidationError):
        store.create_asset({"name": "Coin", "type": "collectibles", "value": Decimal("1"), "currency": "XXX"})
    assert len(store.list_assets()) == 1


def test_settings_defaults_and_merge():
    store = MemoryStore()
    current = store.get_settings()
    assert (current.currency, current.theme, current.notifications) == ("USD", Theme.LIGHT, True)

    updated = store.update_settings({"theme": "dark"})
    assert updated.theme == Theme.DARK
    assert updated.currency == "USD"

    with pytest.raises(ValidationError):
        store.update_settings({"currency": "ZZZ"})
    assert store.get_settings().theme == Theme.DARK


def test_clear_all_resets_everything():
    store = MemoryStore()
    store.create_budget({"category": "food", "amount": Decimal("200")})
    store.create_transaction(expense("10"))
    store.create_asset({"name": "Car", "type": "vehicle", "value": Decimal("5000")})
    store.update_settings({"currency": "EUR", "notifications": False})

    store.clear_all()

    assert store.list_transactions() == []
    assert store.list_budgets() == []
    assert store.list_assets() == []
    settings = store.get_settings()
    assert (settings.currency, settings.theme, settings.notifications) == ("USD", Theme.LIGHT, True)
    assert store.create_transaction(expense("1")).id == 1


def test_export_data_snapshot():
    store = MemoryStore()
    store.create_transaction(expense("10"))
    snapshot = store.export_data()
    assert set(snapshot) == {"transactions", "budgets", "settings", "assets"}
    assert len(snapshot["transactions"]) == 1
