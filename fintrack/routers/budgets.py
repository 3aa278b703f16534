from typing import List

from fastapi import APIRouter, Depends, status

from fintrack.core.dependencies import get_store
from fintrack.core.errors import NotFoundError, ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.models.budget import Budget, BudgetCreate, BudgetUpdate

router = APIRouter()


@router.get("", response_model=List[Budget], include_in_schema=False)
@router.get("/", response_model=List[Budget])
def list_budgets(store: MemoryStore = Depends(get_store)):
    return store.list_budgets()


@router.post("", response_model=Budget, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", response_model=Budget, status_code=status.HTTP_201_CREATED)
def create_budget(budget: BudgetCreate, store: MemoryStore = Depends(get_store)):
    """
    Create a budget. At most one budget per category; spent is computed from
    the expenses already recorded for the category.
    """
    return store.create_budget(budget.model_dump())


@router.get("/{budget_id}", response_model=Budget)
def get_budget(budget_id: int, store: MemoryStore = Depends(get_store)):
    budget = store.get_budget(budget_id)
    if not budget:
        raise NotFoundError("Budget", budget_id)
    return budget


@router.put("/{budget_id}", response_model=Budget)
def update_budget(budget_id: int, budget_update: BudgetUpdate, store: MemoryStore = Depends(get_store)):
    mutable_fields = budget_update.model_dump(exclude_unset=True)
    if not mutable_fields:
        raise ValidationError("No fields to update")

    updated = store.update_budget(budget_id, mutable_fields)
    if not updated:
        raise NotFoundError("Budget", budget_id)
    return updated


@router.delete("/{budget_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_budget(budget_id: int, store: MemoryStore = Depends(get_store)):
    if not store.delete_budget(budget_id):
        raise NotFoundError("Budget", budget_id)
    return None
