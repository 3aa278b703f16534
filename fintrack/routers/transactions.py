from datetime import date
from typing import List

from fastapi import APIRouter, Depends, Query, status

from fintrack.core.dependencies import get_store
from fintrack.core.errors import NotFoundError, ValidationError
from fintrack.db.memory import MemoryStore
from fintrack.models.transaction import Category, Transaction, TransactionCreate, TransactionUpdate

router = APIRouter()


@router.get("", response_model=List[Transaction], include_in_schema=False)
@router.get("/", response_model=List[Transaction])
def list_transactions(store: MemoryStore = Depends(get_store)):
    """All transactions, newest date first."""
    return store.list_transactions()


@router.post("", response_model=Transaction, status_code=status.HTTP_201_CREATED, include_in_schema=False)
@router.post("/", response_model=Transaction, status_code=status.HTTP_201_CREATED)
def create_transaction(transaction: TransactionCreate, store: MemoryStore = Depends(get_store)):
    return store.create_transaction(transaction.model_dump())


@router.get("/category/{category}", response_model=List[Transaction])
def list_transactions_by_category(category: Category, store: MemoryStore = Depends(get_store)):
    return store.transactions_by_category(category)


@router.get("/range", response_model=List[Transaction])
def list_transactions_by_date_range(
    start: date = Query(...),
    end: date = Query(...),
    store: MemoryStore = Depends(get_store),
):
    """
    start and end are inclusive ISO dates. Example: /range?start=2025-11-01&end=2025-11-30
    """
    if start > end:
        raise ValidationError.for_field("start", "start must not be after end", message="Invalid date range")
    return store.transactions_by_date_range(start, end)


@router.get("/{transaction_id}", response_model=Transaction)
def get_transaction(transaction_id: int, store: MemoryStore = Depends(get_store)):
    transaction = store.get_transaction(transaction_id)
    if not transaction:
        raise NotFoundError("Transaction", transaction_id)
    return transaction


@router.put("/{transaction_id}", response_model=Transaction)
def update_transaction(
    transaction_id: int,
    transaction_update: TransactionUpdate,
    store: MemoryStore = Depends(get_store),
):
    mutable_fields = transaction_update.model_dump(exclude_unset=True)
    if not mutable_fields:
        raise ValidationError("No fields to update")

    updated = store.update_transaction(transaction_id, mutable_fields)
    if not updated:
        raise NotFoundError("Transaction", transaction_id)
    return updated


@router.delete("/{transaction_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_transaction(transaction_id: int, store: MemoryStore = Depends(get_store)):
    deleted = store.delete_transaction(transaction_id)
    if not deleted:
        raise NotFoundError("Transaction", transaction_id)
    return None
