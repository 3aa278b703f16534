import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, model_validator

from fintrack.models.common import ZERO, Money, PositiveAmount, reject_nulls
from fintrack.models.transaction import Category


class BudgetPeriod(str, Enum):
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    YEARLY = "yearly"


class BudgetCreate(BaseModel):
    category: Category
    amount: PositiveAmount
    period: BudgetPeriod = BudgetPeriod.MONTHLY


class BudgetUpdate(BaseModel):
    # spent is maintained server side and deliberately absent here
    category: Optional[Category] = None
    amount: Optional[PositiveAmount] = None
    period: Optional[BudgetPeriod] = None

    @model_validator(mode="after")
    def _no_nulls(self):
        return reject_nulls(self, ("category", "amount", "period"))


class Budget(BaseModel):
    id: int
    category: Category
    amount: Money
    spent: Money = ZERO
    period: BudgetPeriod = BudgetPeriod.MONTHLY
    created_at: dt.datetime
