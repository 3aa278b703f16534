import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fintrack.models.common import Money, PositiveAmount, reject_nulls


class Category(str, Enum):
    FOOD = "food"
    TRANSPORT = "transport"
    ENTERTAINMENT = "entertainment"
    UTILITIES = "utilities"
    SHOPPING = "shopping"
    HEALTHCARE = "healthcare"
    EDUCATION = "education"
    INCOME = "income"
    OTHER = "other"


class TransactionType(str, Enum):
    INCOME = "income"
    EXPENSE = "expense"


class TransactionCreate(BaseModel):
    amount: PositiveAmount
    description: str = Field(min_length=1)
    category: Category
    type: TransactionType
    date: dt.date

    model_config = ConfigDict(str_strip_whitespace=True)


class TransactionUpdate(BaseModel):
    amount: Optional[PositiveAmount] = None
    description: Optional[str] = Field(default=None, min_length=1)
    category: Optional[Category] = None
    type: Optional[TransactionType] = None
    date: Optional[dt.date] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def _no_nulls(self):
        return reject_nulls(self, ("amount", "description", "category", "type", "date"))


class Transaction(BaseModel):
    id: int
    amount: Money
    description: str
    category: Category
    type: TransactionType
    date: dt.date
    created_at: dt.datetime

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE
