import datetime as dt
from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

from fintrack.models.common import AssetValue, Money, reject_nulls


class AssetType(str, Enum):
    PROPERTY = "property"
    VEHICLE = "vehicle"
    INVESTMENT = "investment"
    ELECTRONICS = "electronics"
    JEWELRY = "jewelry"
    COLLECTIBLES = "collectibles"
    OTHER = "other"


class AssetCreate(BaseModel):
    name: str = Field(min_length=1)
    type: AssetType
    value: AssetValue
    currency: str = Field(default="USD", min_length=3, max_length=3)
    description: Optional[str] = None
    purchase_date: Optional[dt.date] = None

    model_config = ConfigDict(str_strip_whitespace=True)


class AssetUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1)
    type: Optional[AssetType] = None
    value: Optional[AssetValue] = None
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    description: Optional[str] = None
    purchase_date: Optional[dt.date] = None

    model_config = ConfigDict(str_strip_whitespace=True)

    @model_validator(mode="after")
    def _no_nulls(self):
        return reject_nulls(self, ("name", "type", "value", "currency"))


class Asset(BaseModel):
    id: int
    name: str
    type: AssetType
    value: Money
    currency: str = "USD"
    description: Optional[str] = None
    purchase_date: Optional[dt.date] = None
    created_at: dt.datetime
