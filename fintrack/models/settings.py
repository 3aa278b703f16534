from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from fintrack.core.config import settings
from fintrack.models.common import reject_nulls


class Theme(str, Enum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


class UserSettings(BaseModel):
    """The single user-facing preferences record."""

    currency: str = settings.DEFAULT_CURRENCY
    theme: Theme = Theme(settings.DEFAULT_THEME)
    notifications: bool = settings.DEFAULT_NOTIFICATIONS


class UserSettingsUpdate(BaseModel):
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    theme: Optional[Theme] = None
    notifications: Optional[bool] = None

    @model_validator(mode="after")
    def _no_nulls(self):
        return reject_nulls(self, ("currency", "theme", "notifications"))
